"""
Static scan: classification source must stay free of business-vertical vocabulary
"""
import re
from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parent.parent / "content_intelligence"

DENYLIST = [
    "commission", "compensation", "payroll", "salary", "salaries", "bonus",
    "incentive", "insurance", "mortgage", "loan", "deposit", "pharmacy",
    "patient", "optical", "retail", "franchise", "invoice", "sales",
    "revenue", "customer", "employee", "officer", "bank",
]

SOURCE_FILES = sorted(PACKAGE_ROOT.rglob("*.py"))


def test_package_sources_found():
    assert len(SOURCE_FILES) > 10


@pytest.mark.parametrize("path", SOURCE_FILES, ids=lambda p: str(p.relative_to(PACKAGE_ROOT)))
def test_no_vertical_vocabulary(path):
    text = path.read_text(encoding="utf-8")
    found = [
        word for word in DENYLIST
        if re.search(rf"\b{word}(s|es)?\b", text, re.IGNORECASE)
    ]
    assert found == [], f"{path.name} mentions {found}"
