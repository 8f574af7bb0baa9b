"""
Shared sheet, profile and signal fixtures
"""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

from content_intelligence.agents import AgentType
from content_intelligence.profiler import ContentProfiler, ProfilerConfig
from content_intelligence.signals import ClassificationSignal, SignalStore

Sheet = Tuple[List[str], List[Dict[str, Any]]]


def rules_sheet() -> Sheet:
    """17 rows, 7 placeholder-headed columns: 3 title rows, then sparse rule rows"""
    headers = ["Rule Matrix", "__EMPTY", "__EMPTY_1", "__EMPTY_2", "__EMPTY_3", "__EMPTY_4", "__EMPTY_5"]
    rows: List[Dict[str, Any]] = [
        {"Rule Matrix": "Tier table"},
        {"Rule Matrix": "Level", "__EMPTY": "Floor", "__EMPTY_1": "Ceiling", "__EMPTY_2": "Rate"},
        {"__EMPTY_3": "Notes"},
    ]
    levels = ["Level A", "Level B", "Level C", "Level D"]
    for i in range(14):
        rows.append({
            "Rule Matrix": levels[i % 4],
            "__EMPTY": i * 1000,
            "__EMPTY_1": i * 1000 + 999,
            "__EMPTY_2": f"{2 + i % 3}%",
        })
    rows[5]["__EMPTY_5"] = "2%"
    rows[9]["__EMPTY_5"] = "3%"
    rows[13]["__EMPTY_5"] = "5%"
    return headers, rows


def goals_sheet() -> Sheet:
    """12 rows: Officer ID / Name / Target Amount / Region"""
    headers = ["Officer ID", "Name", "Target Amount", "Region"]
    regions = ["North", "South", "East"]
    rows = [
        {
            "Officer ID": 1001 + i,
            "Name": f"Person {i + 1}",
            "Target Amount": 125000.5 + i * 1000.25,
            "Region": regions[i % 3],
        }
        for i in range(12)
    ]
    return headers, rows


def events_sheet(row_count: int = 600) -> Sheet:
    """Transaction ID / Date / Amount / Entity Code / Category"""
    headers = ["Transaction ID", "Date", "Amount", "Entity Code", "Category"]
    start = date(2024, 1, 1)
    categories = ["A", "B", "C", "D", "E"]
    rows = [
        {
            "Transaction ID": f"T{i:05d}",
            "Date": (start + timedelta(days=i % 365)).isoformat(),
            "Amount": round(10 + i * 1.37, 2),
            "Entity Code": f"E{i % 40:03d}",
            "Category": categories[i % 5],
        }
        for i in range(row_count)
    ]
    return headers, rows


def roster_sheet() -> Sheet:
    """25 rows: Employee ID / Name / Role / Product Licenses / Status"""
    headers = ["Employee ID", "Name", "Role", "Product Licenses", "Status"]
    roles = ["Analyst", "Lead", "Manager", "Associate"]
    licenses = ["Suite A", "Suite A;Suite B", "Suite B"]
    rows = [
        {
            "Employee ID": f"EMP-{i + 1:03d}",
            "Name": f"Person {i + 1}",
            "Role": roles[i % 4],
            "Product Licenses": licenses[i % 3],
            "Status": "Active" if i % 5 else "Inactive",
        }
        for i in range(25)
    ]
    return headers, rows


def hangul_sheet() -> Sheet:
    """Korean headers: number / name / target amount / date / ratio"""
    headers = ["번호", "이름", "목표금액", "날짜", "비율"]
    rows = [
        {
            "번호": i + 1,
            "이름": f"사람{i + 1}",
            "목표금액": 50000.5 + i * 250,
            "날짜": f"2024-0{1 + i % 9}-15",
            "비율": 0.05 + i * 0.01,
        }
        for i in range(8)
    ]
    return headers, rows


def mixed_sheet() -> Sheet:
    """20 rows: identity columns on the left, dated amounts on the right"""
    headers = ["Code", "Name", "Group", "Date", "Amount"]
    groups = ["Red", "Green", "Blue", "Gold"]
    start = date(2024, 3, 1)
    rows = [
        {
            "Code": f"C{i + 1:03d}",
            "Name": f"Person {i + 1}",
            "Group": groups[i % 4],
            "Date": (start + timedelta(days=i)).isoformat(),
            "Amount": round(100.25 + i * 3.5, 2),
        }
        for i in range(20)
    ]
    return headers, rows


def make_signal(system_agent: AgentType = AgentType.ENTITY,
                human_agent: Optional[AgentType] = None,
                tenant_id: str = "tenant-a",
                timestamp: Optional[datetime] = None,
                confidence: float = 0.8,
                contributing: Optional[Dict[AgentType, List[str]]] = None) -> ClassificationSignal:
    """Consistent signal with `overridden` derived from the two agents"""
    return ClassificationSignal(
        tenant_id=tenant_id,
        content_unit_id="upload.xlsx::Sheet1::0",
        system_agent=system_agent,
        system_confidence=confidence,
        human_agent=human_agent,
        overridden=human_agent is not None and human_agent != system_agent,
        contributing_signals=contributing or {},
        weights_version="1.0.0",
        timestamp=timestamp or datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def signal_store():
    store = SignalStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def profiler():
    return ContentProfiler(ProfilerConfig())


def _profile(sheet: Sheet, name: str, index: int = 0):
    headers, rows = sheet
    return ContentProfiler(ProfilerConfig()).generate_content_profile(
        name, index, "upload.xlsx", headers, rows
    )


@pytest.fixture
def rules_profile():
    return _profile(rules_sheet(), "Rules")


@pytest.fixture
def goals_profile():
    return _profile(goals_sheet(), "Goals", 1)


@pytest.fixture
def events_profile():
    return _profile(events_sheet(), "Events", 2)


@pytest.fixture
def roster_profile():
    return _profile(roster_sheet(), "Roster", 3)


@pytest.fixture
def hangul_profile():
    return _profile(hangul_sheet(), "시트1", 4)


@pytest.fixture
def mixed_profile():
    return _profile(mixed_sheet(), "Mixed", 5)
