"""
Header name signal detection

One matcher for every script. Headers are split into tokens; short
keywords must equal a token, longer keywords and keywords written in
unspaced scripts (Hangul, Han, Kana) match anywhere in the header.
"""
import re
import unicodedata
from typing import Dict, List

from .models import NameSignals
from .taxonomy import NAME_SIGNAL_KEYWORDS

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_TOKEN = re.compile(r"[^\W_]+|[%#№‰]")
_UNSPACED_SCRIPTS = ("HANGUL", "CJK", "HIRAGANA", "KATAKANA")
_SHORT_KEYWORD = 5


def tokenize_header(header: str) -> List[str]:
    """Split a header into lowercase tokens ('MemberID' -> ['member', 'id'])"""
    spaced = _CAMEL_BOUNDARY.sub(" ", str(header))
    return _TOKEN.findall(spaced.lower())


def _is_unspaced_script(keyword: str) -> bool:
    for char in keyword:
        if char.isalpha():
            name = unicodedata.name(char, "")
            if name.startswith(_UNSPACED_SCRIPTS):
                return True
    return False


def _matches_as_substring(keyword: str) -> bool:
    return _is_unspaced_script(keyword) or len(keyword) > _SHORT_KEYWORD


def keyword_matches(header: str, keyword: str) -> bool:
    """
    Check whether a keyword occurs in a header

    Args:
        header: Raw header text
        keyword: Lowercase keyword from the taxonomy

    Returns:
        True if the keyword is present under the matching rules
    """
    lowered = str(header).lower()
    if _matches_as_substring(keyword):
        return keyword in lowered

    for token in tokenize_header(header):
        if token == keyword or token in (keyword + "s", keyword + "es"):
            return True
    return False


def detect_name_signals(header: str) -> NameSignals:
    """
    Evaluate every concept dictionary against a header

    Args:
        header: Raw header text (any script)

    Returns:
        NameSignals with one flag per concept
    """
    flags: Dict[str, bool] = {
        concept: any(keyword_matches(header, keyword) for keyword in keywords)
        for concept, keywords in NAME_SIGNAL_KEYWORDS.items()
    }
    return NameSignals(**flags)
