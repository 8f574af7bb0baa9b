"""
Script-independent header vocabulary
"""
from .keywords import NAME_SIGNAL_KEYWORDS, CURRENCY_SYMBOLS

__all__ = ['NAME_SIGNAL_KEYWORDS', 'CURRENCY_SYMBOLS']
