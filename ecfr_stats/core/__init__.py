"""
Core module for the eCFR agency statistics system.
"""

from .config import settings
from .cache import DocumentCache, EvictionPolicy, LRUEviction, NeverEvict
from .logging_config import setup_logging
from .models import *

__all__ = [
    "settings",
    "DocumentCache",
    "EvictionPolicy",
    "LRUEviction",
    "NeverEvict",
    "setup_logging",
]
