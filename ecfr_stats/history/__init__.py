"""
Title version history.
"""

from .version_history import VersionHistoryResolver

__all__ = ["VersionHistoryResolver"]
