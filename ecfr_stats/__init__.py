"""
eCFR Agency Statistics

Aggregates word counts, content checksums and change history for the
regulations an agency owns in the Electronic Code of Federal Regulations.
"""

__version__ = "1.0.0"
__author__ = "eCFR Agency Statistics"

from .core.models import Agency, CfrRef, HistoricalChange, StatisticsResult
from .core.exceptions import (
    EcfrStatsError,
    RemoteFetchError,
    TitleNotFoundError,
    VersionHistoryUnavailable,
)
from .orchestration import AgencyStatisticsAggregator, compute_agency_statistics

__all__ = [
    "Agency",
    "CfrRef",
    "HistoricalChange",
    "StatisticsResult",
    "EcfrStatsError",
    "RemoteFetchError",
    "TitleNotFoundError",
    "VersionHistoryUnavailable",
    "AgencyStatisticsAggregator",
    "compute_agency_statistics",
]
