"""
Statistics orchestration for eCFR agencies.
"""

from .statistics import AgencyStatisticsAggregator, compute_agency_statistics

__all__ = ["AgencyStatisticsAggregator", "compute_agency_statistics"]
