"""
Data ingestion module for the eCFR API.
"""

from .ecfr_client import EcfrClient, change_reference_uri
from .title_directory import TitleDirectory

__all__ = ["EcfrClient", "TitleDirectory", "change_reference_uri"]
