"""
Change history for eCFR titles.
"""

from typing import List, Optional
import structlog
from pydantic import ValidationError

from ..core.exceptions import RemoteFetchError, VersionHistoryUnavailable
from ..core.models import HistoricalChange, TitleVersion
from ..ingestion.ecfr_client import EcfrClient, change_reference_uri

logger = structlog.get_logger(__name__)


class VersionHistoryResolver:
    """Builds the substantive change list of a title from its version history.

    Failures here are never fatal to the caller: ``resolve`` reports a title
    whose history cannot be read as having no changes.
    """

    def __init__(self, client: EcfrClient, base_url: Optional[str] = None):
        self.client = client
        self.base_url = base_url or client.base_url

    def resolve(self, title: int) -> List[HistoricalChange]:
        """Substantive changes of a title, or an empty list if unavailable."""
        try:
            return self.fetch_history(title)
        except VersionHistoryUnavailable as e:
            logger.warning("Version history unavailable",
                           title=title,
                           error=str(e.cause or e))
            return []

    def fetch_history(self, title: int) -> List[HistoricalChange]:
        """Substantive changes of a title, in the order the API lists them.

        Raises:
            VersionHistoryUnavailable: If the version list cannot be fetched or parsed
        """
        try:
            versions = self.client.get_versions(title)
        except (RemoteFetchError, ValidationError, ValueError, TypeError, KeyError) as e:
            raise VersionHistoryUnavailable(title, e) from e

        changes = [
            self._to_change(title, version)
            for version in versions.content_versions
            if version.substantive
        ]
        logger.debug("Resolved version history",
                     title=title,
                     versions=len(versions.content_versions),
                     substantive=len(changes))
        return changes

    def _to_change(self, title: int, version: TitleVersion) -> HistoricalChange:
        return HistoricalChange(
            id=version.identifier,
            title=title,
            issue_date=version.issue_date,
            amendment_date=version.amendment_date,
            description=version.name or "",
            ref_uri=change_reference_uri(
                self.base_url,
                version.amendment_date,
                title,
                part=version.part,
                subpart=version.subpart,
            ),
        )
