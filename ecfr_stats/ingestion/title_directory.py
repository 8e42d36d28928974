"""
Title catalog lookup.
"""

from typing import List
import structlog

from ..core.exceptions import TitleNotFoundError
from ..core.models import Title
from .ecfr_client import EcfrClient

logger = structlog.get_logger(__name__)


class TitleDirectory:
    """Resolves title numbers against the eCFR title catalog.

    The catalog itself is memoized by the client, so repeated lookups cost
    one request per process.
    """

    def __init__(self, client: EcfrClient):
        self.client = client

    def list_titles(self) -> List[Title]:
        return self.client.get_title_catalog().titles

    def get_title(self, number: int) -> Title:
        """Get the catalog entry for a title number.

        Raises:
            TitleNotFoundError: If the catalog has no such title
        """
        for title in self.list_titles():
            if title.number == number:
                return title

        logger.warning("Title not in catalog", title=number)
        raise TitleNotFoundError(number)
