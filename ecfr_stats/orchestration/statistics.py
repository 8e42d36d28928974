"""
Agency statistics orchestrator.

Composes title lookup, structure search, paragraph extraction and version
history into one ``StatisticsResult`` per agency.
"""

import hashlib
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from typing import Dict, List, Optional
import structlog

from ..core.config import settings
from ..core.exceptions import TitleNotFoundError
from ..core.models import Agency, CfrRef, HistoricalChange, StatisticsResult, Title
from ..history import VersionHistoryResolver
from ..ingestion import EcfrClient, TitleDirectory
from ..processing import ParagraphTextExtractor, find_chapter, resolve_parts

logger = structlog.get_logger(__name__)


def calculate_md5(text: str) -> str:
    """Hex MD5 digest of the UTF-8 encoded text."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def count_words(fragments: List[str]) -> int:
    """Whitespace-delimited tokens, counted per fragment."""
    return sum(len(fragment.split()) for fragment in fragments)


def group_changes_by_date(changes: List[HistoricalChange]) -> Dict[str, int]:
    """Number of changes per amendment date (YYYY-MM-DD), in first-seen order."""
    counts: Dict[str, int] = {}
    for change in changes:
        key = change.amendment_date.isoformat()
        counts[key] = counts.get(key, 0) + 1
    return counts


class AgencyStatisticsAggregator:
    """Computes word count, checksum and change history for an agency."""

    def __init__(
        self,
        client: Optional[EcfrClient] = None,
        extractor: Optional[ParagraphTextExtractor] = None,
        max_workers: Optional[int] = None,
    ):
        self.client = client or EcfrClient()
        self.titles = TitleDirectory(self.client)
        self.extractor = extractor or ParagraphTextExtractor()
        self.versions = VersionHistoryResolver(self.client)
        self.max_workers = max_workers or settings.fetch_max_workers

    def compute(self, agency: Agency) -> StatisticsResult:
        """
        Compute statistics over every CFR reference of an agency.

        Args:
            agency: Agency whose references are aggregated, in order

        Returns:
            StatisticsResult for the agency

        Raises:
            RemoteFetchError: If a title, structure or text document cannot be fetched
            TitleNotFoundError: If a referenced title is not in the catalog
        """
        logger.info("Computing agency statistics",
                    agency=agency.slug,
                    references=len(agency.cfr_refs))

        fragments: List[str] = []
        changes: List[HistoricalChange] = []
        regs_by_title: Dict[str, int] = {}

        for ref in agency.cfr_refs:
            logger.info("Processing CFR reference", title=ref.title, chapter=ref.chapter)

            title = self.titles.get_title(ref.title)
            regs_by_title[title.name] = regs_by_title.get(title.name, 0) + 1

            fragments.extend(self._reference_fragments(ref, title))
            changes.extend(self.versions.resolve(ref.title))

        words = "".join(fragments)
        result = StatisticsResult(
            agency=agency,
            word_count=count_words(fragments),
            checksum=calculate_md5(words),
            changes=changes,
            changes_by_date=group_changes_by_date(changes),
            regs_by_title=regs_by_title,
        )

        logger.info("Computed agency statistics",
                    agency=agency.slug,
                    checksum=result.checksum,
                    word_count=result.word_count,
                    changes=len(result.changes))
        return result

    def _reference_fragments(self, ref: CfrRef, title: Title) -> List[str]:
        as_of = title.up_to_date_as_of
        if as_of is None:
            raise TitleNotFoundError(ref.title, "has no current edition")

        hierarchy = self.client.get_structure(ref.title, as_of)
        if not ref.chapter:
            return []

        chapter = find_chapter(hierarchy, ref.chapter)
        if chapter is None:
            logger.warning("Chapter not found in structure",
                           title=ref.title,
                           chapter=ref.chapter)
            return []

        parts = resolve_parts(chapter)
        logger.info("Resolved chapter parts",
                    title=ref.title,
                    chapter=ref.chapter,
                    parts=parts)
        return self._parts_fragments(ref.title, as_of, parts)

    def _parts_fragments(self, title: int, as_of: date, parts: List[str]) -> List[str]:
        if self.max_workers <= 1 or len(parts) <= 1:
            fragments = []
            for part in parts:
                fragments.extend(self._part_fragments(title, as_of, part))
            return fragments

        # Results are slotted back by part index so the buffer order never
        # depends on completion order.
        by_index: List[List[str]] = [[] for _ in parts]
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._part_fragments, title, as_of, part): index
                for index, part in enumerate(parts)
            }
            for future in as_completed(futures):
                by_index[futures[future]] = future.result()

        return [fragment for part_fragments in by_index for fragment in part_fragments]

    def _part_fragments(self, title: int, as_of: date, part: str) -> List[str]:
        xml_text = self.client.get_full_text(title, as_of, part=part)
        return self.extractor.fragments(xml_text)


def compute_agency_statistics(
    agency: Agency,
    client: Optional[EcfrClient] = None,
) -> StatisticsResult:
    """Compute statistics for an agency with a default aggregator."""
    return AgencyStatisticsAggregator(client=client).compute(agency)
