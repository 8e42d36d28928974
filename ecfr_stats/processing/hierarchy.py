"""
Search over a title's structure document.
"""

from typing import List, Optional
import structlog

from ..core.models import HierarchyNode

logger = structlog.get_logger(__name__)

CHAPTER = "chapter"
SUBCHAPTER = "subchapter"
PART = "part"


def find_chapter(node: Optional[HierarchyNode], chapter: str) -> Optional[HierarchyNode]:
    """Locate a chapter node by identifier.

    The whole tree is walked depth-first, parent before children, and the
    last matching node in that order wins. A matching chapter's own subtree
    is searched as well.

    Args:
        node: Root of the (sub)tree to search
        chapter: Chapter identifier, e.g. "I" or "XVIII"

    Returns:
        The last matching chapter node, or None
    """
    if node is None:
        return None

    found = None
    if node.type == CHAPTER and node.identifier == chapter:
        found = node

    for child in node.children:
        nested = find_chapter(child, chapter)
        if nested is not None:
            found = nested

    return found


def _live_parts(node: HierarchyNode) -> List[str]:
    return [
        child.identifier
        for child in node.children
        if child.type == PART and not child.reserved
    ]


def resolve_parts(chapter: HierarchyNode) -> List[str]:
    """Identifiers of the non-reserved parts under a chapter, in document order.

    Chapters that group their parts into subchapters have no direct part
    children; the parts of every subchapter are collected instead.
    """
    parts = _live_parts(chapter)
    if parts:
        return parts

    for child in chapter.children:
        if child.type == SUBCHAPTER:
            parts.extend(_live_parts(child))

    logger.debug("Resolved parts through subchapters",
                 chapter=chapter.identifier,
                 parts=len(parts))
    return parts
