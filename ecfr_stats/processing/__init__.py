"""
Structure search and text extraction for eCFR documents.
"""

from .hierarchy import find_chapter, resolve_parts
from .paragraph_extractor import ParagraphTextExtractor

__all__ = ["find_chapter", "resolve_parts", "ParagraphTextExtractor"]
