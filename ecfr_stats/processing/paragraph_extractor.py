"""
Paragraph text extraction from eCFR full-text XML.

The XML is parsed with xmltodict into nested dicts, lists and scalars, the
same shape regardless of the title's schema. The extractor walks that
structure and collects the text of every paragraph element in order.
"""

from collections.abc import Mapping
from typing import Any, Iterator, List, Optional
import xmltodict
import structlog

from ..core.config import settings

logger = structlog.get_logger(__name__)

TEXT_KEY = "#text"


class ParagraphTextExtractor:
    """Collects paragraph text from a parsed document.

    At every mapping, all keys at that level are checked for the paragraph
    tag before any nested value is descended into. Siblings keep their
    source order, so extraction of the same document always yields the same
    string.
    """

    def __init__(self, tag: Optional[str] = None, text_key: str = TEXT_KEY):
        self.tag = tag or settings.paragraph_tag
        self.text_key = text_key

    def parse(self, xml_text: str) -> Any:
        """Parse XML into a nested dict/list/scalar structure."""
        return xmltodict.parse(xml_text)

    def extract(self, document: Any) -> str:
        """Concatenate every paragraph fragment with no separator."""
        return "".join(self.iter_fragments(document))

    def extract_xml(self, xml_text: str) -> str:
        return self.extract(self.parse(xml_text))

    def fragments(self, xml_text: str) -> List[str]:
        """Parse XML and return its paragraph fragments in order."""
        fragments = list(self.iter_fragments(self.parse(xml_text)))
        logger.debug("Extracted paragraphs", tag=self.tag, fragments=len(fragments))
        return fragments

    def iter_fragments(self, node: Any) -> Iterator[str]:
        """Yield paragraph fragments in traversal order."""
        if isinstance(node, Mapping):
            for key, value in node.items():
                if key == self.tag:
                    yield from self._payload_text(value)
            for value in node.values():
                if isinstance(value, (Mapping, list)):
                    yield from self.iter_fragments(value)
        elif isinstance(node, list):
            for item in node:
                if isinstance(item, (Mapping, list)):
                    yield from self.iter_fragments(item)

    def _payload_text(self, value: Any) -> Iterator[str]:
        if isinstance(value, list):
            for item in value:
                text = self._node_text(item)
                if text is not None:
                    yield text
        else:
            text = self._node_text(value)
            if text is not None:
                yield text

    def _node_text(self, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, Mapping):
            text = value.get(self.text_key)
            return None if text is None else str(text)
        if isinstance(value, list):
            # Nested sequences carry no text of their own
            return None
        return str(value)
