"""
eCFR API client with a process-lifetime response cache.

Every request goes through ``fetch_structured`` or ``fetch_text``. A URI is
requested from the network at most once per cache lifetime; concurrent
callers asking for the same uncached URI wait on the first request instead
of issuing their own.
"""

import threading
from datetime import date
from typing import Any, Callable, Dict, Optional, Type, TypeVar
from urllib.parse import urlencode
import requests
import structlog
from pydantic import BaseModel

from ..core.cache import MISSING, DocumentCache
from ..core.config import settings
from ..core.exceptions import RemoteFetchError
from ..core.models import HierarchyNode, TitleCatalog, VersionList

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

API_PATH = "api/versioner/v1"
RENDERER_PATH = "api/renderer/v1/content/enhanced"


class EcfrClient:
    """Client for the eCFR versioner API.

    JSON and raw text responses are memoized by full URI in a
    ``DocumentCache``. The cache can be shared between clients.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        cache: Optional[DocumentCache] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.api_root).rstrip("/")
        self.cache = cache if cache is not None else DocumentCache.from_max_entries(settings.cache_max_entries)
        self.timeout = timeout if timeout is not None else settings.request_timeout

        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": settings.user_agent,
            "Accept": "application/json, application/xml, text/xml",
        })

        self._inflight: Dict[str, threading.Lock] = {}
        self._inflight_lock = threading.Lock()
        self._counter_lock = threading.Lock()
        self.network_calls = 0
        self.cache_hits = 0

    def resolve(self, path: str) -> str:
        """Full URI for a path relative to the repository base URL."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def fetch_structured(self, path: str, model: Optional[Type[ModelT]] = None) -> Any:
        """Fetch a JSON document, optionally validated into a pydantic model.

        Args:
            path: Path relative to the repository base URL
            model: Model class to validate the payload into

        Returns:
            The decoded JSON, or a ``model`` instance
        """
        payload = self._fetch(path, self._decode_json)
        if model is None:
            return payload
        return model.model_validate(payload)

    def fetch_text(self, path: str) -> str:
        """Fetch a raw text document (full-text XML)."""
        return self._fetch(path, self._decode_text)

    # Endpoints

    def get_title_catalog(self) -> TitleCatalog:
        return self.fetch_structured(f"{API_PATH}/titles.json", TitleCatalog)

    def get_structure(self, title: int, as_of: date) -> HierarchyNode:
        """Structure document of a title at an effective date."""
        return self.fetch_structured(
            f"{API_PATH}/structure/{as_of.isoformat()}/title-{title}.json",
            HierarchyNode,
        )

    def get_full_text(
        self,
        title: int,
        as_of: date,
        part: Optional[str] = None,
        subpart: Optional[str] = None,
    ) -> str:
        """Full-text XML of a title at an effective date, narrowed by part/subpart."""
        path = f"{API_PATH}/full/{as_of.isoformat()}/title-{title}.xml"
        params = {}
        if part:
            params["part"] = part
            if subpart:
                params["subpart"] = subpart
        if params:
            path += "?" + urlencode(params)
        return self.fetch_text(path)

    def get_versions(self, title: int) -> VersionList:
        return self.fetch_structured(f"{API_PATH}/versions/title-{title}.json", VersionList)

    # Internals

    def _fetch(self, path: str, decode: Callable[[str, requests.Response], Any]) -> Any:
        uri = self.resolve(path)

        cached = self.cache.get(uri, MISSING)
        if cached is not MISSING:
            self._count_hit(uri)
            return cached

        with self._inflight_lock:
            uri_lock = self._inflight.setdefault(uri, threading.Lock())

        try:
            with uri_lock:
                # Another caller may have filled the entry while we waited
                cached = self.cache.get(uri, MISSING)
                if cached is not MISSING:
                    self._count_hit(uri)
                    return cached

                payload = decode(uri, self._request(uri))
                self.cache.set(uri, payload)
                return payload
        finally:
            with self._inflight_lock:
                if self._inflight.get(uri) is uri_lock:
                    del self._inflight[uri]

    def _request(self, uri: str) -> requests.Response:
        with self._counter_lock:
            self.network_calls += 1
        logger.info("Requesting eCFR document", uri=uri)

        try:
            response = self.session.get(uri, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("eCFR request failed", uri=uri, error=str(e))
            raise RemoteFetchError(uri, str(e)) from e

        if not response.ok:
            logger.error("eCFR returned an error",
                         uri=uri,
                         status_code=response.status_code,
                         reason=response.reason)
            raise RemoteFetchError(uri, response.reason or "Request failed", response.status_code)

        return response

    def _count_hit(self, uri: str) -> None:
        with self._counter_lock:
            self.cache_hits += 1
        logger.debug("Cache hit", uri=uri)

    @staticmethod
    def _decode_json(uri: str, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteFetchError(uri, f"Invalid JSON body: {e}", response.status_code) from e

    @staticmethod
    def _decode_text(uri: str, response: requests.Response) -> str:
        return response.text


def change_reference_uri(
    base_url: str,
    amendment_date: date,
    title: int,
    part: Optional[str] = None,
    subpart: Optional[str] = None,
) -> str:
    """Link to the rendered title text as of an amendment.

    ``subpart`` is only included when ``part`` is present.
    """
    uri = f"{base_url.rstrip('/')}/{RENDERER_PATH}/{amendment_date.isoformat()}/title-{title}"
    params = {}
    if part:
        params["part"] = part
        if subpart:
            params["subpart"] = subpart
    if params:
        uri += "?" + urlencode(params)
    return uri
