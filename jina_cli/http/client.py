"""Synchronous client for the reader and search APIs."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Optional
from urllib.parse import quote, quote_plus

import requests
from requests.structures import CaseInsensitiveDict

from .. import __version__
from ..errors import HTTPStatusError, RequestConstructionError, TransportError
from ..models.api import ReadRequest, ReadResponse, SearchRequest, SearchResponse
from ..models.config import Settings
from .parsing import extract_title, parse_search_results

logger = logging.getLogger(__name__)

# Characters a path segment may keep unescaped; everything else reserved
# (including "/", "?", "#", ";" and ",") is percent-encoded.
_PATH_SEGMENT_SAFE = "$&+:=@"

_CONSTRUCTION_EXCEPTIONS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
)


def encode_path_segment(value: str) -> str:
    """Percent-encode ``value`` for use as a single URL path segment."""
    return quote(value, safe=_PATH_SEGMENT_SAFE)


class JinaClient:
    """
    Client for the reader (URL to text) and search APIs.

    Every request is a single attempt with one timeout covering the whole
    exchange. Failures are raised as ``jina_cli.errors`` types.

    Example:
        with JinaClient.from_settings(settings) as client:
            response = client.read(ReadRequest(url="https://example.com"))
            print(response.title, response.content)
    """

    USER_AGENT = f"jina-cli/{__version__}"

    def __init__(
        self,
        read_api_url: str,
        search_api_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            read_api_url: Base URL of the reader API
            search_api_url: Base URL of the search API
            api_key: Bearer token, sent only when non-empty
            timeout: Request timeout in seconds
            session: Optional session to send requests with
        """
        self.read_api_url = read_api_url
        self.search_api_url = search_api_url
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        read_api_url: Optional[str] = None,
        search_api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> JinaClient:
        """Build a client from resolved settings; keyword overrides win."""
        return cls(
            read_api_url=read_api_url or settings.api_base_url,
            search_api_url=search_api_url or settings.search_api_url,
            api_key=api_key if api_key is not None else settings.api_key,
            timeout=timeout or settings.timeout,
            session=session,
        )

    def __enter__(self) -> JinaClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def _common_headers(self) -> CaseInsensitiveDict:
        headers: CaseInsensitiveDict = CaseInsensitiveDict()
        headers["User-Agent"] = self.USER_AGENT
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _read_headers(self, req: ReadRequest) -> CaseInsensitiveDict:
        headers = self._common_headers()
        if req.post:
            headers["Content-Type"] = "application/x-www-form-urlencoded"
        if req.response_format:
            headers["X-Respond-With"] = req.response_format
        if req.with_generated_alt:
            headers["X-With-Generated-Alt"] = "true"
        if req.no_cache:
            headers["X-No-Cache"] = "true"

        optional = {
            "X-Proxy-URL": req.proxy_url,
            "X-Target-Selector": req.target_selector,
            "X-Wait-For-Selector": req.wait_for_selector,
            "X-Set-Cookie": req.cookie,
            "X-Cache-Tolerance": req.cache_tolerance,
        }
        for name, value in optional.items():
            if value:
                headers[name] = value

        headers.update(req.headers)
        return headers

    def _prepare(self, request: requests.Request) -> requests.PreparedRequest:
        try:
            return request.prepare()
        except (*_CONSTRUCTION_EXCEPTIONS, ValueError) as e:
            raise RequestConstructionError(f"Failed to build request: {e}") from e

    def build_read_request(self, req: ReadRequest) -> requests.PreparedRequest:
        """
        Build the outbound request for a read call without sending it.

        Args:
            req: Read parameters

        Returns:
            Prepared GET (URL in the path) or POST (URL in a form body)

        Raises:
            RequestConstructionError: If the resulting request is malformed
        """
        headers = self._read_headers(req)
        if req.post:
            request = requests.Request("POST", self.read_api_url, headers=headers, data={"url": req.url})
        else:
            target = f"{self.read_api_url.rstrip('/')}/{encode_path_segment(req.url)}"
            request = requests.Request("GET", target, headers=headers)
        return self._prepare(request)

    def build_search_request(self, req: SearchRequest) -> requests.PreparedRequest:
        """
        Build the outbound request for a search call without sending it.

        Site filters are appended as repeated ``site`` parameters after any
        query string already on the search base URL.
        """
        headers = self._common_headers()
        headers["Accept"] = "application/json"
        if req.response_format:
            headers["X-Respond-With"] = req.response_format
        headers.update(req.headers)

        base, _, existing_query = self.search_api_url.partition("?")
        target = f"{base.rstrip('/')}/{quote_plus(req.query)}"
        if existing_query:
            target = f"{target}?{existing_query}"

        params = [("site", site) for site in req.sites]
        request = requests.Request("GET", target, headers=headers, params=params)
        return self._prepare(request)

    def _decode_body(self, response: requests.Response) -> str:
        """
        Decode the response body.

        Fallback chain:
        1. Content-Type header charset
        2. UTF-8 with replacement
        """
        content_type = response.headers.get("Content-Type", "")
        for part in content_type.split(";"):
            part = part.strip()
            if part.lower().startswith("charset="):
                encoding = part.split("=", 1)[1].strip().strip("\"'")
                try:
                    return response.content.decode(encoding)
                except (UnicodeDecodeError, LookupError):
                    logger.debug(f"Failed to decode with declared encoding: {encoding}")
                break
        return response.content.decode("utf-8", errors="replace")

    def _send(self, prepared: requests.PreparedRequest) -> str:
        logger.debug(f"{prepared.method} {prepared.url}")
        try:
            response = self._session.send(prepared, timeout=self.timeout)
        except _CONSTRUCTION_EXCEPTIONS as e:
            raise RequestConstructionError(f"Failed to build request: {e}") from e
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {e}") from e

        try:
            body = self._decode_body(response)
        finally:
            response.close()

        logger.debug(f"Got {response.status_code} for {prepared.url} ({len(body)} chars)")
        if not 200 <= response.status_code < 300:
            raise HTTPStatusError(response.status_code, body)
        return body

    def read(self, req: ReadRequest) -> ReadResponse:
        """
        Fetch one URL through the reader API.

        The title is taken from the first ``# `` heading when the requested
        format is Markdown (or left to the API default).

        Raises:
            RequestConstructionError: If the request cannot be built
            TransportError: On network failure or timeout
            HTTPStatusError: On a non-2xx response
        """
        content = self._send(self.build_read_request(req))

        title = None
        if req.response_format in (None, "", "markdown"):
            title = extract_title(content)

        return ReadResponse(content=content, url=req.url, title=title)

    def search(self, req: SearchRequest) -> SearchResponse:
        """
        Run a web search and normalize the results.

        Results keep body order and are cut to ``req.effective_limit``.

        Raises:
            RequestConstructionError: If the request cannot be built
            TransportError: On network failure or timeout
            HTTPStatusError: On a non-2xx response
        """
        body = self._send(self.build_search_request(req))
        results = parse_search_results(body)
        return SearchResponse(query=req.query, results=results[: req.effective_limit])
