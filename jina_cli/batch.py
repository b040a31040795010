"""Sequential batch reads over a file of URLs."""

import dataclasses
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

from .errors import JinaError, UsageError
from .http.client import JinaClient
from .models.api import ReadRequest

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


def parse_url_list(text: str) -> list[str]:
    """Return one URL per non-blank line, skipping ``#`` comments."""
    urls = []
    for line in text.split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        urls.append(line)
    return urls


def load_url_list(path: Path) -> list[str]:
    """
    Read a URL list file.

    Raises:
        OSError: If the file cannot be read
        UsageError: If the file is not UTF-8 text
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise UsageError(f"URL list {path} is not valid UTF-8: {e}") from e
    return parse_url_list(text)


def read_batch(
    client: JinaClient,
    urls: list[str],
    template: ReadRequest,
    on_progress: Optional[ProgressCallback] = None,
) -> list[dict[str, Any]]:
    """
    Read each URL in order, one request at a time.

    A failed URL produces ``{"url": ..., "error": ...}`` and the batch keeps
    going; no error is raised for individual URLs.

    Args:
        client: Client to read with
        urls: URLs in processing order
        template: Request whose options apply to every URL (its ``url`` is replaced)
        on_progress: Optional callback receiving (index, total, url), 1-based

    Returns:
        One result record per URL, in input order
    """
    results: list[dict[str, Any]] = []
    total = len(urls)

    for index, url in enumerate(urls, start=1):
        if on_progress:
            on_progress(index, total, url)

        request = dataclasses.replace(template, url=url)
        try:
            response = client.read(request)
        except JinaError as e:
            logger.warning(f"Failed to read {url}: {e}")
            results.append({"url": url, "error": str(e)})
            continue

        results.append(response.to_dict())

    failed = sum(1 for record in results if "error" in record)
    logger.debug(f"Batch complete: {total - failed} succeeded, {failed} failed")
    return results
