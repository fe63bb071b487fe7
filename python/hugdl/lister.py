"""Lister: enumerate the files of a model repository through the tree API."""
import logging
from typing import List, Optional

import requests

from .entity import FileEntry, validate_listing_item
from .errors import DecodeError, NetworkError, RemoteError

logger = logging.getLogger(__name__)


def listing_url(api_url: str, model_id: str) -> str:
    return f"{api_url.rstrip('/')}/models/{model_id}/tree/main"


def list_files(api_url: str, model_id: str, *, session: Optional[requests.Session] = None,
               timeout: Optional[float] = None) -> List[FileEntry]:
    """Return the file entries of `model_id`, in the order the API lists them.

    Directory entries are dropped. Pagination is not followed, so a truncated
    listing yields a truncated result.

    Raises:
        RemoteError: the listing endpoint answered with a non-200 status
        DecodeError: the body is not an array of {type, path, size?} objects
        NetworkError: the request itself failed
    """
    url = listing_url(api_url, model_id)
    http = session or requests
    logger.debug("Fetching file listing from %s", url)

    try:
        resp = http.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"failed to fetch model info: {e}") from e

    with resp:
        if resp.status_code != 200:
            raise RemoteError(resp.status_code, "listing", url)
        try:
            items = resp.json()
        except ValueError as e:
            raise DecodeError(f"failed to decode API response: {e}") from e

    if not isinstance(items, list):
        raise DecodeError(f"expected a JSON array from {url}, got {type(items).__name__}")

    files = []
    for item in items:
        item = validate_listing_item(item)
        if item["type"] == "file":
            files.append(FileEntry.from_listing_item(item))

    logger.debug("Listing for %s: %d items, %d files", model_id, len(items), len(files))
    return files
