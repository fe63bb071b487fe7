"""Fetcher: stream a single repository file to the local model directory."""
import logging
import os
import sys
import time
from typing import Optional

import requests
from tqdm import tqdm

from .entity import FileEntry
from .errors import LocalIOError, NetworkError, RemoteError
from .utils import DEFAULT_TIMEOUT, format_size

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
# the resolve endpoint is queried like a browser download
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "*/*",
}


class _LoggingProgressBar:
    """Progress tracker for non-TTY output (CI logs, docker logs, pipes).

    Prints a line every 10 seconds or every 20% instead of redrawing a bar.
    Exposes the subset of the tqdm interface the fetcher uses.
    """

    def __init__(self, total: int = 0, desc: str = "Downloading"):
        self.total = total or 0
        self.desc = desc
        self.n = 0
        self.last_log_time = time.time()
        self.log_interval = 10.0
        self.last_percent = 0

        if self.total > 0:
            print(f"[hugdl] {self.desc}: Starting (total: {format_size(self.total)})", file=sys.stderr)
        else:
            print(f"[hugdl] {self.desc}: Starting (size unknown)", file=sys.stderr)

    def update(self, n=1):
        self.n += n
        current_time = time.time()
        time_elapsed = current_time - self.last_log_time >= self.log_interval

        if self.total > 0:
            percent = int((self.n / self.total) * 100)
            percent_changed = percent - self.last_percent >= 20
            completed = self.n >= self.total

            if time_elapsed or percent_changed or completed:
                print(f"[hugdl] {self.desc}: {format_size(self.n)} / {format_size(self.total)} ({percent}%)",
                      file=sys.stderr)
                self.last_log_time = current_time
                self.last_percent = percent
        elif time_elapsed:
            print(f"[hugdl] {self.desc}: {format_size(self.n)} downloaded", file=sys.stderr)
            self.last_log_time = current_time

    def close(self):
        if self.n > 0:
            print(f"[hugdl] {self.desc}: Completed {format_size(self.n)}", file=sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _progress_for(entry: FileEntry):
    if sys.stderr.isatty():
        return tqdm(total=entry.size_bytes or None, unit="B", unit_scale=True,
                    unit_divisor=1024, desc=entry.name, leave=False)
    return _LoggingProgressBar(total=entry.size_bytes, desc=entry.name)


def download_url(base_url: str, model_id: str, entry: FileEntry) -> str:
    return f"{base_url.rstrip('/')}/{model_id}/resolve/main/{entry.relative_path}"


def fetch_file(base_url: str, model_id: str, local_model_dir: str, entry: FileEntry, *,
               session: Optional[requests.Session] = None, timeout: Optional[float] = DEFAULT_TIMEOUT,
               show_progress: bool = True) -> int:
    """Download `entry` into `local_model_dir` and return the number of bytes written.

    The file is written flat under its base name; any subdirectory in
    `entry.relative_path` is only used to build the URL. An existing file is
    truncated. A failed transfer may leave a partial file behind.

    Raises:
        RemoteError: the resolve endpoint answered with a non-200 status
        NetworkError: the request failed or the body stream broke
        LocalIOError: the local file could not be created or written
    """
    url = download_url(base_url, model_id, entry)
    output_path = os.path.join(local_model_dir, entry.name)
    http = session or requests
    # requests only bounds connect and single reads; this bounds the whole transfer
    deadline = time.monotonic() + timeout if timeout is not None else None

    try:
        resp = http.get(url, headers=REQUEST_HEADERS, stream=True, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"failed to download: {e}") from e

    with resp:
        if resp.status_code != 200:
            raise RemoteError(resp.status_code, "download", url)

        try:
            out = open(output_path, "wb")
        except OSError as e:
            raise LocalIOError("failed to create output file", output_path) from e

        print(f"   Downloading {entry.name} ({entry.size_bytes} bytes)...")
        progress = _progress_for(entry) if show_progress else None
        written = 0
        try:
            with out:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if deadline is not None and time.monotonic() > deadline:
                        raise NetworkError(f"download exceeded timeout of {timeout:g}s")
                    if not chunk:
                        continue
                    out.write(chunk)
                    written += len(chunk)
                    if progress is not None:
                        progress.update(len(chunk))
        except requests.RequestException as e:
            raise NetworkError(f"failed to save file: {e}") from e
        except OSError as e:
            raise LocalIOError("failed to save file", output_path) from e
        finally:
            if progress is not None:
                progress.close()

    logger.debug("Wrote %d bytes from %s to %s", written, url, output_path)
    print(f"   Downloaded {entry.name} ({written} bytes)")
    return written
