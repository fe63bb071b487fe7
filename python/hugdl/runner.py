"""Sequential orchestration: list, create the model directory, fetch each file."""
import logging
from collections import Counter
from typing import Optional

import requests

from .entity import DownloadConfiguration, DownloadSummary, FileOutcome
from .errors import DownloaderError
from .fetcher import fetch_file
from .lister import list_files
from .utils import ensure_dir

logger = logging.getLogger(__name__)

RULE = "=" * 50


def run(config: DownloadConfiguration, *, session: Optional[requests.Session] = None) -> DownloadSummary:
    """Download every file of `config.model_id` into `config.model_dir`.

    Listing and directory-creation errors propagate to the caller. A failure
    on one file is recorded in the summary and the next file is attempted.
    """
    if session is None:
        with requests.Session() as s:
            return run(config, session=s)

    print("Checking available files...")
    files = list_files(config.api_url, config.model_id, session=session, timeout=config.timeout)
    print(f"Found {len(files)} files")

    ensure_dir(config.model_dir)

    # output is flat, so entries sharing a base name overwrite each other
    for name, count in Counter(f.name for f in files).items():
        if count > 1:
            logger.warning("%d listed files share the name %s; only the last one will be kept", count, name)

    print("\nStarting downloads...")
    print("-" * 50)

    summary = DownloadSummary(model_dir=config.model_dir)
    for i, entry in enumerate(files, start=1):
        print(f"[{i}/{len(files)}] Downloading {entry.relative_path}...")
        try:
            written = fetch_file(config.base_url, config.model_id, config.model_dir, entry,
                                 session=session, timeout=config.timeout,
                                 show_progress=config.show_progress)
        except DownloaderError as e:
            logger.debug("Download of %s failed", entry.relative_path, exc_info=True)
            print(f"Failed to download {entry.relative_path}: {e}")
            summary.outcomes.append(FileOutcome(entry=entry, error=e))
            continue

        outcome = FileOutcome(entry=entry, bytes_written=written)
        if outcome.size_mismatch:
            logger.info("%s: listing declared %d bytes, wrote %d", entry.name, entry.size_bytes, written)
        print(f"Downloaded {entry.relative_path}")
        summary.outcomes.append(outcome)

    print(RULE)
    print(f"Download complete! {summary.succeeded}/{summary.total} files downloaded successfully")
    print(f"Files saved to: {summary.model_dir}")
    return summary
