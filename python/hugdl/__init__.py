"""hugdl

Sequential downloader for Hugging Face model repositories: list the files of
a repository through the tree API, then stream each one into a flat local
directory.
Run as module: python -m hugdl --model org/name
"""

from .entity import DownloadConfiguration, DownloadSummary, FileEntry, FileOutcome
from .errors import DecodeError, DownloaderError, LocalIOError, NetworkError, RemoteError
from .fetcher import fetch_file
from .lister import list_files
from .runner import run
from .utils import build_config_from_args

__all__ = [
    "DownloadConfiguration",
    "DownloadSummary",
    "FileEntry",
    "FileOutcome",
    "DownloaderError",
    "RemoteError",
    "DecodeError",
    "LocalIOError",
    "NetworkError",
    "list_files",
    "fetch_file",
    "run",
    "build_config_from_args",
]
