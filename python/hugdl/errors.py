from typing import Optional


class DownloaderError(Exception):
    """Base class for errors raised while listing or fetching model files."""


class RemoteError(DownloaderError):
    """The remote endpoint answered with a non-200 status."""

    def __init__(self, status_code: int, endpoint: str, url: Optional[str] = None):
        self.status_code = status_code
        self.endpoint = endpoint
        self.url = url
        super().__init__(f"{endpoint} returned status: {status_code}")


class DecodeError(DownloaderError):
    """The listing response could not be decoded into file entries."""


class LocalIOError(DownloaderError):
    """A local directory or file could not be created or written."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class NetworkError(DownloaderError):
    """Connection-level failure: refused connection, timeout, broken body."""
