import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import DecodeError

DEFAULT_ENDPOINT = "https://huggingface.co"
DEFAULT_TIMEOUT = 30 * 60


@dataclass(frozen=True)
class FileEntry:
    """One remote file belonging to a model repository."""
    # base filename, used as the local file name
    name: str
    # full path inside the repository, used to build the resolve URL
    relative_path: str
    # declared size from the listing; 0 when unknown
    size_bytes: int = 0

    @classmethod
    def from_listing_item(cls, item: Dict[str, Any]) -> "FileEntry":
        path = item["path"]
        return cls(name=path.rsplit("/", 1)[-1], relative_path=path,
                   size_bytes=item.get("size") or 0)


@dataclass(frozen=True)
class DownloadConfiguration:
    """Resolved run parameters.

    Built once from CLI input and environment (see utils.build_config_from_args)
    and passed explicitly to the lister, fetcher and runner.
    """
    model_id: str
    base_url: str
    api_url: str
    output_dir: str
    # output_dir joined with model_id, "/" replaced by "_"
    model_dir: str
    timeout: float = DEFAULT_TIMEOUT
    show_progress: bool = True

    @staticmethod
    def model_dir_name(model_id: str) -> str:
        return model_id.replace("/", "_")

    @classmethod
    def create(cls, model_id: str, output_dir: str, *, base_url: str = DEFAULT_ENDPOINT,
               api_url: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT,
               show_progress: bool = True) -> "DownloadConfiguration":
        if not model_id:
            raise ValueError("model identifier must not be empty")
        base_url = base_url.rstrip("/")
        api_url = (api_url or base_url + "/api").rstrip("/")
        model_dir = os.path.join(output_dir, cls.model_dir_name(model_id))
        return cls(model_id=model_id, base_url=base_url, api_url=api_url,
                   output_dir=output_dir, model_dir=model_dir, timeout=timeout,
                   show_progress=show_progress)


@dataclass(frozen=True)
class FileOutcome:
    entry: FileEntry
    bytes_written: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def size_mismatch(self) -> bool:
        # informational only; a mismatch never turns a success into a failure
        return self.ok and self.entry.size_bytes > 0 and self.entry.size_bytes != self.bytes_written


@dataclass
class DownloadSummary:
    model_dir: str
    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded


def validate_listing_item(item: Any) -> Dict[str, Any]:
    """Check one decoded listing item has the fields FileEntry needs."""
    if not isinstance(item, dict):
        raise DecodeError(f"listing item is not an object: {item!r}")
    for key in ("type", "path"):
        if not isinstance(item.get(key), str):
            raise DecodeError(f"listing item missing string field {key!r}: {item!r}")
    size = item.get("size")
    if size is not None and (isinstance(size, bool) or not isinstance(size, int)):
        raise DecodeError(f"listing item has non-integer size: {item!r}")
    return item
