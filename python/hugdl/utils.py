import os
from typing import Any, Dict

from .entity import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, DownloadConfiguration
from .errors import LocalIOError

DEFAULT_MODEL = "Qwen/Qwen2.5-Coder-0.5B"


def ensure_dir(path: str) -> None:
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise LocalIOError(f"failed to create directory ({e.strerror or e})", path) from e


def env_bool(key: str, default: bool) -> bool:
    v = os.environ.get(key)
    if v is None:
        return default
    return v.lower() not in ("0", "false", "no")


def env_float(key: str, default: float) -> float:
    v = os.environ.get(key)
    if not v:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def default_output_dir() -> str:
    return os.environ.get("HUGDL_OUTPUT_DIR") or os.path.join(os.path.expanduser("~"), "hf", "models")


def format_size(n: int) -> str:
    """Human readable byte count, e.g. 1536 -> '1.5 KB'."""
    if n < 1024:
        return f"{n} B"
    size = n / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def build_config_from_args(model_args: Dict[str, Any]) -> DownloadConfiguration:
    """Convert CLI arguments + environment into a DownloadConfiguration.

    Rules:
    - model: model_args.model or DEFAULT_MODEL
    - output root: model_args.output > HUGDL_OUTPUT_DIR > ~/hf/models
    - base url: HF_ENDPOINT or https://huggingface.co; api url is {base}/api
    - timeout: HUGDL_TIMEOUT seconds, default 30 minutes
    - progress: HUGDL_PROGRESS (0/false/no disables), default on
    """
    model_id = model_args.get("model") or DEFAULT_MODEL
    output_dir = model_args.get("output") or default_output_dir()
    base_url = os.environ.get("HF_ENDPOINT") or DEFAULT_ENDPOINT

    return DownloadConfiguration.create(
        model_id,
        output_dir,
        base_url=base_url,
        timeout=env_float("HUGDL_TIMEOUT", DEFAULT_TIMEOUT),
        show_progress=env_bool("HUGDL_PROGRESS", True),
    )
