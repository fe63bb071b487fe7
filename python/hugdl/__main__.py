"""CLI entrypoint: python -m hugdl --model org/name [--output DIR]
"""
import argparse
import logging
import sys

from .errors import DownloaderError, LocalIOError
from .runner import RULE, run
from .utils import DEFAULT_MODEL, build_config_from_args

TITLE = "hugdl - HuggingFace Model Downloader"

EXAMPLES = """Examples:
  hugdl --model Qwen/Qwen2.5-Coder-0.5B
  hugdl --model microsoft/DialoGPT-medium
  hugdl --model meta-llama/Llama-2-7b-chat-hf --output /data/models

Environment:
  HF_ENDPOINT       remote base url (default https://huggingface.co)
  HUGDL_OUTPUT_DIR  default output directory
  HUGDL_TIMEOUT     per-request timeout in seconds (default 1800)
  HUGDL_PROGRESS    set to 0 to disable progress output
"""


def _build_parser():
    p = argparse.ArgumentParser(prog="hugdl", description=TITLE, epilog=EXAMPLES,
                                formatter_class=argparse.RawDescriptionHelpFormatter)
    # Only model-related args are exposed here; endpoint, timeout and progress
    # come from the environment (HF_ENDPOINT, HUGDL_*).
    p.add_argument("--model", default=DEFAULT_MODEL, help=f"model name (default {DEFAULT_MODEL})")
    p.add_argument("--output", required=False, help="output directory for downloaded files")
    p.add_argument("-v", "--verbose", action="store_true", help="log debug details")
    return p


def main(argv=None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.model.strip():
        parser.error("--model must not be empty")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="[hugdl] %(levelname)s %(name)s: %(message)s")

    try:
        config = build_config_from_args({"model": args.model, "output": args.output})
    except ValueError as e:
        parser.error(str(e))

    print(TITLE)
    print(RULE)
    print(f"Model: {config.model_id}")
    print(f"Output: {config.model_dir}")
    print(RULE)

    try:
        run(config)
    except LocalIOError as e:
        print(f"Error creating directory: {e}", file=sys.stderr)
        return 1
    except DownloaderError as e:
        print(f"Error getting model files: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
