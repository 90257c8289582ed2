"""
waveform-batch: reads a JSON batch of base64 audio payloads from stdin,
renders each into a waveform image using the flags below, and writes a
JSON batch of base64 images to stdout.
"""
import argparse
import logging
import os
import sys
from typing import BinaryIO, List, Optional

from waveform_engine import __version__
from waveform_engine.batch import run
from waveform_engine.core.config import policy_from_options
from waveform_engine.core.errors import ConfigError, ProtocolError
from waveform_engine.params.schema import OPTION_SCHEMA
from waveform_engine.protocol.codec import encode_responses

APP = "waveform"

# Exit statuses
EXIT_OK = 0
EXIT_STREAM_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_PROTOCOL_ERROR = 3

logger = logging.getLogger(APP)


def _uint(value: str) -> int:
    try:
        return int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="waveform-batch",
        allow_abbrev=False,
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Single-dash names (-bg, -fn=solid) plus double-dash aliases
    for name in ("bg", "fg", "alt", "fn"):
        entry = OPTION_SCHEMA[name]
        p.add_argument(f"-{name}", f"--{name}", dest=name, default=entry["default"], help=entry["description"])

    for name in ("resolution", "x", "y", "sharpness"):
        entry = OPTION_SCHEMA[name]
        p.add_argument(
            f"-{name}", f"--{name}", dest=name, type=_uint, default=entry["default"],
            help=f"{entry['description']} (default: {entry['default']})",
        )

    p.add_argument(
        "--checker-size", dest="checker_size", type=_uint,
        default=OPTION_SCHEMA["checker_size"]["default"],
        help=OPTION_SCHEMA["checker_size"]["description"],
    )
    p.add_argument(
        "--format", dest="format", default=OPTION_SCHEMA["format"]["default"],
        help=OPTION_SCHEMA["format"]["description"],
    )
    p.add_argument("--seed", dest="seed", type=_uint, default=None, help=OPTION_SCHEMA["seed"]["description"])
    p.add_argument(
        "--max-pixels", dest="max_pixels", type=_uint,
        default=OPTION_SCHEMA["max_pixels"]["default"],
        help=OPTION_SCHEMA["max_pixels"]["description"],
    )
    p.add_argument(
        "--log-level", dest="log_level", default=os.environ.get("LOG_LEVEL", "INFO"),
        help="logging level written to stderr (default: $LOG_LEVEL or INFO)",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def configure_logging(level: str) -> None:
    # stdout carries the response document; all logging goes to stderr
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        stream=sys.stderr,
        format=APP + ": %(levelname)s %(name)s: %(message)s",
    )


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout.buffer

    # Fail fast: nothing is read until the policy is valid
    try:
        policy = policy_from_options(
            bg=args.bg,
            fg=args.fg,
            alt=args.alt,
            fn=args.fn,
            resolution=args.resolution,
            x=args.x,
            y=args.y,
            sharpness=args.sharpness,
            checker_size=args.checker_size,
            format=args.format,
            seed=args.seed,
            max_pixels=args.max_pixels,
        )
    except ConfigError as e:
        logger.critical("%s", e)
        return EXIT_CONFIG_ERROR

    try:
        data = stdin.read()
    except OSError as e:
        logger.error("reading input failed: %s", e)
        return EXIT_STREAM_ERROR

    try:
        output = run(data, policy)
    except ProtocolError as e:
        logger.error("%s", e)
        stdout.write(encode_responses([], error=str(e)) + b"\n")
        stdout.flush()
        return EXIT_PROTOCOL_ERROR

    stdout.write(output + b"\n")
    stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
