#!/usr/bin/env python3
"""
Developer tool around the batch renderer.

Usage:
    python tools/render.py <subcommand> [options]

Subcommands:
    request <audio>...          Print a batch request document for the given audio files
    one-shot <audio>            Render one audio file through the batch pipeline and save the image

Options (one-shot):
    --output <path>       Image path (default: <audio stem>.<format>)
    --fn, --bg, --fg, --alt, --resolution, --x, --y, --sharpness, --format, --seed
                          Same meaning as the waveform-batch flags
"""
import sys
import os
import json
import base64
import hashlib
import argparse
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from waveform_engine.batch import run
from waveform_engine.core.config import policy_from_options
from waveform_engine.core.errors import ConfigError
from waveform_engine.core.types import OP_WAVEFORM


def build_request_document(paths, id_prefix: str = "") -> dict:
    """One waveform request per file; ids are <prefix><index>."""
    requests = []
    for i, path in enumerate(paths, start=1):
        data = Path(path).read_bytes()
        requests.append({
            "id": f"{id_prefix}{i}",
            "function": OP_WAVEFORM,
            "params": [base64.b64encode(data).decode("ascii")],
        })
    return {"requests": requests}


def cmd_request(args):
    """Print a request document."""
    doc = build_request_document(args.audio, id_prefix=args.id_prefix)
    print(json.dumps(doc))
    return 0


def cmd_one_shot(args):
    """Render a single file and write the decoded image."""
    try:
        policy = policy_from_options(
            bg=args.bg, fg=args.fg, alt=args.alt, fn=args.fn,
            resolution=args.resolution, x=args.x, y=args.y,
            sharpness=args.sharpness, format=args.format, seed=args.seed,
        )
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    doc = build_request_document([args.audio])
    out = json.loads(run(json.dumps(doc).encode("utf-8"), policy))
    response = out["responses"][0]

    if not response["result"]:
        print(f"Render failed: {response['error']}", file=sys.stderr)
        return 1

    image = base64.b64decode(response["result"])
    output = Path(args.output) if args.output else Path(args.audio).with_suffix(f".{policy.image_format}")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(image)

    # Print summary
    print(f"\n=== Render Complete ===")
    print(f"Input: {args.audio}")
    print(f"Output: {output}")
    print(f"Strategy: {policy.strategy}")
    print(f"Bytes: {len(image)}")
    print(f"Fingerprint SHA256: {hashlib.sha256(image).hexdigest()[:16]}...")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Developer tool for the batch waveform renderer"
    )

    subparsers = parser.add_subparsers(dest="command", help="Subcommand")

    # request subcommand
    p_req = subparsers.add_parser("request", help="Print a batch request document")
    p_req.add_argument("audio", nargs="+", help="Audio files")
    p_req.add_argument("--id-prefix", type=str, default="", help="Prefix for request ids")

    # one-shot subcommand
    p_one = subparsers.add_parser("one-shot", help="Render one audio file to an image")
    p_one.add_argument("audio", help="Audio file")
    p_one.add_argument("--output", type=str, help="Output image path")
    p_one.add_argument("--fn", type=str, default=None)
    p_one.add_argument("--bg", type=str, default=None)
    p_one.add_argument("--fg", type=str, default=None)
    p_one.add_argument("--alt", type=str, default=None)
    p_one.add_argument("--resolution", type=int, default=None)
    p_one.add_argument("--x", type=int, default=None)
    p_one.add_argument("--y", type=int, default=None)
    p_one.add_argument("--sharpness", type=int, default=None)
    p_one.add_argument("--format", type=str, default=None)
    p_one.add_argument("--seed", type=int, default=None)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "request":
        return cmd_request(args)
    elif args.command == "one-shot":
        return cmd_one_shot(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
