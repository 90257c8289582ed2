"""
Process entry point tests: flag parsing, fail-fast configuration errors,
stream and protocol error exits.
Run from project root: python -m pytest tests/test_main.py -v
"""
import sys
import os
import io
import json
import base64

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np
import pytest

from waveform_engine.core.io import AudioIO
from waveform_engine.main import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_PROTOCOL_ERROR,
    EXIT_STREAM_ERROR,
    build_parser,
    main,
)


class _UnreadableStdin:
    """stdin that must not be touched."""

    def read(self, *args):
        raise AssertionError("stdin was read")


class _BrokenStdin:
    def read(self, *args):
        raise OSError("read error")


def _silence_doc() -> bytes:
    data = AudioIO.to_bytes(np.zeros(8000, dtype=np.float32), 8000)
    doc = {"requests": [{"id": "1", "function": "waveform", "params": [base64.b64encode(data).decode("ascii")]}]}
    return json.dumps(doc).encode("utf-8")


def test_go_style_flags_parse():
    args = build_parser().parse_args(
        ["-bg", "#000", "-fg=#fff", "-alt", "#f00", "-fn=stripe", "-resolution", "5", "-x", "2", "-y", "3", "-sharpness", "0"]
    )
    assert (args.bg, args.fg, args.alt, args.fn) == ("#000", "#fff", "#f00", "stripe")
    assert (args.resolution, args.x, args.y, args.sharpness) == (5, 2, 3, 0)


def test_double_dash_aliases_parse():
    args = build_parser().parse_args(["--fn", "checker", "--x", "4"])
    assert args.fn == "checker"
    assert args.x == 4


def test_defaults():
    args = build_parser().parse_args([])
    assert (args.bg, args.fg, args.alt, args.fn) == ("#FFFFFF", "#000000", "", "solid")
    assert (args.resolution, args.x, args.y, args.sharpness) == (1, 1, 1, 1)


def test_unknown_function_aborts_before_reading_stdin():
    stdout = io.BytesIO()
    code = main(["-fn=unknown"], stdin=_UnreadableStdin(), stdout=stdout)
    assert code == EXIT_CONFIG_ERROR
    assert stdout.getvalue() == b""


def test_zero_scale_aborts_before_reading_stdin():
    stdout = io.BytesIO()
    code = main(["-x", "0"], stdin=_UnreadableStdin(), stdout=stdout)
    assert code == EXIT_CONFIG_ERROR
    assert stdout.getvalue() == b""


def test_pixel_budget_below_one_bar_aborts_before_reading_stdin():
    # a single bar at the default geometry is 1x128 pixels
    stdout = io.BytesIO()
    code = main(["--max-pixels", "100"], stdin=_UnreadableStdin(), stdout=stdout)
    assert code == EXIT_CONFIG_ERROR
    assert stdout.getvalue() == b""


def test_max_pixels_flag_parses():
    args = build_parser().parse_args(["--max-pixels", "4096"])
    assert args.max_pixels == 4096


def test_non_numeric_rejected_by_parser():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-resolution", "abc"])


def test_success_writes_one_document():
    stdout = io.BytesIO()
    code = main([], stdin=io.BytesIO(_silence_doc()), stdout=stdout)
    assert code == EXIT_OK
    out = json.loads(stdout.getvalue())
    assert out["responses"][0]["id"] == "1"
    assert out["responses"][0]["error"] == "false"
    assert out["responses"][0]["result"]


def test_empty_batch_output():
    stdout = io.BytesIO()
    assert main([], stdin=io.BytesIO(b'{"requests":[]}'), stdout=stdout) == EXIT_OK
    assert stdout.getvalue() == b'{"responses":[]}\n'


def test_stream_error_writes_no_document():
    stdout = io.BytesIO()
    code = main([], stdin=_BrokenStdin(), stdout=stdout)
    assert code == EXIT_STREAM_ERROR
    assert stdout.getvalue() == b""


def test_malformed_json_is_top_level_error():
    stdout = io.BytesIO()
    code = main([], stdin=io.BytesIO(b"{oops"), stdout=stdout)
    assert code == EXIT_PROTOCOL_ERROR
    out = json.loads(stdout.getvalue())
    assert out["responses"] == []
    assert out["error"]
