"""
Tests for protocol.codec: request envelope decoding and response envelope encoding.
Run from project root: python -m pytest tests/test_protocol.py -v
"""
import sys
import os
import json

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from waveform_engine.core.errors import ProtocolError
from waveform_engine.core.types import RenderRequest, RenderResult
from waveform_engine.protocol.codec import decode_requests, encode_responses


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------

def test_decode_preserves_order_and_fields():
    doc = {
        "requests": [
            {"id": "a", "function": "waveform", "params": ["AAAA", "extra"]},
            {"id": "b", "function": "other", "params": []},
        ]
    }
    requests = decode_requests(json.dumps(doc).encode("utf-8"))
    assert requests == [
        RenderRequest(id="a", operation="waveform", payload=("AAAA", "extra")),
        RenderRequest(id="b", operation="other", payload=()),
    ]


def test_decode_accepts_str_and_multiline_documents():
    text = '{\n  "requests": [\n    {"id": "1", "function": "waveform", "params": ["AA=="]}\n  ]\n}\n'
    requests = decode_requests(text)
    assert len(requests) == 1
    assert requests[0].id == "1"


def test_decode_empty_batch():
    assert decode_requests(b'{"requests": []}') == []


def test_decode_missing_requests_key_is_empty_batch():
    assert decode_requests(b"{}") == []


def test_decode_missing_fields_default_to_empty():
    requests = decode_requests(b'{"requests": [{}]}')
    assert requests == [RenderRequest(id="", operation="", payload=())]


def test_decode_null_params_is_empty_payload():
    requests = decode_requests(b'{"requests": [{"id": "n", "function": "waveform", "params": null}]}')
    assert requests[0].payload == ()


@pytest.mark.parametrize("data", [
    b"",
    b"{not json",
    b"[]",
    b'{"requests": {}}',
    b'{"requests": [1]}',
    b'{"requests": [{"id": 5}]}',
    b'{"requests": [{"params": "AAAA"}]}',
    b'{"requests": [{"params": [1]}]}',
    b'{"requests": [{"params": ""}]}',
    b'{"requests": [{"params": 0}]}',
    b'{"requests": [{"params": false}]}',
    b'{"requests": [{"params": {}}]}',
    b"\xff\xfe",
])
def test_decode_malformed_raises_protocol_error(data):
    with pytest.raises(ProtocolError):
        decode_requests(data)


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------

def test_encode_empty():
    assert encode_responses([]) == b'{"responses":[]}'


def test_encode_keeps_order_and_shape():
    results = [
        RenderResult(id="2", result="QUJD", error="false"),
        RenderResult(id="1", result="", error="invalid base64 payload"),
    ]
    doc = json.loads(encode_responses(results))
    assert doc == {
        "responses": [
            {"id": "2", "result": "QUJD", "error": "false"},
            {"id": "1", "result": "", "error": "invalid base64 payload"},
        ]
    }


def test_encode_top_level_error():
    doc = json.loads(encode_responses([], error="bad document"))
    assert doc == {"responses": [], "error": "bad document"}


def test_encode_non_ascii_id_as_utf8():
    out = encode_responses([RenderResult(id="ключ-é", result="", error="false")])
    assert "ключ-é".encode("utf-8") in out
    assert b"\\u" not in out
    assert json.loads(out)["responses"][0]["id"] == "ключ-é"


def test_non_ascii_id_round_trips_from_request():
    request = decode_requests('{"requests": [{"id": "日本"}]}'.encode("utf-8"))[0]
    out = encode_responses([RenderResult(id=request.id)])
    assert out == '{"responses":[{"id":"日本","result":"","error":"false"}]}'.encode("utf-8")


def test_encode_lone_surrogate_id_stays_valid_json():
    request = decode_requests(b'{"requests": [{"id": "a\\ud800b"}]}')[0]
    out = encode_responses([RenderResult(id=request.id)])
    out.decode("utf-8")
    assert json.loads(out)["responses"][0]["id"] == "a\ud800b"
