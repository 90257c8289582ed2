"""
Batch protocol codec.

Input:  {"requests": [{"id": "...", "function": "...", "params": ["<base64>", ...]}, ...]}
Output: {"responses": [{"id": "...", "result": "<base64-or-empty>", "error": "..."}, ...]}

No semantic checks on function/params here; that is the orchestrator's job.
"""
import json
from typing import Any, Iterable, List, Optional, Union

from waveform_engine.core.errors import ProtocolError
from waveform_engine.core.types import RenderRequest, RenderResult

REQUESTS_KEY = "requests"
RESPONSES_KEY = "responses"


def _field(entry: dict, key: str, index: int) -> str:
    value = entry.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ProtocolError(f"requests[{index}].{key}: expected string, got {type(value).__name__}")
    return value


def _request_from_json(entry: Any, index: int) -> RenderRequest:
    if not isinstance(entry, dict):
        raise ProtocolError(f"requests[{index}]: expected object, got {type(entry).__name__}")

    params = entry.get("params")
    if params is None:
        params = []
    if not isinstance(params, list) or not all(isinstance(p, str) for p in params):
        raise ProtocolError(f"requests[{index}].params: expected array of strings")

    return RenderRequest(
        id=_field(entry, "id", index),
        operation=_field(entry, "function", index),
        payload=tuple(params),
    )


def decode_requests(data: Union[bytes, str]) -> List[RenderRequest]:
    """
    Parse the whole input document into RenderRequests, in document order.
    Raises ProtocolError on invalid JSON or a malformed envelope.
    A document without a "requests" key (or with null) is an empty batch.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolError(f"input is not valid UTF-8: {e}") from e

    try:
        doc = json.loads(data)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"invalid request document: {e}") from e

    if not isinstance(doc, dict):
        raise ProtocolError(f"request document must be an object, got {type(doc).__name__}")

    entries = doc.get(REQUESTS_KEY)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ProtocolError(f"{REQUESTS_KEY!r} must be an array")

    return [_request_from_json(entry, i) for i, entry in enumerate(entries)]


def result_to_json(result: RenderResult) -> dict:
    return {"id": result.id, "result": result.result, "error": result.error}


def encode_responses(results: Iterable[RenderResult], error: Optional[str] = None) -> bytes:
    """
    Serialize results, in order, into the response document.
    `error` adds a top-level error string (batch-level failures only).
    """
    doc = {RESPONSES_KEY: [result_to_json(r) for r in results]}
    if error is not None:
        doc["error"] = error
    # Raw UTF-8 for non-ASCII text; lone surrogates fall back to their \u escape
    text = json.dumps(doc, separators=(",", ":"), ensure_ascii=False)
    return text.encode("utf-8", "backslashreplace")
