"""
Batch orchestrator: request document in, response document out.

Each request is processed in input order and isolated: a payload or render
failure becomes that request's error entry and the batch carries on.
"""
import base64
import binascii
import logging
from typing import BinaryIO, List, Optional, Union

from waveform_engine.core.errors import PER_REQUEST_ERRORS, PayloadError
from waveform_engine.core.types import NO_ERROR, OP_WAVEFORM, RenderPolicy, RenderRequest, RenderResult
from waveform_engine.protocol.codec import decode_requests, encode_responses
from waveform_engine.renderer.waveform import WaveformRenderer

logger = logging.getLogger(__name__)


def decode_payload(request: RenderRequest) -> bytes:
    """base64-decode payload[0]. Raises PayloadError."""
    if not request.payload:
        raise PayloadError("missing audio payload (params[0])")
    try:
        # Line breaks are ignored, as in MIME-wrapped base64
        encoded = request.payload[0].replace("\r", "").replace("\n", "")
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PayloadError(f"invalid base64 payload: {e}") from e


def process_request(request: RenderRequest, renderer: WaveformRenderer) -> RenderResult:
    """Render one request. Per-request failures are returned, never raised."""
    try:
        audio = decode_payload(request)
        pixels = renderer.render(audio)
        image = renderer.encode_image(pixels)
    except PER_REQUEST_ERRORS as e:
        logger.warning("request %r failed: %s", request.id, e)
        return RenderResult(id=request.id, result="", error=str(e) or type(e).__name__)

    return RenderResult(
        id=request.id,
        result=base64.b64encode(image).decode("ascii"),
        error=NO_ERROR,
    )


def process_batch(requests: List[RenderRequest], renderer: WaveformRenderer) -> List[RenderResult]:
    """
    One result per waveform request, in input order.
    Requests naming any other function produce no entry.
    """
    results: List[RenderResult] = []
    for request in requests:
        if request.operation != OP_WAVEFORM:
            logger.warning("request %r: unsupported function %r skipped", request.id, request.operation)
            continue
        results.append(process_request(request, renderer))
    return results


def run(
    input_stream: Union[BinaryIO, bytes],
    policy: RenderPolicy,
    renderer: Optional[WaveformRenderer] = None,
) -> bytes:
    """
    Read the whole input, process the batch, return the response document.
    Raises ProtocolError when the input is not a request document;
    OSError from the stream propagates.
    """
    if isinstance(input_stream, (bytes, bytearray)):
        data = bytes(input_stream)
    else:
        data = input_stream.read()

    requests = decode_requests(data)
    logger.info("batch of %d request(s)", len(requests))

    renderer = renderer or WaveformRenderer(policy)
    results = process_batch(requests, renderer)

    failed = sum(1 for r in results if not r.ok)
    logger.info("rendered %d response(s), %d failed", len(results), failed)
    return encode_responses(results)
