"""
Error taxonomy.

Configuration and protocol errors are batch-level: they stop the process.
Payload and render errors are per-request: the orchestrator records them on
the request's RenderResult and moves on to the next request.
"""


class WaveformError(Exception):
    """Base class for all errors raised by waveform_engine."""


class ConfigError(WaveformError):
    """Invalid startup option (unknown strategy, out-of-range number)."""


class ProtocolError(WaveformError):
    """Input document is not a valid batch request envelope."""


class PayloadError(WaveformError):
    """Request payload is missing or is not valid base64."""


class RenderError(WaveformError):
    """Unclassified rendering failure."""


class FormatError(RenderError):
    """Audio container is unrecognised or malformed."""


class InvalidDataError(RenderError):
    """Audio container parsed but its sample data is unusable."""


class TruncatedStreamError(RenderError):
    """Audio stream ended before the frames its header declares."""


class ImageTooLargeError(RenderError):
    """Rendered image would exceed the pixel budget."""


PER_REQUEST_ERRORS = (PayloadError, RenderError)
