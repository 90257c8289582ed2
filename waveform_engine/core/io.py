import io
import logging
import struct
from typing import Optional, Tuple

import numpy as np
import soundfile as sf
from PIL import Image

from waveform_engine.core.errors import FormatError, InvalidDataError, RenderError, TruncatedStreamError
from waveform_engine.core.types import AudioBuffer

logger = logging.getLogger(__name__)

# libsndfile error codes (sf_error)
SF_ERR_UNRECOGNISED_FORMAT = 1
SF_ERR_MALFORMED_FILE = 3
SF_ERR_UNSUPPORTED_ENCODING = 4

# libsndfile messages for a stream that stops mid-data
TRUNCATION_MARKERS = (
    "lost sync",
    "unexpected end",
    "end of file",
    "end of stream",
)

# Chunk size written by streaming encoders that could not seek back
_UNKNOWN_CHUNK_SIZES = (0, 0xFFFFFFFF)

IMAGE_FORMATS = {
    "tiff": "TIFF",
    "png": "PNG",
}


def _classify_sf_error(err: Exception) -> RenderError:
    """Map a soundfile/libsndfile failure onto the render error taxonomy."""
    code = getattr(err, "code", None)
    message = getattr(err, "error_string", None) or str(err)
    if any(marker in message.lower() for marker in TRUNCATION_MARKERS):
        return TruncatedStreamError(f"unexpected end of stream: {message}")
    if code in (SF_ERR_UNRECOGNISED_FORMAT, SF_ERR_UNSUPPORTED_ENCODING):
        return FormatError(f"unrecognised audio format: {message}")
    if code == SF_ERR_MALFORMED_FILE:
        return InvalidDataError(f"invalid audio data: {message}")
    return RenderError(f"audio decode failed: {message}")


def _walk_chunks(data: bytes, offset: int, endian: str, target: bytes) -> Optional[Tuple[int, int]]:
    """Return (declared_size, payload_offset) of the first `target` chunk, or None."""
    while offset + 8 <= len(data):
        chunk_id = data[offset:offset + 4]
        (size,) = struct.unpack(endian + "I", data[offset + 4:offset + 8])
        if chunk_id == target:
            return size, offset + 8
        # Chunks are padded to an even length
        offset += 8 + size + (size & 1)
    return None


def data_chunk_shortfall(data: bytes) -> Optional[Tuple[int, int]]:
    """
    For RIFF/WAVE and FORM/AIFF containers, compare the sample-data chunk size
    declared in the header with the bytes actually present.
    Returns (declared, available) when fewer bytes are present, else None.
    """
    if len(data) < 12:
        return None
    if data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        found = _walk_chunks(data, 12, "<", b"data")
    elif data[:4] == b"FORM" and data[8:12] in (b"AIFF", b"AIFC"):
        found = _walk_chunks(data, 12, ">", b"SSND")
    else:
        return None

    if found is None:
        return None
    declared, payload_offset = found
    if declared in _UNKNOWN_CHUNK_SIZES:
        return None
    available = max(0, len(data) - payload_offset)
    if available < declared:
        return declared, available
    return None


OGG_CAPTURE = b"OggS"
OGG_HEADER_SIZE = 27
OGG_FLAG_EOS = 0x04


def ogg_stream_incomplete(data: bytes) -> bool:
    """
    Walks Ogg pages (27-byte header, segment table, body). True when a page
    runs past the end of the data or no page carries the end-of-stream flag.
    """
    if not data.startswith(OGG_CAPTURE):
        return False
    offset = 0
    saw_eos = False
    while offset < len(data):
        if data[offset:offset + 4] != OGG_CAPTURE or offset + OGG_HEADER_SIZE > len(data):
            return True
        flags = data[offset + 5]
        n_segments = data[offset + 26]
        table_end = offset + OGG_HEADER_SIZE + n_segments
        if table_end > len(data):
            return True
        page_end = table_end + sum(data[offset + OGG_HEADER_SIZE:table_end])
        if page_end > len(data):
            return True
        if flags & OGG_FLAG_EOS:
            saw_eos = True
        offset = page_end
    return not saw_eos


class AudioIO:
    @staticmethod
    def decode(data: bytes) -> AudioBuffer:
        """
        Decodes an in-memory audio container into float32 frames.
        Raises FormatError, InvalidDataError or TruncatedStreamError.
        """
        if not data:
            raise FormatError("unrecognised audio format: empty stream")

        # libsndfile shrinks WAV/AIFF frame counts to fit the bytes present and
        # reads a cut Ogg as zero frames, so truncation is only visible in the framing
        shortfall = data_chunk_shortfall(data)
        if shortfall is not None:
            raise TruncatedStreamError(
                f"unexpected end of stream: data chunk declares {shortfall[0]} bytes, {shortfall[1]} present"
            )
        if ogg_stream_incomplete(data):
            raise TruncatedStreamError("unexpected end of stream: ogg page cut short or missing end-of-stream page")

        try:
            with sf.SoundFile(io.BytesIO(data)) as f:
                declared = int(f.frames)
                samples = f.read(dtype="float32", always_2d=True)
                sample_rate = int(f.samplerate)
        except (sf.SoundFileError, RuntimeError) as e:
            raise _classify_sf_error(e) from e

        if samples.shape[0] < declared:
            raise TruncatedStreamError(
                f"unexpected end of stream: read {samples.shape[0]} of {declared} frames"
            )
        if samples.shape[0] == 0:
            raise InvalidDataError("invalid audio data: no frames")
        if not np.all(np.isfinite(samples)):
            raise InvalidDataError("invalid audio data: non-finite samples")

        return AudioBuffer(samples=samples, sample_rate=sample_rate)

    @staticmethod
    def to_bytes(samples: np.ndarray, sample_rate: int, format: str = 'WAV') -> bytes:
        """Returns audio file as bytes (for building request payloads)."""
        buffer = io.BytesIO()

        # Clamp
        data = np.clip(np.asarray(samples, dtype=np.float32), -1.0, 1.0)

        sf.write(buffer, data, sample_rate, format=format)
        return buffer.getvalue()


class ImageIO:
    @staticmethod
    def to_bytes(pixels: np.ndarray, format: str = "tiff") -> bytes:
        """Encodes an (H, W, 4) uint8 RGBA array into a raster container."""
        if pixels.ndim != 3 or pixels.shape[-1] != 4:
            raise ValueError(f"Expected (H, W, 4) RGBA pixels, got shape {pixels.shape}")
        try:
            pil_format = IMAGE_FORMATS[format]
        except KeyError:
            raise ValueError(f"Unknown image format: {format}")

        img = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
        buffer = io.BytesIO()
        img.save(buffer, format=pil_format)
        return buffer.getvalue()
