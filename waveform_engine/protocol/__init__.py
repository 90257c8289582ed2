"""
JSON batch envelope: request decoding and response encoding.
"""
from waveform_engine.protocol.codec import decode_requests, encode_responses

__all__ = ["decode_requests", "encode_responses"]
