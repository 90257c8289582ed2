"""
Batch waveform renderer: JSON requests carrying base64 audio in, base64 images out.
"""
__version__ = "1.0.0"
