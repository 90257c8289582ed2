from waveform_engine.renderer.waveform import WaveformRenderer

__all__ = ["WaveformRenderer"]
