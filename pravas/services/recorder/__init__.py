"""
Recorder module - Client-side capture state machine and save flow.
"""

from .save import SaveFlow
from .session import AudioBlob, BaseCapture, CaptureState, RecorderState, RecordingSession

__all__ = [
    "AudioBlob",
    "BaseCapture",
    "CaptureState",
    "RecorderState",
    "RecordingSession",
    "SaveFlow",
    "create_capture",
]


def create_capture(**kwargs) -> BaseCapture:
    """Factory function for the default microphone capture backend.

    Args:
        **kwargs: Passed to ``MicrophoneCapture`` (sample_rate, channels, device)

    Returns:
        BaseCapture implementation instance
    """
    from .capture import MicrophoneCapture

    return MicrophoneCapture(**kwargs)
