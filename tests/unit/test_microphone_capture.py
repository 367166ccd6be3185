"""Tests for MicrophoneCapture.

``sounddevice`` is replaced by an in-memory module whose ``InputStream``
records calls and exposes the audio callback, so tests can feed blocks
from a worker thread the way PortAudio does.  Encoding uses the real
``soundfile`` OGG/Vorbis writer.
"""

import asyncio
import sys
import types

import numpy as np
import pytest

from pravas.core.exceptions import DeviceUnavailableError
from pravas.services.recorder import capture as capture_module
from pravas.services.recorder.capture import MicrophoneCapture
from pravas.services.recorder.session import CaptureState, RecorderState, RecordingSession

RATE = 16000


class FakeInputStream:
    def __init__(self, owner, **kwargs) -> None:
        self.kwargs = kwargs
        self.callback = kwargs["callback"]
        self.calls: list[str] = []
        owner.streams.append(self)
        if owner.fail_on_create:
            raise owner.PortAudioError("Error querying device -1")
        self._fail_on_start = owner.fail_on_start

    def start(self) -> None:
        if self._fail_on_start:
            raise OSError("Device unavailable")
        self.calls.append("start")

    def stop(self) -> None:
        self.calls.append("stop")

    def close(self) -> None:
        self.calls.append("close")

    def abort(self) -> None:
        self.calls.append("abort")


@pytest.fixture
def fake_sd(monkeypatch):
    module = types.ModuleType("sounddevice")
    module.PortAudioError = type("PortAudioError", (Exception,), {})
    module.streams = []
    module.fail_on_create = False
    module.fail_on_start = False
    module.InputStream = lambda **kwargs: FakeInputStream(module, **kwargs)
    monkeypatch.setitem(sys.modules, "sounddevice", module)
    return module


def speech_block(frames: int = RATE // 2) -> np.ndarray:
    rng = np.random.default_rng(7)
    return rng.uniform(-0.5, 0.5, size=(frames, 1)).astype(np.float32)


async def feed_from_audio_thread(stream: FakeInputStream, block: np.ndarray) -> None:
    """Invoke the stream callback on another thread, then let the loop drain."""
    await asyncio.to_thread(stream.callback, block, len(block), None, None)
    await asyncio.sleep(0)


class TestOpen:
    async def test_opens_input_stream(self, fake_sd) -> None:
        capture = MicrophoneCapture(sample_rate=RATE, channels=1, device="USB Mic")
        await capture.open(lambda chunk: None)

        (stream,) = fake_sd.streams
        assert stream.kwargs["samplerate"] == RATE
        assert stream.kwargs["channels"] == 1
        assert stream.kwargs["dtype"] == "float32"
        assert stream.kwargs["device"] == "USB Mic"
        assert stream.calls == ["start"]
        assert capture.state is CaptureState.recording
        capture.release()

    async def test_port_audio_error_maps_to_device_unavailable(self, fake_sd) -> None:
        fake_sd.fail_on_create = True
        capture = MicrophoneCapture()

        with pytest.raises(DeviceUnavailableError, match="Error querying device"):
            await capture.open(lambda chunk: None)
        assert capture.state is CaptureState.inactive

    async def test_start_failure_maps_to_device_unavailable(self, fake_sd) -> None:
        fake_sd.fail_on_start = True
        capture = MicrophoneCapture()

        with pytest.raises(DeviceUnavailableError):
            await capture.open(lambda chunk: None)
        assert capture.state is CaptureState.inactive

    async def test_missing_portaudio_library_maps_to_device_unavailable(self, monkeypatch) -> None:
        def no_library():
            raise OSError("PortAudio library not found")

        monkeypatch.setattr(capture_module, "_portaudio", no_library)

        with pytest.raises(DeviceUnavailableError, match="PortAudio library not found"):
            await MicrophoneCapture().open(lambda chunk: None)


class TestStreaming:
    async def test_chunks_concatenate_to_full_ogg_stream(self, fake_sd) -> None:
        """Blocks fed from the audio thread come out as one valid OGG stream."""
        chunks: list[bytes] = []
        capture = MicrophoneCapture(sample_rate=RATE)
        await capture.open(chunks.append)
        stream = fake_sd.streams[0]
        buffer = capture._buffer

        for _ in range(4):
            await feed_from_audio_thread(stream, speech_block())
        emitted_while_recording = len(chunks)
        await capture.stop()

        assert emitted_while_recording >= 1
        assert len(chunks) > emitted_while_recording
        assert b"".join(chunks) == buffer.getvalue()
        assert chunks[0].startswith(b"OggS")
        assert all(chunks)

    async def test_pause_and_resume_drive_the_stream(self, fake_sd) -> None:
        capture = MicrophoneCapture()
        await capture.open(lambda chunk: None)
        stream = fake_sd.streams[0]

        capture.pause()
        assert capture.state is CaptureState.paused
        capture.pause()
        capture.resume()
        assert capture.state is CaptureState.recording

        assert stream.calls == ["start", "stop", "start"]
        capture.release()

    async def test_stop_closes_stream(self, fake_sd) -> None:
        capture = MicrophoneCapture()
        await capture.open(lambda chunk: None)
        stream = fake_sd.streams[0]

        await capture.stop()
        assert stream.calls[-2:] == ["stop", "close"]
        assert capture.state is CaptureState.inactive

    async def test_release_drops_later_blocks(self, fake_sd) -> None:
        chunks: list[bytes] = []
        capture = MicrophoneCapture()
        await capture.open(chunks.append)
        stream = fake_sd.streams[0]

        capture.release()
        await feed_from_audio_thread(stream, speech_block())

        assert "abort" in stream.calls
        assert chunks == []
        assert capture.state is CaptureState.inactive


class TestWithRecordingSession:
    async def test_blob_is_the_encoded_recording(self, fake_sd) -> None:
        session = RecordingSession(lambda: MicrophoneCapture(sample_rate=RATE), mime_type="audio/ogg")
        await session.start()
        stream = fake_sd.streams[0]

        await feed_from_audio_thread(stream, speech_block())
        session.pause()
        session.resume()
        await feed_from_audio_thread(stream, speech_block())
        blob = await session.stop()

        assert session.state is RecorderState.stopped
        assert blob.mime_type == "audio/ogg"
        assert blob.data.startswith(b"OggS")
        assert blob.size == session.blob.size > 0

    async def test_device_failure_leaves_session_idle(self, fake_sd) -> None:
        fake_sd.fail_on_create = True
        session = RecordingSession(MicrophoneCapture, mime_type="audio/ogg")

        with pytest.raises(DeviceUnavailableError):
            await session.start()
        assert session.state is RecorderState.idle
