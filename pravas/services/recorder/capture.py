"""Microphone capture that streams OGG/Vorbis chunks.

Audio frames arrive on the PortAudio thread. Each block is handed to the
event loop with ``call_soon_threadsafe`` and encoded there, so the encoder
and the data callback are only ever touched from one thread.
"""

import asyncio
import io
import logging
from collections.abc import Callable

import soundfile as sf

from pravas.core.exceptions import DeviceUnavailableError
from pravas.services.recorder.session import BaseCapture, CaptureState

logger = logging.getLogger(__name__)

MIME_TYPE = "audio/ogg"


def _portaudio():
    # loading sounddevice opens the PortAudio shared library
    import sounddevice

    return sounddevice


class MicrophoneCapture(BaseCapture):
    """Default input device, encoded progressively into an OGG container.

    Args:
        sample_rate: Capture rate in Hz (16 kHz suits speech-to-text).
        channels: Number of input channels.
        device: Optional sounddevice device index or name.
    """

    mime_type = MIME_TYPE

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        device: int | str | None = None,
    ) -> None:
        self._sample_rate = sample_rate
        self._channels = channels
        self._device = device

        self._state = CaptureState.inactive
        self._stream = None
        self._buffer: io.BytesIO | None = None
        self._encoder: sf.SoundFile | None = None
        self._emitted = 0
        self._on_data: Callable[[bytes], None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def state(self) -> CaptureState:
        return self._state

    async def open(self, on_data: Callable[[bytes], None]) -> None:
        try:
            sd = _portaudio()
        except OSError as exc:
            raise DeviceUnavailableError(f"PortAudio unavailable: {exc}") from exc

        self._loop = asyncio.get_running_loop()
        self._on_data = on_data
        self._buffer = io.BytesIO()
        self._emitted = 0
        self._encoder = sf.SoundFile(
            self._buffer,
            mode="w",
            samplerate=self._sample_rate,
            channels=self._channels,
            format="OGG",
            subtype="VORBIS",
        )

        try:
            self._stream = sd.InputStream(
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype="float32",
                device=self._device,
                callback=self._callback,
            )
            self._stream.start()
        except (OSError, sd.PortAudioError) as exc:
            self._close_encoder()
            self._stream = None
            raise DeviceUnavailableError(f"Microphone unavailable: {exc}") from exc

        self._state = CaptureState.recording
        logger.debug("Capture opened at %d Hz, %d channel(s)", self._sample_rate, self._channels)

    def pause(self) -> None:
        if self._state is not CaptureState.recording or self._stream is None:
            return
        self._stream.stop()
        self._state = CaptureState.paused

    def resume(self) -> None:
        if self._state is not CaptureState.paused or self._stream is None:
            return
        self._stream.start()
        self._state = CaptureState.recording

    async def stop(self) -> None:
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
        # let blocks already scheduled by the audio thread reach the encoder
        await asyncio.sleep(0)
        self._close_encoder()
        self._emit_pending()
        self._state = CaptureState.inactive
        self._on_data = None

    def release(self) -> None:
        if self._stream is not None:
            self._stream.abort()
            self._stream.close()
            self._stream = None
        self._on_data = None
        self._close_encoder()
        self._state = CaptureState.inactive

    # -- internals --

    def _callback(self, indata, frames, time_info, status) -> None:
        if status:
            logger.debug("Input stream status: %s", status)
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self._encode, indata.copy())

    def _encode(self, block) -> None:
        if self._encoder is None or self._encoder.closed:
            return
        self._encoder.write(block)
        self._emit_pending()

    def _emit_pending(self) -> None:
        if self._buffer is None or self._on_data is None:
            return
        with self._buffer.getbuffer() as view:
            chunk = bytes(view[self._emitted :])
        if chunk:
            self._emitted += len(chunk)
            self._on_data(chunk)

    def _close_encoder(self) -> None:
        if self._encoder is not None and not self._encoder.closed:
            self._encoder.close()
        self._encoder = None
