"""Recorder state machine for one record-to-stop cycle.

States: idle -> recording <-> paused -> stopped

``RecordingSession`` owns the capture handle, the elapsed-seconds timer,
and the ordered list of audio chunks the handle emits.  Everything runs on
one asyncio event loop; capture backends that deliver audio on another
thread must hop onto the loop before calling the data callback, so the
chunk list has a single writer and emission order is preserved.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from pravas.core.exceptions import DeviceUnavailableError

logger = logging.getLogger(__name__)


class RecorderState(StrEnum):
    """States of a recording session."""

    idle = "idle"
    recording = "recording"
    paused = "paused"
    stopped = "stopped"


class CaptureState(StrEnum):
    """What the underlying capture handle reports about itself."""

    inactive = "inactive"
    recording = "recording"
    paused = "paused"


@dataclass(frozen=True)
class AudioBlob:
    """The finished recording: all chunks concatenated in emission order."""

    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)


class BaseCapture(ABC):
    """An exclusive handle on an audio input device."""

    @property
    @abstractmethod
    def state(self) -> CaptureState:
        """Current sub-state reported by the device."""

    @abstractmethod
    async def open(self, on_data: Callable[[bytes], None]) -> None:
        """Acquire the device and begin emitting encoded chunks to *on_data*.

        Raises:
            DeviceUnavailableError: No input device, or permission denied.
        """

    @abstractmethod
    def pause(self) -> None:
        """Suspend capture without finalizing."""

    @abstractmethod
    def resume(self) -> None:
        """Continue a paused capture."""

    @abstractmethod
    async def stop(self) -> None:
        """Finalize the encoding, emit any trailing chunk, release the device."""

    @abstractmethod
    def release(self) -> None:
        """Release the device immediately, dropping unfinished output."""


class RecordingSession:
    """Client-side recorder state machine.

    Args:
        capture_factory: Builds a fresh capture handle for each ``start()``.
        mime_type: Container/codec tag given to the finished blob.
        on_stopped: Called with the blob once recording stops, so the caller
            can prompt for a destination trip.
        tick_interval: Seconds per elapsed-time tick (1.0 in production).
    """

    def __init__(
        self,
        capture_factory: Callable[[], BaseCapture],
        mime_type: str,
        on_stopped: Callable[[AudioBlob], None] | None = None,
        tick_interval: float = 1.0,
    ) -> None:
        self._capture_factory = capture_factory
        self._mime_type = mime_type
        self._on_stopped = on_stopped
        self._tick_interval = tick_interval

        self._state = RecorderState.idle
        self._elapsed = 0
        self._chunks: list[bytes] = []
        self._capture: BaseCapture | None = None
        self._timer: asyncio.Task | None = None
        self._blob: AudioBlob | None = None
        self._accepting = False
        self._starting = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def elapsed(self) -> int:
        """Whole seconds spent in the *recording* state."""
        return self._elapsed

    @property
    def blob(self) -> AudioBlob | None:
        """The finished recording, available once *stopped*."""
        return self._blob

    @property
    def chunk_count(self) -> int:
        return len(self._chunks)

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """idle -> recording. Ignored in any other state.

        Raises:
            DeviceUnavailableError: The microphone could not be acquired;
                the session stays *idle*.
        """
        if self._state is not RecorderState.idle or self._starting:
            return

        # held across open() so an overlapping start() is ignored
        self._starting = True
        capture = self._capture_factory()
        self._chunks = []
        self._accepting = True
        opened = False
        try:
            await capture.open(self._on_data)
            opened = True
        except DeviceUnavailableError:
            logger.warning("Microphone unavailable; staying idle")
            raise
        finally:
            self._starting = False
            self._accepting = opened

        self._capture = capture
        self._elapsed = 0
        self._state = RecorderState.recording
        self._start_timer()
        logger.info("Recording started")

    def pause(self) -> None:
        """recording -> paused, only if the device is actually recording."""
        if self._state is not RecorderState.recording or self._capture is None:
            return
        if self._capture.state is not CaptureState.recording:
            return
        self._capture.pause()
        self._cancel_timer()
        self._state = RecorderState.paused

    def resume(self) -> None:
        """paused -> recording, only if the device is actually paused."""
        if self._state is not RecorderState.paused or self._capture is None:
            return
        if self._capture.state is not CaptureState.paused:
            return
        self._capture.resume()
        self._state = RecorderState.recording
        self._start_timer()

    async def stop(self) -> AudioBlob | None:
        """{recording, paused} -> stopped.

        Finalizes the device, joins every chunk in emission order into one
        ``AudioBlob``, and hands it to ``on_stopped``.  Returns None (and does
        nothing) from *idle* or *stopped*.
        """
        if self._state not in (RecorderState.recording, RecorderState.paused):
            return None

        self._cancel_timer()
        capture, self._capture = self._capture, None
        if capture is not None:
            await capture.stop()
        self._accepting = False

        self._blob = AudioBlob(data=b"".join(self._chunks), mime_type=self._mime_type)
        self._state = RecorderState.stopped
        logger.info(
            "Recording stopped: %d chunks, %d bytes, %ds",
            len(self._chunks),
            self._blob.size,
            self._elapsed,
        )
        if self._on_stopped is not None:
            self._on_stopped(self._blob)
        return self._blob

    def discard(self) -> None:
        """stopped -> idle: drop the blob and reset elapsed to 0.

        Ignored before *stopped*; an in-progress recording has to be stopped
        first.
        """
        if self._state is not RecorderState.stopped:
            return
        self._chunks = []
        self._blob = None
        self._elapsed = 0
        self._state = RecorderState.idle

    async def aclose(self) -> None:
        """Tear down: cancel the timer and release the device if still held.

        A recording still in progress is abandoned and the session returns to
        *idle*; a stopped blob is kept.
        """
        self._cancel_timer()
        self._accepting = False
        if self._capture is not None:
            self._capture.release()
            self._capture = None
        if self._state in (RecorderState.recording, RecorderState.paused):
            self._chunks = []
            self._elapsed = 0
            self._state = RecorderState.idle

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_data(self, chunk: bytes) -> None:
        if not chunk:
            return
        if not self._accepting:
            return
        self._chunks.append(bytes(chunk))

    def _start_timer(self) -> None:
        self._cancel_timer()
        self._timer = asyncio.create_task(self._run_timer())

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            self._elapsed += 1
