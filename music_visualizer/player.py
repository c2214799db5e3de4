from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

import numpy as np

from .config import PlaybackSettings
from .models import AudioClip, PlaybackError

logger = logging.getLogger(__name__)

StreamCallback = Callable[[np.ndarray, int, Any, Any], None]
StreamFactory = Callable[..., Any]


def open_output_stream(
    *,
    samplerate: int,
    channels: int,
    blocksize: int,
    device: Any,
    callback: StreamCallback,
) -> Any:
    """Open and start a sounddevice output stream."""
    try:
        import sounddevice as sd
    except OSError as exc:
        raise PlaybackError(f"PortAudio library unavailable: {exc}") from exc

    try:
        stream = sd.OutputStream(
            samplerate=samplerate,
            channels=channels,
            dtype="float32",
            blocksize=blocksize,
            device=device,
            callback=callback,
        )
    except (sd.PortAudioError, ValueError) as exc:
        raise PlaybackError(f"Stream creation failed: {exc}") from exc
    try:
        stream.start()
    except sd.PortAudioError as exc:
        stream.close()
        raise PlaybackError(f"Failed to start playback: {exc}") from exc
    return stream


class Player:
    """Plays a single clip through an output stream and exposes the playhead to renderers.

    The stream callback runs on the audio thread; every access to the clip and
    the playhead goes through ``_lock``.
    """

    def __init__(
        self,
        settings: PlaybackSettings,
        *,
        stream_factory: Optional[StreamFactory] = None,
    ) -> None:
        self.settings = settings
        self._stream_factory = stream_factory or open_output_stream
        self._lock = threading.Lock()
        self._clip = AudioClip.empty(settings.fallback_sample_rate, settings.channels)
        self._position = 0
        self._finished = False
        self._stream: Any = None
        self.last_error: Optional[str] = None

    @property
    def clip(self) -> AudioClip:
        return self._clip

    @property
    def is_playing(self) -> bool:
        return self._stream is not None

    @property
    def is_empty(self) -> bool:
        return self._clip.is_empty

    @property
    def finished(self) -> bool:
        with self._lock:
            return self._finished

    @property
    def position_frames(self) -> int:
        with self._lock:
            return self._position

    @property
    def position_seconds(self) -> float:
        rate = self._clip.sample_rate
        return self.position_frames / float(rate) if rate else 0.0

    @property
    def duration_seconds(self) -> float:
        return self._clip.duration_seconds

    def load(self, clip: AudioClip) -> None:
        self.pause()
        with self._lock:
            self._clip = clip
            self._position = 0
            self._finished = False
        self.last_error = None

    def unload(self) -> None:
        self.load(AudioClip.empty(self.settings.fallback_sample_rate, self.settings.channels))

    def update(self, should_play: bool) -> None:
        if should_play and not self.is_playing:
            self.play()
        elif not should_play and self.is_playing:
            self.pause()

    def play(self) -> bool:
        if self._stream is not None:
            return True
        if self._clip.is_empty:
            return False
        with self._lock:
            if self._finished:
                self._position = 0
                self._finished = False
        try:
            self._stream = self._stream_factory(
                samplerate=self._clip.sample_rate,
                channels=self._clip.channels,
                blocksize=self.settings.blocksize,
                device=self.settings.device,
                callback=self._callback,
            )
        except PlaybackError as exc:
            self.last_error = str(exc)
            logger.error("%s", exc)
            self._stream = None
            return False
        self.last_error = None
        logger.info("Playback started at %.2fs.", self.position_seconds)
        return True

    def pause(self) -> None:
        stream = self._stream
        if stream is None:
            return
        self._stream = None
        try:
            stream.stop()
        except Exception as exc:  # PortAudioError once the host API went away
            logger.warning("Could not stop output stream cleanly: %s", exc)
        try:
            stream.close()
        except Exception as exc:
            logger.warning("Could not close output stream: %s", exc)
        logger.debug("Playback paused at %.2fs.", self.position_seconds)

    def stop(self) -> None:
        self.pause()
        with self._lock:
            self._position = 0
            self._finished = False

    def seek(self, seconds: float) -> None:
        with self._lock:
            frame = int(round(max(0.0, seconds) * self._clip.sample_rate))
            self._position = min(frame, self._clip.frames)
            self._finished = self._clip.frames > 0 and self._position >= self._clip.frames

    def window(self, size: int) -> np.ndarray:
        """Return the ``size`` mono samples that ended at the playhead, zero-padded at the start."""
        out = np.zeros(size, dtype=np.float32)
        if size <= 0:
            return out
        with self._lock:
            end = self._position
            start = max(0, end - size)
            segment = self._clip.samples[start:end]
        if segment.shape[0] == 0:
            return out
        mono = segment.mean(axis=1) if segment.shape[1] > 1 else segment[:, 0]
        out[size - mono.shape[0]:] = mono
        return out

    def _callback(self, outdata: np.ndarray, frames: int, time: Any, status: Any) -> None:
        if status:
            logger.debug("Stream status: %s", status)
        with self._lock:
            start = self._position
            chunk = self._clip.samples[start:start + frames]
            count = chunk.shape[0]
            if count:
                outdata[:count] = chunk
            outdata[count:] = 0.0
            self._position = start + count
            if count < frames:
                self._finished = True
