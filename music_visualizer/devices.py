from __future__ import annotations

import logging
from typing import Any, Optional

from .config import PlaybackSettings

logger = logging.getLogger(__name__)


def _sounddevice() -> Any:
    # Imported lazily: loading sounddevice needs the PortAudio shared library.
    import sounddevice

    return sounddevice


class OutputDevice:
    """Answers sample-rate questions about the configured output device."""

    def __init__(self, settings: PlaybackSettings, backend: Any = None) -> None:
        self.settings = settings
        self._backend = backend

    @property
    def backend(self) -> Any:
        if self._backend is None:
            self._backend = _sounddevice()
        return self._backend

    def _errors(self) -> tuple[type[BaseException], ...]:
        return (OSError, ValueError, getattr(self.backend, "PortAudioError", OSError))

    def info(self) -> Optional[dict]:
        try:
            if self.settings.device is not None:
                return dict(self.backend.query_devices(self.settings.device, kind="output"))
            return dict(self.backend.query_devices(kind="output"))
        except self._errors() as exc:
            logger.warning("No output device available: %s", exc)
            return None

    def default_sample_rate(self) -> Optional[int]:
        info = self.info()
        if not info:
            return None
        rate = info.get("default_samplerate")
        return int(rate) if rate else None

    def supports(self, sample_rate: int, channels: Optional[int] = None) -> bool:
        try:
            self.backend.check_output_settings(
                device=self.settings.device,
                channels=channels or self.settings.channels,
                dtype="float32",
                samplerate=sample_rate,
            )
        except self._errors() as exc:
            logger.debug("Device rejected %d Hz: %s", sample_rate, exc)
            return False
        return True

    def determine_sample_rate(self, file_rate: int) -> tuple[bool, int]:
        """Return ``(native_supported, rate_to_play_at)`` for a file recorded at ``file_rate``."""
        try:
            if self.supports(file_rate):
                return True, file_rate
        except Exception as exc:  # backend import failures surface here
            logger.warning(
                "Error querying supported configs: %s. Assuming the song rate is unsupported.",
                exc,
            )
            return False, file_rate
        fallback = self.default_sample_rate()
        if fallback is None:
            return False, file_rate
        return False, fallback

    def describe(self) -> list[str]:
        try:
            devices = list(self.backend.query_devices())
        except Exception as exc:
            return [f"Could not query output devices: {exc}"]
        lines = []
        default = self.info()
        if default:
            lines.append(
                f"Default output: {default.get('name', '?')} "
                f"({int(default.get('default_samplerate') or 0)} Hz, "
                f"{default.get('max_output_channels', 0)} ch)"
            )
        else:
            lines.append("No output device available.")
        for index, device in enumerate(devices):
            channels = device.get("max_output_channels", 0)
            if not channels:
                continue
            lines.append(
                f"  - [{index}] {device.get('name', '?')}, channels: {channels}, "
                f"default rate: {int(device.get('default_samplerate') or 0)}"
            )
        return lines
