from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator


class LibrarySettings(BaseModel):
    root: Path = Field(default=Path("music_library"), validate_default=True)
    include_extensions: List[str] = Field(default_factory=lambda: [".wav", ".flac", ".ogg"])
    exclude_patterns: List[str] = Field(default_factory=list)
    recursive: bool = False

    @field_validator("root", mode="before")
    @classmethod
    def _expand_root(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()

    @field_validator("include_extensions", mode="before")
    @classmethod
    def _normalize_exts(cls, values: List[str]) -> List[str]:
        normalized = []
        for value in values:
            ext = str(value).strip().lower()
            if ext and not ext.startswith("."):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        return normalized


class CacheSettings(BaseModel):
    directory: Path = Field(default=Path("music_cache"), validate_default=True)
    database_path: Path = Field(
        default=Path("music_cache/library.sqlite3"), validate_default=True
    )

    @field_validator("directory", "database_path", mode="before")
    @classmethod
    def _expand_paths(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class PlaybackSettings(BaseModel):
    fallback_sample_rate: int = 44100
    channels: int = 2
    blocksize: int = 1024
    device: Optional[Union[int, str]] = None

    @field_validator("fallback_sample_rate", "channels", "blocksize")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value


class VisualSettings(BaseModel):
    fps: int = 60
    bar_count: int = 48
    fft_size: int = 2048
    min_frequency: float = 30.0
    max_frequency: float = 16000.0
    floor_db: float = -70.0
    attack: float = 0.6
    decay: float = 0.15
    beat_sensitivity: float = 1.4
    beat_history: int = 43

    @field_validator("fps", "bar_count", "fft_size", "beat_history")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("attack", "decay")
    @classmethod
    def _unit_interval(cls, value: float) -> float:
        if not 0.0 < value <= 1.0:
            raise ValueError("must be in (0, 1]")
        return value


class WindowSettings(BaseModel):
    width: int = 1280
    height: int = 720
    menu_fraction: float = 0.28
    title: str = "Music Visualizer"


class Settings(BaseModel):
    library: LibrarySettings = LibrarySettings()
    cache: CacheSettings = CacheSettings()
    playback: PlaybackSettings = PlaybackSettings()
    visual: VisualSettings = VisualSettings()
    window: WindowSettings = WindowSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path]) -> Settings:
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)
