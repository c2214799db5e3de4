from __future__ import annotations

DEFAULT_EXTENSION = ".wav"


def title_from_filename(name: str) -> str:
    """Turn ``example-song.wav`` into ``Example Song``."""
    stem = name
    if "." in stem:
        stem = stem[: stem.rfind(".")]
    return " ".join(_capitalize_first(part) for part in stem.split("-"))


def filename_from_title(title: str, extension: str = DEFAULT_EXTENSION) -> str:
    """Inverse of :func:`title_from_filename` for well-formed names."""
    if extension and not extension.startswith("."):
        extension = f".{extension}"
    stem = "-".join(word.lower() for word in title.split())
    return f"{stem}{extension}"


def _capitalize_first(word: str) -> str:
    if not word:
        return ""
    return word[0].upper() + word[1:]
