from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from ..config import Settings
from ..devices import OutputDevice
from ..scanner import LibraryScanner
from ..storage import LibraryStore
from .output import error, ok as ok_line, warning


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks: list[str]


def run(settings: Settings, *, device: Optional[OutputDevice] = None) -> DoctorReport:
    checks: list[str] = []
    ok = True

    root = settings.library.root
    if not root.exists() or not root.is_dir():
        ok = False
        checks.append(error("Music library", f"missing: {root}"))
    else:
        paths = list(LibraryScanner(settings.library).iter_paths())
        if paths:
            checks.append(ok_line("Music library", f"{len(paths)} song(s) in {root}"))
        else:
            exts = ", ".join(settings.library.include_extensions)
            checks.append(warning("Music library", f"no {exts} files in {root}"))

    cache_dir = settings.cache.directory
    if cache_dir.exists() and not os.access(cache_dir, os.W_OK):
        ok = False
        checks.append(error("Resample cache", f"not writable: {cache_dir}"))
    else:
        checks.append(ok_line("Resample cache", str(cache_dir)))

    try:
        store = LibraryStore(settings.cache.database_path)
    except Exception as exc:
        ok = False
        checks.append(error("Playlist database", str(exc)))
    else:
        try:
            playlists = store.list_playlists()
            checks.append(
                ok_line("Playlist database", f"{len(playlists)} playlist(s) in {settings.cache.database_path}")
            )
        finally:
            store.close()

    device = device or OutputDevice(settings.playback)
    info = device.info()
    if info is None:
        checks.append(warning("Output device", "none available; playback disabled"))
    else:
        rate = info.get("default_samplerate")
        detail = f"{info.get('name', '?')}"
        if rate:
            detail += f" @ {int(rate)} Hz"
        checks.append(ok_line("Output device", detail))

    return DoctorReport(ok=ok, checks=checks)
