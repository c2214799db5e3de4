from __future__ import annotations

from pathlib import Path

from ..models import PlaylistError
from ..scanner import LibraryScanner
from ..storage import LibraryStore


def resolve_track(scanner: LibraryScanner, ref: str) -> Path:
    """Accept a file path or a library song title."""
    candidate = Path(ref).expanduser()
    if candidate.is_file():
        return candidate.resolve()
    song = scanner.find_by_title(ref)
    if song is None:
        raise PlaylistError(f"No song matching '{ref}' in {scanner.root}")
    return song.path


def run(store: LibraryStore, scanner: LibraryScanner, action: str, *, name: str | None = None,
        track: str | None = None, position: int | None = None) -> list[str]:
    lines: list[str] = []
    match action:
        case "list":
            playlists = store.list_playlists()
            if not playlists:
                lines.append("No playlists.")
            for playlist, count in playlists:
                lines.append(f"{playlist} ({count} track{'s' if count != 1 else ''})")
        case "create":
            store.create_playlist(_required(name, "name"))
            lines.append(f"Created playlist {name}.")
        case "delete":
            store.delete_playlist(_required(name, "name"))
            lines.append(f"Deleted playlist {name}.")
        case "add":
            path = resolve_track(scanner, _required(track, "track"))
            index = store.add_track(_required(name, "name"), path)
            lines.append(f"Added {path.name} to {name} at position {index}.")
        case "remove":
            if position is None:
                raise PlaylistError("A track position is required")
            store.remove_track(_required(name, "name"), position)
            lines.append(f"Removed position {position} from {name}.")
        case "show":
            tracks = store.playlist_tracks(_required(name, "name"))
            if not tracks:
                lines.append(f"{name} is empty.")
            for index, path in enumerate(tracks):
                marker = "" if path.exists() else "  (missing)"
                lines.append(f"{index:3d}. {path.name}{marker}")
        case _:
            raise PlaylistError(f"Unknown playlist action: {action}")
    return lines


def _required(value: str | None, what: str) -> str:
    if not value:
        raise PlaylistError(f"A playlist {what} is required")
    return value
