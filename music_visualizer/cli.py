from __future__ import annotations

import argparse
import json
import logging
import queue
from pathlib import Path

from .app import VisualizerApp
from .audio_cache import ResampleCache
from .commands import doctor as cmd_doctor
from .commands import playlists as cmd_playlists
from .commands import prepare as cmd_prepare
from .commands.output import format_duration
from .config import Settings, load_settings
from .models import MusicVisualizerError

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ShortPathFormatter(logging.Formatter):
    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if root]

    def _shorten(self, message: str) -> str:
        for root in self.roots:
            if not message:
                break
            message = message.replace(f"{root}/", "")
            message = message.replace(root, "")
        return message

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return self._shorten(message)


class ColorFormatter(ShortPathFormatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def configure_logging(settings: Settings, level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    display_roots = [settings.library.root, settings.cache.directory]

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT, display_roots))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(ShortPathFormatter(LOG_FORMAT, display_roots))
    root_logger.addHandler(warn_buffer)

    logging.getLogger("watchdog").setLevel(logging.WARNING)
    logging.getLogger("PyQt6").setLevel(logging.WARNING)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Music-reactive visualizer and player")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Delete resampled copies in the cache directory before running",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    run_parser = subparsers.add_parser("run", help="Open the visualizer window")
    run_parser.add_argument("--song", default=None, help="Load this song title or file on start")
    run_parser.add_argument("--playlist", default=None, help="Queue this playlist on start")
    run_parser.add_argument(
        "--no-watch",
        action="store_true",
        help="Do not watch the music library for changes",
    )
    list_parser = subparsers.add_parser("list", help="List songs in the music library")
    list_parser.add_argument("--json", action="store_true", help="Emit JSON to stdout")
    subparsers.add_parser("devices", help="Describe audio output devices")
    prepare_parser = subparsers.add_parser(
        "prepare", help="Pre-build resampled cache entries for the output device"
    )
    prepare_parser.add_argument("titles", nargs="*", help="Song titles (default: all)")
    subparsers.add_parser("doctor", help="Run basic config/library/device checks")

    playlist_parser = subparsers.add_parser("playlist", help="Manage stored playlists")
    playlist_sub = playlist_parser.add_subparsers(dest="action", required=True)
    playlist_sub.add_parser("list", help="List playlists")
    for action, help_text in (
        ("create", "Create an empty playlist"),
        ("delete", "Delete a playlist"),
        ("show", "Show the tracks of a playlist"),
    ):
        action_parser = playlist_sub.add_parser(action, help=help_text)
        action_parser.add_argument("name")
    add_parser = playlist_sub.add_parser("add", help="Append a song to a playlist")
    add_parser.add_argument("name")
    add_parser.add_argument("track", help="Song title or path to an audio file")
    remove_parser = playlist_sub.add_parser("remove", help="Remove a track by position")
    remove_parser.add_argument("name")
    remove_parser.add_argument("position", type=int)

    history_parser = subparsers.add_parser("history", help="Show recently played songs")
    history_parser.add_argument("--limit", type=int, default=20, help="Number of plays to show")
    history_parser.add_argument("--clear", action="store_true", help="Forget the play history")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings(args.config)
    warn_buffer = configure_logging(settings, args.log_level)

    if args.clear_cache:
        removed = ResampleCache(settings.cache.directory).clear()
        print(f"Removed {removed} cached file(s).")

    if args.command == "doctor":
        report = cmd_doctor.run(settings)
        for line in report.checks:
            print(line)
        if not report.ok:
            raise SystemExit(1)
        return

    app = VisualizerApp.create(settings)
    try:
        match args.command:
            case "run":
                _run_window(app, args)
            case "list":
                _print_songs(app, json_output=args.json)
            case "devices":
                for line in app.device.describe():
                    print(line)
            case "prepare":
                prepared, failed = cmd_prepare.run(
                    app.scanner, app.cache, app.device, titles=args.titles
                )
                print(f"Prepared {prepared} song(s), {failed} failed.")
                if failed:
                    raise SystemExit(1)
            case "playlist":
                for line in cmd_playlists.run(
                    app.store,
                    app.scanner,
                    args.action,
                    name=getattr(args, "name", None),
                    track=getattr(args, "track", None),
                    position=getattr(args, "position", None),
                ):
                    print(line)
            case "history":
                if args.clear:
                    app.store.clear_history()
                    print("Play history cleared.")
                    return
                plays = app.store.recent_plays(limit=args.limit)
                if not plays:
                    print("Nothing played yet.")
                for path, played_at in plays:
                    print(f"{played_at}  {Path(path).name}")
            case _:
                parser.error("Unknown command")
    except MusicVisualizerError as exc:
        raise SystemExit(f"error: {exc}") from exc
    finally:
        app.close()
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")


def _print_songs(app: VisualizerApp, *, json_output: bool) -> None:
    songs = app.scanner.list_songs()
    if json_output:
        print(json.dumps([song.to_record() for song in songs], indent=2))
        return
    if not songs:
        print(f"No songs found in {app.settings.library.root}")
        return
    for song in songs:
        artist = f" - {song.artist}" if song.artist else ""
        print(f"{format_duration(song.duration_seconds):>6}  {song.title}{artist}")


def _run_window(app: VisualizerApp, args: argparse.Namespace) -> None:
    # Qt is only needed for the window; keep the other commands usable headless.
    from .ui.window import run_window
    from .watcher import start_watcher

    if args.playlist:
        app.controller.queue_playlist(args.playlist)
    elif args.song:
        app.controller.select(args.song)

    changes: "queue.Queue[Path]" = queue.Queue()
    observer = None
    library_root = app.settings.library.root
    if not args.no_watch and library_root.is_dir():
        observer = start_watcher(
            library_root,
            changes,
            app.scanner.extensions,
            recursive=app.settings.library.recursive,
        )
    try:
        code = run_window(app, changes)
    finally:
        if observer is not None:
            observer.stop()
            observer.join(timeout=2.0)
    if code:
        raise SystemExit(code)


if __name__ == "__main__":  # pragma: no cover
    main()
