"""Main entry point for the Glance speed reader."""

import argparse
import asyncio
import logging
import os
import sys

import platformdirs
from rich.console import Console

from . import config, content_parser, library_manager, ui
from .controller import PlaybackController
from .reader import Reader
from .storage import JsonFileStore
from .timing_calculator import unit_duration


def setup_logging():
    """Set up file-based logging for the application."""
    log_dir = platformdirs.user_log_dir(appname="glance", appauthor=False)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "error.log")

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        filename=log_file,
        filemode='a',
        force=True,
    )
    logging.info("Application starting")


def add_reading_options(parser):
    parser.add_argument("-w", "--wpm", type=int, help=f"Reading rate in words per minute ({config.MIN_WPM}-{config.MAX_WPM})")
    parser.add_argument("-u", "--words", type=int, dest="words_per_unit",
                        help=f"Words per unit ({config.MIN_WORDS_PER_UNIT}-{config.MAX_WORDS_PER_UNIT}); 1 shows single words")
    parser.add_argument("--smart", dest="smart_timing", action="store_true", default=None,
                        help="Adapt each unit's duration to word length and punctuation")
    parser.add_argument("--no-smart", dest="smart_timing", action="store_false",
                        help="Show every word for the same time")
    parser.add_argument("-c", "--comprehension", dest="comprehension_mode", action="store_true", default=None,
                        help="Slower pace and shorter units for better retention")
    parser.add_argument("--no-comprehension", dest="comprehension_mode", action="store_false",
                        help="Turn comprehension mode off")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="glance",
        description="A terminal RSVP speed reader",
    )
    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser("play", help="Read a document one unit at a time")
    play.add_argument("file_path", nargs='?', help="Document to read. If omitted, plays the most recently saved document.")
    add_reading_options(play)

    info = subparsers.add_parser("info", help="Show word count and estimated reading time")
    info.add_argument("file_path")
    add_reading_options(info)

    units = subparsers.add_parser("units", help="List the units a document is split into")
    units.add_argument("file_path")
    units.add_argument("-n", "--limit", type=int, help="Only show the first N units")
    add_reading_options(units)

    save = subparsers.add_parser("save", help="Save a document to the library")
    save.add_argument("file_path")
    save.add_argument("-t", "--title", help="Title to save under (defaults to the file name)")

    subparsers.add_parser("list", help="List saved documents")

    open_cmd = subparsers.add_parser("open", help="Read a saved document")
    open_cmd.add_argument("document_id")
    add_reading_options(open_cmd)

    delete = subparsers.add_parser("delete", help="Delete a saved document")
    delete.add_argument("document_id")

    settings = subparsers.add_parser("settings", help="Show or change the stored reading settings")
    add_reading_options(settings)

    return parser


def reading_overrides(args) -> dict:
    return {
        "wpm": getattr(args, "wpm", None),
        "words_per_unit": getattr(args, "words_per_unit", None),
        "smart_timing": getattr(args, "smart_timing", None),
        "comprehension_mode": getattr(args, "comprehension_mode", None),
    }


def load_file_text(file_path, console):
    if not os.path.isfile(file_path):
        console.print(f"[red]File not found: {file_path}[/red]")
        return None
    text = content_parser.extract_text(file_path, console)
    if not text.strip():
        console.print("[bold red]Error: No text could be extracted from the file.[/bold red]")
        return None
    return text


def preview_controller(text, store, args) -> PlaybackController:
    """Build a controller for inspection commands, without starting playback."""
    settings = library_manager.load_settings(store)
    overrides = reading_overrides(args)
    comprehension = overrides.pop("comprehension_mode")
    settings.update({key: value for key, value in overrides.items() if value is not None})
    controller = PlaybackController(settings=settings)
    if comprehension is not None:
        controller.configure(comprehension_mode=comprehension)
    controller.load_document(text)
    return controller


async def play_text(text, title, store, args, console) -> int:
    reader = Reader(text, title, store, overrides=reading_overrides(args), console=console)
    return 0 if await reader.run() else 1


def run_command(args, console, store) -> int:
    if args.command == "play":
        if args.file_path:
            text = load_file_text(os.path.abspath(args.file_path), console)
            title = os.path.splitext(os.path.basename(args.file_path))[0]
        else:
            document = library_manager.find_most_recent_document(store)
            if document is None:
                console.print("[red]No file specified and no saved documents found.[/red]")
                return 1
            console.print(f"[green]Opening last saved document: {document['title']}[/green]")
            text, title = document["content"], document["title"]
        if text is None:
            return 1
        return asyncio.run(play_text(text, title, store, args, console))

    if args.command == "open":
        document = library_manager.find_saved_document(store, args.document_id)
        if document is None:
            console.print(f"[red]No saved document with id {args.document_id}.[/red]")
            return 1
        return asyncio.run(play_text(document["content"], document["title"], store, args, console))

    if args.command in ("info", "units"):
        text = load_file_text(args.file_path, console)
        if text is None:
            return 1
        controller = preview_controller(text, store, args)
        title = os.path.basename(args.file_path)
        if args.command == "info":
            console.print(ui.stats_table(controller.snapshot(), title))
        else:
            durations = [
                unit_duration(unit, controller.wpm, controller.smart_timing, controller.comprehension_mode)
                for unit in controller.units
            ]
            console.print(ui.units_table(controller.units, durations, args.limit))
        return 0

    if args.command == "save":
        text = load_file_text(args.file_path, console)
        if text is None:
            return 1
        title = args.title or os.path.splitext(os.path.basename(args.file_path))[0]
        document = library_manager.save_document(store, title, text)
        if document is None:
            console.print("[red]A title and some text are required to save a document.[/red]")
            return 1
        console.print(f"[green]Saved '{document['title']}' as {document['id']}.[/green]")
        return 0

    if args.command == "list":
        documents = library_manager.load_saved_documents(store)
        if not documents:
            console.print("[yellow]No saved documents.[/yellow]")
        else:
            console.print(ui.documents_table(documents))
        return 0

    if args.command == "delete":
        if library_manager.delete_saved_document(store, args.document_id):
            console.print(f"[green]Deleted {args.document_id}.[/green]")
            return 0
        console.print(f"[red]No saved document with id {args.document_id}.[/red]")
        return 1

    if args.command == "settings":
        controller = preview_controller("", store, args)
        settings = library_manager.load_settings(store)
        settings.update(controller.settings)
        library_manager.save_settings(store, settings)
        console.print(ui.stats_table(controller.snapshot(), "Reading settings"))
        return 0

    return 2


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    console = Console()

    if not args.command:
        parser.print_help()
        return 2

    setup_logging()
    store = JsonFileStore()
    return run_command(args, console, store)


def cli():
    """Synchronous entry point for the command-line interface."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logging.critical(f"Fatal error in application startup: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
