import asyncio
import logging

from rich.console import Console
from rich.live import Live

from . import library_manager, ui
from .controller import PlaybackController, PlaybackState


class Reader:
    """
    Terminal playback session for one document.

    Owns a PlaybackController scheduled on the running asyncio loop and
    redraws a rich Live panel whenever the controller reports a change.
    Settings are written back to the store when the session ends.
    """

    def __init__(self, text, title, store, overrides=None, console=None):
        self.console = console or Console()
        self.title = title
        self.store = store
        self.text = text

        overrides = {key: value for key, value in (overrides or {}).items() if value is not None}
        comprehension_override = overrides.pop("comprehension_mode", None)
        self.settings = library_manager.load_settings(store)
        self.settings.update(overrides)

        self.live = None
        self.finished_event = None
        self.controller = PlaybackController(
            settings=self.settings,
            on_change=self._on_change,
        )
        # Switching the mode on from the command line applies its rate and unit caps
        if comprehension_override is not None:
            self.controller.configure(comprehension_mode=comprehension_override)

    def _on_change(self, snapshot):
        if self.live is not None:
            self.live.update(ui.render_panel(snapshot, self.title))
        if snapshot.state == PlaybackState.FINISHED and self.finished_event is not None:
            self.finished_event.set()

    def _save_settings(self):
        self.settings.update(self.controller.settings)
        library_manager.save_settings(self.store, self.settings)

    async def run(self) -> bool:
        """
        Play the document to the end.

        Returns:
            bool: False if the document had nothing to read
        """
        self.finished_event = asyncio.Event()
        self.controller.load_document(self.text)
        if not self.controller.units:
            self.console.print("[bold red]Error: No text to read in this document.[/bold red]")
            return False

        logging.info(f"Starting playback of '{self.title}' at {self.controller.wpm} wpm")
        try:
            with Live(ui.render_panel(self.controller.snapshot(), self.title),
                      console=self.console, refresh_per_second=30, transient=False) as live:
                self.live = live
                self.controller.play()
                await self.finished_event.wait()
        except asyncio.CancelledError:
            logging.info("Playback interrupted")
            raise
        finally:
            self.controller.close()
            self.live = None
            self._save_settings()

        snapshot = self.controller.snapshot()
        self.console.print(f"[green]Finished '{self.title}': {snapshot.total_words} words.[/green]")
        return True
