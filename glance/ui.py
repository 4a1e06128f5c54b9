from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .controller import PlaybackState
from .timing_calculator import format_time


class UIIcons:
    """Central place to configure all UI icons and separators."""

    PLAYING = "▶"
    PAUSED = "⏸"
    IDLE = "■"
    FINISHED = "✓"
    SEPARATOR = "⸱"
    PROGRESS_FILLED = "▓"
    PROGRESS_EMPTY = "░"


class UIColors:
    """Central place to configure all UI colors and styles."""

    PLAYING_STATUS = "green"
    PAUSED_STATUS = "yellow"
    FINISHED_STATUS = "cyan"
    TEXT_NORMAL = "white"
    TEXT_EMPHASIS = "bold red"
    COMPREHENSION = "magenta"
    SEPARATORS = "bright_blue"
    PANEL_BORDER = "bright_blue"
    PANEL_TITLE = "bold blue"
    STATS_LABEL = "bold cyan"


STATE_STYLES = {
    PlaybackState.IDLE: (UIIcons.IDLE, UIColors.PAUSED_STATUS),
    PlaybackState.PLAYING: (UIIcons.PLAYING, UIColors.PLAYING_STATUS),
    PlaybackState.PAUSED: (UIIcons.PAUSED, UIColors.PAUSED_STATUS),
    PlaybackState.FINISHED: (UIIcons.FINISHED, UIColors.FINISHED_STATUS),
}


def render_emphasis(split) -> Text:
    """Build a Text with the emphasised part of a unit highlighted."""
    text = Text(justify="center")
    text.append(split.before, style=UIColors.TEXT_NORMAL)
    text.append(split.emphasis, style=UIColors.TEXT_EMPHASIS)
    text.append(split.after, style=UIColors.TEXT_NORMAL)
    return text


def render_unit(snapshot) -> Text:
    if snapshot.unit is not None:
        return render_emphasis(snapshot.unit.emphasis)
    if snapshot.state == PlaybackState.FINISHED:
        return Text("End of text", style=UIColors.FINISHED_STATUS, justify="center")
    return Text("Ready", style=UIColors.TEXT_NORMAL, justify="center")


def progress_bar(percent: float, width: int = 10) -> str:
    filled = int((percent / 100) * width)
    return UIIcons.PROGRESS_FILLED * filled + UIIcons.PROGRESS_EMPTY * (width - filled)


def render_status(snapshot) -> Text:
    icon, color = STATE_STYLES[snapshot.state]
    separator = f" {UIIcons.SEPARATOR} "
    status = Text()
    status.append(f"{icon} ", style=color)
    status.append(snapshot.progress_text)
    status.append(separator, style=UIColors.SEPARATORS)
    status.append(f"{snapshot.wpm} wpm")
    status.append(separator, style=UIColors.SEPARATORS)
    status.append(f"{format_time(*snapshot.remaining_time)} left")
    if snapshot.comprehension_mode:
        status.append(separator, style=UIColors.SEPARATORS)
        status.append("comprehension", style=UIColors.COMPREHENSION)
    return status


def render_panel(snapshot, title: str) -> Panel:
    return Panel(
        render_unit(snapshot),
        title=Text(f"{title} {int(snapshot.progress)}% {progress_bar(snapshot.progress)}", style=UIColors.PANEL_TITLE),
        subtitle=render_status(snapshot),
        border_style=UIColors.PANEL_BORDER,
        padding=(1, 2),
    )


def stats_table(snapshot, title: str) -> Table:
    table = Table(title=title, show_header=False, border_style=UIColors.SEPARATORS)
    table.add_column(style=UIColors.STATS_LABEL)
    table.add_column()
    table.add_row("Words", str(snapshot.total_words))
    table.add_row("Units", str(snapshot.total_units))
    table.add_row("Words per unit", str(snapshot.words_per_unit))
    table.add_row("Reading rate", f"{snapshot.wpm} wpm")
    table.add_row("Smart timing", "on" if snapshot.smart_timing else "off")
    table.add_row("Comprehension mode", "on" if snapshot.comprehension_mode else "off")
    table.add_row("Estimated time", format_time(*snapshot.total_time))
    return table


def units_table(units, durations, limit: int | None = None) -> Table:
    table = Table(border_style=UIColors.SEPARATORS)
    table.add_column("#", justify="right")
    table.add_column("Unit")
    table.add_column("ms", justify="right")
    shown = units if limit is None else units[:limit]
    for index, (unit, duration) in enumerate(zip(shown, durations), start=1):
        table.add_row(str(index), render_emphasis(unit.emphasis), f"{duration:.0f}")
    return table


def documents_table(documents) -> Table:
    table = Table(title="Saved documents", border_style=UIColors.SEPARATORS)
    table.add_column("ID")
    table.add_column("Title", style=UIColors.STATS_LABEL)
    table.add_column("Words", justify="right")
    table.add_column("Saved")
    for document in documents:
        table.add_row(
            document["id"],
            document["title"],
            str(len(document["content"].split())),
            document["timestamp"][:19].replace("T", " "),
        )
    return table


def history_text(history) -> Text:
    text = Text()
    for position, unit in enumerate(history, start=1):
        text.append(f"{position:>2}. ", style=UIColors.SEPARATORS)
        text.append(unit.text + "\n")
    return text
