"""Executable Textual viewer that renders indent guides for a file."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Dict, Optional, Sequence

try:  # pragma: no cover - imported only when the viewer is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use indent_guide.adapters.textual.app"
    ) from exc

from indent_guide.runtime import telemetry

from .controller import GuideUIHooks, RenderedLine, TextualIndentGuideAdapter

HIGHLIGHT_STYLES: Dict[str, str] = {
    "LineNr": "grey42",
    "Delimiter": "bold yellow",
}


class IndentGuideApp(App[None]):
    """Read-only file viewer with indent guides and cursor scope highlight."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("q", "quit", "Quit"),
        ("t", "toggle_guides", "Toggle guides"),
    ]

    def __init__(self, text: str, *, shiftwidth: int = 4, title: str = "") -> None:
        super().__init__()
        self._text = text
        self._shiftwidth = shiftwidth
        self._title = title
        self.adapter: TextualIndentGuideAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        if self._title:
            self.title = self._title
        hooks = GuideUIHooks(
            update_view=self._update_view,
            update_status=self._update_status,
            log=self._log_line,
        )
        height = max(1, self.size.height - 4)
        self.adapter = TextualIndentGuideAdapter(hooks, height=height)
        self.adapter.load_text(self._text, shiftwidth=self._shiftwidth)

    def on_resize(self, event: events.Resize) -> None:
        if self.adapter:
            self.adapter.resize(max(1, event.size.height - 4), max(1, event.size.width - 4))

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        moves = {"j": 1, "down": 1, "k": -1, "up": -1, "pagedown": 20, "pageup": -20}
        scrolls = {"l": 1, "right": 1, "h": -1, "left": -1}
        if event.key in moves:
            self.adapter.move_cursor(moves[event.key])
        elif event.key in scrolls:
            self.adapter.scroll_horizontal(scrolls[event.key])
        else:
            return
        event.stop()

    def action_toggle_guides(self) -> None:
        if self.adapter:
            self.adapter.toggle_enabled()

    def _update_view(self, lines: Sequence[RenderedLine]) -> None:
        if not self._buffer_widget:
            return
        output = Text()
        for rendered in lines:
            row = Text(rendered.text, style="reverse" if rendered.is_cursor else "")
            for column, highlight in rendered.spans:
                row.stylize(HIGHLIGHT_STYLES.get(highlight, "dim"), column, column + 1)
            output.append_text(row)
            output.append("\n")
        self._buffer_widget.update(output)

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _log_line(self, line: str) -> None:
        telemetry.record_event("viewer.log", level="debug", data={"line": line})


def _env_int(key: str, fallback: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="View a file with indent guides.")
    parser.add_argument("path", type=Path, help="File to display")
    parser.add_argument(
        "--shiftwidth",
        type=int,
        default=_env_int("INDENT_GUIDE_SHIFTWIDTH", 4),
        help="Columns per indent level and per tab (default: 4)",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="Telemetry preset to activate before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    text = args.path.read_text(encoding="utf-8", errors="replace")
    app = IndentGuideApp(text, shiftwidth=args.shiftwidth, title=str(args.path))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
