"""
CLI entry point — small demos of the renderer on a real terminal.

    toon-tui hello       styled text, a title and a blinking cursor
    toon-tui counter     space increments, q quits
    toon-tui stopwatch   redraws on a timer while waiting for input
    toon-tui events      shows every decoded input
    toon-tui config      prints the renderer configuration
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from .backends.ansi import AnsiBackend
from .config import RendererConfig
from .cursor import Cursor, CursorShape
from .errors import ToonError
from .events import Events
from .input import Input, KeyPress
from .output import Output
from .renderer import Renderer
from .style import Attributes, Color, Rgb, Style
from .utils import str_width
from .vec2 import Vec2

app = typer.Typer(
    name="toon-tui",
    help="Demos for the toon terminal renderer",
    no_args_is_help=True,
)

console = Console()

QUIT = "quit"


# ─────────────────────────────────────────────────────────────────────────────
# Demo element
# ─────────────────────────────────────────────────────────────────────────────

class TextScreen:
    """
    Lines of styled text, optionally centered, with single-key bindings.
    ``q`` and Ctrl-C always emit QUIT; other keys go to ``on_input``.
    """

    def __init__(
        self,
        lines: list[tuple[str, Style]],
        bindings: dict[str, Any] | None = None,
        on_input: Callable[[Input], Any] | None = None,
        title: str = "",
        cursor: Cursor | None = None,
        centered: bool = False,
    ) -> None:
        self.lines = lines
        self.bindings = bindings or {}
        self.on_input = on_input
        self.title = title
        self.cursor = cursor
        self.centered = centered

    def draw(self, output: Output) -> None:
        size = output.size()
        lines = self.lines[-size.y:] if size.y else []
        top = max(0, (size.y - len(lines)) // 2) if self.centered else 0
        for i, (text, style) in enumerate(lines):
            left = max(0, (size.x - str_width(text)) // 2) if self.centered else 0
            output.write(Vec2(left, top + i), text, style)
        output.set_title(self.title)
        output.set_cursor(self.cursor)

    def ideal_size(self, maximum: Vec2) -> Vec2:
        width = max((str_width(text) for text, _ in self.lines), default=0)
        return Vec2(min(width, maximum.x), min(len(self.lines), maximum.y))

    def handle(self, input: Input, events: Events) -> None:
        if isinstance(input, KeyPress):
            if input.is_char("q") or (input.key == "c" and input.modifiers.control):
                events.add(QUIT)
                return
            if input.modifiers.are_none() and isinstance(input.key, str) and input.key in self.bindings:
                events.add(self.bindings[input.key])
                return
        if self.on_input is not None:
            events.add(self.on_input(input))


def _plain(text: str) -> tuple[str, Style]:
    return text, Style()


def _run(demo: Callable[[Renderer], Any]) -> None:
    config = RendererConfig.from_env()
    try:
        renderer = Renderer(AnsiBackend(config), config=config)
    except (ToonError, OSError) as exc:
        console.print(f"[red]Cannot take over the terminal:[/red] {exc}")
        raise typer.Exit(1)
    with renderer:
        asyncio.run(demo(renderer))


# ─────────────────────────────────────────────────────────────────────────────
# Demos
# ─────────────────────────────────────────────────────────────────────────────

async def _hello(renderer: Renderer) -> None:
    presses = 0
    while True:
        screen = TextScreen(
            [
                ("Hello World!", Style(Color.GREEN, Rgb(20, 20, 60), Attributes().bold())),
                ("こんにちは世界", Style(Color.CYAN, attributes=Attributes().with_italic())),
                _plain(f"keys pressed: {presses}"),
                ("press any key, q to quit", Style(attributes=Attributes().dim())),
            ],
            on_input=lambda _: "press",
            title="Hello World!",
            cursor=Cursor(CursorShape.BLOCK, True, Vec2(0, 3)),
        )
        events = await renderer.draw(screen)
        if QUIT in events:
            return
        presses += len(events)


async def _counter(renderer: Renderer) -> None:
    count = 0
    while True:
        screen = TextScreen(
            [
                (str(count), Style(attributes=Attributes().bold())),
                _plain("[Space] Increment    [Q] Quit"),
            ],
            bindings={" ": "increment"},
            title=f"Counter: {count}",
            centered=True,
        )
        for event in await renderer.draw(screen):
            if event == QUIT:
                return
            count += 1


async def _stopwatch(renderer: Renderer) -> None:
    started: float | None = None
    stopped_at = 0.0

    while True:
        elapsed = time.monotonic() - started if started is not None else stopped_at
        screen = TextScreen(
            [
                (f"{int(elapsed)}:{int(elapsed * 1000) % 1000:03}", Style(attributes=Attributes().bold())),
                _plain("[Space] Start/Stop    [R] Reset    [Q] Quit"),
            ],
            bindings={" ": "toggle", "r": "reset"},
            centered=True,
        )
        # while running, give up waiting for input after a short tick and redraw
        timeout = 0.015 if started is not None else None
        try:
            events = await asyncio.wait_for(renderer.draw(screen), timeout)
        except asyncio.TimeoutError:
            events = []

        for event in events:
            if event == QUIT:
                return
            if event == "toggle":
                if started is None:
                    started = time.monotonic() - stopped_at
                else:
                    stopped_at = time.monotonic() - started
                    started = None
            elif event == "reset":
                if started is None:
                    stopped_at = 0.0
                else:
                    started = time.monotonic()


async def _events(renderer: Renderer) -> None:
    seen: list[tuple[str, Style]] = [_plain("Input events (q quits):")]
    while True:
        screen = TextScreen(seen, on_input=lambda input: input)
        for event in await renderer.draw(screen):
            if event == QUIT:
                return
            seen.append(_plain(repr(event)))


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

@app.callback()
def _setup(
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write debug logs to this file"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level: DEBUG/INFO/WARNING/ERROR"),
) -> None:
    # The terminal belongs to the renderer, so logs can only go to a file.
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@app.command()
def hello() -> None:
    """Show styled text, a title and a blinking cursor."""
    _run(_hello)


@app.command()
def counter() -> None:
    """Count space presses."""
    _run(_counter)


@app.command()
def stopwatch() -> None:
    """Run a stopwatch that redraws while waiting for input."""
    _run(_stopwatch)


@app.command()
def events() -> None:
    """List every decoded input event."""
    _run(_events)


@app.command()
def config() -> None:
    """Print the renderer configuration read from the environment."""
    table = Table(title="Renderer configuration")
    table.add_column("Option")
    table.add_column("Value")
    for name, value in RendererConfig.from_env().model_dump().items():
        table.add_row(name, str(value))
    console.print(table)


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
