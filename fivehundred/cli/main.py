"""Typer entry-point wiring for the 500 CLI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Iterator, List

import typer
from rich.console import Console
from rich.text import Text

from .. import actions, protocol
from ..projection import Projection, Projector
from .render import render_projection

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()
error_console = Console(stderr=True)

REJECTED_EXIT_CODE = 2


@app.callback()
def configure(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level for diagnostics."),
) -> None:
    """Inspect 500 server snapshots and build player actions."""

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"unknown log level {log_level!r}", param_hint="--log-level")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


def _read_lines(source: str) -> Iterator[tuple[int, bytes]]:
    if source == "-":
        yield from _numbered(sys.stdin.buffer)
        return
    with Path(source).open("rb") as stream:
        yield from _numbered(stream)


def _numbered(lines: Iterable[bytes]) -> Iterator[tuple[int, bytes]]:
    for number, line in enumerate(lines, start=1):
        if line.strip():
            yield number, line


def replay_snapshots(lines: Iterable[tuple[int, str | bytes]], projector: Projector) -> List[Projection]:
    """Project each snapshot line in order, skipping lines that cannot be parsed."""

    projections: list[Projection] = []
    for number, line in lines:
        try:
            projections.append(projector.feed_json(line))
        except protocol.WireFormatError as exc:
            logger.error("Skipping snapshot on line %d: %s", number, exc)
    return projections


@app.command()
def replay(
    source: str = typer.Argument(..., help="JSON-lines file of snapshots, or '-' for stdin."),
    last: bool = typer.Option(False, "--last", help="Only render the final projection."),
) -> None:
    """Project a recorded stream of snapshots and render each one."""

    try:
        projections = replay_snapshots(_read_lines(source), Projector())
    except OSError as exc:
        error_console.print(f"[red]Cannot read {source}: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    if last:
        projections = projections[-1:]
    for index, projection in enumerate(projections, start=1):
        console.print(render_projection(projection, title=f"Snapshot {index}"))


def _emit(action: actions.Action) -> None:
    typer.echo(protocol.action_to_json(action))


def _reject(exc: actions.RejectedAction) -> typer.Exit:
    error_console.print(Text.assemble(("Rejected: ", "red"), str(exc)))
    return typer.Exit(code=REJECTED_EXIT_CODE)


@app.command()
def join(team: int = typer.Argument(..., help="Index of the team to join.")) -> None:
    """Print a Join step."""

    try:
        _emit(actions.join(team))
    except actions.RejectedAction as exc:
        raise _reject(exc) from exc


@app.command()
def bid(token: str = typer.Argument(..., help="Bid token, e.g. P, M, O, 6♠ or 10NT.")) -> None:
    """Print a MakeBid step for a bid token."""

    try:
        _emit(actions.bid_from_token(token))
    except actions.RejectedAction as exc:
        raise _reject(exc) from exc


@app.command()
def discard(
    tokens: List[str] = typer.Argument(..., help="Three card tokens, e.g. ★ 10♠ A♥."),
) -> None:
    """Print a DiscardCards step for three card tokens."""

    try:
        _emit(actions.discard_from_tokens(tokens))
    except actions.RejectedAction as exc:
        raise _reject(exc) from exc


@app.command()
def poll() -> None:
    """Print a Poll step."""

    _emit(actions.poll())


@app.command("quit")
def quit_command() -> None:
    """Print a Quit step."""

    _emit(actions.quit_match())


def main() -> None:
    """Entry-point for the ``fivehundred`` console script."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    main()
