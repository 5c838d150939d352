"""Composable view primitives for the 500 CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..projection import Projection, bid_choices
from ..scoreboard import Scoreboard

BID_GRID_WIDTH = 5


@dataclass(slots=True)
class ProjectionView:
    """Renderable summarising one projected snapshot."""

    projection: Projection
    card_formatter: Callable[[str], str]

    def _status_panel(self) -> Panel:
        projection = self.projection
        grid = Table.grid(expand=True)
        grid.add_column(justify="left")
        stage = Text(projection.stage_label or "—", style="bold red" if projection.stage_alert else "bold")
        grid.add_row(stage)
        info = Text(projection.info_message, style="red" if projection.info_alert else "")
        grid.add_row(info)
        if projection.winning_bid is not None:
            grid.add_row(f"[cyan]Contract[/cyan]: {projection.winning_bid}")
        return Panel(grid, title="Stage", box=box.SQUARE, border_style="blue")

    def _seat_table(self) -> Table:
        table = Table(box=box.ROUNDED, expand=True)
        table.add_column("Seat", justify="left")
        table.add_column("Player", justify="left")
        table.add_column("Last bid", justify="left")
        for slot in sorted(self.projection.seat_labels):
            label = self.projection.seat_labels[slot]
            name = f"[bold]{label.name}[/bold]" if label.is_bold else label.name
            table.add_row(label.slot_name, name, label.last_bid or "—")
        return table

    def _hand_markup(self, tokens: tuple[str, ...]) -> str:
        if not tokens:
            return "—"
        return " ".join(self.card_formatter(token) for token in tokens)

    def _bid_grid(self) -> Table:
        grid = Table.grid(padding=(0, 1))
        for _ in range(BID_GRID_WIDTH):
            grid.add_column(justify="center")
        cells = [token if legal else f"[dim]{token}[/dim]" for token, legal in bid_choices(self.projection)]
        for start in range(0, len(cells), BID_GRID_WIDTH):
            row = cells[start : start + BID_GRID_WIDTH]
            row.extend([""] * (BID_GRID_WIDTH - len(row)))
            grid.add_row(*row)
        return grid

    def _scores_table(self) -> Table:
        table = Table(box=box.MINIMAL, expand=True)
        table.add_column("Game", justify="right")
        table.add_column("Team 1", justify="right")
        table.add_column("Team 2", justify="right")
        for row in self.projection.scores:
            table.add_row(
                str(row.game_number),
                f"{row.totals[0]} ({row.deltas[0]:+d})",
                f"{row.totals[1]} ({row.deltas[1]:+d})",
            )
        leader = Scoreboard(list(self.projection.scores)).leader()
        table.caption = "Level" if leader is None else f"Team {leader + 1} leads"
        return table

    def render(self) -> RenderableType:
        components: list[RenderableType] = [self._status_panel()]

        if self.projection.seat_labels:
            components.append(self._seat_table())

        components.append(
            Panel(self._hand_markup(self.projection.visible_hand), title="Hand", box=box.SQUARE, border_style="green")
        )
        if self.projection.discarded:
            components.append(
                Panel(self._hand_markup(self.projection.discarded), title="Discarded", box=box.SIMPLE)
            )
        if self.projection.is_bidding_turn:
            components.append(Panel(self._bid_grid(), title="Bids", box=box.SQUARE, border_style="yellow"))
        if self.projection.scores:
            components.append(Panel(self._scores_table(), title="Scores", box=box.SQUARE, border_style="magenta"))

        return Group(*components)
