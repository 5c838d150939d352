"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from rich.console import RenderableType
from rich.panel import Panel

from .. import encoding
from ..projection import Projection
from .views import ProjectionView


def format_card(token: str) -> str:
    """Return a Rich-rendered label for a card token."""

    if token == encoding.JOKER_GLYPH:
        return f"[blue]{token}[/blue]"
    if encoding.is_red_token(token):
        return f"[red]{token}[/red]"
    return token


def render_projection(projection: Projection, *, title: str = "500") -> RenderableType:
    """Return a Rich panel describing ``projection``."""

    view = ProjectionView(projection=projection, card_formatter=format_card)
    border = "red" if projection.stage_alert else "cyan"
    return Panel(view.render(), title=title, padding=(0, 1), border_style=border)
