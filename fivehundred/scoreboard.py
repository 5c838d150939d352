"""Helpers for tracking team scores across the games of a match."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

__all__ = ["ScoreRow", "Scoreboard"]


@dataclass(frozen=True, slots=True)
class ScoreRow:
    """Score change and running totals after a single game."""

    game_number: int
    deltas: tuple[int, int]
    totals: tuple[int, int]

    @classmethod
    def from_past_game(cls, game_number: int, entry: tuple[int, int, int, int]) -> "ScoreRow":
        """Build a row from a (delta 1, total 1, delta 2, total 2) entry."""

        delta_1, total_1, delta_2, total_2 = entry
        return cls(game_number=game_number, deltas=(delta_1, delta_2), totals=(total_1, total_2))


@dataclass(slots=True)
class Scoreboard:
    """Ordered score rows for the match so far."""

    rows: list[ScoreRow] = field(default_factory=list)

    @classmethod
    def from_past_games(cls, past_games: Iterable[tuple[int, int, int, int]]) -> "Scoreboard":
        board = cls()
        for entry in past_games:
            board.record(ScoreRow.from_past_game(len(board.rows) + 1, entry))
        return board

    def record(self, row: ScoreRow) -> None:
        """Append ``row``, which must continue the game numbering."""

        expected = len(self.rows) + 1
        if row.game_number != expected:
            raise ValueError(f"expected game {expected}, got game {row.game_number}")
        self.rows.append(row)

    def totals(self) -> tuple[int, int]:
        """Return the latest running totals, or zeros before the first game."""

        if not self.rows:
            return (0, 0)
        return self.rows[-1].totals

    def leader(self) -> int | None:
        """Return the index of the leading team, or ``None`` when level."""

        team_1, team_2 = self.totals()
        if team_1 == team_2:
            return None
        return 0 if team_1 > team_2 else 1
