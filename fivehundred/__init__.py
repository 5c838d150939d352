"""Client-side protocol layer for the 500 card game server."""

from . import actions, bids, cards, encoding, projection, protocol, scoreboard, state

__all__ = [
    "actions",
    "bids",
    "cards",
    "encoding",
    "projection",
    "protocol",
    "scoreboard",
    "state",
]
