"""TieTone turns note names, octaves and rhythm tokens into sine-tone audio."""

from .player import Player

__all__ = ["Player"]
