"""Synthetic series for decorative displays. Nothing here reads the chat."""

from substrate_terminal.simulation.forecast import gaussian, random_walk

__all__ = ["gaussian", "random_walk"]
