"""
Topple - tabletop scoring engine.

Tracks board state, turns, dice and scores for the 5x5 graduated-board
stacking game. The physical board is the source of truth; this package
records what happened and computes the points.
"""

__version__ = "0.1.0"
