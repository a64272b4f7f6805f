"""
paperlot: event-sourced lot kernel.

Keeps a time-ordered log of car and parking-spot events per lot and derives
a live current state, point-in-time (time travel) states and paced replays
from it.
"""

__version__ = "0.1.0"
