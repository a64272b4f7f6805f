"""
Live projections derived from the event log.
"""

from .projector import Projector

__all__ = ["Projector"]
