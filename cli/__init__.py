"""
paperlot CLI

Commands:
- paperlot log events - List a lot's events by time range
- paperlot state current/at - Live state and time-travel state
- paperlot replay - Paced replay of a lot's history
"""

__version__ = "0.1.0"
