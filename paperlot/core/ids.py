"""
Event identifier generation.
"""

import uuid


def new_event_id() -> str:
    """
    Generate a globally unique event id.

    Returns:
        Random UUID4 as canonical hyphenated string
    """
    return str(uuid.uuid4())
