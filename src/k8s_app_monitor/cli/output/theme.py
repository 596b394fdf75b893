"""Rich color names shared by the dashboard sections and CLI messages."""

from __future__ import annotations


class Colors:
    """Rich color names used across the dashboard."""

    SUCCESS = "green"
    WARNING = "yellow"
    ERROR = "red"
    NEUTRAL = "white"
    INFO = "blue"

    # Column accents
    NAME = "cyan"
    APP = "yellow"
    AGE = "magenta"
    NODE = "blue"
    COUNT = "cyan"
    HEADER = "bold white"
    BORDER = "cyan"

