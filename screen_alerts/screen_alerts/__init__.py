"""
screen_alerts package.

Holds process-wide runtime helpers for the command line tool.
"""

__all__ = [
    "logger",
]
