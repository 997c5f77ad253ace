"""
Alert identifier utilities.
"""

from __future__ import annotations

import uuid


def new_alert_id() -> str:
    """
    Return a fresh process-unique alert identifier.

    Identifiers are uppercase UUID4 strings, the format callers store to close
    persistent alerts later.
    """
    return str(uuid.uuid4()).upper()
