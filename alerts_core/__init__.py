"""
Core of the screen alerts runtime: alert stacking, settings and the Qt backend.
"""

from .alert_stack import AlertStackManager, AlertState, AlertUsageError, VisibleAlert  # noqa: F401
from .settings import AlertSettings, AlertSettingsManager  # noqa: F401
