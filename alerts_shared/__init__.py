"""
Style, text and geometry records shared by the alert core and its backends.
"""

from .alert_style import DEFAULT_STYLE, AlertStyle, Color  # noqa: F401
from .geometry import Display, Frame, Size  # noqa: F401
from .styled_text import StyledText  # noqa: F401
