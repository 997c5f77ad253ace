"""
Placement arithmetic for stacked alerts.
"""

from __future__ import annotations

from typing import Optional, Tuple

from alerts_shared.geometry import Frame, Size

ANCHOR_RATIO = 1.55
ANCHOR_OFFSET = 55
STACK_GAP = 3
# Measured text comes back slightly too narrow for the drawn glyphs.
TEXT_WIDTH_FUDGE = 8


def anchor_top(display_frame: Frame) -> float:
    """Top edge of the first alert on a display, in the upper-middle region."""
    return display_frame.y + (display_frame.h * (1 - 1 / ANCHOR_RATIO) + ANCHOR_OFFSET)


def stacked_top(display_frame: Frame, previous: Optional[Frame]) -> float:
    """
    Top edge for a new alert given the newest alert already on the display.

    Wraps to the display's top edge once the position falls past the bottom.
    """
    top = anchor_top(display_frame) if previous is None else previous.bottom + STACK_GAP
    if top > display_frame.bottom:
        top = display_frame.y
    return top


def alert_frames(display_frame: Frame, top: float, text_size: Size, font_size: float) -> Tuple[Frame, Frame]:
    """Return ``(background, text)`` frames for an alert whose top edge is ``top``."""
    text_w = text_size.w + TEXT_WIDTH_FUDGE
    background = Frame(
        x=display_frame.x + (display_frame.w - (text_w + font_size)) / 2,
        y=top,
        w=text_w + font_size,
        h=text_size.h + font_size,
    )
    text = Frame(
        x=background.x + font_size / 2,
        y=background.y + font_size / 2,
        w=text_w,
        h=text_size.h,
    )
    return background, text
