from __future__ import annotations

from typing import Dict, Tuple

Color = Tuple[int, int, int]

BACKGROUND: Color = (30, 30, 36)

COLORS: Dict[str, Color] = {
    "green": (0, 200, 80),
    "blue": (40, 90, 240),
    "pink": (240, 120, 200),
    "red": (230, 40, 40),
    "purple": (160, 40, 220),
    "orange": (245, 150, 20),
    "yellow": (240, 230, 40),
    "grey": (128, 128, 128),
}


def color_for(name: str) -> Color:
    return COLORS.get(name, (200, 200, 200))
