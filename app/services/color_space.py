# app/services/color_space.py

import math
from typing import NamedTuple


class Rgb(NamedTuple):
    """One sampled pixel, each channel in [0, 255]."""
    r: int
    g: int
    b: int


class Hsl(NamedTuple):
    """Hue in degrees [0, 360), saturation and lightness as percentages."""
    h: float
    s: float
    l: float


def rgb_to_hsl(r: int, g: int, b: int) -> Hsl:
    """Converts an 8-bit RGB triple to HSL."""
    r, g, b = r / 255, g / 255, b / 255
    max_c = max(r, g, b)
    min_c = min(r, g, b)
    l = (max_c + min_c) / 2

    if max_c == min_c:
        # achromatic
        h = s = 0.0
    else:
        d = max_c - min_c
        s = d / (2 - max_c - min_c) if l > 0.5 else d / (max_c + min_c)
        if max_c == r:
            h = (g - b) / d + (6 if g < b else 0)
        elif max_c == g:
            h = (b - r) / d + 2
        else:
            h = (r - g) / d + 4
        h /= 6

    return Hsl(h=h * 360, s=s * 100, l=l * 100)


def average_hsl(*values: Hsl) -> Hsl:
    """
    Unweighted arithmetic mean of each HSL component.

    Sums with fsum, so the result does not depend on argument order.
    """
    count = len(values)
    return Hsl(
        h=math.fsum(v.h for v in values) / count,
        s=math.fsum(v.s for v in values) / count,
        l=math.fsum(v.l for v in values) / count,
    )
