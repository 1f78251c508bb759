"""Colour-vision-deficiency simulation (Viénot, Brettel & Mollon 1999).

sRGB → linear → 3×3 dichromat matrix → sRGB, clamped. These are the
matrices Chrome DevTools uses.
"""

import numpy as np

from palette_checker.core.colour import hex_to_rgb, linear_to_srgb, normalize_hex, rgb_to_hex, srgb_to_linear
from palette_checker.core.types import Rgb

CVD_TYPES = ('normal', 'protanopia', 'deuteranopia', 'tritanopia')

CVD_LABELS = {
    'normal': 'Normal Vision',
    'protanopia': 'Protanopia',
    'deuteranopia': 'Deuteranopia',
    'tritanopia': 'Tritanopia',
}

_MATRICES = {
    # no L-cones
    'protanopia': np.array(
        [
            [0.152286, 1.052583, -0.204868],
            [0.114503, 0.786281, 0.099216],
            [-0.003882, -0.048116, 1.051998],
        ]
    ),
    # no M-cones
    'deuteranopia': np.array(
        [
            [0.367322, 0.860646, -0.227968],
            [0.280085, 0.672501, 0.047413],
            [-0.011820, 0.042940, 0.968881],
        ]
    ),
    # no S-cones
    'tritanopia': np.array(
        [
            [1.255528, -0.076749, -0.178779],
            [-0.078411, 0.930809, 0.147602],
            [0.004733, 0.691367, 0.303900],
        ]
    ),
}


def simulate_cvd(rgb: Rgb, kind: str) -> Rgb:
    """How `rgb` appears under `kind`. Raises KeyError for an unknown kind."""
    if kind == 'normal':
        return Rgb(*rgb)
    matrix = _MATRICES[kind]
    linear = np.array([srgb_to_linear(c) for c in rgb])
    sim = matrix @ linear
    return Rgb(*(max(0.0, min(1.0, linear_to_srgb(float(c)))) for c in sim))


def simulate_hex(hex_value: str, kind: str) -> str:
    if kind == 'normal':
        return normalize_hex(hex_value)[:7]
    return rgb_to_hex(*simulate_cvd(hex_to_rgb(hex_value), kind))
