"""Minimal forward CAM16 (CIE 224:2017), hue angle only.

Used to keep a scale's perceived hue steady while its lightness changes
(Abney effect). corrected_hue() finds the Oklch hue at a new (L, C) whose
CAM16 hue matches the anchor's, and caps the drift so the shade still reads
as the same family.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from palette_checker.core.colour import normalize_hue, oklch_to_rgb, signed_hue_delta, srgb_to_linear
from palette_checker.core.search import bisect

HUE_SEARCH_WINDOW = 60.0
HUE_SEARCH_ITERATIONS = 48
MAX_HUE_DRIFT = 15.0
MIN_CHROMA = 0.005

M16 = np.array(
    [
        [0.401288, 0.650173, -0.051461],
        [-0.250268, 1.204414, 0.045854],
        [-0.002079, 0.048952, 0.953127],
    ]
)

SRGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)

XYZ_D65 = np.array([95.047, 100.0, 108.883])


def _adapted_response(component: np.ndarray, fl: float) -> np.ndarray:
    p = (fl * np.abs(component) / 100.0) ** 0.42
    return 400.0 * np.sign(component) * p / (p + 27.13)


@dataclass(frozen=True)
class ViewingConditions:
    """Derived CAM16 viewing parameters. Only FL and the D-scaled white matter for hue."""

    adapting_luminance: float
    background: float
    surround: float
    fl: float
    d: float
    d_rgb: tuple[float, float, float]

    @classmethod
    def make(cls, adapting_luminance: float = 64.0, background: float = 20.0, surround: float = 1.0) -> ViewingConditions:
        la = adapting_luminance
        k = 1.0 / (5.0 * la + 1.0)
        k4 = k**4
        fl = k4 * la + 0.1 * (1.0 - k4) ** 2 * math.cbrt(5.0 * la)
        d = surround * (1.0 - (1.0 / 3.6) * math.exp((-la - 42.0) / 92.0))
        rgb_w = M16 @ XYZ_D65
        d_rgb = d * (100.0 / rgb_w) + 1.0 - d
        return cls(
            adapting_luminance=la,
            background=background,
            surround=surround,
            fl=fl,
            d=d,
            d_rgb=(float(d_rgb[0]), float(d_rgb[1]), float(d_rgb[2])),
        )


# sRGB display: D65 white, 64 cd/m², 20% background, average surround
DEFAULT_VIEWING_CONDITIONS = ViewingConditions.make()


def cam16_hue(L: float, C: float, H: float, vc: ViewingConditions = DEFAULT_VIEWING_CONDITIONS) -> float:
    """CAM16 hue angle in [0, 360) of an Oklch colour (rendered clamped to sRGB)."""
    rgb = oklch_to_rgb(L, C, H)
    linear = np.array([srgb_to_linear(c) for c in rgb])
    xyz = 100.0 * (SRGB_TO_XYZ @ linear)
    rgb_c = (M16 @ xyz) * np.array(vc.d_rgb)
    ra, ga, ba = _adapted_response(rgb_c, vc.fl)
    a = ra - 12.0 * ga / 11.0 + ba / 11.0
    b = (ra + ga - 2.0 * ba) / 9.0
    return normalize_hue(math.degrees(math.atan2(b, a)))


def corrected_hue(
    anchor_h: float,
    anchor_l: float,
    anchor_c: float,
    target_l: float,
    target_c: float,
    vc: ViewingConditions = DEFAULT_VIEWING_CONDITIONS,
) -> float:
    """Oklch hue at (target_l, target_c) with the same CAM16 hue as the anchor.

    Searches a ±60° window around the anchor hue. The result never drifts
    more than MAX_HUE_DRIFT from the anchor. Near-achromatic anchors or
    targets (C < 0.005) return the anchor hue unchanged.
    """
    if anchor_c < MIN_CHROMA or target_c < MIN_CHROMA:
        return anchor_h

    wanted = cam16_hue(anchor_l, anchor_c, anchor_h, vc)

    def not_past(h: float) -> bool:
        got = cam16_hue(target_l, target_c, normalize_hue(h), vc)
        return signed_hue_delta(wanted, got) <= 0

    lo, hi = bisect(
        not_past,
        anchor_h - HUE_SEARCH_WINDOW,
        anchor_h + HUE_SEARCH_WINDOW,
        iterations=HUE_SEARCH_ITERATIONS,
    )
    result = normalize_hue((lo + hi) / 2)

    drift = signed_hue_delta(anchor_h, result)
    if abs(drift) > MAX_HUE_DRIFT:
        return normalize_hue(anchor_h + math.copysign(MAX_HUE_DRIFT, drift))
    return result
