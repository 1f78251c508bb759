"""Oklab/Oklch colour math, sRGB gamut mapping, hex utilities and hue geometry.

All conversions follow the Oklab definition by Björn Ottosson (2020):
linear sRGB → LMS → cube root → Lab, and the algebraic inverse back.
Inputs are assumed well formed; only the hex parsers validate.
"""

import functools
import math
import re

import numpy as np

from palette_checker.core.search import bisect
from palette_checker.core.types import InvalidHexError, Oklch, Rgb

GAMUT_EPSILON = 1e-4
CHROMA_PRECISION = 0.001
CHROMA_SEARCH_MAX = 0.4

_LMS_FROM_LINEAR = np.array(
    [
        [0.4122214708, 0.5363325363, 0.0514459929],
        [0.2119034982, 0.6806995451, 0.1073969566],
        [0.0883024619, 0.2817188376, 0.6299787005],
    ]
)
_OKLAB_FROM_LMS = np.array(
    [
        [0.2104542553, 0.7936177850, -0.0040720468],
        [1.9779984951, -2.4285922050, 0.4505937099],
        [0.0259040371, 0.7827717662, -0.8086757660],
    ]
)
_LMS_FROM_OKLAB = np.array(
    [
        [1.0, 0.3963377774, 0.2158037573],
        [1.0, -0.1055613458, -0.0638541728],
        [1.0, -0.0894841775, -1.2914855480],
    ]
)
_LINEAR_FROM_LMS = np.array(
    [
        [4.0767416621, -3.3077115913, 0.2309699292],
        [-1.2684380046, 2.6097574011, -0.3413193965],
        [-0.0041960863, -0.7034186147, 1.7076147010],
    ]
)

_HEX_RE = re.compile(r'^#?([0-9A-Fa-f]{6})([0-9A-Fa-f]{2})?$')
_HEX6_RE = re.compile(r'^#?[0-9A-Fa-f]{6}$')


# ── sRGB ↔ linear RGB ───────────────────────────────────────────────


def srgb_to_linear(c: float) -> float:
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def linear_to_srgb(c: float) -> float:
    """Inverse gamma. Not clamped: out-of-range input gives out-of-range output."""
    if c <= 0.0031308:
        return c * 12.92
    return 1.055 * c ** (1 / 2.4) - 0.055


# ── sRGB ↔ Oklch ────────────────────────────────────────────────────


def rgb_to_oklch(r: float, g: float, b: float) -> Oklch:
    linear = np.array([srgb_to_linear(r), srgb_to_linear(g), srgb_to_linear(b)])
    lms = np.cbrt(_LMS_FROM_LINEAR @ linear)
    L, a, bk = _OKLAB_FROM_LMS @ lms
    C = math.hypot(a, bk)
    H = normalize_hue(math.degrees(math.atan2(bk, a)))
    return Oklch(float(L), float(C), H)


def oklch_to_rgb_raw(L: float, C: float, H: float) -> Rgb:
    """Oklch → gamma-encoded sRGB without clamping. Used for gamut tests."""
    h_rad = math.radians(H)
    lab = np.array([L, C * math.cos(h_rad), C * math.sin(h_rad)])
    lms = (_LMS_FROM_OKLAB @ lab) ** 3
    r, g, b = _LINEAR_FROM_LMS @ lms
    return Rgb(linear_to_srgb(float(r)), linear_to_srgb(float(g)), linear_to_srgb(float(b)))


def oklch_to_rgb(L: float, C: float, H: float) -> Rgb:
    r, g, b = oklch_to_rgb_raw(L, C, H)
    return Rgb(_clamp01(r), _clamp01(g), _clamp01(b))


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


# ── Gamut ───────────────────────────────────────────────────────────


def is_in_gamut(rgb: Rgb) -> bool:
    lo, hi = -GAMUT_EPSILON, 1 + GAMUT_EPSILON
    return all(lo <= c <= hi for c in rgb)


def clamp_chroma_to_gamut(L: float, C: float, H: float, epsilon: float = CHROMA_PRECISION) -> float:
    """Largest chroma in [0, C] that keeps (L, ·, H) inside sRGB. Never raises C."""
    if is_in_gamut(oklch_to_rgb_raw(L, C, H)):
        return C
    lo, _hi = bisect(lambda c: is_in_gamut(oklch_to_rgb_raw(L, c, H)), 0.0, C, tolerance=epsilon)
    return lo


def max_chroma_at_lh(L: float, H: float) -> float:
    """Absolute sRGB chroma boundary at this lightness and hue."""
    lo, _hi = bisect(
        lambda c: is_in_gamut(oklch_to_rgb_raw(L, c, H)),
        0.0,
        CHROMA_SEARCH_MAX,
        tolerance=CHROMA_PRECISION,
    )
    return lo


@functools.lru_cache(maxsize=1024)
def cusp_lightness(H: float) -> float:
    """Lightness where the sRGB gamut is widest for this hue (0.01 grid over 0.10–0.94)."""
    grid = np.round(np.arange(10, 95) / 100, 2)
    chromas = np.array([max_chroma_at_lh(float(l), H) for l in grid])
    return float(grid[int(np.argmax(chromas))])


def adaptive_damping(L: float, H: float, base: float, coeff: float) -> float:
    """clamp(base + coeff·|L − cuspL(H)|, 0.1, 1.0): compress more near the cusp."""
    dist = abs(L - cusp_lightness(H))
    return max(0.1, min(1.0, base + coeff * dist))


def effective_max_chroma(
    L: float,
    H: float,
    reference_hue: float,
    damping_base: float,
    damping_coeff: float,
    ceiling_l: float | None = None,
    ceiling_value: float | None = None,
) -> float:
    """Gamut-width-normalised max chroma.

    Hues whose gamut is wider than the reference hue's at this lightness are
    pulled back toward the reference by the cusp-aware damping factor. At or
    above `ceiling_l` the damping is additionally capped at `ceiling_value`.
    """
    hue_max = max_chroma_at_lh(L, H)
    ref_max = max_chroma_at_lh(L, reference_hue)
    if hue_max <= ref_max:
        return hue_max
    damping = adaptive_damping(L, H, damping_base, damping_coeff)
    if ceiling_l is not None and ceiling_value is not None and L >= ceiling_l:
        damping = min(damping, ceiling_value)
    return ref_max + (hue_max - ref_max) * damping


# ── Hex ─────────────────────────────────────────────────────────────


def is_valid_hex(value: str) -> bool:
    """Exactly six hex digits, optional leading '#'."""
    return bool(_HEX6_RE.match(value))


def _match_hex(value: str) -> re.Match[str]:
    m = _HEX_RE.match(value)
    if m is None:
        raise InvalidHexError(f'Not a 6 or 8 digit hex colour: {value!r}')
    return m


def hex_to_rgba(value: str) -> tuple[Rgb, float]:
    """Parse #RRGGBB or #RRGGBBAA. Alpha defaults to 1.0."""
    m = _match_hex(value)
    digits, alpha = m.group(1), m.group(2)
    rgb = Rgb(int(digits[0:2], 16) / 255, int(digits[2:4], 16) / 255, int(digits[4:6], 16) / 255)
    return rgb, (int(alpha, 16) / 255 if alpha else 1.0)


def hex_to_rgb(value: str) -> Rgb:
    return hex_to_rgba(value)[0]


def _to_byte(c: float) -> int:
    # round half up
    return int(math.floor(max(0.0, min(255.0, c * 255)) + 0.5))


def rgb_to_hex(r: float, g: float, b: float, alpha: float | None = None) -> str:
    """Uppercase '#RRGGBB', or '#RRGGBBAA' when alpha is given."""
    out = '#' + ''.join(f'{_to_byte(c):02X}' for c in (r, g, b))
    if alpha is not None:
        out += f'{_to_byte(alpha):02X}'
    return out


def normalize_hex(value: str) -> str:
    m = _match_hex(value)
    return '#' + m.group(1).upper() + (m.group(2) or '').upper()


# ── Hue geometry ────────────────────────────────────────────────────


def normalize_hue(h: float) -> float:
    h = h % 360.0
    return 0.0 if h >= 360.0 else h


def hue_delta(h1: float, h2: float) -> float:
    """Unsigned angular distance in [0, 180]."""
    d = abs(h1 - h2) % 360.0
    return 360.0 - d if d > 180.0 else d


def signed_hue_delta(h_from: float, h_to: float) -> float:
    """Shortest signed rotation from `h_from` to `h_to`, in (-180, 180]."""
    d = (h_to - h_from) % 360.0
    return d - 360.0 if d > 180.0 else d


def clockwise_distance(a: float, b: float) -> float:
    """Distance travelled going clockwise (increasing hue) from a to b, in [0, 360)."""
    return normalize_hue(b - a)


def midpoint_hue(a: float, b: float) -> float:
    return normalize_hue(a + clockwise_distance(a, b) / 2)


def is_in_arc(hue: float, start: float, end: float) -> bool:
    """True when `hue` lies on the clockwise arc from start (inclusive) to end (exclusive)."""
    return clockwise_distance(start, hue) < clockwise_distance(start, end)
