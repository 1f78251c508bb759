"""WCAG 2.x and APCA contrast, the APCA lightness solver, and alpha compositing.

APCA follows APCA-W3 0.0.98G-4g. Lc is signed: positive for dark text on a
light background, negative for light text on a dark background.
|Lc| >= 60 is readable body text, >= 75 comfortable, >= 90 excellent.
"""

from palette_checker.core.colour import oklch_to_rgb, srgb_to_linear
from palette_checker.core.search import bisect
from palette_checker.core.types import Direction, Rgb

APCA_SOLVER_ITERATIONS = 64

# APCA-W3 0.0.98G-4g constants
_MAIN_TRC = 2.4
_S_RCO, _S_GCO, _S_BCO = 0.2126729, 0.7151522, 0.0721750
_NORM_BG, _NORM_TXT = 0.56, 0.57
_REV_TXT, _REV_BG = 0.62, 0.65
_BLK_THRS, _BLK_CLMP = 0.022, 1.414
_SCALE_BOW, _SCALE_WOB = 1.14, 1.14
_LO_BOW_OFFSET, _LO_WOB_OFFSET = 0.027, 0.027
_LO_CLIP = 0.1
_DELTA_Y_MIN = 0.0005


# ── WCAG ────────────────────────────────────────────────────────────


def relative_luminance(r: float, g: float, b: float) -> float:
    return 0.2126 * srgb_to_linear(r) + 0.7152 * srgb_to_linear(g) + 0.0722 * srgb_to_linear(b)


def contrast_ratio(lum1: float, lum2: float) -> float:
    lighter, darker = max(lum1, lum2), min(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def wcag_level(ratio: float) -> str:
    if ratio >= 7.0:
        return 'aaa'
    if ratio >= 4.5:
        return 'aa'
    if ratio >= 3.0:
        return 'aa-large'
    return 'fail'


def wcag_badge(on_white: float, on_black: float) -> dict[str, str | None]:
    """Best WCAG badge for a swatch, preferring a white background on ties."""
    for threshold, label, level in ((7.0, 'AAA', 'aaa'), (4.5, 'AA', 'aa'), (3.0, 'AA Large', 'aa-large')):
        if on_white >= threshold:
            return {'label': label, 'background': 'white', 'level': level}
        if on_black >= threshold:
            return {'label': label, 'background': 'black', 'level': level}
    return {'label': 'Fails', 'background': None, 'level': 'fail'}


def best_text_color(bg: Rgb) -> str:
    """'white' or 'dark', whichever gives the higher WCAG ratio on this background."""
    lum = relative_luminance(*bg)
    return 'white' if contrast_ratio(lum, 1.0) > contrast_ratio(lum, 0.0) else 'dark'


# ── APCA ────────────────────────────────────────────────────────────


def _screen_luminance(rgb: Rgb) -> float:
    r, g, b = (max(0.0, min(1.0, c)) ** _MAIN_TRC for c in rgb)
    return _S_RCO * r + _S_GCO * g + _S_BCO * b


def _soft_clamp_black(y: float) -> float:
    return y if y > _BLK_THRS else y + (_BLK_THRS - y) ** _BLK_CLMP


def apca_contrast(text: Rgb, bg: Rgb) -> float:
    """APCA lightness contrast Lc of `text` drawn on `bg`."""
    txt_y = _soft_clamp_black(_screen_luminance(text))
    bg_y = _soft_clamp_black(_screen_luminance(bg))

    if abs(bg_y - txt_y) < _DELTA_Y_MIN:
        return 0.0

    if bg_y > txt_y:
        # normal polarity: dark text on light background
        sapc = (bg_y**_NORM_BG - txt_y**_NORM_TXT) * _SCALE_BOW
        return 0.0 if sapc < _LO_CLIP else (sapc - _LO_BOW_OFFSET) * 100
    # reverse polarity: light text on dark background
    sapc = (bg_y**_REV_BG - txt_y**_REV_TXT) * _SCALE_WOB
    return 0.0 if sapc > -_LO_CLIP else (sapc + _LO_WOB_OFFSET) * 100


def apca_level(lc: float) -> str:
    a = abs(lc)
    if a >= 75:
        return 'excellent'
    if a >= 60:
        return 'good'
    if a >= 45:
        return 'min'
    return 'poor'


def solve_l_for_apca(text: Rgb, target_lc: float, direction: Direction) -> float:
    """Oklch L of the achromatic fill where `text` reaches |Lc| = target_lc.

    'light-fill' searches [0.3, 1.0] and returns the lightest-side bound that
    still meets the target (dark text on a light fill). 'dark-fill' searches
    [0.0, 0.7] and returns the darkest-side bound (light text on a dark fill).
    C=0 is the worst case for any hue: chroma only ever darkens the fill once
    H-K compensation is applied.
    """

    def lc_at(L: float) -> float:
        return abs(apca_contrast(text, oklch_to_rgb(L, 0.0, 0.0)))

    if direction == 'light-fill':
        # too little contrast → the answer is lighter
        lo, hi = bisect(lambda L: lc_at(L) < target_lc, 0.3, 1.0, iterations=APCA_SOLVER_ITERATIONS)
        return hi
    if direction == 'dark-fill':
        lo, hi = bisect(lambda L: lc_at(L) >= target_lc, 0.0, 0.7, iterations=APCA_SOLVER_ITERATIONS)
        return lo
    raise ValueError(f'Unknown fill direction: {direction!r}')


# ── Compositing ─────────────────────────────────────────────────────


def alpha_composite(text: Rgb, alpha: float, bg: Rgb) -> Rgb:
    """Source-over blend on gamma-encoded channels: text·α + bg·(1 − α)."""
    return Rgb(*(t * alpha + b * (1 - alpha) for t, b in zip(text, bg)))
