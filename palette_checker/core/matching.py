"""Nearest-family lookup against the reference design systems, by Oklch hue."""

from palette_checker.core.colour import clamp_chroma_to_gamut, hex_to_rgb, hue_delta, oklch_to_rgb, rgb_to_hex, rgb_to_oklch
from palette_checker.core.config import ACHROMATIC_THRESHOLD, TargetCurve, default_target_curve
from palette_checker.core.palettes import SYSTEMS, all_reference_colours, reference_colours
from palette_checker.core.types import ColourMatch, Confidence, DesignSystem, ReferenceColour

# Hue-delta bands in degrees. One set serves every matcher.
EXACT_BELOW = 8.0
CLOSE_BELOW = 18.0
APPROXIMATE_BELOW = 30.0

DEFAULT_TOP_MATCHES = 6


def confidence_from_delta(delta: float) -> Confidence:
    if delta < EXACT_BELOW:
        return 'exact'
    if delta < CLOSE_BELOW:
        return 'close'
    if delta < APPROXIMATE_BELOW:
        return 'approximate'
    return 'distant'


def preview_hex(hue: float, chroma: float, curve: TargetCurve | None = None) -> str:
    """A reference hue/chroma rendered at the anchor (300) lightness, chroma gamut-clamped."""
    L = (curve or default_target_curve()).anchor_l
    C = clamp_chroma_to_gamut(L, chroma, hue)
    return rgb_to_hex(*oklch_to_rgb(L, C, hue))


def _match(hue: float, ref: ReferenceColour, source: DesignSystem, curve: TargetCurve | None) -> ColourMatch:
    delta = hue_delta(hue, ref.hue)
    return ColourMatch(
        name=ref.name,
        source=source,
        hue_delta=delta,
        confidence=confidence_from_delta(delta),
        ref_hue=ref.hue,
        ref_chroma=ref.chroma,
        ref_lightness=ref.lightness,
        preview_hex=preview_hex(ref.hue, ref.chroma, curve),
    )


def _chromatic_hue(hex_value: str) -> float | None:
    _L, C, H = rgb_to_oklch(*hex_to_rgb(hex_value))
    return None if C < ACHROMATIC_THRESHOLD else H


def find_closest(hex_value: str, system: DesignSystem, curve: TargetCurve | None = None) -> ColourMatch | None:
    """Closest family in one system. None for achromatic input.

    Ties keep the first entry in table order.
    """
    table = reference_colours(system)
    hue = _chromatic_hue(hex_value)
    if hue is None:
        return None
    best = table[0]
    best_delta = hue_delta(hue, best.hue)
    for ref in table[1:]:
        d = hue_delta(hue, ref.hue)
        if d < best_delta:
            best, best_delta = ref, d
    return _match(hue, best, system, curve)


def find_closest_multi(hex_value: str, curve: TargetCurve | None = None) -> dict[str, ColourMatch | None]:
    """Closest family from every system, keyed by system name."""
    return {system: find_closest(hex_value, system, curve) for system in SYSTEMS}


def find_top_matches(hex_value: str, limit: int = DEFAULT_TOP_MATCHES, curve: TargetCurve | None = None) -> list[ColourMatch]:
    """Closest families across all systems, nearest first, one entry per (system, name)."""
    hue = _chromatic_hue(hex_value)
    if hue is None or limit <= 0:
        return []

    candidates = sorted(
        ((hue_delta(hue, ref.hue), system, ref) for system, ref in all_reference_colours()),
        key=lambda t: t[0],
    )
    seen: set[tuple[str, str]] = set()
    out: list[ColourMatch] = []
    for _delta, system, ref in candidates:
        key = (system, ref.name)
        if key in seen:
            continue
        seen.add(key)
        out.append(_match(hue, ref, system, curve))
        if len(out) >= limit:
            break
    return out
