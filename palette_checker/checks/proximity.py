"""Hue collisions between adjacent families.

Families are sorted by hue and each neighbouring pair (wrapping around) is
compared. Under 5° the two are effectively the same hue; under 10° they
blur at the light tints. For warnings the family with more room on its
far side is moved half-way into that room.
"""

from palette_checker.core.colour import (
    clamp_chroma_to_gamut,
    clockwise_distance,
    hue_delta,
    normalize_hue,
    oklch_to_rgb,
    rgb_to_hex,
)
from palette_checker.core.config import TargetCurve
from palette_checker.core.types import AuditResult, Check, Family, ProximityWarning

CRITICAL_BELOW = 5.0
WARNING_BELOW = 10.0
CRITICAL_PENALTY = -15
WARNING_PENALTY = -5

check = Check(name='proximity', help='Adjacent families too close in hue', order=20)


def _shift(prev: Family, a: Family, b: Family, nxt: Family) -> tuple[Family, float]:
    """Family to move and its new hue. Ties move `b`."""
    room_a = clockwise_distance(prev.oklch.H, a.oklch.H)
    room_b = clockwise_distance(b.oklch.H, nxt.oklch.H)
    if room_a > room_b:
        return a, normalize_hue(a.oklch.H - room_a / 2)
    return b, normalize_hue(b.oklch.H + room_b / 2)


def analyse_proximity(families: list[Family]) -> list[ProximityWarning]:
    n = len(families)
    if n < 2:
        return []
    ordered = sorted(families, key=lambda f: f.oklch.H)
    pairs = 1 if n == 2 else n

    warnings = []
    for i in range(pairs):
        a, b = ordered[i], ordered[(i + 1) % n]
        delta = hue_delta(a.oklch.H, b.oklch.H)
        if delta < CRITICAL_BELOW:
            warnings.append(
                ProximityWarning(
                    family_a=a.name,
                    family_b=b.name,
                    hue_a=a.oklch.H,
                    hue_b=b.oklch.H,
                    hue_delta=delta,
                    severity='critical',
                    suggestion=f'{a.name} and {b.name} are only {delta:.1f}° apart and will be nearly '
                    f'indistinguishable. Consider merging them into one family.',
                )
            )
        elif delta < WARNING_BELOW:
            target, new_hue = _shift(ordered[i - 1], a, b, ordered[(i + 2) % n])
            L, C, _H = target.oklch
            new_c = clamp_chroma_to_gamut(L, C, new_hue)
            warnings.append(
                ProximityWarning(
                    family_a=a.name,
                    family_b=b.name,
                    hue_a=a.oklch.H,
                    hue_b=b.oklch.H,
                    hue_delta=delta,
                    severity='warning',
                    suggestion=f'{a.name} and {b.name} are {delta:.1f}° apart and may look alike at the '
                    f'50/100 tints. Consider shifting {target.name} to {new_hue:.1f}°.',
                    shift_family=target.name,
                    shifted_hue=new_hue,
                    shifted_hex=rgb_to_hex(*oklch_to_rgb(L, new_c, new_hue)),
                )
            )
    return warnings


@check.run
def run(families: list[Family], result: AuditResult, curve: TargetCurve) -> None:
    result.proximity_warnings = analyse_proximity(families)
    for w in result.proximity_warnings:
        result.add_finding('proximity', w.severity, w.suggestion, family=w.family_b)
        penalty = CRITICAL_PENALTY if w.severity == 'critical' else WARNING_PENALTY
        result.adjust(f'{w.family_a}/{w.family_b} {w.hue_delta:.1f}° apart ({w.severity})', penalty)
