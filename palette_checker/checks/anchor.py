"""300-shade (anchor) normalisation.

An anchor is tweaked when its lightness is more than 0.06 off the scale
engine's APCA-derived 300 target, or when the chroma check flagged it.
Lightness moves first; the flagged chroma ratio is then re-applied at the
new lightness and clamped to gamut.
"""

import math

from palette_checker.checks.chroma import describe_deviation, family_max_chroma
from palette_checker.core.colour import clamp_chroma_to_gamut, oklch_to_rgb, rgb_to_hex
from palette_checker.core.config import TargetCurve
from palette_checker.core.types import AnchorTweak, AuditResult, ChromaAnalysis, Check, Family, Oklch

LIGHTNESS_TOLERANCE = 0.06
SIGNIFICANT_LIGHTNESS = 0.10
LIGHTNESS_PENALTY = -5

check = Check(name='anchor', help='Anchor lightness and chroma normalisation', order=30)


def compute_anchor_tweaks(
    families: list[Family],
    chroma: list[ChromaAnalysis],
    curve: TargetCurve,
) -> list[AnchorTweak]:
    by_family = {c.family: c for c in chroma}
    optimal_l = curve.anchor_l
    tweaks = []

    for fam in families:
        L, C, H = fam.oklch
        reasons = []
        new_l, new_c = L, C

        l_delta = abs(L - optimal_l)
        lightness_changed = l_delta > LIGHTNESS_TOLERANCE
        if lightness_changed:
            new_l = optimal_l
            degree = 'significantly ' if l_delta > SIGNIFICANT_LIGHTNESS else ''
            reasons.append(f'Lightness {L:.3f} is {degree}off the optimal {optimal_l:.3f}')

        analysis = by_family.get(fam.name)
        chroma_changed = bool(analysis and analysis.flagged)
        if chroma_changed:
            if lightness_changed:
                moved = Family(name=fam.name, hex=fam.hex, oklch=Oklch(new_l, C, H))
                new_c = analysis.target_rel_chroma * family_max_chroma(moved, curve)
            else:
                new_c = analysis.suggested_c
            reasons.append(f'Chroma is {describe_deviation(analysis.deviation)} relative to palette median')

        if not reasons:
            continue

        new_c = clamp_chroma_to_gamut(new_l, new_c, H)
        suggested = Oklch(new_l, new_c, H)
        tweaks.append(
            AnchorTweak(
                family=fam.name,
                current_hex=fam.hex,
                suggested_hex=rgb_to_hex(*oklch_to_rgb(new_l, new_c, H)),
                current_oklch=fam.oklch,
                suggested_oklch=suggested,
                reasons=reasons,
                lightness_changed=lightness_changed,
                chroma_changed=chroma_changed,
                delta_e=math.hypot(L - new_l, C - new_c),
            )
        )
    return tweaks


@check.run
def run(families: list[Family], result: AuditResult, curve: TargetCurve) -> None:
    result.anchor_tweaks = compute_anchor_tweaks(families, result.chroma_analysis, curve)
    for t in result.anchor_tweaks:
        result.add_finding(
            'shade300-tweak',
            'warning' if t.lightness_changed else 'info',
            f'{t.family} 300 shade ({t.current_hex}) → suggested {t.suggested_hex}: {"; ".join(t.reasons)}',
            family=t.family,
        )
        if t.lightness_changed:
            result.adjust(f'{t.family} anchor lightness off target', LIGHTNESS_PENALTY)
