"""Chroma balance: is every family perceptually as strong as its peers?

Each anchor's chroma is taken relative to the effective max chroma at its
own lightness and hue. The palette median is the target; a family more than
5% away (absolute, in relative-chroma units) is flagged and given a
suggested chroma at the target ratio, clamped to gamut.
"""

import numpy as np

from palette_checker.core.colour import clamp_chroma_to_gamut, effective_max_chroma, oklch_to_rgb, rgb_to_hex
from palette_checker.core.config import TargetCurve
from palette_checker.core.types import AuditResult, ChromaAnalysis, Check, Family

DEVIATION_THRESHOLD = 0.05
WARNING_DEVIATION = 0.10

check = Check(name='chroma', help='Relative chroma of each anchor vs the palette median', order=10)


def family_max_chroma(family: Family, curve: TargetCurve) -> float:
    config = curve.config
    L, _C, H = family.oklch
    return effective_max_chroma(
        L,
        H,
        config.reference_hue,
        config.cusp_damping_base,
        config.cusp_damping_coeff,
        config.damping_ceiling_l,
        config.damping_ceiling_value,
    )


def analyse_chroma(families: list[Family], curve: TargetCurve) -> list[ChromaAnalysis]:
    analyses = []
    for fam in families:
        max_c = family_max_chroma(fam, curve)
        analyses.append(
            ChromaAnalysis(
                family=fam.name,
                hex=fam.hex,
                oklch=fam.oklch,
                max_chroma=max_c,
                relative_chroma=fam.oklch.C / max_c if max_c > 0 else 0.0,
            )
        )
    if not analyses:
        return analyses

    target = float(np.median([a.relative_chroma for a in analyses]))
    for a in analyses:
        a.target_rel_chroma = target
        a.deviation = a.relative_chroma - target
        a.flagged = abs(a.deviation) > DEVIATION_THRESHOLD
        if a.flagged:
            L, _C, H = a.oklch
            a.suggested_c = clamp_chroma_to_gamut(L, target * a.max_chroma, H)
            a.suggested_hex = rgb_to_hex(*oklch_to_rgb(L, a.suggested_c, H))
        else:
            a.suggested_c = a.oklch.C
            a.suggested_hex = a.hex
    return analyses


def describe_deviation(deviation: float) -> str:
    direction = 'oversaturated' if deviation > 0 else 'undersaturated'
    return f'{abs(deviation) * 100:.1f}% {direction}'


@check.run
def run(families: list[Family], result: AuditResult, curve: TargetCurve) -> None:
    result.chroma_analysis = analyse_chroma(families, curve)
    for a in result.chroma_analysis:
        if not a.flagged:
            continue
        strong = abs(a.deviation) > WARNING_DEVIATION
        look = 'more vivid' if a.deviation > 0 else 'more muted'
        result.add_finding(
            'chroma-imbalance',
            'warning' if strong else 'info',
            f'{a.family} is {describe_deviation(a.deviation)} relative to palette median; '
            f'it may appear {look} than its peers',
            family=a.family,
        )
        if strong:
            result.adjust(f'{a.family} chroma deviation {describe_deviation(a.deviation)}', -3)
