"""Hue coverage: gaps, fill suggestions, spread and warm/cool balance."""

from palette_checker.core.config import TargetCurve
from palette_checker.core.gaps import analyse_hue_gaps, compute_coverage_stats, find_hue_gaps
from palette_checker.core.types import AuditResult, Check, Family, HueDot

LARGE_GAP = 50.0
MEDIUM_GAP = 35.0
LARGE_GAP_PENALTY = -3
MEDIUM_GAP_PENALTY = -1
MAX_SPREAD_PENALTY = 10.0
IMBALANCE_PENALTY = -3

check = Check(name='gaps', help='Hue gaps, fill suggestions and coverage', order=40)


def families_to_dots(families: list[Family]) -> list[HueDot]:
    return [HueDot(name=f.name, hue=f.oklch.H, chroma=f.oklch.C, lightness=f.oklch.L) for f in families]


@check.run
def run(families: list[Family], result: AuditResult, curve: TargetCurve) -> None:
    dots = families_to_dots(families)
    result.gaps = find_hue_gaps(dots)
    result.gap_suggestions = analyse_hue_gaps(dots, curve)
    result.coverage = stats = compute_coverage_stats(dots)

    for gap in result.gaps:
        between = (gap.start.name, gap.end.name)
        fill = next((s for s in result.gap_suggestions if s.between == between), None)
        message = f'{gap.size:.0f}° gap between {gap.start.name} and {gap.end.name}'
        if fill is not None:
            message += f'; consider adding {fill.name} ({fill.source})'
        result.add_finding('hue-gap', 'warning' if gap.size > LARGE_GAP else 'info', message)

        if gap.size > LARGE_GAP:
            result.adjust(f'{gap.size:.0f}° gap after {gap.start.name}', LARGE_GAP_PENALTY)
        elif gap.size > MEDIUM_GAP:
            result.adjust(f'{gap.size:.0f}° gap after {gap.start.name}', MEDIUM_GAP_PENALTY)

    if stats.family_count >= 2 and stats.ideal_gap > 0:
        spread = min(MAX_SPREAD_PENALTY, MAX_SPREAD_PENALTY * stats.gap_std / stats.ideal_gap)
        result.adjust(f'uneven hue spacing (σ {stats.gap_std:.1f}° vs ideal {stats.ideal_gap:.1f}°)', -spread)

    if stats.balance != 'balanced':
        result.add_finding(
            'temperature',
            'info',
            f'Palette is {stats.balance}: {stats.warm_count} warm, {stats.cool_count} cool, '
            f'{stats.neutral_count} neutral',
        )
        result.adjust(f'palette is {stats.balance}', IMBALANCE_PENALTY)
