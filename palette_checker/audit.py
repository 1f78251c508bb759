"""Palette audit: run every registered check, combine into one scored result.

Runs the checks in order (chroma, proximity, anchor, gaps) on a fresh
AuditResult, then applies the family-count adjustment and clamps the score.
Achromatic families (C < 0.01) are left out of every check.

Example:
    from palette_checker.audit import families_from_hex, run_palette_audit

    result = run_palette_audit(families_from_hex({'Blue': '#3B82F6', 'Red': '#EF4444'}))
    print(result.score, [f.message for f in result.sorted_findings()])
"""

import logging
from collections.abc import Iterable, Mapping

from palette_checker.core.config import ACHROMATIC_THRESHOLD, TargetCurve, default_target_curve
from palette_checker.core.types import AuditResult, Family
from palette_checker.registry import all_checks

logger = logging.getLogger(__name__)

BASE_SCORE = 100
IDEAL_FAMILY_RANGE = (16, 20)
IDEAL_FAMILY_BONUS = 5
SPARSE_FAMILY_COUNT = 12
SPARSE_FAMILY_PENALTY = -5


def families_from_hex(anchors: Mapping[str, str]) -> list[Family]:
    """Build audit input from name → anchor (300) hex."""
    return [Family.from_hex(name, hex_value) for name, hex_value in anchors.items()]


def run_palette_audit(
    families: Iterable[Family],
    curve: TargetCurve | None = None,
    checks: Iterable[str] | None = None,
) -> AuditResult:
    """Audit a palette. `checks` limits the run to the named checks, still in order."""
    curve = curve or default_target_curve()
    chromatic = []
    for fam in families:
        if fam.oklch.C < ACHROMATIC_THRESHOLD:
            logger.debug('skipping achromatic family %s (C=%.4f)', fam.name, fam.oklch.C)
            continue
        chromatic.append(fam)

    result = AuditResult(families=chromatic)
    wanted = set(checks) if checks is not None else None
    for name, chk in all_checks().items():
        if wanted is not None and name not in wanted:
            continue
        logger.debug('running check %s on %d families', name, len(chromatic))
        chk.execute(chromatic, result, curve)

    n = result.family_count
    lo, hi = IDEAL_FAMILY_RANGE
    if lo <= n <= hi:
        result.adjust(f'{n} families (ideal {lo}–{hi})', IDEAL_FAMILY_BONUS)
    elif n < SPARSE_FAMILY_COUNT:
        result.adjust(f'only {n} families (fewer than {SPARSE_FAMILY_COUNT})', SPARSE_FAMILY_PENALTY)

    raw = BASE_SCORE + sum(adj.delta for adj in result.breakdown)
    result.score = int(round(max(0.0, min(100.0, raw))))
    result.findings = result.sorted_findings()
    logger.debug('audit score %d (raw %.2f, %d findings)', result.score, raw, len(result.findings))
    return result
