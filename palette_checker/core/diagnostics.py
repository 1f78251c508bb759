"""Diagnostic snapshot of generated scales for offline analysis.

For every chromatic anchor the full scale is generated and each shade is
reported with its APCA result, hue drift from the input, relative chroma and
a chroma comparison against the nearest reference family of each design
system. The summary counts how many comparisons land in the 0.7–1.3 chroma
ratio band. Everything is returned as plain JSON-ready dicts.
"""

import datetime
import logging
from collections.abc import Mapping
from typing import Any

import numpy as np

from palette_checker.core.cam16 import MAX_HUE_DRIFT
from palette_checker.core.colour import (
    effective_max_chroma,
    hex_to_rgb,
    hue_delta,
    is_valid_hex,
    max_chroma_at_lh,
    rgb_to_oklch,
)
from palette_checker.core.config import ACHROMATIC_THRESHOLD, SHADE_LEVELS, TargetCurve, default_target_curve
from palette_checker.core.palettes import SYSTEMS, reference_colours
from palette_checker.core.scale import generate_scale
from palette_checker.core.types import AuditResult, Oklch, ShadeInfo

logger = logging.getLogger(__name__)

EXPORT_VERSION = '1.1'

CHROMA_BAND_LOW = 0.7
CHROMA_BAND_HIGH = 1.3
REFERENCE_HUE_WINDOW = 35.0
MIN_REFERENCE_CHROMA = 0.005
APCA_PASS_MARGIN = 1.0

# Shade each reference table was taken from
REFERENCE_SHADE = {'Tailwind': '700', 'Spectrum': '900', 'Radix': '11'}


def _round(x: float, decimals: int = 3) -> float:
    return round(float(x), decimals)


def in_chroma_band(ratio: float) -> bool:
    return bool(CHROMA_BAND_LOW <= ratio <= CHROMA_BAND_HIGH)


def apca_status(lc: float) -> str:
    if lc >= 75:
        return 'excellent'
    if lc >= 60:
        return 'good'
    if lc >= 45:
        return 'marginal'
    return 'fail'


def closest_reference(system: str, L: float, hue: float):
    """Reference colour nearest in lightness among those within 35° of `hue`, or None."""
    best, best_dist = None, float('inf')
    for ref in reference_colours(system):
        if hue_delta(ref.hue, hue) > REFERENCE_HUE_WINDOW:
            continue
        dist = abs(ref.lightness - L)
        if dist < best_dist:
            best, best_dist = ref, dist
    return best


def _oklch_dict(c: Oklch) -> dict[str, float]:
    return {'L': _round(c.L), 'C': _round(c.C, 4), 'H': _round(c.H, 1)}


def _shade_record(sh: ShadeInfo, input_oklch: Oklch, curve: TargetCurve, ratios: list) -> dict[str, Any]:
    cfg = curve.config
    point = curve[sh.shade]
    L, C, H = sh.oklch

    lc = abs(sh.active_group.level('Primary').apca_lc)
    drift = hue_delta(H, input_oklch.H)
    eff_max = effective_max_chroma(
        L,
        H,
        cfg.reference_hue,
        cfg.cusp_damping_base,
        cfg.cusp_damping_coeff,
        cfg.damping_ceiling_l,
        cfg.damping_ceiling_value,
    )

    comparisons = []
    for system in SYSTEMS:
        ref = closest_reference(system, L, input_oklch.H)
        if ref is None or ref.chroma <= MIN_REFERENCE_CHROMA:
            continue
        ratio = C / ref.chroma
        ratios.append((sh.shade, system, ratio))
        comparisons.append(
            {
                'system': system,
                'closest_family': ref.name,
                'closest_shade': REFERENCE_SHADE[system],
                'closest_c': _round(ref.chroma, 4),
                'chroma_ratio': _round(ratio),
                'in_band': in_chroma_band(ratio),
            }
        )

    return {
        'shade': sh.shade,
        'hex': sh.hex,
        'oklch': _oklch_dict(sh.oklch),
        'target_l': _round(point.L),
        'target_rel_c': _round(point.rel_c),
        'actual_rel_c': _round(C / eff_max if eff_max > 0 else 0.0),
        'effective_max_c': _round(eff_max, 4),
        'raw_max_c': _round(max_chroma_at_lh(L, H), 4),
        'gamut_headroom': _round(sh.gamut_headroom),
        'was_gamut_reduced': sh.was_gamut_reduced,
        'apca_lc': _round(lc, 0),
        'apca_target': point.target_lc,
        'apca_pass': lc >= point.target_lc - APCA_PASS_MARGIN,
        'apca_status': apca_status(lc),
        'hue_drift': _round(drift, 1),
        'reference_comparisons': comparisons,
    }


def _band_summary(ratios: list) -> dict[str, Any]:
    def pct(part: int, total: int, decimals: int = 0) -> float:
        return _round(part / total * 100, decimals) if total else 0

    by_shade = []
    for shade in SHADE_LEVELS:
        values = [r for s, _, r in ratios if s == shade]
        hits = sum(in_chroma_band(r) for r in values)
        by_shade.append(
            {
                'shade': shade,
                'total_comparisons': len(values),
                'in_band': hits,
                'percentage': pct(hits, len(values)),
                'avg_ratio': _round(np.mean(values)) if values else 0,
                'min_ratio': _round(min(values)) if values else 0,
                'max_ratio': _round(max(values)) if values else 0,
            }
        )

    per_system = []
    for system in SYSTEMS:
        values = [r for _, source, r in ratios if source == system]
        hits = sum(in_chroma_band(r) for r in values)
        per_system.append(
            {'system': system, 'in_band': hits, 'total': len(values), 'percentage': pct(hits, len(values))}
        )

    total_hits = sum(in_chroma_band(r) for _, _, r in ratios)
    return {
        'chroma_band_analysis': by_shade,
        'overall_in_band': {'count': total_hits, 'total': len(ratios), 'percentage': pct(total_hits, len(ratios), 1)},
        'per_system': per_system,
    }


def _audit_summary(audit: AuditResult) -> dict[str, Any]:
    return {
        'score': audit.score,
        'breakdown': [{'reason': adj.reason, 'delta': adj.delta} for adj in audit.breakdown],
        'family_count': audit.family_count,
        'proximity_warnings': len(audit.proximity_warnings),
        'chroma_flagged': sum(c.flagged for c in audit.chroma_analysis),
        'anchor_tweaks': len(audit.anchor_tweaks),
        'gap_suggestions': len(audit.gap_suggestions),
    }


def build_diagnostic_export(
    anchors: Mapping[str, str],
    audit: AuditResult | None = None,
    curve: TargetCurve | None = None,
    exported_at: str | None = None,
) -> dict[str, Any]:
    """Snapshot every chromatic anchor's scale, keyed by family name → 300 hex.

    Invalid hex values and achromatic anchors are skipped rather than raised,
    so a partially parsed token file still exports.
    """
    curve = curve or default_target_curve()
    cfg = curve.config
    ratios: list[tuple[int, str, float]] = []
    families = []
    apca_failures = 0
    drift_warnings = 0

    for name, hex_value in anchors.items():
        if not is_valid_hex(hex_value):
            logger.debug('%s: skipping invalid anchor %r', name, hex_value)
            continue
        input_oklch = rgb_to_oklch(*hex_to_rgb(hex_value))
        if input_oklch.C < ACHROMATIC_THRESHOLD:
            continue

        scale = generate_scale(hex_value, name, curve=curve)
        shades = [_shade_record(sh, input_oklch, curve, ratios) for sh in scale.shades]
        apca_failures += sum(not s['apca_pass'] for s in shades)
        drift_warnings += sum(s['hue_drift'] > MAX_HUE_DRIFT for s in shades)
        families.append(
            {
                'name': scale.name,
                'input_hex': scale.input_hex,
                'input_oklch': _oklch_dict(input_oklch),
                'is_achromatic': scale.is_achromatic,
                'shades': shades,
            }
        )

    logger.debug('diagnostic export: %d families, %d chroma comparisons', len(families), len(ratios))
    return {
        'version': EXPORT_VERSION,
        'exported_at': exported_at or datetime.datetime.now(datetime.timezone.utc).isoformat(),
        'engine': {
            'base_rel_c': cfg.base_relc,
            'relc_step': cfg.relc_step,
            'reference_hue': cfg.reference_hue,
            'cusp_damping_base': cfg.cusp_damping_base,
            'cusp_damping_coeff': cfg.cusp_damping_coeff,
            'damping_ceiling_l': cfg.damping_ceiling_l,
            'damping_ceiling_value': cfg.damping_ceiling_value,
            'target_curve': {s: {'L': _round(curve[s].L), 'rel_c': _round(curve[s].rel_c)} for s in SHADE_LEVELS},
        },
        'families': families,
        'summary': {
            'total_shades': sum(len(f['shades']) for f in families),
            'apca_failures': apca_failures,
            'hue_drift_warnings': drift_warnings,
            **_band_summary(ratios),
        },
        'audit': _audit_summary(audit) if audit is not None else None,
    }
