"""Grey-scale analysis: lightness spacing, near-duplicate shades, tint detection.

Shades are sorted light to dark by Oklch L. Consecutive shades closer than
0.008 in L form a cluster, and one shade per cluster is kept. The shade with
the roundest number wins (multiples of 100, then of 50, then the lowest).
A shade counts as tinted once its chroma is above a lightness-dependent
threshold. The threshold is lower at the extremes, where the gamut is narrow.
"""

import logging
import math
from collections.abc import Mapping

import numpy as np

from palette_checker.core.colour import hex_to_rgb, hue_delta, normalize_hex, rgb_to_oklch
from palette_checker.core.contrast import apca_contrast
from palette_checker.core.palettes import REFERENCE_NEUTRALS
from palette_checker.core.types import (
    ConsolidatedShade,
    DesignSystem,
    LightnessCluster,
    NeutralAnalysis,
    NeutralNameMatch,
    NeutralShade,
    NeutralStats,
    Rgb,
    ShadeTintMatch,
)

logger = logging.getLogger(__name__)

CLUSTER_DELTA_L = 0.008
INDISTINGUISHABLE_STEP = 0.005
CONSOLIDATE_MAX_DISTANCE = 0.08
PURE_NEUTRAL_CHROMA = 0.003

WHITE = Rgb(1.0, 1.0, 1.0)
DARK_SURFACE = Rgb(0.1, 0.1, 0.1)  # #1A1A1A

TINT_SYSTEMS: tuple[DesignSystem, ...] = ('Tailwind', 'Radix')
NAME_SYSTEMS: tuple[DesignSystem, ...] = ('Tailwind', 'Radix', 'Spectrum')

# (shade, L, role) of a well-spaced twelve-step grey scale
IDEAL_LIGHTNESS = (
    (0, 1.000, 'Page background'),
    (50, 0.985, 'Page background'),
    (100, 0.950, 'Subtle background'),
    (200, 0.880, 'Card / surface'),
    (300, 0.780, 'Border / divider'),
    (400, 0.640, 'Placeholder / disabled'),
    (500, 0.530, 'Secondary text'),
    (600, 0.420, 'Primary text'),
    (700, 0.310, 'Primary text'),
    (800, 0.210, 'Inverse surface'),
    (900, 0.130, 'Inverse text background'),
    (950, 0.070, 'Inverse text background'),
)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def tint_threshold(L: float) -> float:
    """Chroma above which a grey reads as tinted at lightness L."""
    if L > 0.92 or L < 0.08:
        return 0.0015
    if L > 0.85 or L < 0.15:
        return 0.003
    return 0.005


# ── Per-shade ───────────────────────────────────────────────────────


def _nearest_chromatic(hue: float, system: DesignSystem):
    """(reference, delta) for the chromatic neutral in `system` closest in hue."""
    best, best_delta = None, math.inf
    for ref in REFERENCE_NEUTRALS:
        if ref.source != system or ref.is_achromatic:
            continue
        d = hue_delta(hue, ref.hue)
        if d < best_delta:
            best, best_delta = ref, d
    return best, best_delta


def analyse_neutral_shade(shade: int, hex_value: str) -> NeutralShade:
    rgb = hex_to_rgb(hex_value)
    oklch = rgb_to_oklch(*rgb)
    is_tinted = oklch.C > tint_threshold(oklch.L)

    matches = []
    if is_tinted:
        for system in TINT_SYSTEMS:
            ref, delta = _nearest_chromatic(oklch.H, system)
            matches.append(ShadeTintMatch(source=system, name=ref.name, hue_delta=_round_half_up(delta)))

    return NeutralShade(
        shade=shade,
        hex=normalize_hex(hex_value)[:7],
        oklch=oklch,
        apca_on_white=abs(apca_contrast(rgb, WHITE)),
        apca_on_dark=abs(apca_contrast(rgb, DARK_SURFACE)),
        is_tinted=is_tinted,
        tint_matches=tuple(matches),
    )


# ── Spacing ─────────────────────────────────────────────────────────


def _shade_roundness(shade: int) -> int:
    if shade % 100 == 0:
        return 0
    if shade % 50 == 0:
        return 1
    return 2


def _build_cluster(members: list[NeutralShade]) -> LightnessCluster:
    lightnesses = [s.oklch.L for s in members]
    max_step = max(abs(b - a) for a, b in zip(lightnesses, lightnesses[1:]))
    keep = min(members, key=lambda s: (_shade_roundness(s.shade), s.shade)).shade

    if max_step < INDISTINGUISHABLE_STEP:
        reason = f'Visually indistinguishable (ΔL ≤ {max_step * 100:.1f}% per step)'
    else:
        reason = f'Very close (ΔL ≤ {max_step * 100:.1f}% per step), hard to tell apart'

    return LightnessCluster(
        shades=tuple(s.shade for s in members),
        hexes=tuple(s.hex for s in members),
        lightnesses=tuple(lightnesses),
        max_delta_l=max(lightnesses) - min(lightnesses),
        keep_shade=keep,
        drop_shades=tuple(s.shade for s in members if s.shade != keep),
        reason=reason,
    )


def find_lightness_clusters(shades: list[NeutralShade]) -> list[LightnessCluster]:
    """Runs of consecutive shades (light to dark) each under 0.008 ΔL from the previous."""
    clusters = []
    run: list[NeutralShade] = []
    for s in shades:
        if run and abs(s.oklch.L - run[-1].oklch.L) < CLUSTER_DELTA_L:
            run.append(s)
            continue
        if len(run) >= 2:
            clusters.append(_build_cluster(run))
        run = [s]
    if len(run) >= 2:
        clusters.append(_build_cluster(run))
    return clusters


def distribution_score(shades: list[NeutralShade]) -> int:
    """100 for perfectly even lightness steps, falling with the mean relative step error.

    Fewer than three shades score 100. A scale with no lightness range scores 0.
    """
    if len(shades) < 3:
        return 100
    Ls = np.sort(np.array([s.oklch.L for s in shades]))[::-1]
    ideal = (Ls[0] - Ls[-1]) / (len(Ls) - 1)
    if ideal == 0:
        return 0
    steps = Ls[:-1] - Ls[1:]
    avg_deviation = float(np.mean(np.abs(steps - ideal) / ideal))
    return max(0, _round_half_up((1 - avg_deviation) * 100))


def consolidate(shades: list[NeutralShade]) -> list[ConsolidatedShade]:
    """Map each ideal step to the nearest existing shade within 0.08 L. Nothing is interpolated."""
    out = []
    for shade, target_l, role in IDEAL_LIGHTNESS:
        if not shades:
            break
        best = min(shades, key=lambda s: abs(s.oklch.L - target_l))
        if abs(best.oklch.L - target_l) < CONSOLIDATE_MAX_DISTANCE:
            out.append(
                ConsolidatedShade(shade=shade, hex=best.hex, L=best.oklch.L, role=role, original_shade=best.shade)
            )
    return out


# ── Tint naming ─────────────────────────────────────────────────────


def weighted_mean_hue(shades: list[NeutralShade]) -> float | None:
    """Chroma-weighted circular mean hue of the tinted shades, None if none are tinted."""
    tinted = [s for s in shades if s.is_tinted]
    if not tinted:
        return None
    weights = np.array([s.oklch.C for s in tinted])
    if weights.sum() == 0:
        return None
    rad = np.radians([s.oklch.H for s in tinted])
    sin = np.sum(np.sin(rad) * weights) / weights.sum()
    cos = np.sum(np.cos(rad) * weights) / weights.sum()
    return float(np.degrees(np.arctan2(sin, cos)) % 360.0)


def match_neutral_names(shades: list[NeutralShade]) -> tuple[list[NeutralNameMatch], float | None, float]:
    """Family-level named-grey matches, plus the mean tint hue and chroma they came from.

    An untinted scale, or one whose tinted shades average under 0.003 chroma,
    matches every system's pure grey. Otherwise each system offers its
    closest tinted grey, or its only grey when it has no tinted ones.
    """
    tinted = [s for s in shades if s.is_tinted]
    avg_chroma = float(np.mean([s.oklch.C for s in tinted])) if tinted else 0.0
    avg_hue = weighted_mean_hue(shades)

    if avg_hue is None or avg_chroma < PURE_NEUTRAL_CHROMA:
        matches = [
            NeutralNameMatch(source=ref.source, name=ref.name, tint=ref.tint, hue_delta=0, is_achromatic=True)
            for ref in REFERENCE_NEUTRALS
            if ref.is_achromatic
        ]
        return matches, avg_hue, avg_chroma

    matches = []
    for system in NAME_SYSTEMS:
        ref, delta = _nearest_chromatic(avg_hue, system)
        if ref is not None:
            matches.append(
                NeutralNameMatch(
                    source=system, name=ref.name, tint=ref.tint, hue_delta=_round_half_up(delta), is_achromatic=False
                )
            )
            continue
        grey = next((r for r in REFERENCE_NEUTRALS if r.source == system and r.is_achromatic), None)
        if grey is not None:
            matches.append(
                NeutralNameMatch(source=system, name=grey.name, tint=grey.tint, hue_delta=0, is_achromatic=True)
            )
    return matches, avg_hue, avg_chroma


# ── Family ──────────────────────────────────────────────────────────


def analyse_neutrals(name: str, shades: Mapping[int, str], is_alpha: bool = False) -> NeutralAnalysis:
    """Analyse one grey family given as shade number → hex.

    Raises InvalidHexError for any malformed hex.
    """
    analysed = sorted(
        (analyse_neutral_shade(int(shade), hex_value) for shade, hex_value in shades.items()),
        key=lambda s: s.oklch.L,
        reverse=True,
    )
    clusters = find_lightness_clusters(analysed)
    consolidated = consolidate(analysed)
    name_matches, avg_hue, avg_chroma = match_neutral_names(analysed)

    tailwind_names = {m.name for s in analysed if s.is_tinted for m in s.tint_matches if m.source == 'Tailwind'}
    clustered = {shade for c in clusters for shade in c.shades}
    tinted_count = sum(s.is_tinted for s in analysed)

    logger.debug(
        '%s: %d shades, %d tinted, %d clusters, tint hue %s',
        name,
        len(analysed),
        tinted_count,
        len(clusters),
        'none' if avg_hue is None else f'{avg_hue:.1f}',
    )
    return NeutralAnalysis(
        family_name=name,
        is_alpha=is_alpha,
        shades=tuple(analysed),
        clusters=tuple(clusters),
        distribution_score=distribution_score(analysed),
        consolidated=tuple(consolidated),
        name_matches=tuple(name_matches),
        avg_tint_hue=avg_hue,
        avg_tint_chroma=avg_chroma,
        tint_consistent=len(tailwind_names) <= 1,
        stats=NeutralStats(
            total_shades=len(analysed),
            consolidated_count=len(consolidated),
            tinted_count=tinted_count,
            clustered_count=len(clustered),
        ),
    )
