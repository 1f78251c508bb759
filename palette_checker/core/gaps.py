"""Hue-gap detection, gap-fill suggestions and palette coverage statistics.

Each family is one dot on the hue wheel. Consecutive dots (sorted by hue,
wrapping from the last back to the first) bound an arc; an arc wider than
the dynamic threshold is a gap. Reference colours that land inside a gap,
and are not within 10° of an existing family, are scored on:

    centrality   0.40   1.0 at the gap midpoint, 0 at either edge
    chroma fit   0.35   1.0 at the palette's median relative chroma, 0 at ±0.3
    balance      0.25   favours the under-represented warm/cool side
"""

import logging

import numpy as np

from palette_checker.core.colour import (
    clamp_chroma_to_gamut,
    clockwise_distance,
    hue_delta,
    max_chroma_at_lh,
    normalize_hue,
    oklch_to_rgb,
    rgb_to_hex,
)
from palette_checker.core.config import ANCHOR_REF_CHROMA, MAX_PALETTE_SIZE, TargetCurve, default_target_curve
from palette_checker.core.palettes import all_reference_colours
from palette_checker.core.types import CoverageStats, GapSuggestion, HueDot, HueGap

logger = logging.getLogger(__name__)

MIN_GAP_THRESHOLD = 15.0
MAX_GAP_THRESHOLD = 40.0
GAP_THRESHOLD_FACTOR = 1.5
OVERLAP_TOLERANCE = 10.0

CENTRALITY_WEIGHT = 0.40
CHROMA_FIT_WEIGHT = 0.35
BALANCE_WEIGHT = 0.25
CHROMA_FIT_RANGE = 0.3
DEFAULT_MEDIAN_REL_CHROMA = 0.5

BALANCE_OPPOSITE = 1.0
BALANCE_NEUTRAL_ZONE = 0.7
BALANCE_SAME = 0.2
BALANCE_DEFAULT = 0.5
IMBALANCE_MIN_DOTS = 4
IMBALANCE_RATIO = 2.0


# ── Temperature ─────────────────────────────────────────────────────


def classify_temperature(hue: float) -> str:
    """'warm' for <60° or ≥300°, 'cool' for 120–270°, otherwise 'neutral'."""
    if hue < 60 or hue >= 300:
        return 'warm'
    if 120 <= hue < 270:
        return 'cool'
    return 'neutral'


def temperature_counts(dots: list[HueDot]) -> dict[str, int]:
    counts = {'warm': 0, 'cool': 0, 'neutral': 0}
    for dot in dots:
        counts[classify_temperature(dot.hue)] += 1
    return counts


def temperature_balance(dots: list[HueDot]) -> str:
    """'warm-heavy' or 'cool-heavy' when one side has at least twice the other
    among four or more dots, else 'balanced'."""
    counts = temperature_counts(dots)
    warm, cool = counts['warm'], counts['cool']
    if len(dots) < IMBALANCE_MIN_DOTS or max(warm, cool) == 0:
        return 'balanced'
    if warm >= IMBALANCE_RATIO * cool:
        return 'warm-heavy'
    if cool >= IMBALANCE_RATIO * warm:
        return 'cool-heavy'
    return 'balanced'


def _balance_score(hue: float, balance: str) -> float:
    if balance == 'balanced':
        return BALANCE_DEFAULT
    zone = classify_temperature(hue)
    if zone == 'neutral':
        return BALANCE_NEUTRAL_ZONE
    heavy = 'warm' if balance == 'warm-heavy' else 'cool'
    return BALANCE_SAME if zone == heavy else BALANCE_OPPOSITE


# ── Gaps ────────────────────────────────────────────────────────────


def dynamic_gap_threshold(n: int) -> float:
    """clamp(1.5 × 360/n, 15°, 40°). Fewer families tolerate wider spacing."""
    if n <= 0:
        return MAX_GAP_THRESHOLD
    return max(MIN_GAP_THRESHOLD, min(MAX_GAP_THRESHOLD, GAP_THRESHOLD_FACTOR * 360.0 / n))


def _arcs(dots: list[HueDot]) -> list[HueGap]:
    """Clockwise arcs between consecutive dots, the last one wrapping to the first.

    The wrapping arc always spans the rest of the wheel, so dots that share a
    single hue leave one 360° arc.
    """
    ordered = sorted(dots, key=lambda d: d.hue)
    arcs = []
    for i, start in enumerate(ordered):
        end = ordered[(i + 1) % len(ordered)]
        size = clockwise_distance(start.hue, end.hue)
        if i == len(ordered) - 1 and size == 0.0:
            size = 360.0
        arcs.append(HueGap(start=start, end=end, size=size, midpoint=normalize_hue(start.hue + size / 2)))
    return arcs


def find_hue_gaps(dots: list[HueDot], threshold: float | None = None) -> list[HueGap]:
    """Arcs wider than the threshold, largest first.

    Equal sizes keep hue order of their starting dot. Fewer than two dots
    have no gaps.
    """
    if len(dots) < 2:
        return []
    if threshold is None:
        threshold = dynamic_gap_threshold(len(dots))
    gaps = [arc for arc in _arcs(dots) if arc.size > threshold]
    return sorted(gaps, key=lambda g: g.size, reverse=True)


# ── Suggestions ─────────────────────────────────────────────────────


def relative_chroma_at(chroma: float, lightness: float, hue: float) -> float:
    max_c = max_chroma_at_lh(lightness, hue)
    return chroma / max_c if max_c > 0 else 0.0


def median_relative_chroma(dots: list[HueDot], curve: TargetCurve | None = None) -> float:
    """Median relative chroma of the dots that carry chroma; 0.5 when none do."""
    anchor_l = (curve or default_target_curve()).anchor_l
    values = [
        relative_chroma_at(d.chroma, d.lightness if d.lightness is not None else anchor_l, d.hue)
        for d in dots
        if d.chroma is not None
    ]
    if not values:
        return DEFAULT_MEDIAN_REL_CHROMA
    return float(np.median(values))


def suggestion_preview_hex(hue: float, curve: TargetCurve | None = None) -> str:
    """What the scale engine's anchor would look like at this hue."""
    L = (curve or default_target_curve()).anchor_l
    C = clamp_chroma_to_gamut(L, ANCHOR_REF_CHROMA, hue)
    return rgb_to_hex(*oklch_to_rgb(L, C, hue))


def analyse_hue_gaps(dots: list[HueDot], curve: TargetCurve | None = None) -> list[GapSuggestion]:
    """Ranked reference colours that would fill the palette's hue gaps."""
    capacity = MAX_PALETTE_SIZE - len(dots)
    gaps = find_hue_gaps(dots)
    if capacity <= 0 or not gaps:
        return []

    curve = curve or default_target_curve()
    anchor_l = curve.anchor_l
    median = median_relative_chroma(dots, curve)
    balance = temperature_balance(dots)

    refs = [
        (system, ref)
        for system, ref in all_reference_colours()
        if not any(hue_delta(d.hue, ref.hue) < OVERLAP_TOLERANCE for d in dots)
    ]

    best: dict[tuple[str, str], GapSuggestion] = {}
    for gap in gaps:
        half = gap.size / 2
        for system, ref in refs:
            dist = clockwise_distance(gap.start.hue, ref.hue)
            if dist >= gap.size:
                continue
            centrality = 1.0 - abs(dist - half) / half
            rel_c = relative_chroma_at(ref.chroma, anchor_l, ref.hue)
            chroma_fit = max(0.0, 1.0 - abs(rel_c - median) / CHROMA_FIT_RANGE)
            balance_score = _balance_score(ref.hue, balance)
            score = CENTRALITY_WEIGHT * centrality + CHROMA_FIT_WEIGHT * chroma_fit + BALANCE_WEIGHT * balance_score

            key = (ref.name, system)
            if key in best and best[key].score >= score:
                continue
            best[key] = GapSuggestion(
                name=ref.name,
                source=system,
                hex=suggestion_preview_hex(ref.hue, curve),
                hue=ref.hue,
                gap_size=gap.size,
                between=(gap.start.name, gap.end.name),
                score=score,
                centrality=centrality,
                chroma_fit=chroma_fit,
                balance=balance_score,
            )

    ranked = sorted(best.values(), key=lambda s: s.score, reverse=True)
    logger.debug('%d gaps, %d candidate suggestions, keeping %d', len(gaps), len(ranked), min(capacity, len(ranked)))
    return ranked[:capacity]


# ── Coverage ────────────────────────────────────────────────────────


def compute_coverage_stats(dots: list[HueDot]) -> CoverageStats:
    n = len(dots)
    counts = temperature_counts(dots)
    ideal = 360.0 / n if n else 360.0

    if n >= 2:
        sizes = np.array([arc.size for arc in _arcs(dots)])
        nearest = [min(hue_delta(d.hue, o.hue) for j, o in enumerate(dots) if j != i) for i, d in enumerate(dots)]
        mean_gap = float(np.mean(nearest))
        largest = float(sizes.max())
        std = float(np.std(sizes))
    else:
        mean_gap = largest = std = 0.0

    return CoverageStats(
        family_count=n,
        remaining_capacity=max(0, MAX_PALETTE_SIZE - n),
        ideal_gap=ideal,
        mean_gap=mean_gap,
        largest_gap=largest,
        gap_std=std,
        warm_count=counts['warm'],
        cool_count=counts['cool'],
        neutral_count=counts['neutral'],
        balance=temperature_balance(dots),
    )
