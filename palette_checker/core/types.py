"""Shared types for palette-tool: colour values, scale results, matches, neutral and audit records, Check."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Literal, NamedTuple

if TYPE_CHECKING:
    from palette_checker.core.config import TargetCurve

Severity = Literal['critical', 'warning', 'info']
Direction = Literal['light-fill', 'dark-fill']
DesignSystem = Literal['Tailwind', 'Spectrum', 'Radix']
Confidence = Literal['exact', 'close', 'approximate', 'distant']
Temperature = Literal['warm', 'cool', 'neutral']

SEVERITY_ORDER: dict[str, int] = {'critical': 0, 'warning': 1, 'info': 2}


class InvalidHexError(ValueError):
    """Raised for colour strings that are not 6 or 8 hex digits with an optional '#'."""


class Rgb(NamedTuple):
    """Gamma-encoded sRGB, each channel in [0, 1]."""

    r: float
    g: float
    b: float


class Oklch(NamedTuple):
    """Oklch colour. L in [0, 1], C >= 0, H in [0, 360)."""

    L: float
    C: float
    H: float


# ── Scale engine ────────────────────────────────────────────────────


@dataclass(frozen=True)
class TextLevel:
    """A text token at one opacity, e.g. Grey 750 Secondary at 69%."""

    label: str
    rgb: Rgb
    alpha: float


@dataclass(frozen=True)
class TextLevelContrast:
    label: str
    effective_hex: str
    wcag_ratio: float
    wcag_level: str
    apca_lc: float
    apca_level: str


@dataclass(frozen=True)
class TextLevelGroup:
    token: str
    levels: tuple[TextLevelContrast, ...]
    is_active: bool
    semantic: str

    def level(self, label: str) -> TextLevelContrast:
        for lvl in self.levels:
            if lvl.label == label:
                return lvl
        raise KeyError(f'No text level {label!r} in {self.token}')


@dataclass(frozen=True)
class ShadeInfo:
    """One generated shade with its contrast diagnostics."""

    shade: int
    hex: str
    oklch: Oklch
    rgb: Rgb
    contrast_on_white: float
    contrast_on_black: float
    apca_on_white: float
    apca_on_black: float
    text_groups: tuple[TextLevelGroup, ...]
    mode_context: str  # 'light' | 'dark'
    mode_label: str
    card_text_color: str  # 'white' | 'dark'
    is_anchor: bool
    was_l_adjusted: bool
    original_l: float
    was_gamut_reduced: bool
    original_c: float
    final_c: float
    gamut_headroom: float

    @property
    def active_group(self) -> TextLevelGroup:
        return next(g for g in self.text_groups if g.is_active)


@dataclass(frozen=True)
class ScaleResult:
    name: str
    input_hex: str
    hue: float
    is_achromatic: bool
    shades: tuple[ShadeInfo, ...]

    def shade(self, level: int) -> ShadeInfo:
        for s in self.shades:
            if s.shade == level:
                return s
        raise KeyError(f'No shade {level} in scale {self.name!r}')


# ── Reference palettes & matching ───────────────────────────────────


@dataclass(frozen=True)
class ReferenceColour:
    """Anchor shade of one named family in an external design system."""

    name: str
    hue: float
    chroma: float
    lightness: float


@dataclass(frozen=True)
class ColourMatch:
    name: str
    source: DesignSystem
    hue_delta: float
    confidence: Confidence
    ref_hue: float
    ref_chroma: float
    ref_lightness: float
    preview_hex: str  # reference hue/chroma rendered at the anchor lightness


# ── Hue gaps & coverage ─────────────────────────────────────────────


@dataclass(frozen=True)
class HueDot:
    """One family on the hue wheel. Chroma/lightness are optional extras."""

    name: str
    hue: float
    chroma: float | None = None
    lightness: float | None = None


@dataclass(frozen=True)
class HueGap:
    start: HueDot  # gap runs clockwise from start to end
    end: HueDot
    size: float
    midpoint: float


@dataclass(frozen=True)
class GapSuggestion:
    name: str
    source: DesignSystem
    hex: str
    hue: float
    gap_size: float
    between: tuple[str, str]
    score: float
    centrality: float
    chroma_fit: float
    balance: float


@dataclass(frozen=True)
class CoverageStats:
    family_count: int
    remaining_capacity: int
    ideal_gap: float
    mean_gap: float  # mean distance from each family to its nearest neighbour
    largest_gap: float
    gap_std: float
    warm_count: int
    cool_count: int
    neutral_count: int
    balance: str  # 'balanced' | 'warm-heavy' | 'cool-heavy'


# ── Neutral analysis ────────────────────────────────────────────────


@dataclass(frozen=True)
class ReferenceNeutral:
    """A named grey scale in an external design system."""

    source: DesignSystem
    name: str
    tint: str
    hue: float
    is_achromatic: bool


@dataclass(frozen=True)
class ShadeTintMatch:
    source: DesignSystem
    name: str
    hue_delta: int


@dataclass(frozen=True)
class NeutralShade:
    shade: int
    hex: str
    oklch: Oklch
    apca_on_white: float  # |Lc| of the shade as text on white
    apca_on_dark: float  # |Lc| of the shade as text on #1A1A1A
    is_tinted: bool
    tint_matches: tuple[ShadeTintMatch, ...]


@dataclass(frozen=True)
class LightnessCluster:
    """Consecutive shades whose lightness steps are too small to tell apart."""

    shades: tuple[int, ...]
    hexes: tuple[str, ...]
    lightnesses: tuple[float, ...]
    max_delta_l: float
    keep_shade: int
    drop_shades: tuple[int, ...]
    reason: str


@dataclass(frozen=True)
class ConsolidatedShade:
    shade: int
    hex: str
    L: float
    role: str
    original_shade: int


@dataclass(frozen=True)
class NeutralNameMatch:
    source: DesignSystem
    name: str
    tint: str
    hue_delta: int
    is_achromatic: bool


@dataclass(frozen=True)
class NeutralStats:
    total_shades: int
    consolidated_count: int
    tinted_count: int
    clustered_count: int


@dataclass(frozen=True)
class NeutralAnalysis:
    family_name: str
    is_alpha: bool
    shades: tuple[NeutralShade, ...]  # light to dark
    clusters: tuple[LightnessCluster, ...]
    distribution_score: int
    consolidated: tuple[ConsolidatedShade, ...]
    name_matches: tuple[NeutralNameMatch, ...]
    avg_tint_hue: float | None
    avg_tint_chroma: float
    tint_consistent: bool
    stats: NeutralStats


# ── Palette audit ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Family:
    """Audit input: one colour family reduced to its 300 anchor."""

    name: str
    hex: str
    oklch: Oklch

    @classmethod
    def from_hex(cls, name: str, hex_value: str) -> Family:
        from palette_checker.core.colour import hex_to_rgb, normalize_hex, rgb_to_oklch

        rgb = hex_to_rgb(hex_value)
        return cls(name=name, hex=normalize_hex(hex_value)[:7], oklch=rgb_to_oklch(*rgb))


@dataclass
class ChromaAnalysis:
    family: str
    hex: str
    oklch: Oklch
    max_chroma: float
    relative_chroma: float
    target_rel_chroma: float = 0.0
    suggested_c: float = 0.0
    suggested_hex: str = ''
    deviation: float = 0.0  # positive = oversaturated
    flagged: bool = False


@dataclass
class ProximityWarning:
    family_a: str
    family_b: str
    hue_a: float
    hue_b: float
    hue_delta: float
    severity: Severity
    suggestion: str
    shift_family: str | None = None
    shifted_hue: float | None = None
    shifted_hex: str | None = None


@dataclass
class AnchorTweak:
    family: str
    current_hex: str
    suggested_hex: str
    current_oklch: Oklch
    suggested_oklch: Oklch
    reasons: list[str]
    lightness_changed: bool
    chroma_changed: bool
    delta_e: float  # Euclidean distance in (L, C)


@dataclass
class AuditFinding:
    type: str  # 'proximity' | 'chroma-imbalance' | 'shade300-tweak' | 'hue-gap' | 'temperature'
    severity: Severity
    message: str
    family: str | None = None


@dataclass
class ScoreAdjustment:
    reason: str
    delta: float


@dataclass
class AuditResult:
    """Accumulates results from audit checks for one palette."""

    families: list[Family] = field(default_factory=list)
    chroma_analysis: list[ChromaAnalysis] = field(default_factory=list)
    proximity_warnings: list[ProximityWarning] = field(default_factory=list)
    anchor_tweaks: list[AnchorTweak] = field(default_factory=list)
    gaps: list[HueGap] = field(default_factory=list)
    gap_suggestions: list[GapSuggestion] = field(default_factory=list)
    coverage: CoverageStats | None = None
    findings: list[AuditFinding] = field(default_factory=list)
    breakdown: list[ScoreAdjustment] = field(default_factory=list)
    score: int = 100
    checks_run: list[str] = field(default_factory=list)

    @property
    def family_count(self) -> int:
        return len(self.families)

    def add_finding(self, type_: str, severity: Severity, message: str, family: str | None = None) -> None:
        self.findings.append(AuditFinding(type=type_, severity=severity, message=message, family=family))

    def adjust(self, reason: str, delta: float) -> None:
        """Record one additive score adjustment. Zero deltas are not recorded."""
        if delta:
            self.breakdown.append(ScoreAdjustment(reason=reason, delta=delta))

    def sorted_findings(self) -> list[AuditFinding]:
        return sorted(self.findings, key=lambda f: SEVERITY_ORDER[f.severity])

    def to_dict(self) -> dict[str, Any]:
        return {
            'score': self.score,
            'checks_run': list(self.checks_run),
            'family_count': self.family_count,
            'breakdown': [asdict(b) for b in self.breakdown],
            'findings': [asdict(f) for f in self.findings],
            'chroma_analysis': [asdict(c) for c in self.chroma_analysis],
            'proximity_warnings': [asdict(p) for p in self.proximity_warnings],
            'anchor_tweaks': [asdict(t) for t in self.anchor_tweaks],
            'gaps': [asdict(g) for g in self.gaps],
            'gap_suggestions': [asdict(s) for s in self.gap_suggestions],
            'coverage': asdict(self.coverage) if self.coverage else None,
        }


class Check:
    """A self-registering audit pass. Checks run in ascending `order`.

    Usage in a check module:

        check = Check(name='chroma', help='Relative chroma vs palette median', order=10)

        @check.run
        def run(families, result, curve):
            ...
    """

    def __init__(self, name: str, help: str = '', order: int = 100):
        self.name = name
        self.help = help
        self.order = order
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, families: list[Family], result: AuditResult, curve: TargetCurve) -> None:
        """Execute the check's run function."""
        if self._run_fn is None:
            raise RuntimeError(f'Check {self.name} has no run function')
        self._run_fn(families, result, curve)
        result.checks_run.append(self.name)
