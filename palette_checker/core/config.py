"""Scale-engine configuration and the APCA-derived target curve.

Only the headroom values and the relative-chroma ranks are hand-tuned. Shade
lightness comes from solving the APCA floor for the designated text colour,
then adding headroom (light fills) or subtracting it (dark fills):

    light fill  L = floor(Lc target, Grey 750) + headroom
    dark fill   L = floor(Lc target, Grey 50)  - headroom

Changing the text colours, the Lc target or the headroom recalculates the
whole curve. Build it once with build_target_curve() and pass it to the
engine; default_target_curve() memoises the curve for the default config.

Environment overrides use the PALETTE_ prefix followed by the field name in
upper case, e.g. PALETTE_APCA_TARGET_LC=80 or PALETTE_HK_COEFF=0.035.
"""

from __future__ import annotations

import functools
import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace

from palette_checker.core.contrast import solve_l_for_apca
from palette_checker.core.types import Rgb, TextLevel

logger = logging.getLogger(__name__)

ENV_PREFIX = 'PALETTE_'

SHADE_LEVELS = (50, 100, 200, 300, 400, 500)
ANCHOR_SHADE = 300
LIGHT_FILLS = (50, 100, 200)
DARK_FILLS = (300, 400, 500)

# Inputs below this Oklch chroma are greys: the scale is forced to C=0
# instead of tinting at the phantom hue Oklch assigns to neutrals.
ACHROMATIC_THRESHOLD = 0.01

# Ceiling on families per palette; gap suggestions stop once it is reached.
MAX_PALETTE_SIZE = 24

# Preview chroma for reference colours rendered at the anchor lightness.
ANCHOR_REF_CHROMA = 0.1729

APCA_TARGET_LC = 75.0
APCA_TARGET_LC_200 = 60.0

SHADE_HEADROOM: dict[int, float] = {
    50: 0.065,
    100: 0.035,
    200: 0.021,  # tight to the floor for maximum colour identity
    300: 0.033,
    400: 0.216,
    500: 0.291,
}

# Equal-step relative chroma: relC = BASE_RELC + rank * RELC_STEP.
# Rank 0 is tertiary, 1 secondary, 2 primary.
BASE_RELC = 0.60
RELC_STEP = 0.20
SHADE_RELC_RANK: dict[int, int | None] = {
    50: 0,
    100: 1,
    200: 2,
    300: None,  # anchor keeps the input chroma
    400: 1,
    500: 0,
}

HK_COEFF = 0.04
HK_PEAK_HUE = 265.0

REFERENCE_HUE = 264.0  # blue: the narrowest gamut among the saturated hues
CUSP_DAMPING_BASE = 0.4
CUSP_DAMPING_COEFF = 1.5
DAMPING_CEILING_L = 0.85
DAMPING_CEILING_VALUE = 0.5

SHADE_ROLES: dict[int, tuple[str, str]] = {
    # shade: (light-mode role, dark-mode role)
    50: ('Tertiary', ''),
    100: ('Secondary', ''),
    200: ('', 'Primary'),
    300: ('Primary', ''),
    400: ('', 'Secondary'),
    500: ('', 'Tertiary'),
}

# Primary fills take the inverse token; the rest take standard text.
SHADE_ACTIVE_TEXT: dict[int, str] = {
    50: 'grey750',
    100: 'grey750',
    200: 'grey750',
    300: 'grey50',
    400: 'grey50',
    500: 'grey50',
}

SHADE_TEXT_SEMANTIC: dict[int, str] = {
    50: 'Standard',
    100: 'Standard',
    200: 'Inverse',
    300: 'Inverse',
    400: 'Standard',
    500: 'Standard',
}

GREY_750 = Rgb(0.1137, 0.1137, 0.1137)  # #1D1D1D
GREY_50 = Rgb(0.9922, 0.9922, 0.9922)  # #FDFDFD

TEXT_LEVELS_GREY750 = (
    TextLevel('Primary', GREY_750, 1.00),
    TextLevel('Secondary', GREY_750, 0.69),
    TextLevel('Tertiary', GREY_750, 0.62),
)
TEXT_LEVELS_GREY50 = (
    TextLevel('Primary', GREY_50, 1.00),
    TextLevel('Secondary', GREY_50, 0.72),
    TextLevel('Tertiary', GREY_50, 0.64),
)


@dataclass(frozen=True)
class ScaleConfig:
    """Every tunable number of the scale engine."""

    apca_target_lc: float = APCA_TARGET_LC
    apca_target_lc_200: float = APCA_TARGET_LC_200
    base_relc: float = BASE_RELC
    relc_step: float = RELC_STEP
    hk_coeff: float = HK_COEFF
    hk_amplitude: float = 0.0  # k(H) = hk_coeff + hk_amplitude * cos(H - hk_peak_hue)
    hk_peak_hue: float = HK_PEAK_HUE
    reference_hue: float = REFERENCE_HUE
    cusp_damping_base: float = CUSP_DAMPING_BASE
    cusp_damping_coeff: float = CUSP_DAMPING_COEFF
    damping_ceiling_l: float = DAMPING_CEILING_L
    damping_ceiling_value: float = DAMPING_CEILING_VALUE
    headroom: Mapping[int, float] = field(default_factory=lambda: dict(SHADE_HEADROOM))
    relc_rank: Mapping[int, int | None] = field(default_factory=lambda: dict(SHADE_RELC_RANK))
    chroma_caps: Mapping[int, float] = field(default_factory=dict)
    light_text: tuple[TextLevel, ...] = TEXT_LEVELS_GREY750
    dark_text: tuple[TextLevel, ...] = TEXT_LEVELS_GREY50

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ScaleConfig:
        """Default config with scalar fields overridden from PALETTE_* variables.

        Only float fields can be overridden. A value that does not parse as a
        float raises ValueError naming the variable.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, float] = {}
        for f in fields(cls):
            if f.type not in ('float', float):
                continue
            key = ENV_PREFIX + f.name.upper()
            raw = env.get(key)
            if raw is None or raw.strip() == '':
                continue
            try:
                overrides[f.name] = float(raw)
            except ValueError:
                raise ValueError(f'{key} must be a number, got {raw!r}') from None
        if overrides:
            logger.debug('config overrides from environment: %s', overrides)
        return replace(cls(), **overrides)

    def relative_chroma(self, shade: int) -> float:
        """Target chroma as a fraction of effective max chroma. 0 for the anchor."""
        rank = self.relc_rank.get(shade)
        if rank is None:
            return 0.0
        return self.base_relc + rank * self.relc_step

    def hk_k(self, hue: float) -> float:
        """Helmholtz–Kohlrausch coefficient at this hue."""
        if not self.hk_amplitude:
            return self.hk_coeff
        return self.hk_coeff + self.hk_amplitude * math.cos(math.radians(hue - self.hk_peak_hue))

    def target_lc(self, shade: int) -> float:
        return self.apca_target_lc_200 if shade == 200 else self.apca_target_lc


@dataclass(frozen=True)
class CurvePoint:
    L: float
    rel_c: float
    target_lc: float


@dataclass(frozen=True)
class TargetCurve:
    """Shade → target lightness and relative chroma, plus the floors it came from."""

    points: Mapping[int, CurvePoint]
    light_floor: float
    light_floor_200: float
    dark_floor: float
    config: ScaleConfig

    def __getitem__(self, shade: int) -> CurvePoint:
        return self.points[shade]

    def __iter__(self):
        return iter(SHADE_LEVELS)

    @property
    def anchor_l(self) -> float:
        return self.points[ANCHOR_SHADE].L


def build_target_curve(config: ScaleConfig | None = None) -> TargetCurve:
    """Solve the APCA floors for the config's text colours and derive every shade."""
    config = config or ScaleConfig()
    dark_text = config.light_text[0].rgb  # dark text sits on light fills
    light_text = config.dark_text[0].rgb

    light_floor = solve_l_for_apca(dark_text, config.apca_target_lc, 'light-fill')
    light_floor_200 = solve_l_for_apca(dark_text, config.apca_target_lc_200, 'light-fill')
    dark_floor = solve_l_for_apca(light_text, config.apca_target_lc, 'dark-fill')

    points: dict[int, CurvePoint] = {}
    for shade in SHADE_LEVELS:
        headroom = config.headroom[shade]
        if shade in LIGHT_FILLS:
            floor = light_floor_200 if shade == 200 else light_floor
            L = floor + headroom
        else:
            L = dark_floor - headroom
        points[shade] = CurvePoint(L=L, rel_c=config.relative_chroma(shade), target_lc=config.target_lc(shade))

    logger.debug(
        'target curve: floors light=%.4f light200=%.4f dark=%.4f, L=%s',
        light_floor,
        light_floor_200,
        dark_floor,
        {s: round(p.L, 4) for s, p in points.items()},
    )
    return TargetCurve(
        points=points,
        light_floor=light_floor,
        light_floor_200=light_floor_200,
        dark_floor=dark_floor,
        config=config,
    )


@functools.lru_cache(maxsize=1)
def default_target_curve() -> TargetCurve:
    return build_target_curve(ScaleConfig())
