"""Six-shade scale generation (50–500) from one anchor colour.

Per shade:
  1. Target lightness and relative chroma come from the target curve.
  2. The anchor (300) keeps the input chroma, clamped to gamut at the curve L.
     Other shades take relC × effective max chroma at their lightness.
  3. Helmholtz–Kohlrausch: L_eff = L − k·C for non-anchor shades, then
     chroma is re-clamped at L_eff.
  4. CAM16 keeps the perceived hue of the anchor; chroma is clamped once
     more at the corrected hue.
  5. WCAG and APCA diagnostics against both text tokens at three opacities.

Achromatic inputs (C < 0.01) produce a pure grey ramp.
"""

import logging

from palette_checker.core.cam16 import MAX_HUE_DRIFT, corrected_hue
from palette_checker.core.colour import (
    clamp_chroma_to_gamut,
    effective_max_chroma,
    hex_to_rgb,
    max_chroma_at_lh,
    normalize_hex,
    oklch_to_rgb,
    rgb_to_hex,
    rgb_to_oklch,
    signed_hue_delta,
)
from palette_checker.core.config import (
    ACHROMATIC_THRESHOLD,
    ANCHOR_SHADE,
    SHADE_ACTIVE_TEXT,
    SHADE_LEVELS,
    SHADE_ROLES,
    SHADE_TEXT_SEMANTIC,
    ScaleConfig,
    TargetCurve,
    build_target_curve,
    default_target_curve,
)
from palette_checker.core.contrast import (
    alpha_composite,
    apca_contrast,
    apca_level,
    best_text_color,
    contrast_ratio,
    relative_luminance,
    wcag_level,
)
from palette_checker.core.types import (
    Oklch,
    Rgb,
    ScaleResult,
    ShadeInfo,
    TextLevel,
    TextLevelContrast,
    TextLevelGroup,
)

logger = logging.getLogger(__name__)

WHITE = Rgb(1.0, 1.0, 1.0)
BLACK = Rgb(0.0, 0.0, 0.0)

L_ADJUST_TOLERANCE = 0.01
CHANGE_TOLERANCE = 0.001


def text_level_contrast(level: TextLevel, bg: Rgb) -> TextLevelContrast:
    """Contrast of one text level on `bg`, compositing alpha text over the fill first."""
    eff = alpha_composite(level.rgb, level.alpha, bg)
    ratio = contrast_ratio(relative_luminance(*bg), relative_luminance(*eff))
    lc = apca_contrast(eff, bg)
    return TextLevelContrast(
        label=level.label,
        effective_hex=rgb_to_hex(*eff),
        wcag_ratio=ratio,
        wcag_level=wcag_level(ratio),
        apca_lc=lc,
        apca_level=apca_level(lc),
    )


def _text_groups(shade: int, bg: Rgb, config: ScaleConfig) -> tuple[TextLevelGroup, ...]:
    active = SHADE_ACTIVE_TEXT[shade]
    semantic = SHADE_TEXT_SEMANTIC[shade]
    return (
        TextLevelGroup(
            token='Grey 750',
            levels=tuple(text_level_contrast(lvl, bg) for lvl in config.light_text),
            is_active=active == 'grey750',
            semantic=semantic,
        ),
        TextLevelGroup(
            token='Grey 50',
            levels=tuple(text_level_contrast(lvl, bg) for lvl in config.dark_text),
            is_active=active == 'grey50',
            semantic=semantic,
        ),
    )


def _target_chroma(shade: int, H: float, C_in: float, curve: TargetCurve) -> float:
    config = curve.config
    if shade == ANCHOR_SHADE:
        return C_in
    point = curve[shade]
    target = point.rel_c * effective_max_chroma(
        point.L,
        H,
        config.reference_hue,
        config.cusp_damping_base,
        config.cusp_damping_coeff,
        config.damping_ceiling_l,
        config.damping_ceiling_value,
    )
    cap = config.chroma_caps.get(shade)
    if cap is not None and target > cap:
        target = cap
    return target


def generate_scale(
    hex_value: str,
    name: str = 'Custom',
    curve: TargetCurve | None = None,
    config: ScaleConfig | None = None,
) -> ScaleResult:
    """Derive the 50–500 scale for one anchor hex.

    Pass a prebuilt `curve` to avoid re-solving the APCA floors. A `config`
    without a curve builds one; with neither, the default curve is used.
    """
    if curve is None:
        curve = build_target_curve(config) if config is not None else default_target_curve()
    config = curve.config

    L_in, C_in, H = rgb_to_oklch(*hex_to_rgb(hex_value))
    is_achromatic = C_in < ACHROMATIC_THRESHOLD
    if is_achromatic:
        logger.debug('%s: achromatic input %s (C=%.4f), forcing grey ramp', name, hex_value, C_in)

    anchor_l = curve.anchor_l
    anchor_c = 0.0 if is_achromatic else clamp_chroma_to_gamut(anchor_l, C_in, H)

    shades = []
    for shade in SHADE_LEVELS:
        point = curve[shade]
        is_anchor = shade == ANCHOR_SHADE

        target_c = 0.0 if is_achromatic else _target_chroma(shade, H, C_in, curve)
        final_c = clamp_chroma_to_gamut(point.L, target_c, H)
        was_gamut_reduced = target_c - final_c > CHANGE_TOLERANCE

        if is_achromatic or is_anchor:
            L = point.L
        else:
            L = point.L - config.hk_k(H) * final_c
            final_c = clamp_chroma_to_gamut(L, final_c, H)

        hue = H
        if not is_achromatic and not is_anchor:
            hue = corrected_hue(H, anchor_l, anchor_c, L, final_c)
            if abs(signed_hue_delta(H, hue)) >= MAX_HUE_DRIFT - 1e-9:
                logger.debug('%s: shade %d hue drift capped at %.0f degrees', name, shade, MAX_HUE_DRIFT)
            if hue != H:
                final_c = clamp_chroma_to_gamut(L, final_c, hue)

        rgb = oklch_to_rgb(L, final_c, hue)
        lum = relative_luminance(*rgb)
        max_c = max_chroma_at_lh(L, hue)
        light_role, dark_role = SHADE_ROLES[shade]

        if is_anchor:
            was_l_adjusted = abs(L_in - point.L) > L_ADJUST_TOLERANCE
        else:
            was_l_adjusted = abs(point.L - L) > CHANGE_TOLERANCE

        shades.append(
            ShadeInfo(
                shade=shade,
                hex=rgb_to_hex(*rgb),
                oklch=Oklch(L, final_c, hue),
                rgb=rgb,
                contrast_on_white=contrast_ratio(lum, 1.0),
                contrast_on_black=contrast_ratio(lum, 0.0),
                apca_on_white=apca_contrast(rgb, WHITE),
                apca_on_black=apca_contrast(rgb, BLACK),
                text_groups=_text_groups(shade, rgb, config),
                mode_context='light' if light_role else 'dark',
                mode_label=f'Light {light_role}' if light_role else f'Dark {dark_role}',
                card_text_color=best_text_color(rgb),
                is_anchor=is_anchor,
                was_l_adjusted=was_l_adjusted,
                original_l=L_in,
                was_gamut_reduced=was_gamut_reduced,
                original_c=target_c,
                final_c=final_c,
                gamut_headroom=min(1.0, final_c / max_c) if max_c > 0 else 1.0,
            )
        )

    return ScaleResult(
        name=name,
        input_hex=normalize_hex(hex_value),
        hue=H,
        is_achromatic=is_achromatic,
        shades=tuple(shades),
    )
