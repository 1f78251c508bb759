"""Reference design-system palettes: one anchor shade per named family.

Tailwind v4 uses the 700 shade, published in Oklch. Radix uses step 11 and
Spectrum 2 uses the 900 shade. Both of those are kept as hex and converted
to Oklch on first lookup. These shades sit closest to the scale engine's
300 anchor lightness.

Table order matters: matchers break hue-delta ties by first entry.

REFERENCE_NEUTRALS lists the named grey scales used by neutral analysis.
"""

import functools

from palette_checker.core.colour import hex_to_rgb, rgb_to_oklch
from palette_checker.core.types import DesignSystem, ReferenceColour, ReferenceNeutral

SYSTEMS: tuple[DesignSystem, ...] = ('Tailwind', 'Spectrum', 'Radix')

# name: (L %, C, H)
_TAILWIND_700 = (
    ('red', 50.5, 0.213, 27.518),
    ('orange', 55.3, 0.195, 38.402),
    ('amber', 55.5, 0.163, 48.998),
    ('yellow', 55.4, 0.135, 66.442),
    ('lime', 53.2, 0.157, 131.589),
    ('green', 52.7, 0.154, 150.069),
    ('emerald', 50.8, 0.118, 165.612),
    ('teal', 51.1, 0.096, 186.391),
    ('cyan', 52.0, 0.105, 223.128),
    ('sky', 50.0, 0.134, 242.749),
    ('blue', 48.8, 0.243, 264.376),
    ('indigo', 45.7, 0.240, 277.023),
    ('violet', 49.1, 0.270, 292.581),
    ('purple', 49.6, 0.265, 301.924),
    ('fuchsia', 51.8, 0.253, 323.949),
    ('pink', 52.5, 0.223, 3.958),
    ('rose', 51.4, 0.222, 16.935),
)

_RADIX_STEP_11 = (
    ('tomato', '#D13415'),
    ('red', '#CE2C31'),
    ('ruby', '#CA244D'),
    ('crimson', '#CB1D63'),
    ('pink', '#C2298A'),
    ('plum', '#953EA3'),
    ('purple', '#8145B5'),
    ('violet', '#6550B9'),
    ('iris', '#5753C6'),
    ('indigo', '#3A5BC7'),
    ('blue', '#0D74CE'),
    ('cyan', '#107D98'),
    ('teal', '#008573'),
    ('jade', '#208368'),
    ('green', '#218358'),
    ('grass', '#2A7E3B'),
    ('brown', '#A35829'),
    ('orange', '#CC4E00'),
    ('sky', '#00749E'),
    ('mint', '#027864'),
    ('lime', '#5C7C2F'),
    ('yellow', '#9E6C00'),
    ('amber', '#AB6400'),
    ('gold', '#71624B'),
    ('bronze', '#A1604F'),
)

_SPECTRUM_900 = (
    ('red', '#D73220'),
    ('orange', '#CB5D00'),
    ('yellow', '#A87800'),
    ('chartreuse', '#7A8A00'),
    ('celery', '#3B8B14'),
    ('green', '#12805C'),
    ('seafoam', '#0F797D'),
    ('cyan', '#0870A8'),
    ('blue', '#3B63FB'),
    ('indigo', '#5F55EE'),
    ('purple', '#9246DF'),
    ('fuchsia', '#B53CC8'),
    ('magenta', '#D92361'),
    ('pink', '#D51F96'),
    ('turquoise', '#037A8C'),
    ('cinnamon', '#9C5A3C'),
    ('brown', '#8B5E3C'),
)


def _from_hex(rows: tuple[tuple[str, str], ...]) -> tuple[ReferenceColour, ...]:
    out = []
    for name, hex_value in rows:
        L, C, H = rgb_to_oklch(*hex_to_rgb(hex_value))
        out.append(ReferenceColour(name=name, hue=H, chroma=C, lightness=L))
    return tuple(out)


@functools.lru_cache(maxsize=None)
def reference_colours(system: str) -> tuple[ReferenceColour, ...]:
    """Read-only reference table for 'Tailwind', 'Spectrum' or 'Radix'."""
    if system == 'Tailwind':
        return tuple(ReferenceColour(name=n, hue=h, chroma=c, lightness=lp / 100) for n, lp, c, h in _TAILWIND_700)
    if system == 'Radix':
        return _from_hex(_RADIX_STEP_11)
    if system == 'Spectrum':
        return _from_hex(_SPECTRUM_900)
    raise KeyError(f'Unknown design system: {system}. Available: {", ".join(SYSTEMS)}')


def all_reference_colours() -> list[tuple[DesignSystem, ReferenceColour]]:
    """(system, colour) pairs across every system, in SYSTEMS then table order."""
    return [(system, ref) for system in SYSTEMS for ref in reference_colours(system)]


# Named grey scales. Hues are the mid-tone Oklch hue of each scale; achromatic
# entries carry 0. Spectrum ships a single grey.
REFERENCE_NEUTRALS: tuple[ReferenceNeutral, ...] = (
    ReferenceNeutral('Tailwind', 'Neutral', 'Pure grey, no hue', 0.0, True),
    ReferenceNeutral('Tailwind', 'Stone', 'Warm, yellow-brown tint', 58.0, False),
    ReferenceNeutral('Tailwind', 'Slate', 'Cool blue tint', 257.0, False),
    ReferenceNeutral('Tailwind', 'Gray', 'Subtle blue tint, cooler than Slate', 264.0, False),
    ReferenceNeutral('Tailwind', 'Zinc', 'Violet / purple tint', 286.0, False),
    ReferenceNeutral('Radix', 'Gray', 'Pure grey, no hue', 0.0, True),
    ReferenceNeutral('Radix', 'Sand', 'Warm yellow tint', 80.0, False),
    ReferenceNeutral('Radix', 'Olive', 'Yellow-green tint', 130.0, False),
    ReferenceNeutral('Radix', 'Sage', 'Green tint', 155.0, False),
    ReferenceNeutral('Radix', 'Slate', 'Blue tint', 255.0, False),
    ReferenceNeutral('Radix', 'Mauve', 'Purple tint', 293.0, False),
    ReferenceNeutral('Spectrum', 'Gray', 'Neutral grey (single scale)', 0.0, True),
)
