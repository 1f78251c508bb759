"""APCA font-size lookup (public beta 0.1.7 G table).

Maps |Lc| to the minimum font size in px for each CSS weight 100–900.
Cells of 999 mean "do not use"; 777 means non-text only (icons, dividers).
Rows are 5-Lc steps; a value between rows uses the row below it.
"""

import math

WEIGHTS = (100, 200, 300, 400, 500, 600, 700, 800, 900)

LC_VALUES = (0, 10, 15, 20, 25, 30, 35, 40, 45, 50, 55, 60, 65, 70, 75, 80, 85, 90, 95, 100, 105, 110, 115, 120, 125)

FONT_MATRIX: tuple[tuple[float, ...], ...] = (
    # 100   200    300   400     500     600     700   800   900
    (999, 999, 999, 999, 999, 999, 999, 999, 999),  # 0
    (999, 999, 999, 999, 999, 999, 999, 999, 999),  # 10
    (777, 777, 777, 777, 777, 777, 777, 777, 777),  # 15
    (777, 777, 777, 777, 777, 777, 777, 777, 777),  # 20
    (777, 777, 777, 120, 120, 108, 96, 96, 96),  # 25
    (777, 777, 120, 108, 108, 96, 72, 72, 72),  # 30
    (777, 120, 108, 96, 72, 60, 48, 48, 48),  # 35
    (120, 108, 96, 60, 48, 42, 32, 32, 32),  # 40
    (108, 96, 72, 42, 32, 28, 24, 24, 24),  # 45
    (96, 72, 60, 32, 28, 24, 21, 21, 21),  # 50
    (80, 60, 48, 28, 24, 21, 18, 18, 18),  # 55
    (72, 48, 42, 24, 21, 18, 16, 16, 18),  # 60
    (68, 46, 32, 21.75, 19, 17, 15, 16, 18),  # 65
    (64, 44, 28, 19.5, 18, 16, 14.5, 16, 18),  # 70
    (60, 42, 24, 18, 16, 15, 14, 16, 18),  # 75
    (56, 38.25, 23, 17.25, 15.81, 14.81, 14, 16, 18),  # 80
    (52, 34.5, 22, 16.5, 15.625, 14.625, 14, 16, 18),  # 85
    (48, 32, 21, 16, 15.5, 14.5, 14, 16, 18),  # 90
    (45, 28, 19.5, 15.5, 15, 14, 13.5, 16, 18),  # 95
    (42, 26.5, 18.5, 15, 14.5, 13.5, 13, 16, 18),  # 100
    (39, 25, 18, 14.5, 14, 13, 12, 16, 18),  # 105
    (36, 24, 18, 14, 13, 12, 11, 16, 18),  # 110
    (34.5, 22.5, 17.25, 12.5, 11.875, 11.25, 10.625, 14.5, 16.5),  # 115
    (33, 21, 16.5, 11, 10.75, 10.5, 10.25, 13, 15),  # 120
    (32, 20, 16, 10, 10, 10, 10, 12, 14),  # 125
)

UNUSABLE = 400  # anything at or above this is a sentinel, not a size


def font_lookup_apca(lc: float) -> dict:
    """Per-weight minimum sizes for |lc|, plus the weight with the smallest usable size."""
    lc = abs(lc)
    if lc < 15:
        return {'lc': lc, 'level': 'prohibited', 'recommendations': [], 'best_weight': None, 'best_min_size': None}

    row_idx = 0
    for i, threshold in enumerate(LC_VALUES):
        if lc >= threshold:
            row_idx = i
    row = FONT_MATRIX[row_idx]

    recommendations = []
    best_weight: int | None = None
    best_size: float | None = None
    for weight, size in zip(WEIGHTS, row):
        usable = size < UNUSABLE
        recommendations.append({'weight': weight, 'min_size': math.ceil(size), 'usable': usable})
        if usable and (best_size is None or size < best_size):
            best_size = size
            best_weight = weight

    if lc < 25:
        level = 'non-text'
    elif lc < 45:
        level = 'spot-text'
    else:
        level = 'body-text'

    return {
        'lc': lc,
        'level': level,
        'recommendations': recommendations,
        'best_weight': best_weight,
        'best_min_size': math.ceil(best_size) if best_size is not None else None,
    }


def font_summary(lc: float) -> dict[str, int | None]:
    """Minimum size at regular (400) and bold (700), None where unusable."""
    recs = {r['weight']: r for r in font_lookup_apca(lc)['recommendations']}
    out: dict[str, int | None] = {}
    for key, weight in (('regular', 400), ('bold', 700)):
        rec = recs.get(weight)
        out[key] = rec['min_size'] if rec and rec['usable'] else None
    return out
