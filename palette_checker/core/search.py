"""Bounded bisection shared by every numeric search in the engine.

Chroma clamping, max-chroma lookup, the APCA lightness solver and CAM16 hue
retargeting all reduce to "find the boundary of a monotone predicate inside
[lo, hi]". Each call site states its predicate; the loop lives here once.

The iteration cap is always enforced, so a search can lose precision but
never fail to terminate.
"""

from collections.abc import Callable

DEFAULT_ITERATIONS = 64


def bisect(
    predicate: Callable[[float], bool],
    lo: float,
    hi: float,
    iterations: int = DEFAULT_ITERATIONS,
    tolerance: float | None = None,
) -> tuple[float, float]:
    """Narrow [lo, hi] around the point where `predicate` flips.

    `predicate(mid)` returning True moves `lo` up to `mid`, False moves `hi`
    down. The predicate is expected to hold near `lo` and fail near `hi`.
    Stops after `iterations` steps, or earlier once `hi - lo <= tolerance`.
    Returns the final bracket (lo, hi).
    """
    for _ in range(iterations):
        if tolerance is not None and hi - lo <= tolerance:
            break
        mid = (lo + hi) / 2
        if predicate(mid):
            lo = mid
        else:
            hi = mid
    return lo, hi
