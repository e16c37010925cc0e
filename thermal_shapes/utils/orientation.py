"""Robust 2D orientation predicate. No engine imports.

Adaptive-precision orient2d after Shewchuk, "Adaptive Precision Floating-Point
Arithmetic and Fast Robust Geometric Predicates" (1997). The cheap
determinant is trusted when it clears a forward error bound; otherwise the
determinant is rebuilt as a floating-point expansion (a sum of
non-overlapping doubles) and precision grows only until the sign is certain.

Expansions are plain lists of floats ordered by increasing magnitude.
"""

from __future__ import annotations

# 2^-53, half an ulp of 1.0
EPSILON = 1.1102230246251565e-16
# 2^27 + 1, splits a double into two 26-bit halves
SPLITTER = 134217729.0

RESULT_ERRBOUND = (3.0 + 8.0 * EPSILON) * EPSILON
CCW_ERRBOUND_A = (3.0 + 16.0 * EPSILON) * EPSILON
CCW_ERRBOUND_B = (2.0 + 12.0 * EPSILON) * EPSILON
CCW_ERRBOUND_C = (9.0 + 64.0 * EPSILON) * EPSILON * EPSILON


# ---------------------------------------------------------------------------
# Error-free transformations
# ---------------------------------------------------------------------------


def _fast_two_sum(a: float, b: float) -> tuple[float, float]:
    """a + b as (sum, roundoff). Requires |a| >= |b|."""
    x = a + b
    bvirt = x - a
    return x, b - bvirt


def _two_sum(a: float, b: float) -> tuple[float, float]:
    x = a + b
    bvirt = x - a
    avirt = x - bvirt
    return x, (a - avirt) + (b - bvirt)


def _two_diff_tail(a: float, b: float, x: float) -> float:
    """Roundoff of x = fl(a - b)."""
    bvirt = a - x
    avirt = x + bvirt
    return (a - avirt) + (bvirt - b)


def _two_diff(a: float, b: float) -> tuple[float, float]:
    x = a - b
    return x, _two_diff_tail(a, b, x)


def _split(a: float) -> tuple[float, float]:
    c = SPLITTER * a
    abig = c - a
    hi = c - abig
    return hi, a - hi


def _two_product(a: float, b: float) -> tuple[float, float]:
    x = a * b
    ahi, alo = _split(a)
    bhi, blo = _split(b)
    err1 = x - ahi * bhi
    err2 = err1 - alo * bhi
    err3 = err2 - ahi * blo
    return x, alo * blo - err3


def _two_one_diff(a1: float, a0: float, b: float) -> tuple[float, float, float]:
    i, x0 = _two_diff(a0, b)
    x2, x1 = _two_sum(a1, i)
    return x2, x1, x0


def _two_two_diff(a1: float, a0: float, b1: float, b0: float) -> list[float]:
    """(a1 + a0) - (b1 + b0) as a four-component expansion."""
    j, r0, x0 = _two_one_diff(a1, a0, b0)
    x3, x2, x1 = _two_one_diff(j, r0, b1)
    return [x0, x1, x2, x3]


def _fast_expansion_sum_zeroelim(e: list[float], f: list[float]) -> list[float]:
    """Sum of two expansions, dropping zero components."""
    elen, flen = len(e), len(f)
    eindex = findex = 0
    h: list[float] = []

    enow, fnow = e[0], f[0]
    if (fnow > enow) == (fnow > -enow):
        q = enow
        eindex += 1
    else:
        q = fnow
        findex += 1

    if eindex < elen and findex < flen:
        enow, fnow = e[eindex], f[findex]
        if (fnow > enow) == (fnow > -enow):
            q, hh = _fast_two_sum(enow, q)
            eindex += 1
        else:
            q, hh = _fast_two_sum(fnow, q)
            findex += 1
        if hh != 0.0:
            h.append(hh)
        while eindex < elen and findex < flen:
            enow, fnow = e[eindex], f[findex]
            if (fnow > enow) == (fnow > -enow):
                q, hh = _two_sum(q, enow)
                eindex += 1
            else:
                q, hh = _two_sum(q, fnow)
                findex += 1
            if hh != 0.0:
                h.append(hh)

    while eindex < elen:
        q, hh = _two_sum(q, e[eindex])
        eindex += 1
        if hh != 0.0:
            h.append(hh)
    while findex < flen:
        q, hh = _two_sum(q, f[findex])
        findex += 1
        if hh != 0.0:
            h.append(hh)

    if q != 0.0 or not h:
        h.append(q)
    return h


def _estimate(e: list[float]) -> float:
    return sum(e)


# ---------------------------------------------------------------------------
# Predicate
# ---------------------------------------------------------------------------


def _orient2d_adapt(
    ax: float, ay: float, bx: float, by: float, cx: float, cy: float, detsum: float
) -> float:
    acx = ax - cx
    bcx = bx - cx
    acy = ay - cy
    bcy = by - cy

    detleft, detlefttail = _two_product(acx, bcy)
    detright, detrighttail = _two_product(acy, bcx)
    b = _two_two_diff(detleft, detlefttail, detright, detrighttail)

    det = _estimate(b)
    errbound = CCW_ERRBOUND_B * detsum
    if det >= errbound or -det >= errbound:
        return det

    acxtail = _two_diff_tail(ax, cx, acx)
    bcxtail = _two_diff_tail(bx, cx, bcx)
    acytail = _two_diff_tail(ay, cy, acy)
    bcytail = _two_diff_tail(by, cy, bcy)

    # Differences were exact, so the expansion above is the exact determinant
    if acxtail == 0.0 and acytail == 0.0 and bcxtail == 0.0 and bcytail == 0.0:
        return det

    errbound = CCW_ERRBOUND_C * detsum + RESULT_ERRBOUND * abs(det)
    det += (acx * bcytail + bcy * acxtail) - (acy * bcxtail + bcx * acytail)
    if det >= errbound or -det >= errbound:
        return det

    s1, s0 = _two_product(acxtail, bcy)
    t1, t0 = _two_product(acytail, bcx)
    c1 = _fast_expansion_sum_zeroelim(b, _two_two_diff(s1, s0, t1, t0))

    s1, s0 = _two_product(acx, bcytail)
    t1, t0 = _two_product(acy, bcxtail)
    c2 = _fast_expansion_sum_zeroelim(c1, _two_two_diff(s1, s0, t1, t0))

    s1, s0 = _two_product(acxtail, bcytail)
    t1, t0 = _two_product(acytail, bcxtail)
    d = _fast_expansion_sum_zeroelim(c2, _two_two_diff(s1, s0, t1, t0))

    # Largest component carries the sign of the whole expansion
    return d[-1]


def orient2d(ax: float, ay: float, bx: float, by: float, cx: float, cy: float) -> float:
    """Orientation of C relative to the directed line A→B.

    Positive when C is to the left (counter-clockwise turn A, B, C), negative
    when to the right, zero when the three points are collinear. Only the sign
    is meaningful; it always matches the exact sign of (B − A) × (C − A).
    """
    ax, ay, bx, by, cx, cy = (float(v) for v in (ax, ay, bx, by, cx, cy))

    detleft = (ax - cx) * (by - cy)
    detright = (ay - cy) * (bx - cx)
    det = detleft - detright

    if detleft > 0.0:
        if detright <= 0.0:
            return det
        detsum = detleft + detright
    elif detleft < 0.0:
        if detright >= 0.0:
            return det
        detsum = -detleft - detright
    else:
        return det

    errbound = CCW_ERRBOUND_A * detsum
    if det >= errbound or -det >= errbound:
        return det

    return _orient2d_adapt(ax, ay, bx, by, cx, cy, detsum)
