"""
Clenshaw Summation of Trigonometric Series.

Every series-based conversion between auxiliary latitudes has the form

    eta = zeta + sum_{k=0}^{K-1} c[k] sin((2k + 2) zeta)

This module sums such series, and forms their two-point divided
differences, with Clenshaw's recurrence.

Scientific Context
------------------
For a divided difference the recurrence is run on 2x2 matrices built from
the sum and difference angles zeta2 +- zeta1, so that the result is
obtained directly rather than as the difference of two nearly equal sums.

References
----------
- Clenshaw, C.W. (1955). A note on the summation of Chebyshev series.
  Math. Tables Aids Comput., 9(51), 118-120.
- Karney, C.F.F. (2022). On auxiliary latitudes, Section 6.
"""

from typing import Sequence

from common.precision import Arithmetic, DOUBLE


def clenshaw(
    sinp: bool,
    szeta,
    czeta,
    c: Sequence,
    K: int,
    num: Arithmetic = DOUBLE
):
    """Evaluate sum(c[k] * trig((2k + 2) zeta), k < K).

    Parameters
    ----------
    sinp : bool
        Sum sines if True, cosines otherwise.
    szeta, czeta :
        Sine and cosine of zeta (unit normalized).
    c : sequence
        Coefficients, at least K of them.
    K : int
        Number of terms.
    num : Arithmetic
        Floating-point width.
    """
    # 2 cos(2 zeta)
    x = 2 * (czeta - szeta) * (czeta + szeta)
    u0 = num.real(0)
    u1 = num.real(0)
    for k in range(K - 1, -1, -1):
        t = x * u0 - u1 + c[k]
        u1 = u0
        u0 = t
    f0 = 2 * szeta * czeta if sinp else (czeta - szeta) * (czeta + szeta)
    fm1 = 0 if sinp else 1
    return u0 * f0 - u1 * fm1


def d_clenshaw(
    sinp: bool,
    delta,
    szeta1,
    czeta1,
    szeta2,
    czeta2,
    c: Sequence,
    K: int,
    num: Arithmetic = DOUBLE
):
    """Two-point divided difference of a trigonometric series.

    Evaluates

        (S(zeta2) - S(zeta1)) / delta,  S(z) = sum(c[k] trig((2k + 2) z), k < K)

    Parameters
    ----------
    sinp : bool
        Sine series if True, cosine series otherwise.
    delta :
        EITHER exactly 1, giving the plain difference S(zeta2) - S(zeta1),
        OR zeta2 - zeta1 in radians, giving the divided difference (and
        the derivative when zeta2 == zeta1). Any other value gives
        nonsense; this is not checked.
    szeta1, czeta1, szeta2, czeta2 :
        Sines and cosines (unit normalized) of the two angles.
    c : sequence
        Coefficients, at least K of them.
    K : int
        Number of terms.
    num : Arithmetic
        Floating-point width.

    Returns
    -------
    Real
        The (divided) difference.
    """
    # Suffixes a and b denote the [1,1] and [2,1] elements of the 2x2
    # matrices and 2-vectors of the recurrence.
    D2 = delta * delta
    czetp = czeta2 * czeta1 - szeta2 * szeta1
    szetp = szeta2 * czeta1 + czeta2 * szeta1
    czetm = czeta2 * czeta1 + szeta2 * szeta1
    # sin(zetm) / delta
    if delta == 1:
        szetmd = szeta2 * czeta1 - czeta2 * szeta1
    elif delta != 0:
        szetmd = num.sin(delta) / delta
    else:
        szetmd = num.real(1)
    Xa = 2 * czetp * czetm
    Xb = -2 * szetp * szetmd
    u0a = u0b = u1a = u1b = num.real(0)
    for k in range(K - 1, -1, -1):
        # T = X . U0 - U1 + c[k] * I
        ta = Xa * u0a + D2 * Xb * u0b - u1a + c[k]
        tb = Xb * u0a + Xa * u0b - u1b
        u1a, u0a = u0a, ta
        u1b, u0b = u0b, tb
    # P = U0 . F[0] - U1 . F[-1]; only the second row (the divided
    # difference) is needed.
    # sine series:   F[0] = 2 [szetp czetm, czetp szetmd], F[-1] = [0, 0]
    # cosine series: F[0] = 2 [czetp czetm, -szetp szetmd], F[-1] = [2, 0]
    F0a = (szetp if sinp else czetp) * czetm
    F0b = (czetp if sinp else -szetp) * szetmd
    Fm1a = 0 if sinp else 1
    return 2 * (F0a * u0b + F0b * u0a - Fm1a * u1b)
