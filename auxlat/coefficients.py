"""
Fourier Coefficients of the Auxiliary-Latitude Series.

Every conversion between two auxiliary latitudes zeta -> eta is written as

    eta = zeta + sum_{k=1}^{L} c_k sin(2 k zeta)

This module computes the coefficients c_k numerically and caches them per
conversion pair.

Scientific Context
------------------
Integrating the sine series against sin(2 k zeta) and then by parts gives

    c_k = 2 / (pi k) * int_0^{pi/2} cos(2 k zeta(phi)) eta'(phi) dphi

where both zeta and eta are expressed through the geographic latitude phi,
and eta' = d eta / d phi. The integrand is smooth and periodic, so the
midpoint rule on N nodes converges geometrically (like n^(2N), n the third
flattening) and a few dozen nodes reach full double precision for
terrestrial ellipsoids.

Thread Safety
-------------
`CoefficientTable` is shared by all callers of an engine. A row is filled
at most once: readers test the NaN sentinel in its last slot without
locking, and a writer re-tests it under the table lock before filling.
The sentinel slot is written last, so a reader that sees it set sees the
whole row.

References
----------
- Karney, C.F.F. (2022). On auxiliary latitudes. arXiv:2212.05818.
- Trefethen, L.N. & Weideman, J.A.C. (2014). The exponentially convergent
  trapezoidal rule. SIAM Review, 56(3), 385-458.
"""

import threading
from collections import Counter
from typing import Callable, List, Optional, Sequence

import numpy as np

from common.constants import GeodeticConstants
from common.logging_config import get_logger
from common.precision import Arithmetic
from common.types import AuxAngle, AuxKind

logger = get_logger(__name__)

CoefficientFiller = Callable[[int, int], Sequence]


def fourier_coefficients(
    aux,
    auxin: int,
    auxout: int,
    series_order: int,
    quadrature_points: int
) -> List:
    """Coefficients of the series taking auxin to auxout.

    Parameters
    ----------
    aux : AuxLatitude
        Provides ``num``, ``to_auxiliary`` and ``derivative``.
    auxin, auxout : int
        Source and target `AuxKind`.
    series_order : int
        Number of coefficients L.
    quadrature_points : int
        Number of midpoint nodes N on (0, pi/2).

    Returns
    -------
    list
        c_1 .. c_L in the width of ``aux.num``; element 0 multiplies
        sin(2 zeta).
    """
    num = aux.num
    N = quadrature_points
    sums = [num.real(0)] * series_order
    h = num.pi / (2 * N)
    for j in range(N):
        phi = AuxAngle.from_radians((j + num.real("0.5")) * h, num)
        zeta = aux.to_auxiliary(auxin, phi).radians()
        deta = aux.derivative(auxout, phi)
        for k in range(series_order):
            sums[k] += num.cos(2 * (k + 1) * zeta) * deta
    return [sums[k] / ((k + 1) * N) for k in range(series_order)]


class CoefficientTable:
    """Lazily filled table of series coefficients, one row per pair.

    Parameters
    ----------
    num : Arithmetic
        Width of the stored coefficients.
    series_order : int
        Coefficients per row.
    filler : callable
        ``filler(auxin, auxout)`` returning ``series_order`` coefficients.
    slots : int
        Number of rows; pairs are addressed by ``6 * auxout + auxin``.
    """

    def __init__(
        self,
        num: Arithmetic,
        series_order: int,
        filler: CoefficientFiller,
        slots: int = GeodeticConstants.AUX_NUMBER ** 2
    ):
        if series_order < 1:
            raise ValueError(f"Series order must be positive, got {series_order}")
        self.num = num
        self.series_order = series_order
        self._filler = filler
        dtype = np.float64 if num.name == "double" else object
        self._rows = np.full((slots, series_order), num.nan, dtype=dtype)
        self._lock = threading.Lock()
        self.fill_counts: Counter = Counter()

    @property
    def slots(self) -> int:
        return self._rows.shape[0]

    def is_filled(self, k: int) -> bool:
        return not self.num.isnan(self._rows[k, -1])

    def row(self, k: int, auxin: int, auxout: int) -> np.ndarray:
        """Coefficients for slot k, filling the slot on first use."""
        if not self.is_filled(k):
            with self._lock:
                if not self.is_filled(k):
                    self._fill(k, auxin, auxout)
        return self._rows[k]

    def _fill(self, k: int, auxin: int, auxout: int) -> None:
        values = [self.num.real(v) for v in self._filler(auxin, auxout)]
        if len(values) != self.series_order:
            raise ValueError(
                f"Filler returned {len(values)} coefficients, "
                f"expected {self.series_order}"
            )
        self._rows[k, :-1] = values[:-1]
        self._rows[k, -1] = values[-1]
        self.fill_counts[k] += 1
        logger.debug(
            f"Filled coefficients {AuxKind(auxin).name} -> "
            f"{AuxKind(auxout).name} (slot {k}), "
            f"c1={float(values[0]):.6e}"
        )

    def fill_all(self, pairs: Optional[Sequence] = None) -> None:
        """Fill every (or the given) (auxin, auxout) pair now."""
        n = GeodeticConstants.AUX_NUMBER
        if pairs is None:
            pairs = [(i, o) for o in range(n) for i in range(n) if i != o]
        for auxin, auxout in pairs:
            self.row(n * auxout + auxin, auxin, auxout)

    @property
    def total_fills(self) -> int:
        return sum(self.fill_counts.values())
