"""
Floating-Point Width Abstraction.

The divided-difference algorithms are written once against the small set of
operations defined by `Arithmetic` and instantiated for two widths:

- ``"double"``: IEEE binary64 through numpy scalars, with the Carlson
  symmetric elliptic integrals from `scipy.special`.
- ``"extended"``: an `mpmath` context with a configurable number of decimal
  digits (34 by default, matching IEEE binary128).

Both instantiations must produce self-consistent results; the extended
width is the reference used to validate the double-precision path.

Notes
-----
numpy scalars follow IEEE semantics (1/0 -> inf, 0*inf -> nan). mpmath
raises on an exact division by zero, so the algorithms guard every
division whose denominator can vanish instead of relying on IEEE results.
"""

from abc import ABC, abstractmethod
from contextlib import nullcontext
from functools import lru_cache
from typing import Any, Tuple

import mpmath
import numpy as np
from scipy.special import elliprd, elliprf

from common.constants import GeodeticConstants

Real = Any  # np.float64 or mpmath.mpf, depending on the arithmetic


class Arithmetic(ABC):
    """Operations required by the auxiliary-latitude kernels.

    Implementations convert inputs with `real` and then rely on the
    native +, -, *, / and comparison operators of their scalar type.
    """

    name: str = ""

    @abstractmethod
    def real(self, value: Any) -> Real:
        """Convert a number (or numeric string) to this width."""

    @property
    @abstractmethod
    def nan(self) -> Real:
        pass

    @property
    @abstractmethod
    def inf(self) -> Real:
        pass

    @property
    @abstractmethod
    def pi(self) -> Real:
        pass

    @property
    @abstractmethod
    def epsilon(self) -> Real:
        """Difference between 1 and the next representable number."""

    @property
    @abstractmethod
    def huge(self) -> Real:
        """Magnitude above which hypot may overflow."""

    @abstractmethod
    def sqrt(self, x):
        pass

    @abstractmethod
    def sin(self, x):
        pass

    @abstractmethod
    def cos(self, x):
        pass

    @abstractmethod
    def atan(self, x):
        pass

    @abstractmethod
    def atan2(self, y, x):
        pass

    @abstractmethod
    def asinh(self, x):
        pass

    @abstractmethod
    def atanh(self, x):
        pass

    @abstractmethod
    def sinh(self, x):
        pass

    @abstractmethod
    def cosh(self, x):
        pass

    @abstractmethod
    def exp(self, x):
        pass

    @abstractmethod
    def hypot(self, x, y):
        pass

    @abstractmethod
    def fabs(self, x):
        pass

    @abstractmethod
    def copysign(self, x, y):
        pass

    @abstractmethod
    def isnan(self, x) -> bool:
        pass

    @abstractmethod
    def isinf(self, x) -> bool:
        pass

    @abstractmethod
    def rf(self, x, y, z):
        """Carlson symmetric integral of the first kind R_F(x, y, z)."""

    @abstractmethod
    def rd(self, x, y, z):
        """Carlson symmetric integral of the second kind R_D(x, y, z)."""

    def errstate(self):
        """Context in which IEEE exceptional results are silent."""
        return nullcontext()

    def isfinite(self, x) -> bool:
        return not (self.isnan(x) or self.isinf(x))

    def sq(self, x):
        return x * x

    def radians(self, degrees) -> Real:
        return self.real(degrees) * self.pi / 180

    def degrees(self, radians) -> Real:
        return radians * 180 / self.pi

    def sincosd(self, degrees) -> Tuple[Real, Real]:
        """Sine and cosine of an angle in degrees.

        The argument is reduced to [-45, 45] degrees before conversion to
        radians, so multiples of 90 degrees give exact zeros and ones.
        """
        d = self.real(degrees)
        if not self.isfinite(d):
            return self.nan, self.nan
        q = int(round(float(d) / GeodeticConstants.QUARTER_TURN_DEG))
        r = self.radians(d - GeodeticConstants.QUARTER_TURN_DEG * q)
        s, c = self.sin(r), self.cos(r)
        q %= 4
        # "0 - v" rather than "-v" keeps signed zeros positive
        if q == 0:
            return s, c
        if q == 1:
            return c, 0 - s
        if q == 2:
            return 0 - s, 0 - c
        return 0 - c, s

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class DoubleArithmetic(Arithmetic):
    """IEEE double precision via numpy scalars and scipy.special."""

    name = "double"

    def __init__(self):
        self._nan = np.float64(np.nan)
        self._inf = np.float64(np.inf)
        self._pi = np.float64(np.pi)
        self._eps = np.finfo(np.float64).eps
        self._huge = np.finfo(np.float64).max / 2

    def real(self, value: Any) -> np.float64:
        return np.float64(value)

    @property
    def nan(self):
        return self._nan

    @property
    def inf(self):
        return self._inf

    @property
    def pi(self):
        return self._pi

    @property
    def epsilon(self):
        return self._eps

    @property
    def huge(self):
        return self._huge

    def sqrt(self, x):
        return np.sqrt(x)

    def sin(self, x):
        return np.sin(x)

    def cos(self, x):
        return np.cos(x)

    def atan(self, x):
        return np.arctan(x)

    def atan2(self, y, x):
        return np.arctan2(y, x)

    def asinh(self, x):
        return np.arcsinh(x)

    def atanh(self, x):
        return np.arctanh(x)

    def sinh(self, x):
        return np.sinh(x)

    def cosh(self, x):
        return np.cosh(x)

    def exp(self, x):
        return np.exp(x)

    def hypot(self, x, y):
        return np.hypot(x, y)

    def fabs(self, x):
        return np.fabs(x)

    def copysign(self, x, y):
        return np.copysign(x, y)

    def isnan(self, x) -> bool:
        return bool(np.isnan(x))

    def isinf(self, x) -> bool:
        return bool(np.isinf(x))

    def isfinite(self, x) -> bool:
        return bool(np.isfinite(x))

    def rf(self, x, y, z):
        return np.float64(elliprf(x, y, z))

    def rd(self, x, y, z):
        return np.float64(elliprd(x, y, z))

    def errstate(self):
        return np.errstate(divide="ignore", invalid="ignore", over="ignore")


class ExtendedArithmetic(Arithmetic):
    """Extended precision via a private mpmath context.

    Parameters
    ----------
    digits : int
        Working precision in decimal digits.
    """

    name = "extended"

    def __init__(self, digits: int = GeodeticConstants.EXTENDED_DIGITS):
        if digits < 16:
            raise ValueError(
                f"Extended precision needs at least 16 digits, got {digits}"
            )
        self.digits = digits
        self._ctx = mpmath.MPContext()
        self._ctx.dps = digits
        self._pi = +self._ctx.pi

    def real(self, value: Any):
        return self._ctx.mpf(value)

    @property
    def nan(self):
        return self._ctx.nan

    @property
    def inf(self):
        return self._ctx.inf

    @property
    def pi(self):
        return self._pi

    @property
    def epsilon(self):
        return self._ctx.eps

    @property
    def huge(self):
        # mpf exponents are unbounded, hypot cannot overflow
        return self._ctx.inf

    def sqrt(self, x):
        return self._ctx.sqrt(x)

    def sin(self, x):
        return self._ctx.sin(x)

    def cos(self, x):
        return self._ctx.cos(x)

    def atan(self, x):
        return self._ctx.atan(x)

    def atan2(self, y, x):
        return self._ctx.atan2(y, x)

    def asinh(self, x):
        return self._ctx.asinh(x)

    def atanh(self, x):
        return self._ctx.atanh(x)

    def sinh(self, x):
        return self._ctx.sinh(x)

    def cosh(self, x):
        return self._ctx.cosh(x)

    def exp(self, x):
        return self._ctx.exp(x)

    def hypot(self, x, y):
        return self._ctx.hypot(x, y)

    def fabs(self, x):
        return self._ctx.fabs(x)

    def copysign(self, x, y):
        # mpf has no signed zero
        return -self._ctx.fabs(x) if y < 0 else self._ctx.fabs(x)

    def isnan(self, x) -> bool:
        return bool(self._ctx.isnan(x))

    def isinf(self, x) -> bool:
        return bool(self._ctx.isinf(x))

    def rf(self, x, y, z):
        return self._ctx.elliprf(x, y, z)

    def rd(self, x, y, z):
        return self._ctx.elliprd(x, y, z)

    def __repr__(self) -> str:
        return f"ExtendedArithmetic(digits={self.digits})"


DOUBLE = DoubleArithmetic()


@lru_cache(maxsize=None)
def get_arithmetic(
    name: str,
    digits: int = GeodeticConstants.EXTENDED_DIGITS
) -> Arithmetic:
    """Look up an arithmetic by name.

    Parameters
    ----------
    name : str
        ``"double"`` or ``"extended"``.
    digits : int
        Decimal digits for the extended width (ignored for double).

    Returns
    -------
    Arithmetic
        Shared instance for the requested width.

    Raises
    ------
    ValueError
        If the name is not a known precision.
    """
    if name == "double":
        return DOUBLE
    if name == "extended":
        return ExtendedArithmetic(digits)
    raise ValueError(
        f"Unknown precision {name!r}; expected 'double' or 'extended'"
    )
