"""
Auxiliary Latitudes on an Ellipsoid of Revolution.

This module implements the conversions from the geographic latitude phi to
the other auxiliary latitudes, their derivatives with respect to phi, and
the Fourier series that convert between any two of them.

Scientific Context
------------------
Domain: Geodesy
Latitudes (tan of each given in terms of t = tan(phi), s = sin(phi)):

    parametric  beta : tan(beta)  = (1 - f) t
    geocentric  theta: tan(theta) = (1 - e^2) t
    rectifying  mu   : mu = (pi/2) E(beta | -e'^2) / E(-e'^2)
    conformal   chi  : tan(chi) = sinh(psi)
    authalic    xi   : sin(xi) = q(s) / q(1)
    isometric   psi  : psi = asinh(t) - e^2 atanhee(t)

with E the elliptic integral of the second kind, evaluated through the
Carlson symmetric integrals R_F and R_D, and

    atanhee(t) = atanh(e sn(t)) / e   (oblate)
               = atan(e sn(t)) / e    (prolate)

The authalic latitude is assembled from its (sine, cosine) components so
that it is accurate near the pole, where 1 - q(s)/q(1) cancels.

References
----------
- Karney, C.F.F. (2022). On auxiliary latitudes. arXiv:2212.05818.
- Carlson, B.C. (1995). Numerical computation of real or complex elliptic
  integrals. Numer. Algorithms, 10, 13-26.
"""

from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from common.constants import GeodeticConstants
from common.logging_config import get_logger
from common.precision import Arithmetic, get_arithmetic
from common.types import AuxAngle, AuxKind
from auxlat.clenshaw import clenshaw
from auxlat.coefficients import (
    CoefficientFiller,
    CoefficientTable,
    fourier_coefficients,
)
from auxlat.ellipsoid import EllipsoidConstants, EllipsoidParameters, WGS84Ellipsoid
from auxlat.primitives import sc, sn

logger = get_logger(__name__)


@dataclass
class EngineConfig:
    """Configuration of an auxiliary-latitude engine.

    Attributes
    ----------
    precision : str
        ``"double"`` or ``"extended"``.
    series_order : int, optional
        Fourier terms per conversion; defaults per precision.
    quadrature_points : int, optional
        Midpoint nodes used to compute the coefficients; defaults per
        precision.
    extended_digits : int
        Decimal digits of the extended precision.
    eager : bool
        Fill every coefficient row at construction instead of on first use.
    """
    precision: str = "double"
    series_order: Optional[int] = None
    quadrature_points: Optional[int] = None
    extended_digits: int = GeodeticConstants.EXTENDED_DIGITS
    eager: bool = False

    def resolved_series_order(self) -> int:
        if self.series_order is not None:
            return self.series_order
        return GeodeticConstants.SERIES_ORDER[self.precision]

    def resolved_quadrature_points(self) -> int:
        if self.quadrature_points is not None:
            return self.quadrature_points
        return GeodeticConstants.QUADRATURE_POINTS[self.precision]

    def to_dict(self) -> dict:
        return asdict(self)


class AuxLatitude:
    """Conversions between auxiliary latitudes.

    Parameters
    ----------
    ellipsoid : EllipsoidParameters
        The ellipsoid; WGS84 by default.
    config : EngineConfig, optional
        Precision and series settings.
    filler : callable, optional
        Replacement for `fill_coefficients`, called as
        ``filler(auxin, auxout)``.

    Attributes
    ----------
    num : Arithmetic
        Floating-point width of every result.
    f, fm1, e2, e2m1, e12, e, e1, n :
        Ellipsoid constants in that width.
    series_order : int
        Number of Fourier terms per conversion.

    Notes
    -----
    Instances are immutable apart from the coefficient table, which is
    filled once per pair under a lock and may be shared between threads.
    """

    def __init__(
        self,
        ellipsoid: EllipsoidParameters = WGS84Ellipsoid,
        config: Optional[EngineConfig] = None,
        filler: Optional[CoefficientFiller] = None
    ):
        self.config = config or EngineConfig()
        self.num: Arithmetic = get_arithmetic(
            self.config.precision, self.config.extended_digits
        )
        self.ellipsoid = ellipsoid
        self.constants = EllipsoidConstants(ellipsoid, self.num)
        c = self.constants
        self.f, self.fm1, self.n = c.f, c.fm1, c.n
        self.e2, self.e2m1, self.e12 = c.e2, c.e2m1, c.e12
        self.e, self.e1 = c.e, c.e1

        self.series_order = self.config.resolved_series_order()
        self.quadrature_points = self.config.resolved_quadrature_points()

        num = self.num
        k2 = -self.e12
        # E(k2) for the complete quadrant
        self._ellip_ec = (
            self.rf(0, 1 - k2, 1) - k2 * self.rd(0, 1 - k2, 1) / 3
        )
        self._qp = self._q(num.real(1))

        self._coeffs = CoefficientTable(
            num, self.series_order, filler or self.fill_coefficients
        )
        if self.config.eager:
            self._coeffs.fill_all()

        logger.info(
            f"Initialized auxiliary latitudes for {ellipsoid.name or 'ellipsoid'} "
            f"(f={float(self.f):.12g}) in {num.name} precision, "
            f"series order {self.series_order}"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def ind(auxout: int, auxin: int) -> int:
        """Coefficient slot of the conversion auxin -> auxout, or -1."""
        n = GeodeticConstants.AUX_NUMBER
        if not (0 <= auxout < n and 0 <= auxin < n):
            return -1
        return n * int(auxout) + int(auxin)

    def rf(self, x, y, z):
        """Carlson R_F in the engine width."""
        num = self.num
        return num.rf(num.real(x), num.real(y), num.real(z))

    def rd(self, x, y, z):
        """Carlson R_D in the engine width."""
        num = self.num
        return num.rd(num.real(x), num.real(y), num.real(z))

    def sn(self, t):
        return sn(t, self.num)

    def sc(self, t):
        return sc(t, self.num)

    def angle(self, degrees) -> AuxAngle:
        """An AuxAngle in the engine width from degrees."""
        return AuxAngle.from_degrees(degrees, self.num)

    def _atanhee_sin(self, s):
        # atanhee in terms of the sine s = sn(t)
        num = self.num
        if self.e2 > 0:
            return num.atanh(self.e * s) / self.e
        if self.e2 < 0:
            return num.atan(self.e * s) / self.e
        return s

    def atanhee(self, t):
        """atanh(e sn(t)) / e, continued to prolate and spherical cases."""
        return self._atanhee_sin(self.sn(t))

    def _q(self, s):
        # Authalic q for s = |sin(phi)|; q(1) is its polar value
        return self.e2m1 * (s / (1 - self.e2 * s * s) + self._atanhee_sin(s))

    def _dq(self, s):
        # (q(1) - q(s)) / (1 - s)
        num = self.num
        w = self.e * (1 - s) / (1 - self.e2 * s)
        if w == 0:
            g = num.real(1)
        elif self.e2 > 0:
            g = num.atanh(w) / w
        else:
            g = num.atan(w) / w
        return (1 + self.e2 * s) / (1 - self.e2 * s * s) + self.e2m1 * g / (1 - self.e2 * s)

    # ------------------------------------------------------------------
    # Conversions from the geographic latitude
    # ------------------------------------------------------------------

    def parametric(self, phi: AuxAngle) -> AuxAngle:
        return AuxAngle(self.fm1 * phi.y, phi.x, self.num)

    def geocentric(self, phi: AuxAngle) -> AuxAngle:
        return AuxAngle(self.e2m1 * phi.y, phi.x, self.num)

    def _ellip_e(self, sbet, cbet):
        # Incomplete E(beta | k2) for sin/cos of beta
        k2 = -self.e12
        cbet2 = cbet * cbet
        sbet2 = sbet * sbet
        dn2 = 1 - k2 * sbet2
        return sbet * (
            self.rf(cbet2, dn2, 1) - k2 * sbet2 * self.rd(cbet2, dn2, 1) / 3
        )

    def _rectifying_slope(self, phin: AuxAngle):
        # d mu / d phi = (pi/2) / E(k2) * fm1 / (1 - e^2 sin^2 phi)^(3/2)
        num = self.num
        d = phin.x * phin.x + self.e2m1 * phin.y * phin.y
        return num.pi / (2 * self._ellip_ec) * self.fm1 / (d * num.sqrt(d))

    def rectifying(self, phi: AuxAngle) -> Tuple[AuxAngle, object]:
        """Rectifying latitude and d tan(mu) / d tan(phi).

        Returns
        -------
        mu : AuxAngle
            Normalized rectifying latitude; exactly (+-1, 0) at the pole.
        d :
            The derivative d tan(mu) / d tan(phi), which at the pole is
            replaced by its limit cos(mu)^2 / cos(phi)^2 = (d phi/d mu).
        """
        num = self.num
        phin = phi.normalized()
        if num.isnan(phin.y):
            return AuxAngle.nan_angle(num), num.nan
        slope = self._rectifying_slope(phin)
        if phin.x == 0:
            return AuxAngle(num.copysign(1, phin.y), 0, num), 1 / slope
        beta = self.parametric(phin).normalized()
        mu = AuxAngle.from_radians(
            num.pi / 2 * self._ellip_e(beta.y, beta.x) / self._ellip_ec, num
        )
        d = slope * num.sq(self.sc(mu.tan())) / num.sq(self.sc(phin.tan()))
        return mu, d

    def rectifying_radius(self, a=1):
        """Radius of the sphere with the meridian quadrant of the ellipsoid.

        Equal to ``a (1 - f) E(-e'^2) * 2 / pi``.
        """
        return self.num.real(a) * self.fm1 * self._ellip_ec * 2 / self.num.pi

    def isometric(self, phi: AuxAngle):
        """Isometric latitude psi in radians; +-inf at the poles."""
        num = self.num
        t = phi.tan()
        if num.isinf(t) or num.isnan(t):
            return t
        return num.asinh(t) - self.e2 * self.atanhee(t)

    def conformal(self, phi: AuxAngle) -> AuxAngle:
        num = self.num
        t = phi.tan()
        if num.isnan(t):
            return AuxAngle.nan_angle(num)
        if num.isinf(t):
            return AuxAngle(num.copysign(1, t), 0, num)
        return AuxAngle(num.sinh(self.isometric(phi)), 1, num)

    def authalic(self, phi: AuxAngle) -> AuxAngle:
        num = self.num
        phin = phi.normalized()
        if num.isnan(phin.y):
            return phin
        if self.f == 0 or phin.x == 0:
            return phin
        s = num.fabs(phin.y)
        q = self._q(s)
        dqm = (self._qp + q) / (1 + s)
        return AuxAngle(
            num.copysign(q, phin.y),
            num.fabs(phin.x) * num.sqrt(self._dq(s) * dqm),
            num
        )

    def to_auxiliary(self, kind: int, phi: AuxAngle) -> AuxAngle:
        """The auxiliary latitude of the given kind for geographic phi."""
        kind = AuxKind(kind)
        if kind == AuxKind.GEOGRAPHIC:
            return phi
        if kind == AuxKind.PARAMETRIC:
            return self.parametric(phi)
        if kind == AuxKind.GEOCENTRIC:
            return self.geocentric(phi)
        if kind == AuxKind.RECTIFYING:
            return self.rectifying(phi)[0]
        if kind == AuxKind.CONFORMAL:
            return self.conformal(phi)
        return self.authalic(phi)

    def derivative(self, kind: int, phi: AuxAngle):
        """d eta / d phi for the auxiliary latitude eta of the given kind."""
        num = self.num
        kind = AuxKind(kind)
        phin = phi.normalized()
        s, c = phin.y, phin.x
        if kind == AuxKind.GEOGRAPHIC:
            return num.real(1)
        if kind == AuxKind.PARAMETRIC:
            return self.fm1 / (c * c + self.e2m1 * s * s)
        if kind == AuxKind.GEOCENTRIC:
            return self.e2m1 / (c * c + num.sq(self.e2m1) * s * s)
        if kind == AuxKind.RECTIFYING:
            return self._rectifying_slope(phin)
        if kind == AuxKind.CONFORMAL:
            if c == 0:
                # c cosh(psi) -> exp(-e^2 atanhee(inf)) at the pole
                return num.exp(self.e2 * self._atanhee_sin(num.real(1)))
            return self.e2m1 / (
                (1 - self.e2 * s * s) * c * num.cosh(self.isometric(phin))
            )
        sa = num.fabs(s)
        dqm = (self._qp + self._q(sa)) / (1 + sa)
        return 2 * self.e2m1 / (
            num.sq(1 - self.e2 * s * s) * num.sqrt(self._dq(sa) * dqm)
        )

    # ------------------------------------------------------------------
    # Series conversions
    # ------------------------------------------------------------------

    def fill_coefficients(self, auxin: int, auxout: int):
        """Compute the series coefficients of auxin -> auxout."""
        return fourier_coefficients(
            self, auxin, auxout, self.series_order, self.quadrature_points
        )

    def coefficients(self, auxin: int, auxout: int):
        """Cached coefficients of auxin -> auxout, filled on first use."""
        k = self.ind(auxout, auxin)
        if k < 0:
            raise ValueError(f"Unsupported conversion {auxin} -> {auxout}")
        return self._coeffs.row(k, auxin, auxout)

    @property
    def coefficient_table(self) -> CoefficientTable:
        return self._coeffs

    def convert(self, auxin: int, auxout: int, zeta: AuxAngle) -> AuxAngle:
        """Convert an auxiliary latitude with the Fourier series.

        Returns the NaN angle for an unsupported pair.
        """
        num = self.num
        k = self.ind(auxout, auxin)
        if k < 0:
            return AuxAngle.nan_angle(num)
        zn = zeta.normalized()
        if auxin == auxout:
            return zn
        c = self._coeffs.row(k, auxin, auxout)
        eta = zn.radians() + clenshaw(True, zn.y, zn.x, c, self.series_order, num)
        return AuxAngle.from_radians(eta, num)

    def metadata(self) -> dict:
        """Engine description for logs and audit records."""
        meta = self.constants.as_dict()
        meta.update(self.config.to_dict())
        meta["series_order"] = self.series_order
        meta["quadrature_points"] = self.quadrature_points
        return meta
