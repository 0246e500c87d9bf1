"""
Unit tests for the divided-difference engine.

Each divided difference is checked against the derivative at coincident
arguments, against the difference quotient of the closed form at well
separated arguments, and at the poles and invalid inputs.
"""

import math

import mpmath
import numpy as np
import pytest

from auxlat import DAuxLatitude, EllipsoidParameters, EngineConfig
from common.types import AuxAngle, AuxKind


def secant(f, engine, lat1, lat2):
    x, y = engine.angle(lat1), engine.angle(lat2)
    return (f(y) - f(x)) / (y.radians() - x.radians())


class TestDEllipticE:
    """Divided difference of the incomplete elliptic integral E."""

    @staticmethod
    def reference(e12, lat1, lat2):
        with mpmath.workdps(50):
            e12 = mpmath.mpf(e12)
            a, b = mpmath.radians(lat1), mpmath.radians(lat2)
            integral = mpmath.quad(lambda t: mpmath.sqrt(1 + e12 * mpmath.sin(t) ** 2), [a, b])
            return integral / (b - a)

    def test_30_60_double(self, wgs84):
        expected = self.reference(float(wgs84.e12), 30, 60)
        value = wgs84.d_elliptic_e(wgs84.angle(30), wgs84.angle(60))
        assert value == pytest.approx(float(expected), rel=2e-15)

    def test_30_60_extended(self, wgs84_extended):
        e = wgs84_extended
        expected = self.reference(e.e12, 30, 60)
        value = e.d_elliptic_e(e.angle(30), e.angle(60))
        # compare at the reference precision, not mpmath's global 15 digits
        with mpmath.workdps(50):
            relerr = abs(mpmath.mpf(value) - expected) / expected
        assert float(relerr) < 1e-30

    def test_coincident(self, wgs84):
        e12 = float(wgs84.e12)
        value = wgs84.d_elliptic_e(wgs84.angle(30), wgs84.angle(30))
        assert value == pytest.approx(math.sqrt(1 + e12 / 4), rel=1e-15)

    @pytest.mark.parametrize("lat", [0, 90])
    def test_degenerate_points(self, wgs84, lat):
        assert np.isnan(wgs84.d_elliptic_e(wgs84.angle(lat), wgs84.angle(lat)))

    def test_sign_is_ignored(self, wgs84):
        north = wgs84.d_elliptic_e(wgs84.angle(30), wgs84.angle(60))
        south = wgs84.d_elliptic_e(wgs84.angle(-30), wgs84.angle(-60))
        assert north == south

    def test_one_endpoint_at_pole(self, wgs84):
        expected = self.reference(float(wgs84.e12), 40, 90)
        value = wgs84.d_elliptic_e(wgs84.angle(40), wgs84.angle(90))
        assert value == pytest.approx(float(expected), rel=4e-15)

    def test_sphere(self, sphere):
        assert sphere.d_elliptic_e(sphere.angle(10), sphere.angle(70)) == pytest.approx(1.0, rel=1e-14)


class TestDParametric:
    """Divided difference of the parametric latitude."""

    def test_equator(self, wgs84):
        assert wgs84.d_parametric(wgs84.angle(0), wgs84.angle(0)) == wgs84.fm1

    def test_pole(self, wgs84):
        value = wgs84.d_parametric(wgs84.angle(90), wgs84.angle(90))
        assert value == pytest.approx(1 / float(wgs84.fm1), rel=1e-15)

    @pytest.mark.parametrize("lat", [20.0, 45.0, 70.0])
    def test_coincident(self, wgs84, lat):
        phi = wgs84.angle(lat)
        assert wgs84.d_parametric(phi, phi) == pytest.approx(
            wgs84.derivative(AuxKind.BETA, phi), rel=1e-15)

    @pytest.mark.parametrize("lat1,lat2", [(10, 50), (-20, 30), (60, 89), (80, 90), (-90, -30)])
    def test_secant(self, wgs84, lat1, lat2):
        expected = secant(lambda p: wgs84.parametric(p).radians(), wgs84, lat1, lat2)
        value = wgs84.d_parametric(wgs84.angle(lat1), wgs84.angle(lat2))
        assert value == pytest.approx(expected, rel=1e-13)

    def test_equator_to_pole(self, wgs84):
        assert wgs84.d_parametric(wgs84.angle(0), wgs84.angle(90)) == pytest.approx(1.0, rel=1e-15)

    def test_nan(self, wgs84):
        assert np.isnan(wgs84.d_parametric(AuxAngle.nan_angle(), wgs84.angle(10)))


class TestDRectifying:
    """Divided difference of the rectifying latitude."""

    @pytest.mark.parametrize("lat", [0.0, 30.0, -65.0, 89.0, 90.0])
    def test_coincident(self, wgs84, lat):
        phi = wgs84.angle(lat)
        assert wgs84.d_rectifying(phi, phi) == pytest.approx(
            wgs84.derivative(AuxKind.MU, phi), rel=1e-14)

    @pytest.mark.parametrize("lat1,lat2", [(20, 50), (-20, 30), (45, 90), (-90, -10), (0, 15)])
    def test_secant(self, wgs84, lat1, lat2):
        expected = secant(lambda p: wgs84.rectifying(p)[0].radians(), wgs84, lat1, lat2)
        value = wgs84.d_rectifying(wgs84.angle(lat1), wgs84.angle(lat2))
        assert value == pytest.approx(expected, rel=1e-13)

    def test_close_points(self, wgs84):
        value = wgs84.d_rectifying(wgs84.angle(30), wgs84.angle(30 + 1e-9))
        assert value == pytest.approx(wgs84.derivative(AuxKind.MU, wgs84.angle(30)), rel=1e-9)

    def test_sphere(self, sphere):
        assert sphere.d_rectifying(sphere.angle(10), sphere.angle(40)) == pytest.approx(1.0, rel=1e-14)

    def test_near_pole_accuracy_double(self, sphere):
        # mu == phi on the sphere; cos((x + y) / 2) cancels next to the pole
        value = sphere.d_rectifying(sphere.angle(89.999999), sphere.angle(90))
        assert value == pytest.approx(1.0, rel=1e-7)

    def test_near_pole_accuracy_extended(self):
        sphere = DAuxLatitude(
            EllipsoidParameters.from_flattening(0.0, name="sphere"),
            EngineConfig(precision="extended"),
        )
        value = sphere.d_rectifying(sphere.angle(89.999999), sphere.angle(90))
        assert float(abs(value - 1)) < 1e-22

    def test_near_pole_double_tracks_extended(self, wgs84, wgs84_extended):
        ours = wgs84.d_rectifying(wgs84.angle(89.999999), wgs84.angle(90))
        ref = wgs84_extended.d_rectifying(
            wgs84_extended.angle(89.999999), wgs84_extended.angle(90))
        assert ours == pytest.approx(float(ref), rel=1e-7)

    def test_prolate(self, prolate):
        expected = secant(lambda p: prolate.rectifying(p)[0].radians(), prolate, 20, 50)
        value = prolate.d_rectifying(prolate.angle(20), prolate.angle(50))
        assert value == pytest.approx(expected, rel=1e-13)


class TestDAtanhee:
    """Divided difference of atanhee in the tangent."""

    @pytest.mark.parametrize("engine_name", ["wgs84", "prolate"])
    def test_secant(self, request, engine_name):
        engine = request.getfixturevalue(engine_name)
        expected = (engine.atanhee(3.0) - engine.atanhee(1.0)) / 2
        assert engine.d_atanhee(1.0, 3.0) == pytest.approx(expected, rel=1e-13)

    def test_coincident(self, wgs84):
        e2 = float(wgs84.e2)
        t = 0.5
        expected = (1 + t * t) ** -1.5 / (1 - e2 * t * t / (1 + t * t))
        assert wgs84.d_atanhee(t, t) == pytest.approx(expected, rel=4e-15)

    def test_sphere_reduces_to_sn(self, sphere):
        from auxlat.primitives import d_sn
        assert sphere.d_atanhee(1.0, 3.0) == pytest.approx(d_sn(1.0, 3.0), rel=1e-15)


class TestDIsometric:
    """Divided difference of the isometric latitude."""

    def test_nan_propagates(self, wgs84):
        assert np.isnan(wgs84.d_isometric(AuxAngle.nan_angle(), wgs84.angle(10)))
        assert np.isnan(wgs84.d_isometric(wgs84.angle(10), AuxAngle(0.0, 0.0)))

    @pytest.mark.parametrize("lat1,lat2", [(90, 90), (90, 30), (-90, 30), (10, -90)])
    def test_pole_is_infinite(self, wgs84, lat1, lat2):
        assert wgs84.d_isometric(wgs84.angle(lat1), wgs84.angle(lat2)) == np.inf

    @pytest.mark.parametrize("lat", [0.0, 35.0, -80.0])
    def test_coincident(self, wgs84, lat):
        e2 = float(wgs84.e2)
        phi = math.radians(lat)
        expected = (1 - e2) / ((1 - e2 * math.sin(phi) ** 2) * math.cos(phi))
        assert wgs84.d_isometric(wgs84.angle(lat), wgs84.angle(lat)) == pytest.approx(expected, rel=1e-14)

    @pytest.mark.parametrize("lat1,lat2", [(10, 50), (-30, 60), (70, 89)])
    def test_secant(self, wgs84, lat1, lat2):
        expected = secant(wgs84.isometric, wgs84, lat1, lat2)
        value = wgs84.d_isometric(wgs84.angle(lat1), wgs84.angle(lat2))
        assert value == pytest.approx(expected, rel=1e-13)

    def test_prolate(self, prolate):
        expected = secant(prolate.isometric, prolate, 10, 50)
        assert prolate.d_isometric(prolate.angle(10), prolate.angle(50)) == pytest.approx(expected, rel=1e-13)

    def test_sphere(self, sphere):
        assert sphere.d_isometric(sphere.angle(60), sphere.angle(60)) == pytest.approx(2.0, rel=1e-14)


class TestDConvert:
    """Divided difference of the series conversions."""

    @pytest.mark.parametrize("auxin,auxout", [(7, 0), (0, 6), (-1, 2)])
    def test_unsupported_pair(self, wgs84, auxin, auxout):
        assert np.isnan(wgs84.d_convert(auxin, auxout, wgs84.angle(10), wgs84.angle(20)))

    @pytest.mark.parametrize("kind", list(AuxKind))
    def test_same_kind(self, wgs84, kind):
        assert wgs84.d_convert(kind, kind, wgs84.angle(10), wgs84.angle(20)) == 1

    @pytest.mark.parametrize("lat1,lat2", [(10, 50), (-20, 30), (30, 30)])
    def test_parametric(self, wgs84, lat1, lat2):
        x, y = wgs84.angle(lat1), wgs84.angle(lat2)
        assert wgs84.d_convert(AuxKind.PHI, AuxKind.BETA, x, y) == pytest.approx(
            wgs84.d_parametric(x, y), rel=1e-13)

    @pytest.mark.parametrize("lat1,lat2", [(10, 50), (-20, 30), (30, 30)])
    def test_rectifying(self, wgs84, lat1, lat2):
        x, y = wgs84.angle(lat1), wgs84.angle(lat2)
        assert wgs84.d_convert(AuxKind.PHI, AuxKind.MU, x, y) == pytest.approx(
            wgs84.d_rectifying(x, y), rel=1e-13)

    @pytest.mark.parametrize("lat", [0.0, 45.0, 89.0])
    def test_conformal_derivative(self, wgs84, lat):
        phi = wgs84.angle(lat)
        assert wgs84.d_convert(AuxKind.PHI, AuxKind.CHI, phi, phi) == pytest.approx(
            wgs84.derivative(AuxKind.CHI, phi), rel=1e-13)

    def test_inverse_product(self, wgs84):
        z1, z2 = wgs84.angle(15), wgs84.angle(55)
        eta1 = wgs84.convert(AuxKind.CHI, AuxKind.XI, z1)
        eta2 = wgs84.convert(AuxKind.CHI, AuxKind.XI, z2)
        product = (wgs84.d_convert(AuxKind.CHI, AuxKind.XI, z1, z2)
                   * wgs84.d_convert(AuxKind.XI, AuxKind.CHI, eta1, eta2))
        assert product == pytest.approx(1.0, rel=1e-13)

    def test_strongly_oblate(self, flat):
        expected = secant(lambda p: flat.authalic(p).radians(), flat, 20, 70)
        value = flat.d_convert(AuxKind.PHI, AuxKind.XI, flat.angle(20), flat.angle(70))
        assert value == pytest.approx(expected, rel=1e-12)

    def test_close_points(self, wgs84):
        x, y = wgs84.angle(40), wgs84.angle(40 + 1e-9)
        assert wgs84.d_convert(AuxKind.PHI, AuxKind.XI, x, y) == pytest.approx(
            wgs84.derivative(AuxKind.XI, x), rel=1e-9)


class TestPrecisionAgreement:
    """Double-precision results agree with the extended-precision engine."""

    @pytest.mark.parametrize("method", ["d_rectifying", "d_parametric", "d_isometric", "d_elliptic_e"])
    @pytest.mark.parametrize("lat1,lat2", [(20, 50), (33, 33), (5, 89)])
    def test_closed_forms(self, wgs84, wgs84_extended, method, lat1, lat2):
        x, y = wgs84.angle(lat1), wgs84.angle(lat2)
        ours = getattr(wgs84, method)(x, y)
        theirs = getattr(wgs84_extended, method)(
            x.with_arithmetic(wgs84_extended.num), y.with_arithmetic(wgs84_extended.num))
        assert ours == pytest.approx(float(theirs), rel=1e-14)

    @pytest.mark.parametrize("auxin,auxout", [(AuxKind.PHI, AuxKind.XI), (AuxKind.MU, AuxKind.CHI)])
    def test_series(self, wgs84, wgs84_extended, auxin, auxout):
        x, y = wgs84.angle(25), wgs84.angle(65)
        ours = wgs84.d_convert(auxin, auxout, x, y)
        theirs = wgs84_extended.d_convert(
            auxin, auxout, x.with_arithmetic(wgs84_extended.num), y.with_arithmetic(wgs84_extended.num))
        assert ours == pytest.approx(float(theirs), rel=1e-14)

    def test_double_results_are_numpy_scalars(self, wgs84):
        value = wgs84.d_rectifying(wgs84.angle(10), wgs84.angle(20))
        assert isinstance(value, np.float64)
