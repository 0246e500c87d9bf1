import os
import sys

import pytest

# Ensure the top-level packages import without installation.
_TEST_DIR = os.path.dirname(__file__)
_REPO_ROOT = os.path.abspath(os.path.join(_TEST_DIR, ".."))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from auxlat import DAuxLatitude, EllipsoidParameters, EngineConfig, make_engine  # noqa: E402


# =============================================================================
# Engine Fixtures
# =============================================================================
# Engines are immutable apart from their coefficient cache, so one instance
# per configuration is shared across the session.


@pytest.fixture(scope="session")
def wgs84() -> DAuxLatitude:
    """Double-precision engine on WGS84."""
    return make_engine()


@pytest.fixture(scope="session")
def wgs84_extended() -> DAuxLatitude:
    """Extended-precision engine on WGS84 (34 digits)."""
    return make_engine(precision="extended")


@pytest.fixture(scope="session")
def sphere() -> DAuxLatitude:
    """Double-precision engine on the unit sphere."""
    return DAuxLatitude(EllipsoidParameters.from_flattening(0.0, name="sphere"))


@pytest.fixture(scope="session")
def prolate() -> DAuxLatitude:
    """Prolate ellipsoid, f = -1/50, with a long series."""
    return DAuxLatitude(
        EllipsoidParameters.from_flattening(-1 / 50, name="prolate"),
        EngineConfig(series_order=20, quadrature_points=96),
    )


@pytest.fixture(scope="session")
def flat() -> DAuxLatitude:
    """Strongly oblate ellipsoid, f = 1/10, with a long series."""
    return DAuxLatitude(
        EllipsoidParameters.from_flattening(1 / 10, name="flat"),
        EngineConfig(series_order=30, quadrature_points=128),
    )
