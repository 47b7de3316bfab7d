import itertools

import pytest

from flange_designer.analysis.gasket import custom_gasket_geometry, gasket_factors, gasket_geometry
from flange_designer.database.catalogs import AVAILABLE_DNS, PRESSURE_CLASSES


def test_dn200_pn16_raised_face():
    g = gasket_geometry(200, 16, "RF", 2, "graphite")
    assert g.id == 194
    assert g.od == pytest.approx(238)
    assert g.effective_diameter == pytest.approx(216)
    assert g.effective_width == pytest.approx(17.6)
    assert (g.m, g.y) == (3.0, 40.0)


def test_class_facing_and_thickness_factors():
    base = gasket_geometry(200, 16, "RF", 2, "graphite")
    scaled = gasket_geometry(200, 320, "FF", 3, "graphite")
    width = (scaled.od - scaled.id) / 2
    assert width == pytest.approx(22 * 1.15 * 1.10 * 1.08)
    assert scaled.od > base.od


def test_small_dn_width_floor_and_id_floor():
    g = gasket_geometry(15, 16, "IBC", 2, "ptfe")
    assert g.id == 10
    assert g.od == pytest.approx(10 + 2 * 8)
    assert g.effective_width == pytest.approx(6.4)


def test_large_dn_width_cap():
    g = gasket_geometry(1200, 400, "FF", 3, "graphite")
    assert g.od - g.id == pytest.approx(64)
    assert g.effective_width == 25


def test_all_combinations_stay_in_bounds():
    for dn, pn, facing, thickness in itertools.product(AVAILABLE_DNS + [1, 5000], PRESSURE_CLASSES, ["RF", "FF", "IBC"], [2, 3]):
        g = gasket_geometry(dn, pn, facing, thickness, "graphite")
        assert g.od > g.id
        assert 6 <= g.effective_width <= 25


def test_unknown_material_uses_graphite():
    assert gasket_factors("cardboard") == gasket_factors("graphite")
    g = gasket_geometry(100, 16, "RF", 2, "cardboard")
    assert g.material == "cardboard"
    assert (g.m, g.y) == (3.0, 40.0)


def test_custom_gasket():
    g = custom_gasket_geometry(100, 140, "RF", 2, "tesnitBA50")
    assert g.effective_diameter == pytest.approx(120)
    assert g.effective_width == pytest.approx(16)
    assert (g.m, g.y) == (2.5, 35.0)
