import math

import pytest

from flange_designer.analysis.bolting import (
    blocked_area_check,
    bolt_area_check,
    bolt_torque,
    fastener_feature_od,
    fastener_geometry,
    fastener_properties,
    geometry_check,
    required_bolt_loads,
    resolve_fastener,
    resolve_selection,
)
from flange_designer.analysis.gasket import gasket_geometry
from flange_designer.database.fasteners import get_fastener_options
from flange_designer.models.flange import BoltingLoads, FastenerFeature, FastenerSelection


class TestBoltAreaCheck:
    def test_hydrotest_governs(self):
        loads = BoltingLoads(wm1=50000, wm2_op=80000, wm2_hydro=95000)
        check = bolt_area_check(loads, 300, 4, 353)
        assert check.governing_case == "hydrotest"
        assert check.required_area == pytest.approx(95000 / 300)
        assert check.pass_

    def test_ties_prefer_seating(self):
        loads = BoltingLoads(wm1=90000, wm2_op=90000, wm2_hydro=90000)
        assert bolt_area_check(loads, 300, 4, 353).governing_case == "seating"

    def test_operating_when_unique_max(self):
        loads = BoltingLoads(wm1=10000, wm2_op=90000, wm2_hydro=50000)
        assert bolt_area_check(loads, 300, 4, 353).governing_case == "operating"

    @pytest.mark.parametrize("stress_area", [50, 79, 79.2, 80, 353])
    def test_pass_iff_provided_covers_max(self, stress_area):
        loads = BoltingLoads(wm1=50000, wm2_op=80000, wm2_hydro=95000)
        check = bolt_area_check(loads, 300, 4, stress_area)
        required = max(check.required_area_seating, check.required_area_oper, check.required_area_hydro)
        assert check.pass_ == (check.provided_area >= required)

    def test_failure_reason(self):
        loads = BoltingLoads(wm1=50000, wm2_op=80000, wm2_hydro=95000)
        check = bolt_area_check(loads, 300, 4, 50)
        reason = check.failure_reason()
        assert reason.case == "hydrotest"
        assert reason.provided_area == 200
        assert reason.delta_area == pytest.approx(95000 / 300 - 200)

    def test_utilization(self):
        loads = BoltingLoads(wm1=30000, wm2_op=60000, wm2_hydro=90000)
        check = bolt_area_check(loads, 300, 3, 100)
        assert check.utilization("hydrotest") == pytest.approx(1.0)
        assert check.utilization("seating") == pytest.approx(1 / 3)

    def test_blocked_check_never_passes(self):
        check = blocked_area_check(8, 353)
        assert not check.pass_
        assert check.provided_area == 8 * 353


def test_required_bolt_loads():
    g = gasket_geometry(200, 16, "RF", 2, "graphite")
    loads = required_bolt_loads(g, 16, 24)
    G, b = g.effective_diameter, g.effective_width
    assert loads.wm1 == pytest.approx(math.pi * G * b * 40)
    assert loads.wm2_op == pytest.approx(math.pi * G ** 2 * 1.6 / 4 + 2 * math.pi * b * G * 3 * 1.6)
    assert loads.wm2_hydro > loads.wm2_op


class TestTorque:
    def test_capped_by_proof(self):
        result = bolt_torque(24, 353, 580, 160000, "seating")
        assert result.preload_cap == pytest.approx(143318)
        assert result.preload_per_bolt == pytest.approx(143318)
        assert result.capped_by_proof
        assert result.torque_nm == pytest.approx(0.20 * 143318 * 0.024)
        assert "Torque capped by proof load" in result.assumptions

    def test_not_capped(self):
        result = bolt_torque(24, 353, 580, 100000, "operating", friction_preset="lubricated")
        assert not result.capped_by_proof
        assert result.preload_per_bolt == 100000
        assert result.torque_min_nm == pytest.approx(0.13 * 100000 * 0.024)
        assert result.torque_nm == pytest.approx(0.15 * 100000 * 0.024)
        assert result.torque_max_nm == pytest.approx(0.17 * 100000 * 0.024)
        assert result.preload_utilization == pytest.approx(100000 / 204740)

    def test_unknown_friction_uses_dry(self):
        result = bolt_torque(24, 353, 580, 100000, "seating", friction_preset="greasy")
        assert result.friction_preset == "dry"
        assert result.torque_nm == pytest.approx(0.20 * 100000 * 0.024)


class TestFastenerCatalog:
    def test_unknown_grade_falls_back(self):
        spec = resolve_fastener("EN_99.9")
        assert spec.fallback
        assert spec.grade_id == "EN_8.8"

    def test_legacy_grade(self):
        assert resolve_fastener(bolt_grade="10.9").grade_id == "EN_10.9"

    def test_standard_and_type_from_catalog(self):
        spec = resolve_fastener("ASME_SA193_B8_CL1")
        assert (spec.standard, spec.type) == ("ASME", "STUD")

    def test_placeholder(self):
        spec = resolve_selection(FastenerSelection(grade_id="EN_25CrMo4"))
        assert spec.properties.placeholder
        assert not spec.fallback

    def test_size_dependent_grade(self):
        small = fastener_properties("EN_42CrMo4", 24)
        large = fastener_properties("EN_42CrMo4", 64)
        assert small.size_dependent
        assert small.proof == 675
        assert large.proof == 585
        assert small.allowable_op == pytest.approx(675 / 1.5)

    def test_catalog_filter(self):
        assert {e.id for e in get_fastener_options("ASME", "STUD")} == {"ASME_SA193_B8_CL1", "ASME_SA193_B8_CL2"}
        # no EN studs: the type filter is dropped
        assert get_fastener_options("EN", "STUD") == get_fastener_options("EN")


class TestFastenerGeometry:
    def test_metric(self):
        geom = fastener_geometry("M24")
        assert (geom.diameter, geom.stress_area, geom.pitch, geom.hole_diameter) == (24.0, 353, 3.0, 26)
        assert geom.geometry_assumption is None
        assert geom.is_complete

    def test_asme_assumption(self):
        assert fastener_geometry("M24", "ASME").geometry_assumption == "metric thread"

    def test_unknown_size(self):
        assert not fastener_geometry("M100").is_complete

    def test_feature_od_washer(self):
        feature = fastener_feature_od("EN", "M24")
        assert feature.feature_od == 44
        assert not feature.approximated

    def test_feature_od_asme_is_approximated(self):
        feature = fastener_feature_od("ASME", "M24")
        assert feature.feature_od == pytest.approx(44 * 1.1)
        assert feature.approximated

    def test_feature_od_from_diameter(self):
        feature = fastener_feature_od("EN", "M100")
        assert feature.feature_od == pytest.approx(210)
        assert feature.approximated


class TestGeometryCheck:
    def test_passes(self):
        check = geometry_check(320, 420, 12, FastenerFeature(44, "washer"), gasket_od=238)
        assert check.ok
        assert check.notes == []

    def test_edge_failure_reports_shortfall(self):
        check = geometry_check(320, 330, 12, FastenerFeature(44, "washer"))
        assert not check.edge_ok
        assert check.spacing_ok
        assert "short by 20.0 mm" in check.notes[0]

    def test_spacing_failure(self):
        check = geometry_check(200, 400, 16, FastenerFeature(44, "washer"))
        assert not check.spacing_ok
        assert check.edge_ok
        assert "Insufficient spacing" in check.notes[0]

    def test_gasket_clearance(self):
        check = geometry_check(240, 420, 8, FastenerFeature(44, "washer"), gasket_od=238)
        assert not check.gasket_ok
        assert not check.ok

    def test_approximated_feature_noted(self):
        check = geometry_check(320, 330, 12, FastenerFeature(48.4, "washer", approximated=True))
        assert check.notes[-1].startswith("FeatureOD approximated")
