import dataclasses

import pytest

from flange_designer.analysis.manual_check import verify_manual_geometry
from flange_designer.models.flange import ManualGeometry


class TestValidation:
    def test_missing_fields_short_circuit(self, dn200_pn16):
        manual = ManualGeometry(bolt_circle=0, bolt_count=0, bolt_hole_diameter=0, outer_diameter=0, thickness=0, bolt_size="")
        result = verify_manual_geometry(dn200_pn16, manual, 16)
        assert not result.pass_
        assert len(result.errors) == 6
        assert result.gasket_summary is None
        assert result.bolt_summary is None
        assert result.hydrotest is None

    def test_unknown_bolt_size(self, dn200_pn16, good_manual):
        result = verify_manual_geometry(dn200_pn16, dataclasses.replace(good_manual, bolt_size="M100"), 16)
        assert result.errors == ["Bolt size M100 is not in the thread tables."]

    def test_non_numeric_field_raises(self, dn200_pn16, good_manual):
        with pytest.raises(ValueError):
            verify_manual_geometry(dn200_pn16, dataclasses.replace(good_manual, bolt_circle="320"), 16)

    def test_fractional_bolt_count_raises(self, dn200_pn16, good_manual):
        with pytest.raises(ValueError):
            verify_manual_geometry(dn200_pn16, dataclasses.replace(good_manual, bolt_count=7.5), 16)

    @pytest.mark.parametrize("field, value", [("bolt_count", float("inf")), ("thickness", float("nan")),
                                              ("outer_diameter", float("-inf"))])
    def test_non_finite_field_raises(self, dn200_pn16, good_manual, field, value):
        with pytest.raises(ValueError):
            verify_manual_geometry(dn200_pn16, dataclasses.replace(good_manual, **{field: value}), 16)


class TestGeometryFailure:
    def test_keeps_partial_results(self, dn200_pn16, good_manual):
        manual = dataclasses.replace(good_manual, outer_diameter=330.0)
        result = verify_manual_geometry(dn200_pn16, manual, 16)
        assert not result.pass_
        assert not result.geometry.edge_ok
        assert any("short by 20.0 mm" in e for e in result.errors)
        assert result.gasket_summary is not None
        assert result.gasket_summary.loads.wm1 > 0
        assert result.hydrotest is not None
        assert result.pressure_test_used == pytest.approx(16 * 1.25 * 1.5 / 1.05)
        assert result.bolt_summary is None
        assert result.thickness_summary is None


class TestFullCheck:
    def test_passes(self, dn200_pn16, good_manual):
        result = verify_manual_geometry(dn200_pn16, good_manual, 16)
        assert result.pass_
        assert result.errors == []
        assert result.governing_case == "seating"
        assert result.governing_code == "ASME"
        assert result.bolt_summary.torque is not None
        assert not result.bolt_summary.torque.capped_by_proof
        assert result.bolt_summary.utilization_seating < 1
        assert result.thickness_summary.utilization < 1
        assert result.plate_check is not None

    def test_thin_plate_fails_thickness_only(self, dn200_pn16, good_manual):
        result = verify_manual_geometry(dn200_pn16, dataclasses.replace(good_manual, thickness=10.0), 16)
        assert not result.pass_
        assert result.bolt_summary.pass_
        assert not result.thickness_summary.pass_
        assert result.thickness_summary.utilization > 1

    def test_corrosion_allowance_from_manual(self, dn200_pn16, good_manual):
        plain = verify_manual_geometry(dn200_pn16, good_manual, 16)
        corroded = verify_manual_geometry(dn200_pn16, dataclasses.replace(good_manual, corrosion_allowance=3.0), 16)
        assert corroded.thickness_summary.required_with_ca == pytest.approx(plain.thickness_summary.required_with_ca + 3.0)

    def test_placeholder_fastener_blocks(self, dn200_pn16, good_manual):
        manual = dataclasses.replace(good_manual, fastener_grade_id="EN_25CrMo4")
        result = verify_manual_geometry(dn200_pn16, manual, 16)
        assert not result.pass_
        assert result.errors == ["Material only. Define property class or provide proof/yield."]
        assert not result.bolt_summary.pass_
        assert result.bolt_summary.torque is None
        assert result.bolt_summary.failure_reason is None
        assert result.thickness_summary.pass_

    def test_too_few_bolts_fails_bolting(self, dn200_pn16, good_manual):
        manual = dataclasses.replace(good_manual, bolt_count=4, bolt_size="M16", bolt_hole_diameter=18.0)
        result = verify_manual_geometry(dn200_pn16, manual, 16)
        assert not result.pass_
        assert not result.bolt_summary.pass_
        assert result.bolt_summary.torque is None
        assert result.bolt_summary.failure_reason.case == "seating"

    def test_custom_gasket(self, dn200_pn16, good_manual):
        manual = dataclasses.replace(good_manual, gasket_id=200.0, gasket_od=250.0)
        result = verify_manual_geometry(dn200_pn16, manual, 16)
        assert result.gasket_summary.gasket.id == 200
        assert result.gasket_summary.gasket.effective_diameter == pytest.approx(225)

    def test_default_pressure_class(self, dn200_pn16, good_manual):
        assert verify_manual_geometry(dn200_pn16, good_manual) == verify_manual_geometry(dn200_pn16, good_manual, 16)

    def test_lever_arm_floor_with_narrow_gasket(self, dn200_pn16, good_manual):
        # 1 mm wide gasket, G = 201: k = 208 gives a raw arm of 3.5 mm, k = 209 exactly 4 mm
        narrow = dataclasses.replace(good_manual, gasket_id=200.0, gasket_od=202.0)
        floored = verify_manual_geometry(dn200_pn16, dataclasses.replace(narrow, bolt_circle=208.0), 16)
        at_floor = verify_manual_geometry(dn200_pn16, dataclasses.replace(narrow, bolt_circle=209.0), 16)
        wider = verify_manual_geometry(dn200_pn16, dataclasses.replace(narrow, bolt_circle=212.0), 16)
        assert floored.geometry.ok and at_floor.geometry.ok
        assert floored.thickness_summary.requirement == at_floor.thickness_summary.requirement
        assert wider.thickness_summary.requirement.asme > at_floor.thickness_summary.requirement.asme
