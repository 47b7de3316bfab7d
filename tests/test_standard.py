import pytest

from flange_designer.analysis.standard import calculate_standard_flange, needs_custom_sizing
from flange_designer.database.catalogs import (
    EN1092_DB,
    calculated_pressure_class,
    find_nearest_standard,
    max_available_pressure_class,
    min_standard_bolt_circle,
    pick_pressure_class,
)
from flange_designer.models.flange import CalculationInput


class TestCatalog:
    @pytest.mark.parametrize("pressure, pn", [(0, 10), (10, 10), (10.5, 16), (16, 16), (17, 25), (320, 320), (500, 400)])
    def test_calculated_pressure_class(self, pressure, pn):
        assert calculated_pressure_class(pressure) == pn

    def test_max_available_pressure_class(self):
        assert max_available_pressure_class(200) == 400
        assert max_available_pressure_class(250) == 160
        assert max_available_pressure_class(175) is None

    def test_pick_pressure_class_rounds_up(self):
        dims, pn = pick_pressure_class(100, 25)
        assert pn == 40
        assert dims == EN1092_DB[100][40]
        assert pick_pressure_class(250, 250) is None

    def test_min_standard_bolt_circle(self):
        assert min_standard_bolt_circle(200) == 490
        assert min_standard_bolt_circle(250) == 430
        assert min_standard_bolt_circle(175) is None

    def test_plate_ladder(self):
        assert find_nearest_standard(12.4) == 14
        assert find_nearest_standard(14) == 14
        assert find_nearest_standard(151.2) == 152


def test_needs_custom_sizing():
    assert not needs_custom_sizing(200, 16)
    assert needs_custom_sizing(250, 300)
    assert needs_custom_sizing(175, 10)


class TestStandardFlange:
    def test_dn200_pn16(self, dn200_pn16):
        result = calculate_standard_flange(dn200_pn16)
        assert result.source == "en1092"
        assert result.pressure_class == 16
        assert result.dims == EN1092_DB[200][16]
        assert result.bolting.pass_
        assert result.bolting.torque is not None
        assert result.recommended_thickness >= result.final_thickness
        assert result.weight > 0

    def test_not_cataloged(self):
        calc_input = CalculationInput(dn=250, pressure_op=300.0, pressure_test=0.0, temperature=20.0, material="P265GH")
        assert calculate_standard_flange(calc_input) is None

    def test_placeholder_fastener_reported(self):
        calc_input = CalculationInput(dn=200, pressure_op=16.0, pressure_test=0.0, temperature=20.0,
                                      material="P265GH", fastener_grade_id="EN_25CrMo4")
        result = calculate_standard_flange(calc_input)
        assert not result.bolting.pass_
        assert result.bolting.fastener.properties.placeholder
        assert result.bolting.torque is None

    def test_legacy_bolt_grade(self):
        calc_input = CalculationInput(dn=200, pressure_op=16.0, pressure_test=0.0, temperature=20.0,
                                      material="P265GH", bolt_grade="10.9")
        assert calculate_standard_flange(calc_input).bolting.fastener.grade_id == "EN_10.9"
