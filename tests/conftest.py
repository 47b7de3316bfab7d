import pytest

from flange_designer.models.flange import CalculationInput, FastenerSelection, ManualGeometry, MaterialSpec


@pytest.fixture
def step_material():
    return MaterialSpec(name="Step test steel", yield_by_temp={200: 215, 20: 265, 100: 243}, density=7.85)


@pytest.fixture
def unit_ratio_material():
    # 210 / 1.05 == 300 / 1.5: hydrotest allowable ratio of exactly 1 between 20 and 100 degC
    return MaterialSpec(name="Unit ratio steel", yield_by_temp={20: 210, 100: 300}, density=7.85)


@pytest.fixture
def dn200_pn40():
    return CalculationInput(dn=200, pressure_op=40.0, pressure_test=0.0, temperature=20.0, material="P265GH")


@pytest.fixture
def dn200_pn16():
    return CalculationInput(dn=200, pressure_op=16.0, pressure_test=0.0, temperature=20.0, material="P265GH")


@pytest.fixture
def en88():
    return FastenerSelection(standard="EN", type="BOLT", grade_id="EN_8.8")


@pytest.fixture
def placeholder_selection():
    return FastenerSelection(standard="EN", type="BOLT", grade_id="EN_25CrMo4")


@pytest.fixture
def good_manual():
    # DN200 PN16 gasket (OD 238): 12 x M24 on k=320 clears edge, pitch and gasket
    return ManualGeometry(
        bolt_circle=320.0,
        bolt_count=12,
        bolt_hole_diameter=26.0,
        outer_diameter=420.0,
        thickness=30.0,
        bolt_size="M24",
    )
