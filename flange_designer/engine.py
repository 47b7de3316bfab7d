"""
Public entry points of the blind flange engine.

Every function here is pure: same input, same output, no I/O. Results are
frozen dataclasses from `flange_designer.models`; the UI and report layers
only read them.
"""

from flange_designer.analysis.allowables import allowable_stress, hydrotest_pressure
from flange_designer.analysis.gasket import gasket_geometry
from flange_designer.analysis.manual_check import verify_manual_geometry
from flange_designer.analysis.optimization import diagnose_sizing_failure, run_custom_sizing, size_custom_flange
from flange_designer.analysis.standard import calculate_standard_flange, needs_custom_sizing
from flange_designer.models.flange import GasketGeometry
from flange_designer.models.results import HydrotestResult

__all__ = [
    "compute_allowable_stress",
    "compute_hydrotest_pressure",
    "compute_gasket_geometry",
    "size_custom_flange",
    "diagnose_sizing_failure",
    "verify_manual_geometry",
    "run_custom_sizing",
    "calculate_standard_flange",
    "needs_custom_sizing",
]


def compute_allowable_stress(material, temperature: float, code: str, usage: str) -> float:
    """Allowable stress in MPa; `material` is a catalog id or a MaterialSpec."""
    return allowable_stress(material, temperature, code, usage)


def compute_hydrotest_pressure(
    code: str,
    design_pressure: float,
    op_pressure: float,
    design_temp: float,
    test_temp: float,
    material_id,
) -> HydrotestResult:
    return hydrotest_pressure(code, design_pressure, op_pressure, design_temp, test_temp, material_id)


def compute_gasket_geometry(
    nominal_size: float,
    pressure_class: float,
    facing: str,
    thickness: float,
    material_id: str,
) -> GasketGeometry:
    return gasket_geometry(nominal_size, pressure_class, facing, thickness, material_id)
