from dataclasses import dataclass, field
from typing import List, Optional

from flange_designer.analysis.allowables import allowable_stress, hydrotest_pressure, yield_at_temperature
from flange_designer.analysis.bolting import required_bolt_loads
from flange_designer.analysis.thickness import pressure_end_force
from flange_designer.constants import (
    CODE_EN,
    DEFAULT_FRICTION,
    DEFAULT_MODULUS_MPA,
    FALLBACK_ALLOWABLE_MPA,
    FALLBACK_DENSITY,
    HYDRO_EN13445,
    K_FACTORS,
    TEST_TEMPERATURE_C,
    USAGE_OPERATING,
    USAGE_TEST,
)
from flange_designer.database.materials import DEFAULT_GASKET_MATERIAL, GASKET_MATERIALS, get_material
from flange_designer.models.flange import BoltingLoads, CalculationInput, GasketGeometry
from flange_designer.models.results import HydrotestResult


@dataclass(frozen=True)
class DesignBasis:
    """Quantities shared by every bolt pattern for one input and gasket."""
    gasket: GasketGeometry
    hydrotest: HydrotestResult
    pressure_test_used: float  # bar
    allowable_op: float  # MPa, plate at design temperature
    allowable_test: float  # MPa, plate at test temperature
    yield_at_test: float
    modulus: float
    density: float
    loads: BoltingLoads
    force_op: float  # N
    force_test: float  # N
    fallbacks: List[str] = field(default_factory=list)


def pressure_test_used(input: CalculationInput, hydro: HydrotestResult) -> float:
    """User test pressure when given, else the derived one; never below operating."""
    chosen = input.pressure_test if input.pressure_test > 0 else hydro.test_pressure
    return max(chosen, input.pressure_op)


def design_basis(input: CalculationInput, gasket: GasketGeometry, fallbacks: Optional[List[str]] = None) -> DesignBasis:
    notes = list(fallbacks or [])
    if gasket.material not in GASKET_MATERIALS:
        notes.append(f"Gasket material {gasket.material!r} not found: {DEFAULT_GASKET_MATERIAL} factors used.")
    if input.friction_preset not in K_FACTORS:
        notes.append(f"Friction preset {input.friction_preset!r} not found: {DEFAULT_FRICTION} K-factor used.")
    material = get_material(input.material)
    if material is None:
        notes.append(
            f"Material {input.material!r} not found: allowable {FALLBACK_ALLOWABLE_MPA:.0f} MPa, "
            f"density {FALLBACK_DENSITY} kg/dm3 assumed."
        )

    hydro = hydrotest_pressure(
        HYDRO_EN13445,
        input.pressure_op,
        input.pressure_op,
        input.temperature,
        TEST_TEMPERATURE_C,
        input.material,
    )
    p_test = pressure_test_used(input, hydro)

    # pressure acts on the gasket bore
    pressure_diameter = gasket.id or gasket.effective_diameter

    return DesignBasis(
        gasket=gasket,
        hydrotest=hydro,
        pressure_test_used=p_test,
        allowable_op=allowable_stress(input.material, input.temperature, CODE_EN, USAGE_OPERATING),
        allowable_test=allowable_stress(input.material, TEST_TEMPERATURE_C, CODE_EN, USAGE_TEST),
        yield_at_test=yield_at_temperature(material, TEST_TEMPERATURE_C) if material else FALLBACK_ALLOWABLE_MPA,
        modulus=(material.modulus if material and material.modulus else DEFAULT_MODULUS_MPA),
        density=material.density if material else FALLBACK_DENSITY,
        loads=required_bolt_loads(gasket, input.pressure_op, p_test),
        force_op=pressure_end_force(pressure_diameter, input.pressure_op),
        force_test=pressure_end_force(pressure_diameter, p_test),
        fallbacks=notes,
    )
