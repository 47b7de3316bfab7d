import numpy as np

from flange_designer.constants import (
    BAR_TO_MPA,
    DEFAULT_MODULUS_MPA,
    DEFLECTION_LIMIT_MM,
    EN_BENDING_FACTOR,
    LEVER_ARM_MIN_MM,
    POISSON_RATIO,
)
from flange_designer.models.results import AsmeGoverning, EnGoverning, PlateCheck, ThicknessRequirement


def lever_arm(bolt_circle: float, gasket_diameter: float) -> float:
    """Radial distance bolt circle -> gasket reaction, floored at 4 mm."""
    return max((bolt_circle - gasket_diameter) / 2, LEVER_ARM_MIN_MM)


def pressure_end_force(pressure_diameter: float, pressure_bar: float) -> float:
    """Pressure force (N) on a disc of the given diameter (mm)."""
    return float(np.pi * (pressure_diameter / 2) ** 2 * pressure_bar * BAR_TO_MPA)


def _bending_thickness(gasket_diameter, arm, forces, allowables, factor=1.0):
    # t = sqrt(6 M / (pi G S)), M = F * arm * factor
    moments = np.asarray(forces, dtype=float) * arm * factor
    return np.sqrt(6 * moments / (np.pi * gasket_diameter * np.asarray(allowables, dtype=float)))


def required_thickness(
    gasket_diameter: float,
    arm: float,
    force_op: float,
    force_test: float,
    allowable_op: float,
    allowable_test: float,
) -> ThicknessRequirement:
    """
    Plate thickness under both simplified formulas, each at operating and test
    force. ASME: UG-34 style edge moment. EN: same moment scaled by 0.95.
    The formula with the larger maximum governs (ASME on a tie).
    """
    forces = (force_op, force_test)
    allowables = (allowable_op, allowable_test)
    asme_op, asme_test = _bending_thickness(gasket_diameter, arm, forces, allowables)
    en_op, en_test = _bending_thickness(gasket_diameter, arm, forces, allowables, EN_BENDING_FACTOR)

    asme = max(float(asme_op), float(asme_test))
    en = max(float(en_op), float(en_test))
    governing = EnGoverning(en) if en > asme else AsmeGoverning(asme)
    return ThicknessRequirement(
        asme_op=float(asme_op),
        asme_test=float(asme_test),
        en_op=float(en_op),
        en_test=float(en_test),
        governing=governing,
    )


def plate_stress(pressure_mpa: float, radius: float, thickness: float, nu: float = POISSON_RATIO) -> float:
    """Centre bending stress of a simply supported circular plate."""
    if thickness <= 0 or radius <= 0:
        return float("inf")
    return 3 * pressure_mpa * radius ** 2 * (3 + nu) / (8 * thickness ** 2)


def plate_deflection(
    pressure_mpa: float,
    radius: float,
    thickness: float,
    modulus: float = DEFAULT_MODULUS_MPA,
    nu: float = POISSON_RATIO,
) -> float:
    """Centre deflection of a simply supported circular plate."""
    if thickness <= 0 or radius <= 0:
        return float("inf")
    rigidity = modulus * thickness ** 3 / (12 * (1 - nu ** 2))
    return (5 + nu) * pressure_mpa * radius ** 4 / (64 * rigidity * (1 + nu))


def plate_check(
    pressure_op_bar: float,
    pressure_test_bar: float,
    radius: float,
    thickness: float,
    corrosion_allowance: float,
    yield_at_test: float,
    modulus: float = DEFAULT_MODULUS_MPA,
) -> PlateCheck:
    # new plate for the test, corroded plate for service deflection
    return PlateCheck(
        stress_test=plate_stress(pressure_test_bar * BAR_TO_MPA, radius, thickness),
        yield_at_test=yield_at_test,
        deflection_op=plate_deflection(pressure_op_bar * BAR_TO_MPA, radius, max(0.0, thickness - corrosion_allowance), modulus),
        deflection_limit=DEFLECTION_LIMIT_MM,
    )
