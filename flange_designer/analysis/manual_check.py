import dataclasses
import math
from numbers import Real
from typing import List, Optional

from flange_designer.analysis.basis import design_basis
from flange_designer.analysis.bolting import (
    blocked_area_check,
    bolt_area_check,
    bolt_torque,
    fastener_feature_od,
    fastener_geometry,
    geometry_check,
    resolve_fastener,
)
from flange_designer.analysis.gasket import custom_gasket_geometry, gasket_geometry
from flange_designer.analysis.thickness import lever_arm, plate_check, required_thickness
from flange_designer.database.catalogs import calculated_pressure_class
from flange_designer.database.fasteners import BOLT_STRESS_AREA
from flange_designer.logging import get_logger
from flange_designer.models.flange import CalculationInput, GeometryCheck, ManualGeometry
from flange_designer.models.results import (
    BoltingSummary,
    ManualCheckResult,
    ManualGasketSummary,
    ManualThicknessSummary,
)

logger = get_logger(__name__)

PLACEHOLDER_FASTENER_MESSAGE = "Fastener data is placeholder. Provide proof/yield/allowables to enable manual check."

_NUMERIC_FIELDS = ("bolt_circle", "bolt_count", "bolt_hole_diameter", "outer_diameter", "thickness")


def _check_types(manual: ManualGeometry):
    for name in _NUMERIC_FIELDS:
        value = getattr(manual, name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, Real)):
            raise ValueError(f"ManualGeometry.{name} must be a number, got {type(value).__name__}")
        if value is not None and not math.isfinite(value):
            raise ValueError(f"ManualGeometry.{name} must be finite, got {value}")
    if manual.bolt_count is not None and int(manual.bolt_count) != manual.bolt_count:
        raise ValueError(f"ManualGeometry.bolt_count must be a whole number, got {manual.bolt_count}")
    if manual.bolt_size is not None and not isinstance(manual.bolt_size, str):
        raise ValueError(f"ManualGeometry.bolt_size must be a string, got {type(manual.bolt_size).__name__}")


def validate_manual_geometry(manual: ManualGeometry) -> List[str]:
    """Presence and positivity of the user geometry. Wrong field types raise ValueError."""
    _check_types(manual)
    errors = []
    if not manual.bolt_circle or manual.bolt_circle <= 0:
        errors.append("Bolt circle (k) is required.")
    if not manual.bolt_count or manual.bolt_count < 2:
        errors.append("Bolt count must be at least 2.")
    if not manual.bolt_hole_diameter or manual.bolt_hole_diameter <= 0:
        errors.append("Bolt hole diameter is required.")
    if not manual.outer_diameter or manual.outer_diameter <= 0:
        errors.append("Outer diameter is required.")
    if not manual.thickness or manual.thickness <= 0:
        errors.append("Thickness is required.")
    if not manual.bolt_size:
        errors.append("Bolt size is required.")
    elif manual.bolt_size not in BOLT_STRESS_AREA:
        errors.append(f"Bolt size {manual.bolt_size} is not in the thread tables.")
    return errors


def _manual_gasket(input: CalculationInput, manual: ManualGeometry, target_pn: int):
    facing = manual.gasket_facing or input.gasket_facing
    material = manual.gasket_material or input.gasket_material
    thickness = manual.gasket_thickness if manual.gasket_thickness is not None else input.gasket_thickness
    if manual.gasket_id and manual.gasket_od:
        return custom_gasket_geometry(manual.gasket_id, manual.gasket_od, facing, thickness, material)
    return gasket_geometry(input.dn, target_pn, facing, thickness, material)


def verify_manual_geometry(
    input: CalculationInput,
    manual: ManualGeometry,
    target_pn: Optional[int] = None,
) -> ManualCheckResult:
    """
    Run the sizing physics against a user supplied geometry.

    Order: field validation (stops here on error), edge/spacing/gasket
    clearance (stops after the gasket loads and hydrotest), fastener data,
    bolt area, thickness. Torque only for a passing, non-placeholder bolting.
    """
    errors = validate_manual_geometry(manual)
    if errors:
        return ManualCheckResult(
            pass_=False,
            errors=errors,
            geometry=GeometryCheck(edge_ok=False, spacing_ok=False, gasket_ok=False),
            manual=manual,
        )

    if target_pn is None:
        target_pn = calculated_pressure_class(input.pressure_op)
    ca = manual.corrosion_allowance if manual.corrosion_allowance is not None else input.corrosion_allowance
    input = dataclasses.replace(input, corrosion_allowance=ca, friction_preset=manual.friction_preset)

    gasket = _manual_gasket(input, manual, target_pn)
    bolt = fastener_geometry(manual.bolt_size, manual.fastener_standard)
    geometry = geometry_check(
        manual.bolt_circle,
        manual.outer_diameter,
        manual.bolt_count,
        fastener_feature_od(manual.fastener_standard, manual.bolt_size),
        gasket_od=gasket.od,
    )

    fastener = resolve_fastener(manual.fastener_grade_id, manual.fastener_standard, manual.fastener_type,
                                bolt_diameter=bolt.diameter)
    fallbacks = []
    if fastener.fallback:
        fallbacks.append(f"Fastener grade {manual.fastener_grade_id!r} not found: {fastener.grade_id} used.")
    if bolt.geometry_assumption:
        fallbacks.append(f"Fastener geometry: {bolt.geometry_assumption}.")
    basis = design_basis(input, gasket, fallbacks)
    gasket_summary = ManualGasketSummary(gasket=gasket, loads=basis.loads)

    if not geometry.ok:
        return ManualCheckResult(
            pass_=False,
            errors=list(geometry.notes),
            geometry=geometry,
            manual=manual,
            gasket_summary=gasket_summary,
            hydrotest=basis.hydrotest,
            pressure_test_used=basis.pressure_test_used,
            fallbacks=basis.fallbacks,
        )

    placeholder = fastener.properties.placeholder
    if placeholder:
        logger.info("Manual check blocked: fastener grade %s has placeholder data", fastener.grade_id)
        errors.append(fastener.properties.notes or PLACEHOLDER_FASTENER_MESSAGE)
        areas = blocked_area_check(manual.bolt_count, bolt.stress_area)
    else:
        areas = bolt_area_check(basis.loads, fastener.properties.allowable_op, manual.bolt_count, bolt.stress_area)

    torque = None
    if areas.pass_ and not placeholder:
        case = areas.governing_case
        torque = bolt_torque(
            bolt_diameter=bolt.diameter,
            stress_area=bolt.stress_area,
            proof_stress=fastener.properties.proof,
            required_preload=basis.loads.for_case(case) / manual.bolt_count,
            governing_case=case,
            friction_preset=manual.friction_preset,
            method=manual.tightening_method,
            geometry_assumption=bolt.geometry_assumption,
        )
    bolt_summary = BoltingSummary(
        loads=basis.loads,
        areas=areas,
        fastener=fastener,
        geometry=bolt,
        friction_preset=manual.friction_preset,
        pass_=areas.pass_ and not placeholder,
        failure_reason=None if placeholder else areas.failure_reason(),
        torque=torque,
    )

    G = gasket.effective_diameter
    requirement = required_thickness(
        G,
        lever_arm(manual.bolt_circle, G),
        basis.force_op,
        basis.force_test,
        basis.allowable_op,
        basis.allowable_test,
    )
    required_with_ca = requirement.required + ca
    thickness_summary = ManualThicknessSummary(
        requirement=requirement,
        required_with_ca=required_with_ca,
        provided=manual.thickness,
        utilization=required_with_ca / manual.thickness,
        pass_=manual.thickness >= required_with_ca,
    )

    passed = not errors and geometry.ok and bolt_summary.pass_ and thickness_summary.pass_
    return ManualCheckResult(
        pass_=passed,
        errors=errors,
        geometry=geometry,
        manual=manual,
        bolt_summary=bolt_summary,
        thickness_summary=thickness_summary,
        gasket_summary=gasket_summary,
        plate_check=plate_check(
            input.pressure_op,
            basis.pressure_test_used,
            G / 2,
            manual.thickness,
            ca,
            basis.yield_at_test,
            basis.modulus,
        ),
        hydrotest=basis.hydrotest,
        pressure_test_used=basis.pressure_test_used,
        fallbacks=basis.fallbacks,
    )
