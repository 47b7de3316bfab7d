from typing import Optional

from flange_designer.analysis.basis import design_basis
from flange_designer.analysis.bolting import (
    blocked_area_check,
    bolt_area_check,
    bolt_torque,
    fastener_geometry,
    resolve_fastener,
)
from flange_designer.analysis.gasket import gasket_geometry
from flange_designer.analysis.optimization import plate_weight
from flange_designer.analysis.thickness import lever_arm, plate_check, required_thickness
from flange_designer.database.catalogs import (
    calculated_pressure_class,
    find_nearest_standard,
    max_available_pressure_class,
    pick_pressure_class,
)
from flange_designer.database.fasteners import parse_thread_diameter
from flange_designer.logging import get_logger
from flange_designer.models.flange import CalculationInput
from flange_designer.models.results import BoltingSummary, SizedResult, SizingCandidate

logger = get_logger(__name__)


def needs_custom_sizing(dn: float, pressure_op: float) -> bool:
    """True when the required class is above what the table catalogs for this DN (or the DN is missing)."""
    ceiling = max_available_pressure_class(dn)
    if ceiling is None:
        return True
    return calculated_pressure_class(pressure_op) > ceiling


def calculate_standard_flange(input: CalculationInput) -> Optional[SizedResult]:
    """
    Check the EN 1092-1 blind flange for the operating pressure class.

    The table fixes D, k and the bolts; thickness, bolting and torque are
    computed with the same equations as the custom search. The bolting check
    may fail here; it is reported, not filtered. None when DN/PN is not cataloged.
    """
    target_pn = calculated_pressure_class(input.pressure_op)
    picked = pick_pressure_class(input.dn, target_pn)
    if picked is None:
        logger.info("DN%s PN%s is not in the standard table", input.dn, target_pn)
        return None
    dims, selected_pn = picked

    fastener = resolve_fastener(
        input.fastener_grade_id,
        input.fastener_standard,
        input.fastener_type,
        input.bolt_grade,
        parse_thread_diameter(dims.thread_size),
    )
    geometry = fastener_geometry(dims.thread_size, fastener.standard)
    fallbacks = []
    if fastener.fallback:
        fallbacks.append(f"Fastener grade {input.fastener_grade_id!r} not found: {fastener.grade_id} used.")
    if geometry.geometry_assumption:
        fallbacks.append(f"Fastener geometry: {geometry.geometry_assumption}.")

    gasket = gasket_geometry(input.dn, selected_pn, input.gasket_facing, input.gasket_thickness, input.gasket_material)
    basis = design_basis(input, gasket, fallbacks)
    G = gasket.effective_diameter

    placeholder = fastener.properties.placeholder
    if placeholder:
        logger.info("Standard flange bolting blocked: fastener grade %s has placeholder data", fastener.grade_id)
        areas = blocked_area_check(dims.bolt_count, geometry.stress_area)
    else:
        areas = bolt_area_check(basis.loads, fastener.properties.allowable_op, dims.bolt_count, geometry.stress_area)

    torque = None
    if areas.pass_ and not placeholder:
        case = areas.governing_case
        torque = bolt_torque(
            bolt_diameter=geometry.diameter,
            stress_area=geometry.stress_area,
            proof_stress=fastener.properties.proof,
            required_preload=basis.loads.for_case(case) / dims.bolt_count,
            governing_case=case,
            friction_preset=input.friction_preset,
            method=input.tightening_method,
            geometry_assumption=geometry.geometry_assumption,
        )

    arm = lever_arm(dims.bolt_circle, G)
    thickness = required_thickness(G, arm, basis.force_op, basis.force_test, basis.allowable_op, basis.allowable_test)
    final_thickness = thickness.required + input.corrosion_allowance
    recommended = find_nearest_standard(final_thickness)

    candidate = SizingCandidate(
        dims=dims,
        bolt_circle=dims.bolt_circle,
        bolt_circle_raw=dims.bolt_circle,
        bolt_circle_clamped=False,
        outer_diameter=dims.outer_diameter,
        lever_arm=arm,
        force_op=basis.force_op,
        force_test=basis.force_test,
        thickness=thickness,
        final_thickness=final_thickness,
        recommended_thickness=recommended,
        weight=plate_weight(dims.outer_diameter, recommended, basis.density),
        bolting=BoltingSummary(
            loads=basis.loads,
            areas=areas,
            fastener=fastener,
            geometry=geometry,
            friction_preset=input.friction_preset,
            pass_=areas.pass_ and not placeholder,
            failure_reason=None if placeholder else areas.failure_reason(),
            torque=torque,
        ),
        plate_check=plate_check(
            input.pressure_op,
            basis.pressure_test_used,
            G / 2,
            recommended,
            input.corrosion_allowance,
            basis.yield_at_test,
            basis.modulus,
        ),
    )

    return SizedResult(
        dims=dims,
        pressure_class=selected_pn,
        source="en1092",
        gasket=gasket,
        hydrotest=basis.hydrotest,
        pressure_test_used=basis.pressure_test_used,
        allowable_op=basis.allowable_op,
        allowable_test=basis.allowable_test,
        candidate=candidate,
        fallbacks=basis.fallbacks,
    )
