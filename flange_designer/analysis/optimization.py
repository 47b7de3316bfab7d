import math
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from flange_designer.analysis.basis import DesignBasis, design_basis
from flange_designer.analysis.bolting import (
    bolt_area_check,
    bolt_torque,
    fastener_geometry,
    resolve_selection,
)
from flange_designer.analysis.gasket import gasket_geometry
from flange_designer.analysis.thickness import lever_arm, plate_check, required_thickness
from flange_designer.constants import (
    EDGE_MARGIN_FACTOR,
    GASKET_BOLT_CLEARANCE_MM,
    LIGAMENT_FACTOR,
    LIGAMENT_MIN_MM,
    OD_OVER_DN_MM,
    OD_OVER_GASKET_MM,
    PREFERENCE_MIN_BOLTS,
    PREFERENCE_MIN_WEIGHT,
    PREFERENCES,
)
from flange_designer.database.catalogs import find_nearest_standard, min_standard_bolt_circle
from flange_designer.logging import get_logger
from flange_designer.models.flange import (
    BoltAreaCheck,
    CalculationInput,
    FailureReason,
    FastenerGeometry,
    FastenerSelection,
    FastenerSpec,
    FlangeDimensions,
)
from flange_designer.models.results import (
    BoltingSummary,
    Infeasible,
    Sized,
    SizedResult,
    SizingCandidate,
    SizingOutcome,
)

logger = get_logger(__name__)

BOLT_COUNTS = (4, 8, 12, 16, 20, 24, 28, 32, 36)
BOLT_SIZES = ("M16", "M20", "M24", "M27", "M30", "M33", "M36", "M39", "M42", "M45", "M48", "M52", "M56", "M60", "M64")


@dataclass(frozen=True)
class BoltPattern:
    """A bolt count x size combination with its bolt circle and bolting check."""
    bolt_count: int
    geometry: FastenerGeometry
    fastener: FastenerSpec
    bolt_circle: float
    bolt_circle_raw: float
    bolt_circle_clamped: bool
    lever_arm: float
    area_check: BoltAreaCheck


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def bolt_circle_from_holes(bolt_count: int, hole_diameter: float, bolt_diameter: float) -> float:
    """Smallest bolt circle whose chord between holes leaves the minimum ligament."""
    ligament = max(LIGAMENT_MIN_MM, bolt_diameter * LIGAMENT_FACTOR)
    chord = hole_diameter + ligament
    return chord / math.sin(math.pi / bolt_count)


def candidate_bolt_circle(
    bolt_count: int,
    hole_diameter: float,
    bolt_diameter: float,
    gasket_od: float,
    min_standard: Optional[float],
) -> Tuple[float, float, bool]:
    """(bolt circle, bolt circle before the table floor, floor bound)."""
    raw = max(bolt_circle_from_holes(bolt_count, hole_diameter, bolt_diameter), gasket_od + GASKET_BOLT_CLEARANCE_MM)
    if min_standard is None:
        return raw, raw, False
    bolt_circle = max(raw, min_standard)
    return bolt_circle, raw, min_standard > raw


def outer_diameter(bolt_circle: float, hole_diameter: float, bolt_diameter: float, dn: float, gasket_diameter: float) -> float:
    edge_margin = bolt_diameter * EDGE_MARGIN_FACTOR
    by_bolts = bolt_circle + 2 * (edge_margin + hole_diameter / 2)
    return max(by_bolts, dn + OD_OVER_DN_MM, gasket_diameter + OD_OVER_GASKET_MM)


def plate_weight(outer_diameter_mm: float, thickness_mm: float, density: float) -> float:
    """Disc mass in kg (density in kg/dm^3)."""
    return math.pi * (outer_diameter_mm / 2000) ** 2 * (thickness_mm / 1000) * density * 1000


def iter_bolt_patterns(
    input: CalculationInput,
    basis: DesignBasis,
    selection: FastenerSelection,
    bolt_counts: Iterable[int] = BOLT_COUNTS,
    bolt_sizes: Iterable[str] = BOLT_SIZES,
) -> Iterator[BoltPattern]:
    """Lazily walk bolt count x bolt size, skipping sizes without thread data or strength data."""
    min_standard = min_standard_bolt_circle(input.dn)
    gasket = basis.gasket
    for bolt_count in bolt_counts:
        for size in bolt_sizes:
            geometry = fastener_geometry(size, selection.standard)
            if not geometry.is_complete:
                continue
            fastener = resolve_selection(selection, geometry.diameter)
            if fastener.properties.placeholder:
                continue
            bolt_circle, raw, clamped = candidate_bolt_circle(
                bolt_count, geometry.hole_diameter, geometry.diameter, gasket.od, min_standard
            )
            yield BoltPattern(
                bolt_count=bolt_count,
                geometry=geometry,
                fastener=fastener,
                bolt_circle=bolt_circle,
                bolt_circle_raw=raw,
                bolt_circle_clamped=clamped,
                lever_arm=lever_arm(bolt_circle, gasket.effective_diameter),
                area_check=bolt_area_check(
                    basis.loads, fastener.properties.allowable_op, bolt_count, geometry.stress_area
                ),
            )


def build_candidate(pattern: BoltPattern, input: CalculationInput, basis: DesignBasis) -> SizingCandidate:
    """Outline, thickness, weight and torque for a bolt pattern that passed the area check."""
    geometry = pattern.geometry
    G = basis.gasket.effective_diameter
    od = outer_diameter(pattern.bolt_circle, geometry.hole_diameter, geometry.diameter, input.dn, G)

    thickness = required_thickness(
        G, pattern.lever_arm, basis.force_op, basis.force_test, basis.allowable_op, basis.allowable_test
    )
    final_thickness = thickness.required + input.corrosion_allowance
    recommended = find_nearest_standard(final_thickness)

    case = pattern.area_check.governing_case
    torque = bolt_torque(
        bolt_diameter=geometry.diameter,
        stress_area=geometry.stress_area,
        proof_stress=pattern.fastener.properties.proof,
        required_preload=basis.loads.for_case(case) / pattern.bolt_count,
        governing_case=case,
        friction_preset=input.friction_preset,
        method=input.tightening_method,
        geometry_assumption=geometry.geometry_assumption,
    )

    return SizingCandidate(
        dims=FlangeDimensions(
            outer_diameter=round_half_up(od),
            bolt_circle=round_half_up(pattern.bolt_circle),
            bolt_count=pattern.bolt_count,
            thread_size=geometry.size,
            hole_diameter=geometry.hole_diameter,
        ),
        bolt_circle=pattern.bolt_circle,
        bolt_circle_raw=pattern.bolt_circle_raw,
        bolt_circle_clamped=pattern.bolt_circle_clamped,
        outer_diameter=od,
        lever_arm=pattern.lever_arm,
        force_op=basis.force_op,
        force_test=basis.force_test,
        thickness=thickness,
        final_thickness=final_thickness,
        recommended_thickness=recommended,
        weight=plate_weight(od, recommended, basis.density),
        bolting=BoltingSummary(
            loads=basis.loads,
            areas=pattern.area_check,
            fastener=pattern.fastener,
            geometry=geometry,
            friction_preset=input.friction_preset,
            pass_=True,
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


def candidate_sort_key(preference: str) -> Callable[[SizingCandidate], tuple]:
    """
    Ranking: min_bolts puts bolt count first; then weight, recommended
    thickness and bolt count, all ascending.
    """
    if preference not in PREFERENCES:
        raise ValueError(f"Unknown sizing preference: {preference!r}")

    def key(candidate: SizingCandidate) -> tuple:
        lead = (candidate.bolt_count,) if preference == PREFERENCE_MIN_BOLTS else ()
        return lead + (candidate.weight, candidate.recommended_thickness, candidate.bolt_count)

    return key


def rank_candidates(candidates: Iterable[SizingCandidate], preference: str) -> List[SizingCandidate]:
    """Stable sort; equal keys keep search order."""
    return sorted(candidates, key=candidate_sort_key(preference))


def _prepare(
    input: CalculationInput, target_pn: int, selection: FastenerSelection
) -> Optional[Tuple[DesignBasis, FastenerSelection]]:
    """Design basis plus the selection with its grade resolved against the catalog."""
    if input.pressure_op <= 0 or input.corrosion_allowance < 0:
        logger.info("Custom sizing skipped: operating pressure must be > 0 and corrosion allowance >= 0")
        return None
    fastener = resolve_selection(selection)
    if fastener.properties.placeholder:
        logger.info("Custom sizing blocked: fastener grade %s has placeholder data", fastener.grade_id)
        return None
    fallbacks = []
    if fastener.fallback:
        fallbacks.append(f"Fastener grade {selection.grade_id!r} not found: {fastener.grade_id} used.")
    gasket = gasket_geometry(input.dn, target_pn, input.gasket_facing, input.gasket_thickness, input.gasket_material)
    resolved = replace(selection, grade_id=fastener.grade_id)
    return design_basis(input, gasket, fallbacks), resolved


def size_custom_flange(
    input: CalculationInput,
    target_pn: int,
    selection: FastenerSelection,
    preference: str = PREFERENCE_MIN_WEIGHT,
) -> Optional[SizedResult]:
    """
    Search bolt count x bolt size for the best blind flange at `target_pn`.

    Only patterns whose bolt area passes in all three load cases are kept;
    survivors are ranked by `preference`. Returns None when nothing passes or
    the fastener grade has no strength data.
    """
    key = candidate_sort_key(preference)
    prepared = _prepare(input, target_pn, selection)
    if prepared is None:
        return None
    basis, selection = prepared

    evaluated = 0
    passing = 0
    best = None
    best_key = None
    for pattern in iter_bolt_patterns(input, basis, selection):
        evaluated += 1
        if not pattern.area_check.pass_:
            continue
        passing += 1
        candidate = build_candidate(pattern, input, basis)
        candidate_key = key(candidate)
        if best is None or candidate_key < best_key:
            best, best_key = candidate, candidate_key

    logger.debug("Custom sizing DN%s PN%s: %d patterns evaluated, %d passed", input.dn, target_pn, evaluated, passing)
    if best is None:
        logger.info("Custom sizing DN%s PN%s: no bolt pattern passes the bolt area check", input.dn, target_pn)
        return None
    logger.debug("Chosen: %d x %s, t=%s mm, %.1f kg", best.bolt_count, best.bolt_size, best.recommended_thickness, best.weight)

    fallbacks = list(basis.fallbacks)
    if best.bolting.geometry.geometry_assumption:
        fallbacks.append(f"Fastener geometry: {best.bolting.geometry.geometry_assumption}.")

    return SizedResult(
        dims=best.dims,
        pressure_class=target_pn,
        source="custom",
        gasket=basis.gasket,
        hydrotest=basis.hydrotest,
        pressure_test_used=basis.pressure_test_used,
        allowable_op=basis.allowable_op,
        allowable_test=basis.allowable_test,
        candidate=best,
        preference=preference,
        bolt_circle_min_standard=min_standard_bolt_circle(input.dn),
        candidates_evaluated=evaluated,
        candidates_passing=passing,
        fallbacks=fallbacks,
    )


def diagnose_sizing_failure(
    input: CalculationInput,
    target_pn: int,
    selection: FastenerSelection,
) -> Optional[FailureReason]:
    """
    Closest miss over the whole search space: the failing pattern with the
    smallest bolt area shortfall. None for placeholder fasteners or when no
    pattern fails.
    """
    prepared = _prepare(input, target_pn, selection)
    if prepared is None:
        return None
    basis, selection = prepared

    best: Optional[FailureReason] = None
    for pattern in iter_bolt_patterns(input, basis, selection):
        failure = pattern.area_check.failure_reason()
        if failure is None:
            continue
        if best is None or failure.delta_area < best.delta_area:
            best = FailureReason(
                case=failure.case,
                required_area=failure.required_area,
                provided_area=failure.provided_area,
                delta_area=failure.delta_area,
                bolt_count=pattern.bolt_count,
                bolt_size=pattern.geometry.size,
            )
    return best


def run_custom_sizing(
    input: CalculationInput,
    target_pn: int,
    selection: FastenerSelection,
    preference: str = PREFERENCE_MIN_WEIGHT,
) -> SizingOutcome:
    """Search and, when it comes back empty, the closest-miss diagnostic."""
    result = size_custom_flange(input, target_pn, selection, preference)
    if result is not None:
        return Sized(result)
    return Infeasible(diagnose_sizing_failure(input, target_pn, selection))
