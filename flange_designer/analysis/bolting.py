import math
from typing import List, Optional

from flange_designer.constants import (
    ASME_WASHER_FACTOR,
    BAR_TO_MPA,
    CASE_HYDROTEST,
    CASE_OPERATING,
    CASE_SEATING,
    CODE_ASME,
    DEFAULT_FRICTION,
    EDGE_CLEARANCE_MIN_MM,
    FASTENER_GAP_MIN_MM,
    FEATURE_OD_FROM_DIAMETER,
    K_FACTORS,
    PRELOAD_LIMIT_FACTOR,
    TIGHTENING_K_FACTOR,
)
from flange_designer.database.fasteners import (
    BOLT_HOLE_DIAMETER,
    BOLT_STRESS_AREA,
    DEFAULT_FASTENER_ID,
    FASTENER_CATALOG_BY_ID,
    LEGACY_BOLT_GRADE_MAP,
    METRIC_PITCH,
    NUT_AF_ISO4032,
    WASHER_OD_ISO7089,
    get_fastener_entry,
    get_size_band,
    parse_thread_diameter,
)
from flange_designer.logging import get_logger
from flange_designer.models.flange import (
    BoltAreaCheck,
    BoltingLoads,
    BoltTorqueResult,
    FastenerCatalogEntry,
    FastenerFeature,
    FastenerGeometry,
    FastenerProperties,
    FastenerSelection,
    FastenerSpec,
    GasketGeometry,
    GeometryCheck,
)

logger = get_logger(__name__)


# --- Fastener catalog resolution ---

def is_placeholder(entry: FastenerCatalogEntry) -> bool:
    """Placeholder rows carry no usable strength data (<= 1 MPa) or are flagged as such."""
    if entry.is_placeholder:
        return True
    proof_missing = not entry.proof_stress or entry.proof_stress <= 1
    yield_missing = not entry.yield_stress or entry.yield_stress <= 1
    allowable_missing = (
        not entry.allowable_op or entry.allowable_op <= 1
        or not entry.allowable_test or entry.allowable_test <= 1
    )
    return proof_missing or yield_missing or allowable_missing


def fastener_properties(grade_id: Optional[str], bolt_diameter: float = 0.0) -> FastenerProperties:
    """
    Strength values of a grade. Diameter-banded grades use the band for
    `bolt_diameter`; otherwise the catalog row, with missing allowables
    derived from proof stress (proof/1.5 operating, proof/1.1 test).
    Unknown grades resolve to the default grade.
    """
    entry = get_fastener_entry(grade_id) or FASTENER_CATALOG_BY_ID[DEFAULT_FASTENER_ID]
    band = get_size_band(entry.id, bolt_diameter)
    if band is not None:
        return FastenerProperties(
            proof=band["proof"],
            yield_stress=band["yield"],
            allowable_op=band["proof"] / 1.5,
            allowable_test=band["proof"] / 1.1,
            placeholder=False,
            size_dependent=True,
            notes=entry.notes,
        )

    proof = entry.proof_stress
    allowable_op = entry.allowable_op
    if not (allowable_op and allowable_op > 1) and proof > 0:
        allowable_op = proof / 1.5
    allowable_test = entry.allowable_test
    if not (allowable_test and allowable_test > 1) and proof > 0:
        allowable_test = proof / 1.1

    return FastenerProperties(
        proof=proof,
        yield_stress=entry.yield_stress,
        allowable_op=allowable_op,
        allowable_test=allowable_test,
        placeholder=is_placeholder(entry),
        notes=entry.notes,
    )


def resolve_fastener(
    grade_id: Optional[str] = None,
    standard: Optional[str] = None,
    fastener_type: Optional[str] = None,
    bolt_grade: Optional[str] = None,
    bolt_diameter: float = 0.0,
) -> FastenerSpec:
    """Fill standard/type from the catalog and resolve properties. Legacy bolt grades map to catalog ids."""
    requested = grade_id or LEGACY_BOLT_GRADE_MAP.get(bolt_grade or "") or DEFAULT_FASTENER_ID
    entry = get_fastener_entry(requested)
    fallback = entry is None
    if fallback:
        logger.warning("Unknown fastener grade %r, using %s", requested, DEFAULT_FASTENER_ID)
        entry = FASTENER_CATALOG_BY_ID[DEFAULT_FASTENER_ID]
    props = fastener_properties(entry.id, bolt_diameter)
    return FastenerSpec(
        standard=standard or entry.standard,
        type=fastener_type or entry.type,
        grade_id=entry.id,
        label=entry.label,
        properties=props,
        fallback=fallback,
    )


def resolve_selection(selection: FastenerSelection, bolt_diameter: float = 0.0) -> FastenerSpec:
    return resolve_fastener(selection.grade_id, selection.standard, selection.type, bolt_diameter=bolt_diameter)


# --- Thread & installation geometry ---

def fastener_geometry(size: Optional[str], standard: str = "EN") -> FastenerGeometry:
    """Nominal diameter, stress area, pitch and hole diameter; zeros when the size is not tabulated."""
    return FastenerGeometry(
        size=size or "",
        diameter=parse_thread_diameter(size),
        stress_area=BOLT_STRESS_AREA.get(size, 0.0) if size else 0.0,
        pitch=METRIC_PITCH.get(size, 0.0) if size else 0.0,
        hole_diameter=BOLT_HOLE_DIAMETER.get(size, 0.0) if size else 0.0,
        geometry_assumption="metric thread" if standard == CODE_ASME else None,
    )


def washer_od(standard: str, bolt_size: str) -> Optional[FastenerFeature]:
    od = WASHER_OD_ISO7089.get(bolt_size)
    if not od:
        return None
    if standard == CODE_ASME:
        # metric washer scaled up until USS/SAE tables are available
        return FastenerFeature(od * ASME_WASHER_FACTOR, "washer OD (metric, approx for ASME)", approximated=True)
    return FastenerFeature(float(od), "washer OD (ISO 7089)", approximated=False)


def nut_across_corners(standard: str, bolt_size: str) -> Optional[FastenerFeature]:
    af = NUT_AF_ISO4032.get(bolt_size)
    if not af:
        return None
    corners = af / math.cos(math.pi / 6)
    if standard == CODE_ASME:
        return FastenerFeature(corners, "nut across corners (metric, approx for ASME)", approximated=True)
    return FastenerFeature(corners, "nut across corners (ISO 4032, from AF)", approximated=False)


def fastener_feature_od(standard: str, bolt_size: str) -> FastenerFeature:
    """Installation envelope: washer OD, else nut across corners, else 2.1 d."""
    feature = washer_od(standard, bolt_size) or nut_across_corners(standard, bolt_size)
    if feature is not None:
        return feature
    d = parse_thread_diameter(bolt_size)
    if d > 0:
        return FastenerFeature(d * FEATURE_OD_FROM_DIAMETER, "featureOD (approx from bolt diameter)", approximated=True)
    return FastenerFeature(0.0, "featureOD unknown", approximated=True)


def geometry_check(
    bolt_circle: float,
    outer_diameter: float,
    bolt_count: int,
    feature: FastenerFeature,
    gasket_od: Optional[float] = None,
) -> GeometryCheck:
    """
    Edge distance and bolt pitch checks against the fastener envelope.

    Edge: k/2 + featureOD/2 + 3 <= D/2. Pitch: pi k / n >= featureOD + 2.
    With a gasket OD the bolt circle must also clear it by 3 mm per side.
    """
    radius = bolt_circle / 2
    outer_radius = outer_diameter / 2
    approx_label = " (approximated)" if feature.approximated else ""

    edge_need = radius + feature.feature_od / 2 + EDGE_CLEARANCE_MIN_MM
    edge_ok = edge_need <= outer_radius

    pitch = math.pi * bolt_circle / max(1, bolt_count)
    pitch_need = feature.feature_od + FASTENER_GAP_MIN_MM
    spacing_ok = pitch >= pitch_need

    gasket_ok = True
    notes: List[str] = []
    if gasket_od is not None:
        gasket_need = gasket_od + 2 * EDGE_CLEARANCE_MIN_MM
        gasket_ok = bolt_circle >= gasket_need
        if not gasket_ok:
            notes.append(
                f"Bolt circle too small for gasket: k={bolt_circle:.1f} mm < gasket OD + clearance = "
                f"{gasket_need:.1f} mm (gasket OD={gasket_od:.1f} mm, clearance={EDGE_CLEARANCE_MIN_MM:g} mm), "
                f"short by {gasket_need - bolt_circle:.1f} mm."
            )
    if not edge_ok:
        notes.append(
            f"Edge check ({feature.source_label}{approx_label}): k/2 + featureOD/2 + edgeClearanceMin = "
            f"{edge_need:.1f} mm > OD/2 = {outer_radius:.1f} mm (featureOD={feature.feature_od:.1f} mm, "
            f"edgeClearanceMin={EDGE_CLEARANCE_MIN_MM:g} mm), short by {edge_need - outer_radius:.1f} mm."
        )
    if not spacing_ok:
        notes.append(
            f"Insufficient spacing ({feature.source_label}{approx_label}): pitch s=π·k/n = {pitch:.1f} mm, "
            f"need ≥ featureOD+gapMin = {pitch_need:.1f} mm (featureOD={feature.feature_od:.1f} mm, "
            f"gapMin={FASTENER_GAP_MIN_MM:g} mm), short by {pitch_need - pitch:.1f} mm."
        )
    if feature.approximated and notes:
        notes.append(f"FeatureOD approximated: {feature.feature_od:.1f} mm via {feature.source_label}.")

    return GeometryCheck(edge_ok=edge_ok, spacing_ok=spacing_ok, gasket_ok=gasket_ok, notes=notes, feature=feature)


# --- Gasket loads & bolt area ---

def required_bolt_loads(gasket: GasketGeometry, pressure_op: float, pressure_test: float) -> BoltingLoads:
    """
    Wm1 = pi G b y (seating); Wm2 = pi G^2 P / 4 + 2 pi b G m P at operating
    and test pressure. Pressures in bar.
    """
    G = gasket.effective_diameter
    b = gasket.effective_width
    p_op = pressure_op * BAR_TO_MPA
    p_test = pressure_test * BAR_TO_MPA

    def wm2(p):
        return math.pi * G ** 2 * p / 4 + 2 * math.pi * b * G * gasket.m * p

    return BoltingLoads(wm1=math.pi * G * b * gasket.y, wm2_op=wm2(p_op), wm2_hydro=wm2(p_test))


def bolt_area_check(loads: BoltingLoads, allowable_bolt: float, bolt_count: int, stress_area: float) -> BoltAreaCheck:
    """
    Required bolt area per load case against the provided area n * As.

    Governing case is the largest requirement; on ties seating wins, then
    hydrotest, else operating.
    """
    provided = bolt_count * stress_area
    req_seating = loads.wm1 / allowable_bolt
    req_oper = loads.wm2_op / allowable_bolt
    req_hydro = loads.wm2_hydro / allowable_bolt
    required = max(req_seating, req_oper, req_hydro)
    if required == req_seating:
        governing = CASE_SEATING
    elif required == req_hydro:
        governing = CASE_HYDROTEST
    else:
        governing = CASE_OPERATING
    return BoltAreaCheck(
        required_area_seating=req_seating,
        required_area_oper=req_oper,
        required_area_hydro=req_hydro,
        provided_area=provided,
        governing_case=governing,
        pass_=provided >= req_seating and provided >= req_oper and provided >= req_hydro,
    )


def blocked_area_check(bolt_count: int, stress_area: float) -> BoltAreaCheck:
    """Stand-in for a fastener without strength data: nothing required, never passes."""
    return BoltAreaCheck(
        required_area_seating=0.0,
        required_area_oper=0.0,
        required_area_hydro=0.0,
        provided_area=bolt_count * stress_area,
        governing_case=CASE_SEATING,
        pass_=False,
    )


# --- Torque ---

def friction_factors(preset: str):
    k = K_FACTORS.get(preset)
    if k is None:
        logger.warning("Unknown friction preset %r, using %s", preset, DEFAULT_FRICTION)
        k = K_FACTORS[DEFAULT_FRICTION]
    return k


def bolt_torque(
    bolt_diameter: float,
    stress_area: float,
    proof_stress: float,
    required_preload: float,
    governing_case: str,
    friction_preset: str = DEFAULT_FRICTION,
    method: str = TIGHTENING_K_FACTOR,
    geometry_assumption: Optional[str] = None,
) -> BoltTorqueResult:
    """
    K-factor tightening torque: T = K F d.

    Preload is capped at 70% of the proof load (As * proof). When the cap
    binds the joint is under-tightened against the governing load and
    capped_by_proof is set.
    """
    k = friction_factors(friction_preset)

    proof_load = stress_area * proof_stress
    preload_cap = proof_load * PRELOAD_LIMIT_FACTOR
    capped = required_preload > preload_cap
    preload = min(required_preload, preload_cap)
    utilization = preload / proof_load if proof_load > 0 else 0.0

    d_m = bolt_diameter / 1000.0
    assumptions = [
        f"Method: {'K-factor' if method == TIGHTENING_K_FACTOR else method}",
        f"Friction: {k['label']} (K={k['K']:.2f} range {k['Kmin']:.2f}-{k['Kmax']:.2f})",
        f"Preload cap: {round(PRELOAD_LIMIT_FACTOR * 100)}% of proof",
        f"Governing case: {governing_case}",
    ]
    if geometry_assumption:
        assumptions.append(f"Geometry: {geometry_assumption}")
    if capped:
        assumptions.append("Torque capped by proof load")

    return BoltTorqueResult(
        method=method,
        friction_preset=friction_preset if friction_preset in K_FACTORS else DEFAULT_FRICTION,
        torque_nm=k["K"] * preload * d_m,
        torque_min_nm=k["Kmin"] * preload * d_m,
        torque_max_nm=k["Kmax"] * preload * d_m,
        preload_per_bolt=preload,
        preload_cap=preload_cap,
        required_preload=required_preload,
        preload_utilization=utilization,
        governing_case=governing_case,
        capped_by_proof=capped,
        assumptions=assumptions,
    )
