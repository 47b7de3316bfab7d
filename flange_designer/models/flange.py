from dataclasses import dataclass, field
from typing import Dict, List, Optional

from flange_designer.constants import CASE_HYDROTEST, CASE_OPERATING, CASE_SEATING


@dataclass(frozen=True)
class MaterialSpec:
    """Plate material: yield strength (MPa) by temperature (degC)."""
    name: str
    yield_by_temp: Dict[float, float]
    density: float  # kg/dm^3
    modulus: Optional[float] = None  # MPa, default applied by the caller


@dataclass(frozen=True)
class FastenerCatalogEntry:
    id: str
    label: str
    standard: str  # EN | ASME
    type: str  # BOLT | STUD
    proof_stress: float  # MPa
    yield_stress: float  # MPa
    allowable_op: float
    allowable_test: float
    notes: Optional[str] = None
    source: Optional[str] = None
    is_placeholder: bool = False


@dataclass(frozen=True)
class FastenerProperties:
    """Strength values of a grade, resolved for a bolt diameter when the grade is size dependent."""
    proof: float
    yield_stress: float
    allowable_op: float
    allowable_test: float
    placeholder: bool = False
    size_dependent: bool = False
    notes: Optional[str] = None


@dataclass(frozen=True)
class FastenerSpec:
    standard: str
    type: str
    grade_id: str
    label: str
    properties: FastenerProperties
    fallback: bool = False  # requested grade unknown, catalog default used


@dataclass(frozen=True)
class FastenerSelection:
    """User choice of fastener, before catalog resolution."""
    standard: str = "EN"
    type: str = "BOLT"
    grade_id: str = "EN_8.8"


@dataclass(frozen=True)
class FastenerGeometry:
    size: str
    diameter: float  # mm
    stress_area: float  # mm^2
    pitch: float  # mm
    hole_diameter: float  # mm
    geometry_assumption: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.diameter > 0 and self.stress_area > 0 and self.hole_diameter > 0


@dataclass(frozen=True)
class FastenerFeature:
    """Washer OD or nut across-corners used for edge and pitch checks."""
    feature_od: float  # mm
    source_label: str
    approximated: bool = False


@dataclass(frozen=True)
class GasketGeometry:
    effective_diameter: float  # G, mm
    effective_width: float  # b, mm
    id: float
    od: float
    material: str
    thickness: float
    facing: str
    m: float
    y: float  # MPa


@dataclass(frozen=True)
class BoltingLoads:
    """Required bolt loads in N."""
    wm1: float  # seating
    wm2_op: float  # operating
    wm2_hydro: float  # hydrotest

    def for_case(self, case: str) -> float:
        if case == CASE_SEATING:
            return self.wm1
        if case == CASE_HYDROTEST:
            return self.wm2_hydro
        return self.wm2_op


@dataclass(frozen=True)
class FailureReason:
    case: str
    required_area: float
    provided_area: float
    delta_area: float  # required - provided, mm^2
    bolt_count: Optional[int] = None
    bolt_size: Optional[str] = None


@dataclass(frozen=True)
class BoltAreaCheck:
    required_area_seating: float
    required_area_oper: float
    required_area_hydro: float
    provided_area: float
    governing_case: str
    pass_: bool

    @property
    def required_area(self) -> float:
        return max(self.required_area_seating, self.required_area_oper, self.required_area_hydro)

    def required_for(self, case: str) -> float:
        if case == CASE_SEATING:
            return self.required_area_seating
        if case == CASE_HYDROTEST:
            return self.required_area_hydro
        return self.required_area_oper

    def utilization(self, case: str) -> float:
        if self.provided_area <= 0:
            return 0.0
        return self.required_for(case) / self.provided_area

    def failure_reason(self) -> Optional[FailureReason]:
        if self.pass_:
            return None
        required = self.required_for(self.governing_case)
        return FailureReason(
            case=self.governing_case,
            required_area=required,
            provided_area=self.provided_area,
            delta_area=required - self.provided_area,
        )


@dataclass(frozen=True)
class GeometryCheck:
    edge_ok: bool
    spacing_ok: bool
    gasket_ok: bool = True
    notes: List[str] = field(default_factory=list)
    feature: Optional[FastenerFeature] = None

    @property
    def ok(self) -> bool:
        return self.edge_ok and self.spacing_ok and self.gasket_ok


@dataclass(frozen=True)
class BoltTorqueResult:
    method: str
    friction_preset: str
    torque_nm: float
    torque_min_nm: float
    torque_max_nm: float
    preload_per_bolt: float  # N
    preload_cap: float  # N
    required_preload: float  # N
    preload_utilization: float  # preload / proof load
    governing_case: str
    capped_by_proof: bool
    assumptions: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FlangeDimensions:
    """Bolt pattern and outline; same shape as a standard-table row."""
    outer_diameter: float  # D, mm
    bolt_circle: float  # k, mm
    bolt_count: int
    thread_size: str
    hole_diameter: float  # d2, mm


@dataclass(frozen=True)
class CalculationInput:
    dn: float
    pressure_op: float  # bar
    pressure_test: float  # bar, <= 0 means derive the hydrotest pressure
    temperature: float  # degC
    material: str
    corrosion_allowance: float = 0.0  # mm
    gasket_material: str = "graphite"
    gasket_thickness: float = 2.0  # mm
    gasket_facing: str = "RF"
    friction_preset: str = "dry"
    tightening_method: str = "k_factor"
    fastener_standard: Optional[str] = None
    fastener_type: Optional[str] = None
    fastener_grade_id: Optional[str] = None
    bolt_grade: Optional[str] = None  # legacy 8.8 / 10.9 / A2-70


@dataclass(frozen=True)
class ManualGeometry:
    """User supplied flange geometry for verification."""
    bolt_circle: float  # k, mm
    bolt_count: int
    bolt_hole_diameter: float  # d2, mm
    outer_diameter: float  # D, mm
    thickness: float  # plate thickness including corrosion allowance, mm
    bolt_size: str  # e.g. M24
    fastener_standard: str = "EN"
    fastener_type: str = "BOLT"
    fastener_grade_id: str = "EN_8.8"
    friction_preset: str = "dry"
    tightening_method: str = "k_factor"
    corrosion_allowance: Optional[float] = None
    gasket_id: Optional[float] = None
    gasket_od: Optional[float] = None
    gasket_material: Optional[str] = None
    gasket_facing: Optional[str] = None
    gasket_thickness: Optional[float] = None
