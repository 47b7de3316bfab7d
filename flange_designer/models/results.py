from dataclasses import dataclass, field
from typing import List, Optional, Union

from flange_designer.constants import CODE_ASME, CODE_EN
from flange_designer.models.flange import (
    BoltAreaCheck,
    BoltingLoads,
    BoltTorqueResult,
    FailureReason,
    FastenerGeometry,
    FastenerSpec,
    FlangeDimensions,
    GasketGeometry,
    GeometryCheck,
    ManualGeometry,
)


@dataclass(frozen=True)
class HydrotestResult:
    test_pressure: float  # bar
    basis: str
    ratio: float
    clamped_to_op: bool


@dataclass(frozen=True)
class AsmeGoverning:
    """UG-34 style edge-moment thickness governs."""
    value: float
    code: str = CODE_ASME


@dataclass(frozen=True)
class EnGoverning:
    """EN 13445 style flat-end thickness governs."""
    value: float
    code: str = CODE_EN


ThicknessGoverning = Union[AsmeGoverning, EnGoverning]


@dataclass(frozen=True)
class ThicknessRequirement:
    """Required plate thickness (without corrosion allowance) under both formulas."""
    asme_op: float
    asme_test: float
    en_op: float
    en_test: float
    governing: ThicknessGoverning

    @property
    def asme(self) -> float:
        return max(self.asme_op, self.asme_test)

    @property
    def en(self) -> float:
        return max(self.en_op, self.en_test)

    @property
    def required(self) -> float:
        return self.governing.value

    @property
    def governing_code(self) -> str:
        return self.governing.code


@dataclass(frozen=True)
class PlateCheck:
    """Advisory simply-supported plate check; does not drive the thickness."""
    stress_test: float  # MPa, at test pressure
    yield_at_test: float  # MPa, yield at 20 degC
    deflection_op: float  # mm, corroded plate at operating pressure
    deflection_limit: float  # mm

    @property
    def stress_ok(self) -> bool:
        return self.stress_test <= self.yield_at_test

    @property
    def deflection_ok(self) -> bool:
        return self.deflection_op <= self.deflection_limit


@dataclass(frozen=True)
class BoltingSummary:
    loads: BoltingLoads
    areas: BoltAreaCheck
    fastener: FastenerSpec
    geometry: FastenerGeometry
    friction_preset: str
    pass_: bool
    failure_reason: Optional[FailureReason] = None
    torque: Optional[BoltTorqueResult] = None

    @property
    def governing_case(self) -> str:
        return self.areas.governing_case

    @property
    def utilization_seating(self) -> float:
        return self.areas.utilization("seating")

    @property
    def utilization_oper(self) -> float:
        return self.areas.utilization("operating")

    @property
    def utilization_hydro(self) -> float:
        return self.areas.utilization("hydrotest")


@dataclass(frozen=True)
class SizingCandidate:
    """One evaluated bolt pattern from the custom sizing search, with its numeric trace."""
    dims: FlangeDimensions  # rounded D and k, as reported
    bolt_circle: float  # unrounded
    bolt_circle_raw: float  # before the standard-table clamp
    bolt_circle_clamped: bool
    outer_diameter: float  # unrounded
    lever_arm: float
    force_op: float  # N, pressure end force at operating pressure
    force_test: float  # N
    thickness: ThicknessRequirement
    final_thickness: float  # governing + corrosion allowance
    recommended_thickness: float
    weight: float  # kg
    bolting: BoltingSummary
    plate_check: PlateCheck

    @property
    def bolt_count(self) -> int:
        return self.dims.bolt_count

    @property
    def bolt_size(self) -> str:
        return self.dims.thread_size

    @property
    def torque(self) -> Optional[BoltTorqueResult]:
        return self.bolting.torque


@dataclass(frozen=True)
class SizedResult:
    """Chosen design (custom search or standard table) with the full trace."""
    dims: FlangeDimensions
    pressure_class: int
    source: str  # 'custom' | 'en1092'
    gasket: GasketGeometry
    hydrotest: HydrotestResult
    pressure_test_used: float  # bar
    allowable_op: float
    allowable_test: float
    candidate: SizingCandidate
    preference: Optional[str] = None
    bolt_circle_min_standard: Optional[float] = None
    candidates_evaluated: int = 0
    candidates_passing: int = 0
    fallbacks: List[str] = field(default_factory=list)

    @property
    def min_thickness(self) -> float:
        return self.candidate.thickness.required

    @property
    def final_thickness(self) -> float:
        return self.candidate.final_thickness

    @property
    def recommended_thickness(self) -> float:
        return self.candidate.recommended_thickness

    @property
    def weight(self) -> float:
        return self.candidate.weight

    @property
    def governing_code(self) -> str:
        return self.candidate.thickness.governing_code

    @property
    def bolting(self) -> BoltingSummary:
        return self.candidate.bolting


@dataclass(frozen=True)
class Sized:
    result: SizedResult


@dataclass(frozen=True)
class Infeasible:
    reason: Optional[FailureReason] = None


SizingOutcome = Union[Sized, Infeasible]


@dataclass(frozen=True)
class ManualThicknessSummary:
    requirement: ThicknessRequirement
    required_with_ca: float
    provided: float
    utilization: float
    pass_: bool

    @property
    def governing_code(self) -> str:
        return self.requirement.governing_code


@dataclass(frozen=True)
class ManualGasketSummary:
    gasket: GasketGeometry
    loads: BoltingLoads


@dataclass(frozen=True)
class ManualCheckResult:
    pass_: bool
    errors: List[str]
    geometry: GeometryCheck
    manual: Optional[ManualGeometry] = None
    bolt_summary: Optional[BoltingSummary] = None
    thickness_summary: Optional[ManualThicknessSummary] = None
    gasket_summary: Optional[ManualGasketSummary] = None
    plate_check: Optional[PlateCheck] = None
    hydrotest: Optional[HydrotestResult] = None
    pressure_test_used: Optional[float] = None
    fallbacks: List[str] = field(default_factory=list)

    @property
    def governing_case(self) -> Optional[str]:
        return self.bolt_summary.governing_case if self.bolt_summary else None

    @property
    def governing_code(self) -> Optional[str]:
        return self.thickness_summary.governing_code if self.thickness_summary else None
