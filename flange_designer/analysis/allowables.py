from typing import Optional

from flange_designer.constants import (
    CODE_ASME,
    CODE_EN,
    DESIGN_CODES,
    FALLBACK_ALLOWABLE_MPA,
    HYDRO_ASME_VIII,
    HYDRO_EN13445,
    SAFETY_FACTORS,
    USAGE_OPERATING,
    USAGE_TEST,
    USAGES,
)
from flange_designer.database.materials import get_material
from flange_designer.logging import get_logger
from flange_designer.models.flange import MaterialSpec
from flange_designer.models.results import HydrotestResult

logger = get_logger(__name__)


def yield_at_temperature(material: MaterialSpec, temperature: float) -> float:
    """
    Step lookup of the yield table: the largest tabulated temperature <= T.

    Below the table the lowest point is used, above it the highest. No
    interpolation between points.
    """
    temps = sorted(material.yield_by_temp.keys())
    if not temps:
        return FALLBACK_ALLOWABLE_MPA
    selected = temps[0]
    for t in temps:
        if t <= temperature:
            selected = t
    return float(material.yield_by_temp[selected])


def safety_factor(code: str, usage: str) -> float:
    if code not in DESIGN_CODES:
        raise ValueError(f"Unknown design code: {code!r}")
    if usage not in USAGES:
        raise ValueError(f"Unknown usage: {usage!r}")
    return SAFETY_FACTORS[(code, usage)]


def allowable_stress(material, temperature: float, code: str = CODE_EN, usage: str = USAGE_OPERATING) -> float:
    """
    Allowable plate stress (MPa) = yield(T) / safety factor(code, usage).

    `material` is a catalog id or a MaterialSpec. Unknown ids fall back to a
    flat 150 MPa.
    """
    gamma = safety_factor(code, usage)
    spec = get_material(material)
    if spec is None:
        logger.warning("Unknown material %r, using fallback allowable %.0f MPa", material, FALLBACK_ALLOWABLE_MPA)
        return FALLBACK_ALLOWABLE_MPA
    return yield_at_temperature(spec, temperature) / gamma


def hydrotest_pressure(
    code: str,
    design_pressure: float,
    op_pressure: float,
    design_temp: float,
    test_temp: float,
    material,
) -> HydrotestResult:
    """
    Hydrostatic test pressure (bar) per the selected code.

    ASME VIII-1 UG-99: 1.3 P ratio. EN 13445-5: max(1.25 P ratio, 1.43 P).
    ratio = allowable(test temp, test usage) / allowable(design temp, operating).
    The result is never below the operating pressure (clamped_to_op).
    """
    if code in (CODE_ASME, HYDRO_ASME_VIII):
        code = HYDRO_ASME_VIII
    elif code in (CODE_EN, HYDRO_EN13445):
        code = HYDRO_EN13445
    else:
        raise ValueError(f"Unknown hydrotest code: {code!r}")

    p_design = max(design_pressure, 0.0)
    p_op = max(op_pressure, 0.0)

    spec: Optional[MaterialSpec] = get_material(material)
    if spec is None:
        logger.warning("Unknown material %r, hydrotest pressure set to operating pressure", material)
        return HydrotestResult(test_pressure=p_op, basis="Material not found", ratio=1.0, clamped_to_op=True)

    allowable_code = CODE_ASME if code == HYDRO_ASME_VIII else CODE_EN
    allowable_design = allowable_stress(spec, design_temp, allowable_code, USAGE_OPERATING)
    allowable_test = allowable_stress(spec, test_temp, allowable_code, USAGE_TEST)
    ratio = allowable_test / allowable_design if allowable_design > 0 else 1.0
    if not ratio > 0:
        ratio = 1.0

    if code == HYDRO_ASME_VIII:
        p_test = 1.3 * p_design * ratio
        basis = "ASME VIII-1 UG-99: 1.3·P·ratio"
    else:
        p_test = max(1.25 * p_design * ratio, 1.43 * p_design)
        basis = "EN 13445-5: max(1.25·P·ratio, 1.43·P)"

    p_test = max(p_test, 0.0)
    clamped = p_op > 0 and p_test < p_op
    return HydrotestResult(
        test_pressure=p_op if clamped else p_test,
        basis=basis,
        ratio=ratio,
        clamped_to_op=clamped,
    )
