from flange_designer.database.materials import DEFAULT_GASKET_MATERIAL, GASKET_MATERIALS
from flange_designer.logging import get_logger
from flange_designer.models.flange import GasketGeometry

logger = get_logger(__name__)

WIDTH_MIN_MM = 8.0
WIDTH_MAX_MM = 32.0
EFFECTIVE_WIDTH_MIN_MM = 6.0
EFFECTIVE_WIDTH_MAX_MM = 25.0


def gasket_factors(material: str):
    """(m, y) for a gasket material; unknown materials use graphite."""
    props = GASKET_MATERIALS.get(material)
    if props is None:
        logger.warning("Unknown gasket material %r, using %s factors", material, DEFAULT_GASKET_MATERIAL)
        props = GASKET_MATERIALS[DEFAULT_GASKET_MATERIAL]
    return props["m"], props["y"]


def _pressure_class_factor(pn: float) -> float:
    if pn >= 320:
        return 1.15
    if pn >= 250:
        return 1.10
    if pn >= 160:
        return 1.05
    return 1.0


def _facing_factor(facing: str) -> float:
    if facing == "FF":
        return 1.10
    if facing == "IBC":
        return 0.95
    return 1.0


def _effective_width(width: float) -> float:
    return max(EFFECTIVE_WIDTH_MIN_MM, min(width * 0.8, EFFECTIVE_WIDTH_MAX_MM))


def gasket_geometry(dn: float, pn: float, facing: str, thickness: float, material: str) -> GasketGeometry:
    """
    Empirical gasket geometry for a nominal size and pressure class.

    width = (0.08 DN + 6) scaled by class, facing and thickness factors,
    held in [8, 32] mm. No validation: degenerate input still yields a geometry.
    """
    m, y = gasket_factors(material)

    thickness_factor = 1.08 if thickness >= 3 else 1.0
    raw_width = dn * 0.08 + 6
    width = raw_width * _pressure_class_factor(pn) * _facing_factor(facing) * thickness_factor
    width = min(WIDTH_MAX_MM, max(WIDTH_MIN_MM, width))

    gasket_id = max(10.0, dn - 6)
    gasket_od = gasket_id + 2 * width

    return GasketGeometry(
        effective_diameter=(gasket_id + gasket_od) / 2,
        effective_width=_effective_width(width),
        id=gasket_id,
        od=gasket_od,
        material=material,
        thickness=thickness,
        facing=facing,
        m=m,
        y=y,
    )


def custom_gasket_geometry(gasket_id: float, gasket_od: float, facing: str, thickness: float, material: str) -> GasketGeometry:
    """Gasket from user supplied inner/outer diameters."""
    m, y = gasket_factors(material)
    width = max(0.0, (gasket_od - gasket_id) / 2)
    return GasketGeometry(
        effective_diameter=(gasket_id + gasket_od) / 2,
        effective_width=_effective_width(width),
        id=gasket_id,
        od=gasket_od,
        material=material,
        thickness=thickness,
        facing=facing,
        m=m,
        y=y,
    )
