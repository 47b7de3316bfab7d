from typing import Optional

from flange_designer.models.flange import MaterialSpec

# Plate materials. Yield strength (MPa) keyed by temperature (degC), density in kg/dm^3.
MATERIALS = {
    # EN 10028-2: pressure purpose steels, elevated temperature
    "P265GH": MaterialSpec(
        name="P265GH (1.0425) - Carbon Steel",
        yield_by_temp={20: 265, 100: 243, 150: 228, 200: 215, 250: 204, 300: 194, 350: 184, 400: 173},
        density=7.85,
    ),
    "P355GH": MaterialSpec(
        name="P355GH (1.0473) - Carbon Steel High Press",
        yield_by_temp={20: 355, 100: 329, 150: 312, 200: 298, 250: 285, 300: 271, 350: 258, 400: 247},
        density=7.85,
    ),
    "16Mo3": MaterialSpec(
        name="16Mo3 (1.5415) - Heat Resistant",
        yield_by_temp={20: 275, 100: 261, 150: 253, 200: 233, 250: 216, 300: 200, 350: 186, 400: 170, 450: 158, 500: 145},
        density=7.85,
    ),
    "13CrMo4-5": MaterialSpec(
        name="13CrMo4-5 (1.7335) - Heat Resistant",
        yield_by_temp={20: 300, 100: 273, 150: 264, 200: 255, 250: 245, 300: 233, 350: 218, 400: 204, 450: 192, 500: 181},
        density=7.85,
    ),
    # EN 10028-7: stainless
    "1.4301": MaterialSpec(
        name="1.4301 (304) - Standard Food Grade",
        yield_by_temp={20: 210, 100: 175, 150: 155, 200: 145, 250: 135, 300: 127, 350: 120, 400: 115},
        density=7.9,
    ),
    "1.4307": MaterialSpec(
        name="1.4307 (304L) - Low Carbon Food Grade",
        yield_by_temp={20: 200, 100: 147, 150: 132, 200: 118, 250: 108, 300: 100, 350: 94, 400: 90},
        density=7.9,
    ),
    "1.4404": MaterialSpec(
        name="1.4404 (316L) - Marine/Chemical",
        yield_by_temp={20: 220, 100: 166, 150: 152, 200: 137, 250: 127, 300: 118, 350: 113, 400: 108},
        density=7.98,
    ),
    "1.4571": MaterialSpec(
        name="1.4571 (316Ti) - Chemical Stabilized",
        yield_by_temp={20: 220, 100: 198, 150: 188, 200: 178, 250: 169, 300: 161, 350: 155, 400: 149, 450: 144, 500: 139},
        density=8.0,
    ),
    "1.4541": MaterialSpec(
        name="1.4541 (321) - Heat/Corrosion Stabilized",
        yield_by_temp={20: 200, 100: 179, 150: 168, 200: 159, 250: 150, 300: 141, 350: 134, 400: 128, 450: 124, 500: 119},
        density=7.9,
    ),
    # Duplex & special alloys
    "1.4462": MaterialSpec(
        name="1.4462 (Duplex 2205) - High Strength/Corrosion",
        yield_by_temp={20: 460, 100: 360, 150: 335, 200: 315, 250: 300},  # duplex usually limited to ~250-280C
        density=7.8,
    ),
    "1.4539": MaterialSpec(
        name="1.4539 (904L) - Sulfuric Acid Service",
        yield_by_temp={20: 220, 100: 185, 150: 170, 200: 160, 250: 150, 300: 145, 350: 140, 400: 135},
        density=8.0,
    ),
    "1.4547": MaterialSpec(
        name="1.4547 (254 SMO) - Pulp/Bleaching/Seawater",
        yield_by_temp={20: 300, 100: 240, 150: 220, 200: 205, 250: 195, 300: 185, 350: 175, 400: 170},
        density=8.0,
    ),
    # ASME
    "SA516-70": MaterialSpec(
        name="ASME SA-516 Gr.70 - PVQ Carbon Steel",
        yield_by_temp={20: 260, 40: 260, 65: 247, 100: 236, 150: 225, 200: 214, 250: 205, 300: 197, 350: 188, 400: 178},
        density=7.85,
    ),
    "SA240-304L": MaterialSpec(
        name="ASME SA-240 304L - Stainless",
        yield_by_temp={20: 170, 40: 167, 65: 154, 100: 143, 150: 132, 200: 123, 250: 117, 300: 112, 350: 108, 400: 105},
        density=7.9,
    ),
    "SA240-316L": MaterialSpec(
        name="ASME SA-240 316L - Stainless",
        yield_by_temp={20: 170, 40: 168, 65: 158, 100: 147, 150: 135, 200: 126, 250: 120, 300: 115, 350: 112, 400: 108},
        density=7.98,
    ),
}

# Gasket factors: m (maintenance), y (seating stress, MPa)
GASKET_MATERIALS = {
    "graphite": {"label": "Graphite", "m": 3.0, "y": 40.0},
    "tesnitBA50": {"label": "Tesnit BA-50", "m": 2.5, "y": 35.0},
    "ptfe": {"label": "PTFE", "m": 3.5, "y": 50.0},
}
DEFAULT_GASKET_MATERIAL = "graphite"

GASKET_FACINGS = {
    "RF": "Raised face (RF)",
    "FF": "Flat face (FF)",
    "IBC": "Integral bore contact (IBC)",
}
GASKET_THICKNESSES = [2, 3]


def get_material(material_id) -> Optional[MaterialSpec]:
    """Accepts a catalog id or a MaterialSpec; returns None when the id is unknown."""
    if isinstance(material_id, MaterialSpec):
        return material_id
    return MATERIALS.get(material_id)
