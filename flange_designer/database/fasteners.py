from typing import Dict, List, Optional

from flange_designer.models.flange import FastenerCatalogEntry

# Thread geometry, metric coarse. Stress area in mm^2, others in mm.
BOLT_STRESS_AREA = {
    "M12": 84.3, "M16": 157, "M20": 245, "M24": 353, "M27": 459, "M30": 561, "M33": 694, "M36": 817,
    "M39": 976, "M42": 1120, "M45": 1310, "M48": 1470, "M52": 1750, "M56": 2030, "M60": 2400, "M64": 2670,
}

BOLT_HOLE_DIAMETER = {
    "M12": 14, "M16": 18, "M20": 22, "M24": 26, "M27": 30, "M30": 33, "M33": 36, "M36": 39,
    "M39": 42, "M42": 45, "M45": 48, "M48": 52, "M52": 56, "M56": 62, "M60": 66, "M64": 70,
}

METRIC_PITCH = {
    "M12": 1.75, "M16": 2.0, "M20": 2.5, "M24": 3.0, "M27": 3.0, "M30": 3.5, "M33": 3.5, "M36": 4.0,
    "M39": 4.0, "M42": 4.5, "M45": 4.5, "M48": 5.0, "M52": 5.0, "M56": 5.5, "M60": 5.5, "M64": 6.0,
}

# ISO 7089 normal series washer OD
WASHER_OD_ISO7089 = {
    "M12": 24, "M16": 30, "M20": 37, "M24": 44, "M27": 50, "M30": 56, "M33": 60, "M36": 66,
    "M39": 72, "M42": 78, "M45": 85, "M48": 92, "M52": 98, "M56": 105, "M60": 110, "M64": 115,
}

# ISO 4032 hex nut across flats
NUT_AF_ISO4032 = {
    "M12": 19, "M16": 24, "M20": 30, "M24": 36, "M27": 41, "M30": 46, "M33": 50, "M36": 55,
    "M39": 60, "M42": 65, "M45": 70, "M48": 75, "M52": 80, "M56": 85, "M60": 90, "M64": 95,
}

DEFAULT_FASTENER_ID = "EN_8.8"

LEGACY_BOLT_GRADE_MAP = {
    "8.8": "EN_8.8",
    "10.9": "EN_10.9",
    "A2-70": "EN_A2-70",
}

FASTENER_CATALOG = [
    FastenerCatalogEntry(
        id="EN_5.6", label="5.6 (carbon steel)", standard="EN", type="BOLT",
        proof_stress=280, yield_stress=300, allowable_op=280 / 1.5, allowable_test=280 / 1.1,
        notes="ISO 898-1 class 5.6: Rm 500, ReL 300, Sp 280. Allowables derived as Sp/1.5 op, Sp/1.1 test.",
        source="ISO 898-1",
    ),
    FastenerCatalogEntry(
        id="EN_8.8", label="8.8 (carbon steel)", standard="EN", type="BOLT",
        proof_stress=580, yield_stress=640, allowable_op=387, allowable_test=527,
        source="Existing dataset",
    ),
    FastenerCatalogEntry(
        id="EN_10.9", label="10.9 (high-strength)", standard="EN", type="BOLT",
        proof_stress=830, yield_stress=940, allowable_op=553, allowable_test=755,
        source="Existing dataset",
    ),
    FastenerCatalogEntry(
        id="EN_A2-70", label="A2-70 (stainless)", standard="EN", type="BOLT",
        proof_stress=450, yield_stress=450, allowable_op=300, allowable_test=409,
        source="Existing dataset",
    ),
    FastenerCatalogEntry(
        id="EN_A4-70", label="A4-70 (stainless)", standard="EN", type="BOLT",
        proof_stress=450, yield_stress=450, allowable_op=450 / 1.5, allowable_test=450 / 1.1,
        notes="ISO 3506-1 A4-70: Rm 700, Rp0.2 450 (used as proof).",
        source="ISO 3506-1",
    ),
    FastenerCatalogEntry(
        # catalog values are the largest-diameter band; see FASTENER_SIZE_TABLE
        id="EN_42CrMo4", label="42CrMo4 (+QT, diameter-dependent)", standard="EN", type="BOLT",
        proof_stress=495, yield_stress=550, allowable_op=495 / 1.5, allowable_test=495 / 1.1,
        notes="Assumes 42CrMo4 in Q+T condition. Properties depend on diameter; table used when bolt diameter is known.",
        source="Q+T minima (diameter-dependent)",
    ),
    FastenerCatalogEntry(
        id="EN_25CrMo4", label="25CrMo4 (material-based)", standard="EN", type="BOLT",
        proof_stress=1, yield_stress=1, allowable_op=1, allowable_test=1,
        notes="Material only. Define property class or provide proof/yield.",
        is_placeholder=True,
    ),
    FastenerCatalogEntry(
        id="ASME_SA193_B8_CL1", label="SA193 Gr.B8 Cl1", standard="ASME", type="STUD",
        proof_stress=207, yield_stress=207, allowable_op=207 / 1.5, allowable_test=207 / 1.1,
        notes="ASME SA193 B8 Class 1: Tensile 517 MPa, Yield 207 MPa.",
        source="ASME SA193",
    ),
    FastenerCatalogEntry(
        id="ASME_SA193_B8_CL2", label="SA193 Gr.B8 Cl2", standard="ASME", type="STUD",
        proof_stress=345, yield_stress=345, allowable_op=345 / 1.5, allowable_test=345 / 1.1,
        notes="ASME SA193 B8 Class 2: size-dependent yield. Fallback uses largest diameter range; see size table.",
        source="ASME SA193",
    ),
]

FASTENER_CATALOG_BY_ID = {entry.id: entry for entry in FASTENER_CATALOG}

# Diameter-banded strength: first row with d <= max_dia applies, else the last row.
FASTENER_SIZE_TABLE = {
    "ASME_SA193_B8_CL2": [
        {"max_dia": 19.05, "proof": 690, "yield": 690},  # <= 3/4"
        {"max_dia": 25.4, "proof": 552, "yield": 552},  # 7/8" - 1"
        {"max_dia": 31.75, "proof": 448, "yield": 448},  # 1-1/8" - 1-1/4"
        {"max_dia": 38.1, "proof": 345, "yield": 345},  # 1-3/8" - 1-1/2"
    ],
    "EN_42CrMo4": [
        {"max_dia": 40, "proof": 675, "yield": 750},
        {"max_dia": 95, "proof": 585, "yield": 650},
        {"max_dia": 1e9, "proof": 495, "yield": 550},
    ],
}


def get_fastener_entry(grade_id: Optional[str]) -> Optional[FastenerCatalogEntry]:
    """Catalog row for a grade id, None when unknown."""
    if not grade_id:
        return None
    return FASTENER_CATALOG_BY_ID.get(grade_id)


def get_fastener_options(standard: str, fastener_type: Optional[str] = None) -> List[FastenerCatalogEntry]:
    """Grades for a standard, narrowed to a type when that leaves at least one option."""
    options = [entry for entry in FASTENER_CATALOG if entry.standard == standard]
    if not fastener_type:
        return options
    filtered = [entry for entry in options if entry.type == fastener_type]
    return filtered if filtered else options


def get_size_band(grade_id: str, diameter: float) -> Optional[Dict[str, float]]:
    table = FASTENER_SIZE_TABLE.get(grade_id)
    if not table or not diameter or diameter <= 0:
        return None
    for row in table:
        if diameter <= row["max_dia"]:
            return row
    return table[-1]


def parse_thread_diameter(size: Optional[str]) -> float:
    """'M24' -> 24.0; 0.0 when the designation can't be read."""
    if not size:
        return 0.0
    try:
        return float(size.upper().lstrip("M"))
    except ValueError:
        return 0.0
