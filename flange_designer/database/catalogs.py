# EN 1092-1 blind flange dimensions and the standard plate ladder
import math
from typing import Optional, Tuple

from flange_designer.models.flange import FlangeDimensions


def _dims(D, k, bolts, size, d2) -> FlangeDimensions:
    return FlangeDimensions(outer_diameter=D, bolt_circle=k, bolt_count=bolts, thread_size=size, hole_diameter=d2)


# DN -> PN -> dimensions. D outer diameter, k bolt circle, d2 hole diameter (mm).
EN1092_DB = {
    15: {
        16: _dims(95, 65, 4, "M12", 14),
        40: _dims(95, 65, 4, "M12", 14),
        63: _dims(105, 75, 4, "M12", 14),
        100: _dims(105, 75, 4, "M12", 14),
        160: _dims(105, 75, 4, "M12", 14),
        250: _dims(130, 90, 4, "M16", 18),
        320: _dims(130, 90, 4, "M16", 18),
        400: _dims(145, 100, 4, "M20", 22),
    },
    20: {
        16: _dims(105, 75, 4, "M12", 14),
        40: _dims(105, 75, 4, "M12", 14),
        63: _dims(130, 90, 4, "M16", 18),
        100: _dims(130, 90, 4, "M16", 18),
        160: _dims(130, 90, 4, "M16", 18),
        250: _dims(150, 105, 4, "M20", 22),
        320: _dims(150, 105, 4, "M20", 22),
        400: _dims(170, 125, 4, "M24", 26),
    },
    25: {
        16: _dims(115, 85, 4, "M12", 14),
        40: _dims(115, 85, 4, "M12", 14),
        63: _dims(140, 100, 4, "M16", 18),
        100: _dims(140, 100, 4, "M16", 18),
        160: _dims(140, 100, 4, "M16", 18),
        250: _dims(150, 105, 4, "M20", 22),
        320: _dims(160, 115, 4, "M20", 22),
        400: _dims(180, 130, 4, "M24", 26),
    },
    32: {
        16: _dims(140, 100, 4, "M16", 18),
        40: _dims(140, 100, 4, "M16", 18),
        63: _dims(155, 110, 4, "M20", 22),
        100: _dims(155, 110, 4, "M20", 22),
        160: _dims(155, 110, 4, "M20", 22),
        250: _dims(170, 120, 4, "M24", 26),
        320: _dims(180, 130, 4, "M24", 26),
        400: _dims(195, 145, 4, "M27", 30),
    },
    50: {
        16: _dims(165, 125, 4, "M16", 18),
        40: _dims(165, 125, 4, "M16", 18),
        63: _dims(180, 135, 4, "M20", 22),
        100: _dims(195, 145, 4, "M24", 26),
        160: _dims(195, 145, 4, "M24", 26),
        250: _dims(200, 150, 8, "M24", 26),
        320: _dims(210, 160, 8, "M24", 26),
        400: _dims(235, 180, 8, "M27", 30),
    },
    65: {
        16: _dims(185, 145, 4, "M16", 18),
        40: _dims(185, 145, 8, "M16", 18),
        63: _dims(205, 160, 8, "M20", 22),
        100: _dims(220, 170, 8, "M24", 26),
        160: _dims(220, 170, 8, "M24", 26),
        250: _dims(230, 180, 8, "M27", 30),
        320: _dims(245, 190, 8, "M30", 33),
        400: _dims(270, 210, 8, "M33", 36),
    },
    80: {
        16: _dims(200, 160, 8, "M16", 18),
        40: _dims(200, 160, 8, "M16", 18),
        63: _dims(215, 170, 8, "M20", 22),
        100: _dims(230, 180, 8, "M24", 26),
        160: _dims(230, 180, 8, "M24", 26),
        250: _dims(255, 200, 8, "M27", 30),
        320: _dims(275, 220, 8, "M27", 30),
        400: _dims(305, 240, 8, "M30", 33),
    },
    100: {
        16: _dims(220, 180, 8, "M16", 18),
        40: _dims(235, 190, 8, "M20", 22),
        63: _dims(250, 200, 8, "M24", 26),
        100: _dims(265, 210, 8, "M27", 30),
        160: _dims(265, 210, 8, "M27", 30),
        250: _dims(300, 235, 8, "M30", 33),
        320: _dims(335, 265, 8, "M33", 36),
        400: _dims(370, 295, 8, "M36", 39),
    },
    125: {
        16: _dims(250, 210, 8, "M16", 18),
        40: _dims(270, 220, 8, "M24", 26),
        63: _dims(295, 240, 8, "M27", 30),
        100: _dims(315, 250, 8, "M30", 33),
        160: _dims(315, 250, 8, "M30", 33),
        250: _dims(345, 275, 12, "M33", 36),
        320: _dims(375, 300, 12, "M33", 36),
        400: _dims(415, 340, 12, "M36", 39),
    },
    150: {
        16: _dims(285, 240, 8, "M20", 22),
        40: _dims(300, 250, 8, "M24", 26),
        63: _dims(345, 280, 8, "M30", 33),
        100: _dims(355, 290, 12, "M30", 33),
        160: _dims(355, 290, 12, "M30", 33),
        250: _dims(390, 320, 12, "M33", 36),
        320: _dims(425, 350, 12, "M36", 39),
        400: _dims(475, 390, 12, "M39", 42),
    },
    200: {
        10: _dims(340, 295, 8, "M20", 22),
        16: _dims(340, 295, 12, "M20", 22),
        25: _dims(360, 310, 12, "M24", 26),
        40: _dims(375, 320, 12, "M30", 33),
        63: _dims(415, 345, 12, "M36", 39),
        100: _dims(430, 360, 12, "M36", 39),
        160: _dims(430, 360, 12, "M36", 39),
        250: _dims(485, 400, 12, "M42", 45),
        320: _dims(525, 440, 16, "M48", 52),
        400: _dims(585, 490, 16, "M52", 56),
    },
    250: {
        10: _dims(395, 350, 12, "M20", 22),
        16: _dims(405, 355, 12, "M24", 26),
        25: _dims(425, 370, 12, "M27", 30),
        40: _dims(450, 385, 12, "M33", 36),
        63: _dims(470, 400, 12, "M36", 39),
        100: _dims(505, 430, 12, "M39", 42),
        160: _dims(515, 430, 12, "M42", 45),
    },
    300: {
        10: _dims(445, 400, 12, "M20", 22),
        16: _dims(460, 410, 12, "M24", 26),
        25: _dims(485, 430, 16, "M27", 30),
        40: _dims(515, 450, 16, "M33", 36),
        63: _dims(530, 460, 16, "M36", 39),
        100: _dims(585, 500, 16, "M42", 45),
        160: _dims(585, 500, 16, "M42", 45),
    },
    400: {
        10: _dims(565, 515, 16, "M24", 26),
        16: _dims(580, 525, 16, "M27", 30),
        25: _dims(620, 550, 16, "M36", 39),
        40: _dims(660, 585, 16, "M39", 42),
        63: _dims(670, 585, 16, "M45", 48),
        100: _dims(715, 610, 16, "M48", 52),
    },
    500: {
        10: _dims(670, 620, 20, "M24", 26),
        16: _dims(715, 650, 20, "M30", 33),
        25: _dims(730, 660, 20, "M36", 39),
        40: _dims(755, 670, 20, "M45", 48),
        63: _dims(800, 705, 20, "M48", 52),
        100: _dims(870, 760, 20, "M52", 56),
    },
    600: {
        10: _dims(780, 725, 20, "M27", 30),
        16: _dims(840, 770, 20, "M33", 36),
        25: _dims(845, 770, 20, "M36", 39),
        40: _dims(890, 795, 20, "M48", 52),
        63: _dims(930, 820, 20, "M52", 56),
        100: _dims(990, 875, 24, "M56", 62),
    },
    700: {
        10: _dims(895, 840, 24, "M27", 30),
        16: _dims(910, 840, 24, "M33", 36),
        25: _dims(960, 875, 24, "M42", 45),
        40: _dims(995, 900, 24, "M48", 52),
    },
    800: {
        10: _dims(1015, 950, 24, "M30", 33),
        16: _dims(1025, 950, 24, "M36", 39),
        25: _dims(1085, 990, 24, "M48", 52),
        40: _dims(1140, 1030, 24, "M52", 56),
    },
    900: {
        10: _dims(1115, 1050, 28, "M30", 33),
        16: _dims(1125, 1050, 28, "M36", 39),
        25: _dims(1185, 1090, 28, "M48", 52),
        40: _dims(1250, 1140, 28, "M52", 56),
    },
    1000: {
        10: _dims(1230, 1160, 28, "M33", 36),
        16: _dims(1255, 1170, 28, "M39", 42),
        25: _dims(1320, 1210, 28, "M52", 56),
        40: _dims(1360, 1250, 28, "M56", 62),
    },
    1200: {
        10: _dims(1455, 1380, 32, "M36", 39),
        16: _dims(1485, 1390, 32, "M45", 48),
        25: _dims(1530, 1420, 32, "M52", 56),
        40: _dims(1575, 1460, 32, "M64", 70),
    },
}

AVAILABLE_DNS = sorted(EN1092_DB.keys())

PRESSURE_CLASSES = [10, 16, 25, 40, 63, 100, 160, 250, 320, 400]

STANDARD_THICKNESSES = [
    6, 8, 10, 12, 14, 15, 16, 18, 20, 22, 25, 28, 30, 35, 40, 45, 50, 60, 70, 80, 90, 100, 110, 120, 130,
    140, 150,
]


def find_nearest_standard(t_calc: float) -> float:
    """Smallest standard plate thickness >= t_calc.

    Past the end of the ladder the value is rounded up to the next whole mm.
    """
    for t in STANDARD_THICKNESSES:
        if t >= t_calc:
            return t
    return math.ceil(t_calc)


def calculated_pressure_class(pressure_bar: float) -> int:
    """Lowest PN on the ladder that covers the operating pressure (bar)."""
    for pn in PRESSURE_CLASSES:
        if pressure_bar <= pn:
            return pn
    return PRESSURE_CLASSES[-1]


def max_available_pressure_class(dn: float) -> Optional[int]:
    rows = EN1092_DB.get(dn)
    if not rows:
        return None
    return max(rows.keys())


def pick_pressure_class(dn: float, target_pn: int) -> Optional[Tuple[FlangeDimensions, int]]:
    """Smallest cataloged class >= target for this DN, with its dimensions."""
    rows = EN1092_DB.get(dn)
    if not rows:
        return None
    for pn in sorted(rows.keys()):
        if pn >= target_pn:
            return rows[pn], pn
    return None


def min_standard_bolt_circle(dn: float) -> Optional[float]:
    """Bolt circle of the highest cataloged class for this DN (PN400 when present)."""
    rows = EN1092_DB.get(dn)
    if not rows:
        return None
    if 400 in rows:
        return rows[400].bolt_circle
    max_k = max(dims.bolt_circle for dims in rows.values())
    return max_k if max_k > 0 else None
