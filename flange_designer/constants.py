# Engineering constants used across the calculation engine.
# Units: mm, N, MPa (N/mm^2), bar for user-facing pressures, degC.

BAR_TO_MPA = 0.1

# Design codes / usages
CODE_EN = "EN"
CODE_ASME = "ASME"
DESIGN_CODES = (CODE_EN, CODE_ASME)

USAGE_OPERATING = "operating"
USAGE_TEST = "test"
USAGES = (USAGE_OPERATING, USAGE_TEST)

SAFETY_FACTORS = {
    (CODE_EN, USAGE_OPERATING): 1.5,
    (CODE_ASME, USAGE_OPERATING): 1.5,
    (CODE_EN, USAGE_TEST): 1.05,
    (CODE_ASME, USAGE_TEST): 1.1,
}

# Hydrotest codes
HYDRO_EN13445 = "EN13445"
HYDRO_ASME_VIII = "ASMEVIII"

FALLBACK_ALLOWABLE_MPA = 150.0
FALLBACK_DENSITY = 7.85  # kg/dm^3
DEFAULT_MODULUS_MPA = 200000.0
POISSON_RATIO = 0.3
TEST_TEMPERATURE_C = 20.0

# Bolting cases
CASE_SEATING = "seating"
CASE_OPERATING = "operating"
CASE_HYDROTEST = "hydrotest"

# Fastener installation geometry
EDGE_CLEARANCE_MIN_MM = 3.0
FASTENER_GAP_MIN_MM = 2.0
ASME_WASHER_FACTOR = 1.1
FEATURE_OD_FROM_DIAMETER = 2.1

# Torque
PRELOAD_LIMIT_FACTOR = 0.7
K_FACTORS = {
    "dry": {"K": 0.20, "Kmin": 0.18, "Kmax": 0.22, "label": "Dry"},
    "lubricated": {"K": 0.15, "Kmin": 0.13, "Kmax": 0.17, "label": "Lubricated"},
}
DEFAULT_FRICTION = "dry"
TIGHTENING_K_FACTOR = "k_factor"

# Thickness
EN_BENDING_FACTOR = 0.95
LEVER_ARM_MIN_MM = 4.0
DEFLECTION_LIMIT_MM = 1.0

# Custom sizing geometry
GASKET_BOLT_CLEARANCE_MM = 12.0
LIGAMENT_MIN_MM = 8.0
LIGAMENT_FACTOR = 0.35
EDGE_MARGIN_FACTOR = 1.5
OD_OVER_DN_MM = 120.0
OD_OVER_GASKET_MM = 100.0

PREFERENCE_MIN_WEIGHT = "min_weight"
PREFERENCE_MIN_BOLTS = "min_bolts"
PREFERENCES = (PREFERENCE_MIN_WEIGHT, PREFERENCE_MIN_BOLTS)
