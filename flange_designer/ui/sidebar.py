import streamlit as st

from flange_designer.constants import K_FACTORS, PREFERENCES
from flange_designer.database.catalogs import AVAILABLE_DNS
from flange_designer.database.fasteners import DEFAULT_FASTENER_ID, get_fastener_options
from flange_designer.database.materials import GASKET_FACINGS, GASKET_MATERIALS, GASKET_THICKNESSES, MATERIALS
from flange_designer.models.flange import CalculationInput, FastenerSelection


def _fastener_selector():
    """Standard -> type -> grade, filtered from the catalog."""
    c1, c2 = st.sidebar.columns(2)
    standard = c1.selectbox("Fastener Standard", ["EN", "ASME"], key="fastener_standard")
    fastener_type = c2.selectbox("Type", ["BOLT", "STUD"], key="fastener_type")

    options = get_fastener_options(standard, fastener_type)
    ids = [entry.id for entry in options]
    labels = {entry.id: entry.label for entry in options}
    default = ids.index(DEFAULT_FASTENER_ID) if DEFAULT_FASTENER_ID in ids else 0
    grade_id = st.sidebar.selectbox("Grade", ids, index=default, format_func=lambda i: labels[i], key="fastener_grade")
    return FastenerSelection(standard=standard, type=fastener_type, grade_id=grade_id)


def render_sidebar():
    """Renders the sidebar input form. Returns the config dict used by app.py."""
    st.sidebar.header("Design Data")

    dn = st.sidebar.selectbox("Nominal Size (DN)", AVAILABLE_DNS, index=AVAILABLE_DNS.index(200))
    c1, c2 = st.sidebar.columns(2)
    pressure_op = c1.number_input("Operating Pressure (bar)", value=16.0, min_value=0.0, step=1.0)
    pressure_test = c2.number_input("Test Pressure (bar)", value=0.0, min_value=0.0, step=1.0,
                                    help="0 = derived from EN 13445-5")
    c3, c4 = st.sidebar.columns(2)
    temperature = c3.number_input("Design Temperature (°C)", value=20.0, step=10.0)
    corrosion = c4.number_input("Corrosion Allowance (mm)", value=0.0, min_value=0.0, step=0.5)

    material = st.sidebar.selectbox("Plate Material", list(MATERIALS.keys()), format_func=lambda m: MATERIALS[m].name)

    st.sidebar.markdown("---")
    st.sidebar.subheader("Gasket")
    g1, g2 = st.sidebar.columns(2)
    gasket_material = g1.selectbox("Material", list(GASKET_MATERIALS.keys()),
                                   format_func=lambda g: GASKET_MATERIALS[g]["label"])
    gasket_facing = g2.selectbox("Facing", list(GASKET_FACINGS.keys()), format_func=lambda f: GASKET_FACINGS[f])
    gasket_thickness = st.sidebar.selectbox("Thickness (mm)", GASKET_THICKNESSES)

    st.sidebar.markdown("---")
    st.sidebar.subheader("Bolting")
    selection = _fastener_selector()
    friction = st.sidebar.selectbox("Friction", list(K_FACTORS.keys()), format_func=lambda k: K_FACTORS[k]["label"])
    preference = st.sidebar.radio("Custom sizing preference", PREFERENCES,
                                  format_func=lambda p: "Minimum weight" if p == "min_weight" else "Minimum bolts")

    calc_input = CalculationInput(
        dn=dn,
        pressure_op=pressure_op,
        pressure_test=pressure_test,
        temperature=temperature,
        material=material,
        corrosion_allowance=corrosion,
        gasket_material=gasket_material,
        gasket_thickness=gasket_thickness,
        gasket_facing=gasket_facing,
        friction_preset=friction,
        fastener_standard=selection.standard,
        fastener_type=selection.type,
        fastener_grade_id=selection.grade_id,
    )

    return {
        'input': calc_input,
        'selection': selection,
        'preference': preference,
    }
