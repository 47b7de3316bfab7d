import streamlit as st

from flange_designer.database.fasteners import BOLT_HOLE_DIAMETER, BOLT_STRESS_AREA
from flange_designer.models.flange import FlangeDimensions, ManualGeometry

BOLT_SIZE_OPTIONS = list(BOLT_STRESS_AREA.keys())


# --- Manual geometry state ---
def init_manual_geometry(dims: FlangeDimensions = None, thickness=None):
    """Seed the editor with the last sized design, once."""
    if "manual" in st.session_state or dims is None:
        return
    st.session_state.manual = {
        "bolt_circle": float(dims.bolt_circle),
        "bolt_count": int(dims.bolt_count),
        "bolt_hole_diameter": float(dims.hole_diameter),
        "outer_diameter": float(dims.outer_diameter),
        "thickness": float(thickness or 20.0),
        "bolt_size": dims.thread_size,
        "custom_gasket": False,
        "gasket_id": 0.0,
        "gasket_od": 0.0,
    }


def reset_manual_geometry():
    st.session_state.pop("manual", None)


# --- UI Rendering ---
def render_editor(config: dict):
    """
    Manual geometry form. Returns a ManualGeometry built from the form and
    the sidebar fastener selection.
    """
    state = st.session_state.setdefault("manual", {
        "bolt_circle": 0.0, "bolt_count": 8, "bolt_hole_diameter": 0.0, "outer_diameter": 0.0,
        "thickness": 0.0, "bolt_size": "M16", "custom_gasket": False, "gasket_id": 0.0, "gasket_od": 0.0,
    })
    selection = config['selection']
    calc_input = config['input']

    with st.expander("Flange Geometry", expanded=True):
        c1, c2, c3 = st.columns(3)
        state['outer_diameter'] = c1.number_input("Outer Diameter D (mm)", value=state['outer_diameter'], min_value=0.0, step=5.0)
        state['bolt_circle'] = c2.number_input("Bolt Circle k (mm)", value=state['bolt_circle'], min_value=0.0, step=5.0)
        state['thickness'] = c3.number_input("Thickness incl. CA (mm)", value=state['thickness'], min_value=0.0, step=1.0)

        c4, c5, c6 = st.columns(3)
        state['bolt_count'] = int(c4.number_input("Bolt Count", value=state['bolt_count'], min_value=0, step=4))
        size_index = BOLT_SIZE_OPTIONS.index(state['bolt_size']) if state['bolt_size'] in BOLT_SIZE_OPTIONS else 0
        state['bolt_size'] = c5.selectbox("Bolt Size", BOLT_SIZE_OPTIONS, index=size_index)
        state['bolt_hole_diameter'] = c6.number_input(
            "Hole Diameter d2 (mm)",
            value=state['bolt_hole_diameter'] or float(BOLT_HOLE_DIAMETER.get(state['bolt_size'], 0.0)),
            min_value=0.0, step=1.0,
        )

    with st.expander("Gasket (optional)", expanded=False):
        state['custom_gasket'] = st.checkbox("User-defined gasket diameters", value=state['custom_gasket'])
        if state['custom_gasket']:
            g1, g2 = st.columns(2)
            state['gasket_id'] = g1.number_input("Gasket ID (mm)", value=state['gasket_id'], min_value=0.0)
            state['gasket_od'] = g2.number_input("Gasket OD (mm)", value=state['gasket_od'], min_value=0.0)
        else:
            st.caption("Gasket derived from DN and pressure class.")

    if st.button("Reset to sized design"):
        reset_manual_geometry()
        st.rerun()

    custom = state['custom_gasket']
    return ManualGeometry(
        bolt_circle=state['bolt_circle'],
        bolt_count=state['bolt_count'],
        bolt_hole_diameter=state['bolt_hole_diameter'],
        outer_diameter=state['outer_diameter'],
        thickness=state['thickness'],
        bolt_size=state['bolt_size'],
        fastener_standard=selection.standard,
        fastener_type=selection.type,
        fastener_grade_id=selection.grade_id,
        friction_preset=calc_input.friction_preset,
        tightening_method=calc_input.tightening_method,
        gasket_id=state['gasket_id'] if custom else None,
        gasket_od=state['gasket_od'] if custom else None,
    )
