import logging

import streamlit as st

from flange_designer.database.catalogs import calculated_pressure_class, max_available_pressure_class
from flange_designer.engine import calculate_standard_flange, needs_custom_sizing, run_custom_sizing, verify_manual_geometry
from flange_designer.models.results import Sized
from flange_designer.ui.editor import init_manual_geometry, render_editor
from flange_designer.ui.sidebar import render_sidebar
from flange_designer.ui.visualization import plot_flange_plan, plot_thickness, plot_utilization

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Blind Flange Designer", layout="wide", page_icon="⚙️")


def compute_design(config):
    """Standard table when the class is cataloged, otherwise the custom search."""
    calc_input = config['input']
    if not needs_custom_sizing(calc_input.dn, calc_input.pressure_op):
        return calculate_standard_flange(calc_input), None

    target_pn = calculated_pressure_class(calc_input.pressure_op)
    outcome = run_custom_sizing(calc_input, target_pn, config['selection'], config['preference'])
    if isinstance(outcome, Sized):
        return outcome.result, None
    return None, outcome.reason


def render_failure(reason):
    st.error("No bolt pattern passes the bolt area check for this design.")
    if reason is not None:
        st.warning(
            f"Closest miss: {reason.bolt_count} x {reason.bolt_size}, {reason.case} case needs "
            f"{reason.required_area:.0f} mm² but provides {reason.provided_area:.0f} mm² "
            f"(short by {reason.delta_area:.0f} mm²)."
        )
    else:
        st.info("The selected fastener grade has no strength data (placeholder). Choose another grade.")


def render_result(result):
    dims = result.dims
    bolting = result.bolting

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Recommended Thickness", f"{result.recommended_thickness:.0f} mm",
              help=f"Required {result.min_thickness:.1f} mm + CA = {result.final_thickness:.1f} mm")
    c2.metric("Bolting", f"{dims.bolt_count} x {dims.thread_size}")
    c3.metric("Outer Diameter / Bolt Circle", f"{dims.outer_diameter:.0f} / {dims.bolt_circle:.0f} mm")
    c4.metric("Weight", f"{result.weight:.1f} kg")

    source = "EN 1092-1 table" if result.source == "en1092" else "Custom sizing"
    st.caption(
        f"{source} | PN{result.pressure_class} | governing code {result.governing_code} | "
        f"test pressure {result.pressure_test_used:.1f} bar ({result.hydrotest.basis})"
    )
    for note in result.fallbacks:
        st.warning(note)
    if result.candidate.bolt_circle_clamped:
        st.info(f"Bolt circle raised to the standard table minimum ({result.bolt_circle_min_standard:.0f} mm).")

    tab_plan, tab_bolting, tab_thickness = st.tabs(["Plan View", "Bolting", "Thickness"])

    with tab_plan:
        st.plotly_chart(plot_flange_plan(dims, result.gasket), use_container_width=True)

    with tab_bolting:
        if not bolting.pass_:
            if bolting.fastener.properties.placeholder:
                st.error("Fastener data is placeholder: bolting cannot be verified.")
            elif bolting.failure_reason is not None:
                fr = bolting.failure_reason
                st.error(f"Bolt area insufficient ({fr.case}): short by {fr.delta_area:.0f} mm².")
        st.plotly_chart(plot_utilization(bolting), use_container_width=True)
        torque = bolting.torque
        if torque is not None:
            t1, t2, t3 = st.columns(3)
            t1.metric("Torque", f"{torque.torque_nm:.0f} Nm", help=f"{torque.torque_min_nm:.0f} - {torque.torque_max_nm:.0f} Nm")
            t2.metric("Preload / Bolt", f"{torque.preload_per_bolt / 1000:.1f} kN")
            t3.metric("Proof Utilization", f"{torque.preload_utilization:.0%}")
            if torque.capped_by_proof:
                st.warning("Preload capped at 70% of proof load: the joint is under-tightened for the governing case.")
            st.markdown("\n".join(f"- {a}" for a in torque.assumptions))

    with tab_thickness:
        st.plotly_chart(
            plot_thickness(result.candidate.thickness, result.final_thickness, result.recommended_thickness),
            use_container_width=True,
        )
        check = result.candidate.plate_check
        p1, p2 = st.columns(2)
        p1.metric("Plate Stress at Test", f"{check.stress_test:.0f} MPa", help=f"Yield at 20 °C: {check.yield_at_test:.0f} MPa")
        p2.metric("Deflection at Operation", f"{check.deflection_op:.2f} mm", help=f"Limit {check.deflection_limit:.1f} mm")


def render_manual_check(config, result):
    init_manual_geometry(result.dims if result else None, result.recommended_thickness if result else None)
    manual = render_editor(config)
    if not st.button("Verify Geometry", type="primary"):
        return

    check = verify_manual_geometry(config['input'], manual, result.pressure_class if result else None)
    if check.pass_:
        st.success("Manual geometry passes all checks.")
    else:
        st.error("Manual geometry fails.")
    for err in check.errors:
        st.markdown(f"- {err}")
    for note in check.fallbacks:
        st.warning(note)

    if check.bolt_summary is not None:
        thickness_util = check.thickness_summary.utilization if check.thickness_summary else None
        st.plotly_chart(plot_utilization(check.bolt_summary, thickness_util), use_container_width=True)
    if check.thickness_summary is not None:
        ts = check.thickness_summary
        st.caption(f"Required {ts.required_with_ca:.1f} mm (incl. CA), provided {ts.provided:.1f} mm, {ts.governing_code} governs.")


def main():
    st.title("Blind Flange Designer")

    config = render_sidebar()
    calc_input = config['input']

    ceiling = max_available_pressure_class(calc_input.dn)
    if needs_custom_sizing(calc_input.dn, calc_input.pressure_op):
        st.info(f"PN{calculated_pressure_class(calc_input.pressure_op)} exceeds the EN 1092-1 table for DN{calc_input.dn} "
                f"(max PN{ceiling}). Custom sizing is used.")

    tab_design, tab_manual = st.tabs(["Design", "Manual Check"])

    result, reason = compute_design(config)
    with tab_design:
        if result is None:
            render_failure(reason)
        else:
            render_result(result)

    with tab_manual:
        render_manual_check(config, result)


if __name__ == "__main__":
    main()
