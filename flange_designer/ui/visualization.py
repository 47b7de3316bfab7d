import plotly.graph_objects as go
from plotly.subplots import make_subplots
import numpy as np

from flange_designer.models.flange import FlangeDimensions, GasketGeometry
from flange_designer.models.results import BoltingSummary, ThicknessRequirement


def draw_circle(fig, diameter, cx=0.0, cy=0.0, color='black', name='Circle', dash=None, fill=None, fillcolor=None, width=2, showlegend=True):
    """Helper to draw a circle outline (flange rim, bolt circle, gasket, holes)."""
    r = diameter / 2.0
    theta = np.linspace(0, 2 * np.pi, 73)
    fig.add_trace(go.Scatter(
        x=cx + r * np.cos(theta),
        y=cy + r * np.sin(theta),
        mode='lines',
        line=dict(color=color, width=width, dash=dash),
        fill=fill,
        fillcolor=fillcolor,
        name=name,
        showlegend=showlegend,
        hoverinfo='name'
    ))


def bolt_positions(bolt_circle, bolt_count, start_angle=None):
    """(x, y) arrays of hole centres, evenly spaced; first hole off the vertical axis."""
    if start_angle is None:
        start_angle = np.pi / bolt_count
    angles = start_angle + np.linspace(0, 2 * np.pi, bolt_count, endpoint=False)
    r = bolt_circle / 2.0
    return r * np.cos(angles), r * np.sin(angles)


def plot_flange_plan(dims: FlangeDimensions, gasket: GasketGeometry = None):
    """Plan view of the blind flange: outline, gasket ring, bolt circle and holes."""
    fig = go.Figure()

    draw_circle(fig, dims.outer_diameter, color='#2c3e50', name=f'D = {dims.outer_diameter:.0f} mm', fill='toself',
                fillcolor='rgba(189, 195, 199, 0.4)', width=3)

    if gasket is not None:
        draw_circle(fig, gasket.od, color='#27ae60', name=f'Gasket OD {gasket.od:.0f} mm')
        draw_circle(fig, gasket.id, color='#27ae60', name=f'Gasket ID {gasket.id:.0f} mm', dash='dot')
        draw_circle(fig, gasket.effective_diameter, color='#16a085', name=f'G = {gasket.effective_diameter:.1f} mm', dash='dash', width=1)

    draw_circle(fig, dims.bolt_circle, color='#2980b9', name=f'k = {dims.bolt_circle:.0f} mm', dash='dashdot', width=1)

    xs, ys = bolt_positions(dims.bolt_circle, dims.bolt_count)
    for i, (x, y) in enumerate(zip(xs, ys)):
        draw_circle(fig, dims.hole_diameter, cx=x, cy=y, color='#c0392b', name=f'{dims.bolt_count} x {dims.thread_size}', showlegend=(i == 0))

    fig.add_trace(go.Scatter(
        x=xs, y=ys,
        mode='text',
        text=[str(i + 1) for i in range(len(xs))],
        textposition='middle center',
        showlegend=False,
        hoverinfo='skip'
    ))

    fig.update_layout(
        xaxis=dict(title='x (mm)', scaleanchor='y', zeroline=False),
        yaxis=dict(title='y (mm)', zeroline=False),
        margin=dict(l=0, r=0, b=0, t=30),
        showlegend=True,
        legend=dict(x=1.02, y=1),
        title_text="Blind Flange - Plan View"
    )
    return fig


def plot_utilization(bolting: BoltingSummary, thickness_utilization=None):
    """Bar chart of required/provided per load case; 1.0 is the limit."""
    cases = ["Seating", "Operating", "Hydrotest"]
    values = [bolting.utilization_seating, bolting.utilization_oper, bolting.utilization_hydro]
    if thickness_utilization is not None:
        cases.append("Thickness")
        values.append(thickness_utilization)

    colors = ['#e74c3c' if v > 1.0 else '#2ecc71' for v in values]
    fig = go.Figure(go.Bar(x=cases, y=values, marker_color=colors, text=[f"{v:.0%}" for v in values], textposition='outside'))
    fig.add_hline(y=1.0, line=dict(color='black', dash='dash'), annotation_text="Limit")
    fig.update_layout(yaxis_title="Utilization (required / provided)", title_text="Utilization", showlegend=False)
    return fig


def plot_thickness(requirement: ThicknessRequirement, final_thickness, provided):
    """Required thickness per formula and load case next to the chosen plate."""
    fig = make_subplots(rows=1, cols=2, shared_yaxes=True, subplot_titles=("ASME", "EN"))

    fig.add_trace(go.Bar(x=["Operating", "Test"], y=[requirement.asme_op, requirement.asme_test], marker_color='#3498db', name="ASME"), row=1, col=1)
    fig.add_trace(go.Bar(x=["Operating", "Test"], y=[requirement.en_op, requirement.en_test], marker_color='#9b59b6', name="EN"), row=1, col=2)

    for col in (1, 2):
        fig.add_hline(y=final_thickness, line=dict(color='#e67e22', dash='dot'), row=1, col=col)
        fig.add_hline(y=provided, line=dict(color='#2c3e50', dash='dash'), row=1, col=col)

    fig.update_layout(showlegend=False, title_text=f"Required thickness - {requirement.governing_code} governs")
    fig.update_yaxes(title_text="Thickness (mm)", row=1, col=1)
    return fig
