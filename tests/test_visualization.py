import numpy as np
import plotly.graph_objects as go
import pytest

from flange_designer.analysis.standard import calculate_standard_flange
from flange_designer.ui.visualization import bolt_positions, plot_flange_plan, plot_thickness, plot_utilization


def test_bolt_positions_on_circle():
    xs, ys = bolt_positions(320, 12)
    assert len(xs) == 12
    assert np.allclose(np.hypot(xs, ys), 160)
    # no hole on the vertical axis
    assert not np.any(np.isclose(xs, 0))


def test_plan_view(dn200_pn16):
    result = calculate_standard_flange(dn200_pn16)
    fig = plot_flange_plan(result.dims, result.gasket)
    assert isinstance(fig, go.Figure)
    holes = [t for t in fig.data if t.name == "12 x M20"]
    assert len(holes) == 12
    assert sum(1 for t in holes if t.showlegend) == 1


def test_utilization_chart(dn200_pn16):
    result = calculate_standard_flange(dn200_pn16)
    fig = plot_utilization(result.bolting, thickness_utilization=1.2)
    bar = fig.data[0]
    assert list(bar.x) == ["Seating", "Operating", "Hydrotest", "Thickness"]
    assert bar.y[0] == pytest.approx(result.bolting.utilization_seating)
    assert bar.marker.color[-1] == '#e74c3c'


def test_thickness_chart(dn200_pn16):
    result = calculate_standard_flange(dn200_pn16)
    fig = plot_thickness(result.candidate.thickness, result.final_thickness, result.recommended_thickness)
    assert len(fig.data) == 2
