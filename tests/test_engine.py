import logging

import pytest

from flange_designer import engine
from flange_designer.models.results import Sized


def test_entry_points_are_deterministic(dn200_pn40, dn200_pn16, en88, good_manual):
    calls = [
        lambda: engine.compute_allowable_stress("P265GH", 150, "EN", "operating"),
        lambda: engine.compute_hydrotest_pressure("EN13445", 10, 10, 100, 20, "P265GH"),
        lambda: engine.compute_gasket_geometry(200, 40, "RF", 2, "graphite"),
        lambda: engine.size_custom_flange(dn200_pn40, 40, en88, "min_weight"),
        lambda: engine.diagnose_sizing_failure(dn200_pn40, 40, en88),
        lambda: engine.verify_manual_geometry(dn200_pn16, good_manual, 16),
        lambda: engine.calculate_standard_flange(dn200_pn16),
    ]
    for call in calls:
        assert call() == call()


def test_allowable_stress():
    # P265GH has a 150 degC row
    assert engine.compute_allowable_stress("P265GH", 150, "EN", "operating") == pytest.approx(228 / 1.5)
    assert engine.compute_allowable_stress("P265GH", 175, "EN", "operating") == pytest.approx(228 / 1.5)


def test_diagnose_reports_closest_failing_pattern(dn200_pn40, en88):
    # some small patterns fail even though the design is feasible
    reason = engine.diagnose_sizing_failure(dn200_pn40, 40, en88)
    assert reason.delta_area > 0
    assert reason.bolt_count is not None
    assert reason.bolt_size is not None


def test_run_custom_sizing(dn200_pn40, en88):
    assert isinstance(engine.run_custom_sizing(dn200_pn40, 40, en88), Sized)


def test_fallback_is_logged(caplog, dn200_pn16):
    with caplog.at_level(logging.WARNING, logger="flange_designer"):
        engine.compute_allowable_stress("Unobtainium", 20, "EN", "operating")
    assert any("Unobtainium" in r.getMessage() for r in caplog.records)


def test_placeholder_is_logged(caplog, dn200_pn40, placeholder_selection):
    with caplog.at_level(logging.INFO, logger="flange_designer"):
        assert engine.size_custom_flange(dn200_pn40, 40, placeholder_selection) is None
    assert any("placeholder" in r.getMessage() for r in caplog.records)
