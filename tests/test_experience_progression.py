import datetime

from portfolio.experience import default_levels, estimate_progression, next_level_info, take_snapshot
from tests.factories import make_range

JUNIOR = make_range("Junior", 0.6, 2)
MID = make_range("Mid", 2.1, 5)


def test_mid_tier_example():
    prog = estimate_progression(1.3, [JUNIOR, MID])
    assert prog.current_level == JUNIOR
    assert prog.next_level == MID
    # Measured against the next tier's lower bound: 0.7 / 1.5 = 46.7%.
    # Dividing by the current tier's width (2 - 0.6) would give 50.
    assert prog.progress_percent == 47


def test_top_tier_is_complete():
    prog = estimate_progression(30, default_levels())
    assert prog.current_level.label == "Architect"
    assert prog.next_level is None
    assert prog.progress_percent == 100
    assert next_level_info(prog) is None


def test_no_level_gives_empty_progression():
    prog = estimate_progression(2.05, [JUNIOR, MID])
    assert prog.current_level is None
    assert prog.next_level is None
    assert prog.progress_percent == 0


def test_lower_bound_is_zero_percent():
    assert estimate_progression(0.6, [JUNIOR, MID]).progress_percent == 0


def test_pre_resolved_level_is_clamped_to_100():
    # Caller passes a level whose range the value has already left
    prog = estimate_progression(4.0, [JUNIOR, MID], current=JUNIOR)
    assert prog.next_level == MID
    assert prog.progress_percent == 100


def test_zero_width_gap_guarded():
    a = make_range("A", 1, 1)
    b = make_range("B", 1, 3)
    prog = estimate_progression(1, [a, b], current=a)
    assert prog.next_level == b
    assert prog.progress_percent == 100


def test_inactive_next_level_is_skipped():
    hidden = make_range("Hidden", 2.1, 5, active=False)
    senior = make_range("Senior", 5.1, 10)
    prog = estimate_progression(1.3, [JUNIOR, hidden, senior])
    assert prog.next_level == senior
    # (1.3 - 0.6) / (5.1 - 0.6) = 15.6% -> 16
    assert prog.progress_percent == 16


def test_next_level_info_reports_remaining_years():
    prog = estimate_progression(1.3, [JUNIOR, MID])
    info = next_level_info(prog)
    assert info == {"label": "Mid", "yearsNeeded": 2.1, "yearsRemaining": 0.8}


def test_estimate_is_idempotent():
    table = default_levels()
    assert estimate_progression(7.7, table) == estimate_progression(7.7, table)


def test_snapshot_fuses_calculator_resolver_and_estimator():
    ref = datetime.datetime(2024, 6, 1, tzinfo=datetime.timezone.utc)
    snap = take_snapshot("2019-01-01", default_levels(), reference_date=ref)
    assert snap.years == 5.4
    assert snap.resolved_level.label == "Senior"
    assert snap.progression.next_level.label == "Lead"
    data = snap.to_dict()
    assert data["level"]["label"] == "Senior"
    assert data["progress"] == 6
    assert data["nextLevel"] == {"label": "Lead", "yearsNeeded": 10.1, "yearsRemaining": 4.7}


def test_snapshot_with_future_start_is_intern():
    ref = datetime.datetime(2024, 6, 1, tzinfo=datetime.timezone.utc)
    snap = take_snapshot("2030-01-01", default_levels(), reference_date=ref)
    assert snap.years == 0
    assert snap.resolved_level.label == "Intern"
    assert snap.progression.progress_percent == 0
