import pytest

from bess_cashflow.finance.payback import solve_payback


def test_interpolates_within_crossing_year():
    # net in year 2 is 70; 40 of it is needed
    assert solve_payback([-100.0, -40.0, 30.0], 2) == pytest.approx(1 + 40 / 70)


def test_explicit_net_flows_are_used_when_given():
    assert solve_payback([-100.0, -40.0, 30.0], 2, [-100.0, 60.0, 70.0]) == pytest.approx(1 + 40 / 70)


def test_no_payback_returns_horizon_exactly():
    cum = [-100.0 + 5 * i for i in range(13)]
    assert cum[-1] < 0
    assert solve_payback(cum, 12) == 12.0


def test_pays_back_in_first_year():
    # net 100 in year 1, half of it needed
    assert solve_payback([-50.0, 50.0], 12) == pytest.approx(0.5)
    # the whole year-1 net is needed
    assert solve_payback([-50.0, 1e-9], 12, [-50.0, 50.0 + 1e-9]) == pytest.approx(1.0)
    assert solve_payback([-50.0, 150.0], 12) == pytest.approx(0.25)


def test_exactly_zero_is_not_yet_paid_back():
    # reaching zero is not a crossing; the next positive year is
    assert solve_payback([-100.0, 0.0, 50.0], 12) == pytest.approx(1.0)


def test_zero_net_at_crossing_is_guarded():
    # inconsistent caller-supplied nets must not divide by zero
    assert solve_payback([-10.0, 5.0], 12, [-10.0, 0.0]) == 0.0


def test_first_crossing_wins_after_dip():
    cum = [-100.0, 20.0, -10.0, 40.0]
    assert solve_payback(cum, 3) == pytest.approx(100 / 120)


def test_empty_or_outlay_only_sequences():
    assert solve_payback([], 12) == 12.0
    assert solve_payback([-1.0], 12) == 12.0
