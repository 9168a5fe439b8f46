"""Unit tests for proportional pool allocation"""

import pytest
from decimal import Decimal
from debt_pool.domain.allocation import allocate_pool
from debt_pool.domain.exceptions import InvalidAmountError
from debt_pool.domain.weighting import calculate_weight


def total(lines):
    return sum((line.amount for line in lines), Decimal("0.00"))


def test_allocate_single_debt_clamped_to_balance(make_debt):
    """Pool far above the balance pays the debt off and no more"""
    debt = make_debt(interest_rate="5", balance="40.00")

    lines = allocate_pool([debt], {debt.creditor_id: 5}, 1000)

    assert len(lines) == 1
    assert lines[0].amount == Decimal("40.00")
    assert lines[0].debt_id == debt.id


def test_allocate_equal_weights_split_evenly(make_debt):
    """Two equal debts of 100, pool 100 -> 50.00 each"""
    a = make_debt(interest_rate="10", balance="100.00", creditor_id="X")
    b = make_debt(interest_rate="10", balance="100.00", creditor_id="X")

    lines = allocate_pool([a, b], {}, "100.00")

    assert [line.amount for line in lines] == [Decimal("50.00"), Decimal("50.00")]
    assert total(lines) == Decimal("100.00")


def test_allocate_rounding_remainder_goes_to_largest_share(make_debt):
    """Three equal debts, pool 100 -> 33.33 each + 0.01 on the first largest"""
    debts = [make_debt(interest_rate="4", balance="500.00", creditor_id="X") for _ in range(3)]

    lines = allocate_pool(debts, {}, "100.00")

    assert [line.amount for line in lines] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
    assert total(lines) == Decimal("100.00")


def test_allocate_half_cent_overshoot_taken_back(make_debt):
    """Two equal debts, pool 0.05 -> half-up gives 0.03 + 0.03, trimmed to total 0.05"""
    a = make_debt(interest_rate="3", balance="10.00", creditor_id="X")
    b = make_debt(interest_rate="3", balance="10.00", creditor_id="X")

    lines = allocate_pool([a, b], {}, "0.05")

    assert total(lines) == Decimal("0.05")
    assert [line.amount for line in lines] == [Decimal("0.02"), Decimal("0.03")]


def test_allocate_clamped_excess_spills_to_debts_with_room(make_debt):
    """A tiny high-rate debt is capped; the rest of the pool lands on the other debt"""
    tiny = make_debt(interest_rate="20", balance="5.00")
    big = make_debt(interest_rate="1", balance="1000.00")

    lines = allocate_pool([tiny, big], {}, "100.00")

    amounts = {line.debt_id: line.amount for line in lines}
    assert amounts[tiny.id] == Decimal("5.00")
    assert amounts[big.id] == Decimal("95.00")
    assert total(lines) == Decimal("100.00")


def test_allocate_pool_above_total_capacity(make_debt):
    """When all balances together are below the pool, every debt is paid off"""
    a = make_debt(interest_rate="8", balance="30.00")
    b = make_debt(interest_rate="2", balance="12.50")

    lines = allocate_pool([a, b], {}, "500.00")

    assert {line.debt_id: line.amount for line in lines} == {
        a.id: Decimal("30.00"),
        b.id: Decimal("12.50"),
    }
    assert total(lines) == Decimal("42.50")


def test_allocate_never_exceeds_balance_or_pool(make_debt):
    debts = [
        make_debt(interest_rate=rate, balance=balance, creditor_id=creditor)
        for rate, balance, creditor in [
            ("19.99", "0.07", "A"),
            ("7.5", "250.00", "B"),
            ("0", "1.01", "C"),
            ("3.2", "999.99", "A"),
            ("7.5", "3.33", "D"),
        ]
    ]
    scores = {"A": 0, "B": 10, "C": 7}
    balances = {d.id: d.outstanding_balance for d in debts}

    for pool in ["0.01", "0.99", "1.00", "13.37", "100.00", "1254.39", "5000.00"]:
        lines = allocate_pool(debts, scores, pool)
        capacity = sum(balances.values(), Decimal("0.00"))

        assert total(lines) <= Decimal(pool)
        if capacity >= Decimal(pool):
            assert total(lines) == Decimal(pool)
        for line in lines:
            assert Decimal("0") < line.amount <= balances[line.debt_id]


def test_allocate_preserves_input_order_and_weights(make_debt):
    low = make_debt(interest_rate="1", balance="100.00", creditor_id="L")
    high = make_debt(interest_rate="9", balance="100.00", creditor_id="H")

    lines = allocate_pool([low, high], {"L": 2}, "50.00")

    assert [line.debt_id for line in lines] == [low.id, high.id]
    assert lines[0].weight == pytest.approx(calculate_weight(low, 2))
    assert lines[1].weight == pytest.approx(calculate_weight(high, 5))
    assert lines[1].amount > lines[0].amount


def test_allocate_skips_settled_debts(make_debt):
    settled = make_debt(interest_rate="50", balance="0", amount="10.00")
    open_debt = make_debt(interest_rate="1", balance="20.00")

    lines = allocate_pool([settled, open_debt], {}, "10.00")

    assert [line.debt_id for line in lines] == [open_debt.id]
    assert lines[0].amount == Decimal("10.00")


def test_allocate_drops_zero_lines(make_debt):
    """A negligible weight that rounds to 0.00 is not recorded"""
    heavy = make_debt(interest_rate="100", balance="1000.00")
    light = make_debt(interest_rate="0", balance="1000.00")

    lines = allocate_pool([heavy, light], {heavy.creditor_id: 0}, "0.01", default_score=0)

    assert [line.debt_id for line in lines] == [heavy.id]
    assert lines[0].amount == Decimal("0.01")


def test_allocate_empty_inputs(make_debt):
    """No debts or only settled debts -> nothing to allocate"""
    assert allocate_pool([], {}, 100) == []
    settled = [make_debt(balance="0", amount="5.00"), make_debt(balance="0", amount="7.00")]
    assert allocate_pool(settled, {}, 100) == []


def test_allocate_does_not_mutate_debts(make_debt):
    debt = make_debt(interest_rate="5", balance="40.00")

    allocate_pool([debt], {}, 10)

    assert debt.outstanding_balance == Decimal("40.00")
    assert debt.payments == ()


@pytest.mark.parametrize("pool", [0, "-5", "abc", "1e30"])
def test_allocate_rejects_invalid_pool(make_debt, pool):
    with pytest.raises(InvalidAmountError):
        allocate_pool([make_debt()], {}, pool)
