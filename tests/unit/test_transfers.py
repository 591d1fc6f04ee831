from __future__ import annotations

from dataclasses import replace

import pytest

from conftest import make_transaction
from pocketledger.exceptions import BusinessRuleError
from pocketledger.transfers import (
    cascade_transfer_delete,
    check_transfer_type_change,
    create_transfer_pair,
    find_orphaned_legs,
    propagate_transfer_update,
)


def test_create_transfer_pair_links_legs() -> None:
    outflow, inflow = create_transfer_pair("acc-1", "acc-2", 25000, "2026-02-14", notes="Rent pot")

    assert outflow.amount == -25000
    assert inflow.amount == 25000
    assert outflow.account_id == "acc-1"
    assert inflow.account_id == "acc-2"
    assert outflow.transfer_pair_id == inflow.id
    assert inflow.transfer_pair_id == outflow.id
    assert outflow.type == inflow.type == "transfer"
    assert outflow.category_id == inflow.category_id == ""
    assert outflow.date == inflow.date == "2026-02-14"
    assert outflow.notes == inflow.notes == "Rent pot"
    assert outflow.id != inflow.id


def test_create_transfer_pair_ignores_amount_sign() -> None:
    outflow, inflow = create_transfer_pair("acc-1", "acc-2", -25000, "2026-02-14")

    assert outflow.amount == -25000
    assert inflow.amount == 25000
    assert find_orphaned_legs([outflow, inflow]) == []


def test_check_transfer_type_change() -> None:
    check_transfer_type_change("expense", "income")
    check_transfer_type_change("transfer", "transfer")

    with pytest.raises(BusinessRuleError):
        check_transfer_type_change("transfer", "expense")
    with pytest.raises(BusinessRuleError):
        check_transfer_type_change("income", "transfer")


def test_propagate_transfer_update_mirrors_amount_and_date() -> None:
    outflow, inflow = create_transfer_pair("acc-1", "acc-2", 25000, "2026-02-14")
    other = make_transaction("t9", -500)
    updated = replace(inflow, amount=30000, date="2026-02-15", notes="Top up")

    result = propagate_transfer_update([outflow, inflow, other], updated)

    by_id = {tx.id: tx for tx in result}
    assert by_id[inflow.id].amount == 30000
    assert by_id[outflow.id].amount == -30000
    assert by_id[outflow.id].date == "2026-02-15"
    assert by_id[outflow.id].notes == ""
    assert by_id["t9"] == other


def test_propagate_transfer_update_rejects_type_change() -> None:
    outflow, inflow = create_transfer_pair("acc-1", "acc-2", 25000, "2026-02-14")
    changed = replace(inflow, type="income", transfer_pair_id="")

    with pytest.raises(BusinessRuleError):
        propagate_transfer_update([outflow, inflow], changed)


def test_propagate_transfer_update_rejects_change_to_transfer() -> None:
    expense = make_transaction("t1", -500)
    changed = replace(expense, type="transfer")

    with pytest.raises(BusinessRuleError):
        propagate_transfer_update([expense], changed)


def test_cascade_transfer_delete_removes_both_legs() -> None:
    outflow, inflow = create_transfer_pair("acc-1", "acc-2", 25000, "2026-02-14")
    other = make_transaction("t9", -500)

    assert cascade_transfer_delete([outflow, inflow, other], inflow.id) == [other]
    assert cascade_transfer_delete([outflow, inflow, other], "t9") == [outflow, inflow]


def test_find_orphaned_legs() -> None:
    outflow, inflow = create_transfer_pair("acc-1", "acc-2", 25000, "2026-02-14")
    mismatched = replace(inflow, amount=100)

    assert find_orphaned_legs([outflow]) == [outflow]
    assert find_orphaned_legs([outflow, mismatched]) == [outflow, mismatched]
