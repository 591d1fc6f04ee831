"""Integration tests for the account, transaction and transfer CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from pocketledger.cli.main import main
from pocketledger.lifecycle import compute_balance
from pocketledger.snapshot import load_ledger


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()


def _invoke(cli_runner, ledger_path, *args):
    return cli_runner.invoke(main, ["--ledger", str(ledger_path), *args])


def _add_account(cli_runner, ledger_path, name, account_type="checking", balance="0") -> str:
    result = _invoke(
        cli_runner,
        ledger_path,
        "account",
        "add",
        "--name",
        name,
        "--type",
        account_type,
        "--starting-balance",
        balance,
    )
    assert result.exit_code == 0, result.output
    return result.output.strip().rsplit(" ", 1)[-1]


@pytest.mark.sit
def test_init_creates_ledger(cli_runner, tmp_path) -> None:
    path = tmp_path / "books" / "ledger.json"

    result = cli_runner.invoke(main, ["--ledger", str(path), "init"])

    assert result.exit_code == 0
    assert "Created ledger" in result.output
    assert len(load_ledger(path).categories) == 18

    again = cli_runner.invoke(main, ["--ledger", str(path), "init"])
    assert again.exit_code != 0
    assert "already exists" in again.output


@pytest.mark.sit
def test_missing_ledger_reports_init_hint(cli_runner, tmp_path) -> None:
    result = _invoke(cli_runner, tmp_path / "absent.json", "account", "list")

    assert result.exit_code != 0
    assert "pocketledger init" in result.output


@pytest.mark.sit
def test_account_add_and_list(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Checking", balance="1,250.00")

    result = _invoke(cli_runner, ledger_path, "account", "list")

    assert result.exit_code == 0
    assert account_id in result.output
    assert "$1,250.00" in result.output
    ledger = load_ledger(ledger_path)
    assert compute_balance(ledger.transactions, account_id) == 125000


@pytest.mark.sit
def test_account_list_type_filter(cli_runner, ledger_path) -> None:
    _add_account(cli_runner, ledger_path, "Checking")
    _add_account(cli_runner, ledger_path, "Visa", account_type="credit_card", balance="-300")

    result = _invoke(cli_runner, ledger_path, "account", "list", "--type", "credit_card")

    assert result.exit_code == 0
    assert "Visa" in result.output
    assert "Checking" not in result.output
    assert "-$300.00" in result.output


@pytest.mark.sit
def test_account_archive_rejects_non_zero_balance(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Checking", balance="10")
    before = ledger_path.read_text(encoding="utf-8")

    result = _invoke(cli_runner, ledger_path, "account", "archive", account_id)

    assert result.exit_code != 0
    assert "non-zero balance" in result.output
    assert ledger_path.read_text(encoding="utf-8") == before


@pytest.mark.sit
def test_account_archive_and_list_all(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Old Savings", account_type="savings")

    result = _invoke(cli_runner, ledger_path, "account", "archive", account_id)
    assert result.exit_code == 0

    hidden = _invoke(cli_runner, ledger_path, "account", "list")
    assert "No accounts found." in hidden.output
    shown = _invoke(cli_runner, ledger_path, "account", "list", "--all")
    assert "Old Savings (archived)" in shown.output


@pytest.mark.sit
def test_account_update_requires_a_field(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Checking")

    result = _invoke(cli_runner, ledger_path, "account", "update", account_id)
    assert result.exit_code != 0

    result = _invoke(
        cli_runner, ledger_path, "account", "update", account_id, "--name", "Joint"
    )
    assert result.exit_code == 0
    assert load_ledger(ledger_path).get_account(account_id).name == "Joint"


@pytest.mark.sit
def test_account_delete_with_transactions_fails(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Checking")

    result = _invoke(cli_runner, ledger_path, "account", "delete", account_id, "--yes")

    assert result.exit_code != 0
    assert "has transactions" in result.output


@pytest.mark.sit
def test_delete_cancelled_without_confirmation(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Checking")

    result = cli_runner.invoke(
        main, ["--ledger", str(ledger_path), "account", "delete", account_id], input="n\n"
    )

    assert result.exit_code == 0
    assert "Delete cancelled." in result.output


@pytest.mark.sit
def test_transaction_add_stores_expense_negative(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Checking", balance="100")

    result = _invoke(
        cli_runner,
        ledger_path,
        "transaction",
        "add",
        "--type",
        "expense",
        "--account",
        account_id,
        "--amount",
        "45.50",
        "--date",
        "2026-02-10",
        "--category",
        "5",
        "--payee",
        "Corner Market",
    )

    assert result.exit_code == 0, result.output
    ledger = load_ledger(ledger_path)
    expense = next(tx for tx in ledger.transactions if tx.type == "expense")
    assert expense.amount == -4550
    assert expense.category_id == "5"
    assert expense.payee == "Corner Market"
    assert compute_balance(ledger.transactions, account_id) == 5450

    listed = _invoke(cli_runner, ledger_path, "transaction", "list", "--month", "2026-02")
    assert "-$45.50" in listed.output


@pytest.mark.sit
def test_transaction_add_rejects_bad_date(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Checking")

    result = _invoke(
        cli_runner,
        ledger_path,
        "transaction",
        "add",
        "--type",
        "income",
        "--account",
        account_id,
        "--amount",
        "10",
        "--date",
        "2026-02-30",
    )

    assert result.exit_code != 0
    assert "YYYY-MM-DD" in result.output


@pytest.mark.sit
def test_transaction_update_keeps_sign(cli_runner, ledger_path) -> None:
    account_id = _add_account(cli_runner, ledger_path, "Checking")
    _invoke(
        cli_runner,
        ledger_path,
        "transaction",
        "add",
        "--type",
        "expense",
        "--account",
        account_id,
        "--amount",
        "20",
        "--date",
        "2026-02-10",
    )
    expense = next(tx for tx in load_ledger(ledger_path).transactions if tx.type == "expense")

    result = _invoke(
        cli_runner, ledger_path, "transaction", "update", expense.id, "--amount", "35"
    )

    assert result.exit_code == 0, result.output
    assert load_ledger(ledger_path).get_transaction(expense.id).amount == -3500


@pytest.mark.sit
def test_transfer_add_update_delete(cli_runner, ledger_path) -> None:
    checking_id = _add_account(cli_runner, ledger_path, "Checking", balance="500")
    savings_id = _add_account(cli_runner, ledger_path, "Savings", account_type="savings")

    result = _invoke(
        cli_runner,
        ledger_path,
        "transfer",
        "add",
        "--from-account",
        checking_id,
        "--to-account",
        savings_id,
        "--amount",
        "200",
        "--date",
        "2026-02-14",
    )
    assert result.exit_code == 0, result.output
    outflow_id, inflow_id = result.output.strip().split(" ", 2)[2].split(" -> ")

    ledger = load_ledger(ledger_path)
    assert compute_balance(ledger.transactions, checking_id) == 30000
    assert compute_balance(ledger.transactions, savings_id) == 20000

    result = _invoke(
        cli_runner, ledger_path, "transaction", "update", outflow_id, "--amount", "250"
    )
    assert result.exit_code == 0, result.output
    ledger = load_ledger(ledger_path)
    assert ledger.get_transaction(outflow_id).amount == -25000
    assert ledger.get_transaction(inflow_id).amount == 25000

    result = _invoke(cli_runner, ledger_path, "transaction", "delete", inflow_id, "--yes")
    assert result.exit_code == 0
    ledger = load_ledger(ledger_path)
    assert not any(tx.type == "transfer" for tx in ledger.transactions)


@pytest.mark.sit
def test_transfer_to_same_account_fails(cli_runner, ledger_path) -> None:
    checking_id = _add_account(cli_runner, ledger_path, "Checking")

    result = _invoke(
        cli_runner,
        ledger_path,
        "transfer",
        "add",
        "--from-account",
        checking_id,
        "--to-account",
        checking_id,
        "--amount",
        "5",
    )

    assert result.exit_code != 0
    assert "must differ" in result.output
