from __future__ import annotations

from decimal import Decimal

import pytest

from pocketledger.models import Currency
from pocketledger.money import (
    format_money,
    format_money_decimal,
    is_known_currency,
    parse_money,
    to_decimal,
)

USD = Currency("USD", 2)


def test_format_money_usd() -> None:
    assert format_money(123456, USD) == "$1,234.56"
    assert format_money(-1200, USD) == "-$12.00"
    assert format_money(0, USD) == "$0.00"


def test_format_money_other_currencies() -> None:
    assert format_money(123456, Currency("CHF", 2)) == "CHF 1,234.56"
    assert format_money(1500, Currency("JPY", 0)) == "¥1,500"
    assert format_money(1234, Currency("BTC", 2)) == "12.34 BTC"
    assert format_money(-100000000, Currency("BTC", 8)) == "-1.00000000 BTC"


def test_format_money_decimal() -> None:
    assert format_money_decimal(-123456, USD) == "-1234.56"
    assert format_money_decimal(5, Currency("KWD", 3)) == "0.005"
    assert to_decimal(123456, USD) == Decimal("1234.56")


def test_is_known_currency() -> None:
    assert is_known_currency("usd")
    assert not is_known_currency("BTC")


def test_parse_money() -> None:
    assert parse_money("$1,234.56", USD) == 123456
    assert parse_money("-$12", USD) == -1200
    assert parse_money("12.345", USD) == 1234
    assert parse_money(".5", USD) == 50
    assert parse_money("1500", Currency("JPY", 0)) == 1500


def test_parse_money_only_leading_minus_counts() -> None:
    assert parse_money("1-2", USD) == 1200


def test_parse_money_rejects_text_without_digits() -> None:
    with pytest.raises(ValueError):
        parse_money("abc", USD)
    with pytest.raises(ValueError):
        parse_money("-", USD)


@pytest.mark.parametrize("amount", [0, 1, -1, 99, 123456, -98765432])
@pytest.mark.parametrize("code, precision", [("USD", 2), ("JPY", 0), ("CHF", 2), ("BTC", 8)])
def test_parse_money_reads_formatted_text(amount, code, precision) -> None:
    currency = Currency(code, precision)

    assert parse_money(format_money(amount, currency), currency) == amount
    assert parse_money(format_money_decimal(amount, currency), currency) == amount
