"""Conversion between integer minor-unit amounts and display text."""

from __future__ import annotations

from decimal import Decimal
import re

from pocketledger.models import Currency

# en-US display symbols; ISO codes missing here render as "CODE 1.00".
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "CN¥",
    "INR": "₹",
    "KRW": "₩",
    "ILS": "₪",
    "VND": "₫",
    "PHP": "₱",
    "CAD": "CA$",
    "AUD": "A$",
    "NZD": "NZ$",
    "HKD": "HK$",
    "MXN": "MX$",
    "BRL": "R$",
    "TWD": "NT$",
    "XAF": "FCFA",
    "XOF": "F CFA",
    "XCD": "EC$",
    "XPF": "CFPF",
}

ISO_4217_CODES = frozenset(
    """
    AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BHD BIF BMD BND
    BOB BRL BSD BTN BWP BYN BZD CAD CDF CHF CLP CNY COP CRC CUP CVE CZK DJF
    DKK DOP DZD EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD GNF GTQ GYD HKD
    HNL HTG HUF IDR ILS INR IQD IRR ISK JMD JOD JPY KES KGS KHR KMF KPW KRW
    KWD KYD KZT LAK LBP LKR LRD LSL LYD MAD MDL MGA MKD MMK MNT MOP MRU MUR
    MVR MWK MXN MYR MZN NAD NGN NIO NOK NPR NZD OMR PAB PEN PGK PHP PKR PLN
    PYG QAR RON RSD RUB RWF SAR SBD SCR SDG SEK SGD SHP SLE SOS SRD SSP STN
    SVC SYP SZL THB TJS TMT TND TOP TRY TTD TWD TZS UAH UGX USD UYU UZS VES
    VND VUV WST XAF XCD XOF XPF YER ZAR ZMW ZWL
    """.split()
)

_STRIP_PATTERN = re.compile(r"[^0-9.\-]")


def is_known_currency(code: str) -> bool:
    """Return True when the code is an ISO 4217 currency."""
    return code.upper() in ISO_4217_CODES


def to_decimal(amount: int, currency: Currency) -> Decimal:
    """Scale an integer minor-unit amount to its major-unit Decimal."""
    return Decimal(amount).scaleb(-currency.precision)


def format_money_decimal(amount: int, currency: Currency) -> str:
    """Format the bare decimal part, e.g. ``-1234.56``."""
    return f"{to_decimal(amount, currency):.{currency.precision}f}"


def format_money(amount: int, currency: Currency) -> str:
    """Format a minor-unit amount as en-US currency text.

    Recognized ISO 4217 codes render with their symbol (``$1,234.56``) or,
    lacking one, their code (``CHF 1,234.56``). Anything else, such as
    crypto tickers, renders as the grouped number followed by the code
    (``12.34 BTC``).
    """
    value = to_decimal(amount, currency)
    sign = "-" if amount < 0 else ""
    number = f"{abs(value):,.{currency.precision}f}"
    code = currency.code.upper()
    if not is_known_currency(code):
        return f"{sign}{number} {currency.code}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {number}"
    return f"{sign}{symbol}{number}"


def parse_money(text: str, currency: Currency) -> int:
    """Parse display text back into an integer minor-unit amount.

    Everything except digits, a leading minus and the first decimal point is
    ignored. Fraction digits beyond the currency precision are truncated,
    missing ones are padded with zeros.

    Raises:
        ValueError: If the text contains no digit
    """
    cleaned = _STRIP_PATTERN.sub("", text)
    if not any(char.isdigit() for char in cleaned):
        raise ValueError(f'Invalid money input: "{text}"')
    negative = cleaned.startswith("-")
    cleaned = cleaned.replace("-", "")
    whole, _, fraction = cleaned.partition(".")
    fraction = fraction.split(".", 1)[0]
    precision = currency.precision
    fraction = fraction[:precision].ljust(precision, "0")
    value = int(whole or "0") * 10**precision + int(fraction or "0")
    return -value if negative else value
