"""
Tests for symbol formatting: exchange inference, normalization, idempotence.
"""

import pytest

from stockmon.symbols import format_symbol, split_symbol
from stockmon.data_sources.sina import to_sina_code


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("600000", "600000.SH"),
        ("688981", "688981.SH"),
        ("000001", "000001.SZ"),
        ("300750", "300750.SZ"),
        ("  601318 ", "601318.SH"),
    ],
)
def test_bare_codes_get_exchange(raw, expected):
    assert format_symbol(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("600000.SH", "600000.SH"),
        ("600000.sh", "600000.SH"),
        ("sh.600000", "600000.SH"),
        ("SZ.000001", "000001.SZ"),
        ("600519.SS", "600519.SH"),
        ("00700.hk", "00700.HK"),
    ],
)
def test_qualified_codes_are_normalized(raw, expected):
    assert format_symbol(raw) == expected


def test_unknown_prefix_passes_through():
    assert format_symbol("830799") == "830799"
    assert format_symbol("AAPL") == "AAPL"


@pytest.mark.parametrize("raw", ["600000", "000001.sz", "sh.600000", "600519.SS", "830799"])
def test_formatting_is_idempotent(raw):
    once = format_symbol(raw)
    assert format_symbol(once) == once


def test_split_symbol():
    assert split_symbol("600000") == ("600000", "SH")
    assert split_symbol("830799") == ("830799", "")


def test_sina_code():
    assert to_sina_code("600000.SH") == "sh600000"
    assert to_sina_code("000001") == "sz000001"
    assert to_sina_code("830799") == "830799"
