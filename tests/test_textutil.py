import datetime

import pytest

from licverify.textutil import (
    FileFormat,
    identify_format,
    seconds_from_epoch,
    split,
    trim,
    upper,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("  a b \t\n", "a b"),
        ("abc\0\0", "abc"),
        ("\0abc", "\0abc"),
        ("   ", ""),
        ("", ""),
    ],
)
def test_trim(text, expected):
    assert trim(text) == expected


def test_upper_only_ascii():
    assert upper("abc-é") == "ABC-é"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a;b", ["a", "b"]),
        ("a;b;", ["a", "b"]),
        ("", []),
        (";a", ["", "a"]),
        ("a;;", ["a", ""]),
    ],
)
def test_split(text, expected):
    assert split(text, ";") == expected


def test_date_formats_agree():
    compact = seconds_from_epoch("20200101")
    assert seconds_from_epoch("2020-01-01") == compact
    assert seconds_from_epoch("2020/01/01") == compact


def test_date_is_local_midnight():
    expected = datetime.datetime(2021, 3, 15).timestamp()
    assert seconds_from_epoch("2021-03-15") == int(expected)


def test_consecutive_days():
    first = seconds_from_epoch("2020-06-10")
    second = seconds_from_epoch("2020-06-11")
    assert abs((second - first) - 86400) <= 3600


@pytest.mark.parametrize("text", ["2020-01", "abcdefgh", "2020.01.01", "", "2020-01-011"])
def test_bad_dates(text):
    with pytest.raises(ValueError):
        seconds_from_epoch(text)


@pytest.mark.parametrize(
    "content, expected",
    [
        ("[section]\nkey=value", FileFormat.INI),
        ("TWFu", FileFormat.BASE64),
        ("TWE=", FileFormat.BASE64),
        ("", FileFormat.BASE64),
        ("hello", FileFormat.UNKNOWN),
    ],
)
def test_identify_format(content, expected):
    assert identify_format(content) is expected