"""Unit tests for shared text helpers."""

import pytest

from resumake.utils.text_processing import (
    as_text,
    sanitize_file_name,
    set_max_consecutive_blank_lines,
    truncate,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "name,expected",
    [
        ("resume_abc-123", "resume_abc-123"),
        ("Jane Doe's CV (v2)", "Jane_Doe_s_CV__v2_"),
        ("../../etc/passwd", "______etc_passwd"),
        ("", "resume"),
        ("-draft", "draft"),
        ("--output-directory=x", "output-directory_x"),
        ("---", "resume"),
        ("a-b", "a-b"),
    ],
)
def test_sanitize_file_name(name, expected):
    assert sanitize_file_name(name) == expected


@pytest.mark.unit
def test_truncate_bound():
    assert truncate("abcdef", 3) == "abc"
    assert truncate("ab", 3) == "ab"
    assert truncate("ab", 0) == ""


@pytest.mark.unit
def test_as_text():
    assert as_text(None) == ""
    assert as_text(["a"]) == ""
    assert as_text(3.5) == "3.5"
    assert as_text(True) == "true"


@pytest.mark.unit
def test_set_max_consecutive_blank_lines():
    assert set_max_consecutive_blank_lines("a\n\n\n\nb") == "a\n\nb"
