import pytest

from ariabrowser.ariatree.yaml_escape import (
    quote_name,
    yaml_escape_key_if_needed,
    yaml_escape_value_if_needed,
)


@pytest.mark.parametrize("key", ["button", "click-me", "test_value", "it's"])
def test_plain_keys_are_left_alone(key: str) -> None:
    assert yaml_escape_key_if_needed(key) == key


@pytest.mark.parametrize(
    "key, expected",
    [
        ("- dash", "'- dash'"),
        ("& amp", "'& amp'"),
        ("[bracket", "'[bracket'"),
        ("{brace", "'{brace'"),
        ("# hash", "'# hash'"),
        ("'quoted", "'''quoted'"),
        (" leading", "' leading'"),
        ("true", "'true'"),
        ("No", "'No'"),
        ("123", "'123'"),
        ("3.14", "'3.14'"),
        ("0x1F", "'0x1F'"),
        ("key: value", "'key: value'"),
        ("code`here", "'code`here'"),
        ("", "''"),
    ],
)
def test_keys_are_single_quoted_when_needed(key: str, expected: str) -> None:
    assert yaml_escape_key_if_needed(key) == expected


def test_values_are_double_quoted_with_escapes() -> None:
    assert yaml_escape_value_if_needed("hello") == "hello"
    assert yaml_escape_value_if_needed("click me") == "click me"
    assert yaml_escape_value_if_needed("a\nb") == '"a\\nb"'
    assert yaml_escape_value_if_needed('- say "hi"') == '"- say \\"hi\\""'
    assert yaml_escape_value_if_needed("null") == '"null"'
    assert yaml_escape_value_if_needed("") == '""'


def test_control_characters_use_hex_escapes() -> None:
    assert yaml_escape_value_if_needed("bell\x07") == '"bell\\x07"'
    assert yaml_escape_value_if_needed("c1\x85") == '"c1\\x85"'


def test_quote_name_truncates_and_escapes() -> None:
    assert quote_name('say "hi"', 900) == '"say \\"hi\\""'
    assert quote_name("abcdef", 3) == '"abc..."'
    assert quote_name("café", 900) == '"café"'
