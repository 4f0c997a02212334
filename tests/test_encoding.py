# tests/test_encoding.py
"""
Tests for hex encoding, random material generation, and timing-safe comparison.
"""

import re
import pytest
from core.encoding import (
    bytes_to_hex,
    hex_to_bytes,
    generate_salt,
    generate_form_token,
    timing_safe_equal
)
from core.errors import EncodingError

HEX_RE = re.compile(r"^[0-9a-f]+$")


def test_bytes_to_hex():
    assert bytes_to_hex(bytes([0x00, 0x01, 0xff, 0xab])) == "0001ffab"
    assert bytes_to_hex(b"") == ""
    assert bytes_to_hex(bytearray(b"\x10")) == "10"


def test_hex_to_bytes():
    assert hex_to_bytes("0001ffab") == bytes([0x00, 0x01, 0xff, 0xab])
    assert hex_to_bytes("") == b""
    assert hex_to_bytes("DEADbeef") == bytes.fromhex("deadbeef"), "Uppercase hex should decode"


@pytest.mark.parametrize("data", [
    b"",
    b"\x00",
    bytes([1, 2, 3, 255, 0, 128]),
    bytes(range(256)),
])
def test_round_trip(data):
    assert hex_to_bytes(bytes_to_hex(data)) == data


def test_odd_length_rejected():
    with pytest.raises(EncodingError) as excinfo:
        hex_to_bytes("abc")

    assert "odd length" in str(excinfo.value)


@pytest.mark.parametrize("bad", ["zz", "0g", "de ad", "12\n4", "0x12"])
def test_non_hex_rejected(bad):
    with pytest.raises(EncodingError):
        hex_to_bytes(bad)


def test_non_string_rejected():
    with pytest.raises(EncodingError):
        hex_to_bytes(b"abcd")


def test_generate_salt():
    seen = set()
    for _ in range(50):
        salt = generate_salt()
        assert len(salt) == 64, "Salt should be 32 bytes hex encoded"
        assert HEX_RE.match(salt), "Salt should be lowercase hex"
        assert salt not in seen, "Duplicate salt generated"
        seen.add(salt)


def test_generate_form_token():
    seen = set()
    for _ in range(50):
        token = generate_form_token()
        assert len(token) == 32, "Form token should be 16 bytes hex encoded"
        assert HEX_RE.match(token), "Form token should be lowercase hex"
        assert token not in seen, "Duplicate form token generated"
        seen.add(token)


def test_timing_safe_equal():
    secret = generate_salt()

    assert timing_safe_equal(secret, secret)
    assert timing_safe_equal("", "")
    assert timing_safe_equal("abc", "abc")

    assert not timing_safe_equal("abc", "abd"), "Content difference not detected"
    assert not timing_safe_equal("abc", "ABC"), "Comparison must be case sensitive"
    assert not timing_safe_equal("abc", "abcd"), "Length difference not detected"
    assert not timing_safe_equal("", "a")
    assert not timing_safe_equal(secret, secret[:-1] + ("0" if secret[-1] != "0" else "1"))


@pytest.mark.parametrize("bad", [5, "abcd", None, [1, 2]])
def test_bytes_to_hex_rejects_non_bytes(bad):
    with pytest.raises(EncodingError):
        bytes_to_hex(bad)


def test_bytes_to_hex_memoryview():
    assert bytes_to_hex(memoryview(b"\xab\xcd")) == "abcd"
