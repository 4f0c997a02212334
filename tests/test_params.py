# tests/test_params.py
"""
Tests for scrypt parameter validation and security level presets.
Covers:
- Range bounds on N, r, p, dkLen and the power-of-two rule
- Memory ceiling across otherwise valid fields
- Check ordering (first failure wins)
- Preset table values and copy semantics
- Wire (de)serialization of parameters
"""

import pytest
from dataclasses import replace
from core.params import (
    ScryptParams,
    SecurityLevel,
    validate_params,
    get_preset,
    list_presets,
    resolve_level
)
from core.errors import ValidationError
from core.constants import (
    SCRYPT_MIN_N,
    SCRYPT_MAX_N,
    SCRYPT_MAX_MEMORY_BYTES
)


@pytest.fixture
def valid_params():
    return ScryptParams(n=2 ** 14, r=8, p=1, dk_len=32)


def test_presets_are_valid():
    for level in SecurityLevel:
        validate_params(get_preset(level))


def test_preset_values():
    expected = {
        "development": (2 ** 14, 8, 1, 32),
        "standard":    (2 ** 16, 8, 1, 32),
        "high":        (2 ** 18, 8, 1, 32),
        "paranoid":    (2 ** 20, 8, 1, 32),
    }
    for level, (n, r, p, dk_len) in expected.items():
        assert get_preset(level) == ScryptParams(n=n, r=r, p=p, dk_len=dk_len), f"Preset mismatch for {level}"


def test_default_preset_is_standard():
    assert get_preset() == get_preset("standard")
    assert get_preset(None) == get_preset(SecurityLevel.STANDARD)


def test_get_preset_returns_copies():
    params = get_preset("standard")
    params.n = 999
    params.dk_len = 1

    fresh = get_preset("standard")
    assert fresh.n == 2 ** 16, "Mutating a returned preset leaked into the table"
    assert fresh.dk_len == 32
    assert get_preset("standard") is not get_preset("standard")


def test_list_presets_returns_copies():
    presets = list_presets()
    assert set(presets) == set(SecurityLevel)

    presets[SecurityLevel.HIGH].r = 1
    assert get_preset("high").r == 8


def test_unknown_level():
    with pytest.raises(ValidationError) as excinfo:
        get_preset("extreme")

    assert excinfo.value.field == "level"
    assert resolve_level("paranoid") is SecurityLevel.PARANOID


@pytest.mark.parametrize("field, value", [
    ("n", SCRYPT_MIN_N),
    ("n", 2 ** 23),     # with r=1 this is exactly the memory ceiling
    ("r", 1),
    ("r", 64),
    ("p", 1),
    ("p", 64),
    ("dk_len", 16),
    ("dk_len", 128),
])
def test_boundaries_accepted(field, value):
    params = ScryptParams(n=2 ** 10, r=1, p=1, dk_len=32)
    setattr(params, field, value)
    validate_params(params)


@pytest.mark.parametrize("field, value, reported", [
    ("n", SCRYPT_MIN_N // 2, "N"),
    ("n", SCRYPT_MAX_N * 2, "N"),
    ("r", 0, "r"),
    ("r", 65, "r"),
    ("p", 0, "p"),
    ("p", 65, "p"),
    ("dk_len", 15, "dkLen"),
    ("dk_len", 129, "dkLen"),
])
def test_single_field_out_of_bounds(valid_params, field, value, reported):
    params = replace(valid_params, **{field: value})

    with pytest.raises(ValidationError) as excinfo:
        validate_params(params)

    assert excinfo.value.field == reported, f"Expected failure on {reported}, got {excinfo.value.field}"
    assert reported in str(excinfo.value)


@pytest.mark.parametrize("n", [1000, 0, -1024, 3 * 2 ** 12, 2 ** 14 + 1])
def test_n_not_power_of_two(valid_params, n):
    with pytest.raises(ValidationError) as excinfo:
        validate_params(replace(valid_params, n=n))

    assert excinfo.value.field == "N"
    assert "power of 2" in excinfo.value.reason


def test_n_power_of_two_checked_first():
    # every other field is also out of range, but N's shape is reported
    with pytest.raises(ValidationError) as excinfo:
        validate_params(ScryptParams(n=1000, r=100, p=100, dk_len=1))

    assert excinfo.value.field == "N"


def test_memory_ceiling():
    params = ScryptParams(n=2 ** 24, r=64, p=1, dk_len=32)
    assert params.memory_bytes() > SCRYPT_MAX_MEMORY_BYTES

    with pytest.raises(ValidationError) as excinfo:
        validate_params(params)

    assert excinfo.value.field == "memory"
    assert "exceeds limit" in excinfo.value.reason


def test_memory_ceiling_is_inclusive():
    # paranoid sits exactly on 1 GiB
    paranoid = get_preset("paranoid")
    assert paranoid.memory_bytes() == SCRYPT_MAX_MEMORY_BYTES
    validate_params(paranoid)

    with pytest.raises(ValidationError):
        validate_params(replace(paranoid, r=9))


def test_wire_round_trip():
    params = get_preset("high")
    data = params.to_dict()

    assert data == {"N": 2 ** 18, "r": 8, "p": 1, "dkLen": 32}
    assert ScryptParams.from_dict(data) == params


@pytest.mark.parametrize("data, field", [
    ({"r": 8, "p": 1, "dkLen": 32}, "N"),
    ({"N": 2 ** 14, "r": 8, "p": 1}, "dkLen"),
    ({"N": "16384", "r": 8, "p": 1, "dkLen": 32}, "N"),
    ({"N": 2 ** 14, "r": 8.0, "p": 1, "dkLen": 32}, "r"),
    ({"N": 2 ** 14, "r": 8, "p": True, "dkLen": 32}, "p"),
    ({"N": 2 ** 24, "r": 64, "p": 1, "dkLen": 32}, "memory"),
])
def test_from_dict_rejects_bad_input(data, field):
    with pytest.raises(ValidationError) as excinfo:
        ScryptParams.from_dict(data)

    assert excinfo.value.field == field


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        ScryptParams(n=1000, r=8, p=1, dk_len=32).validate()
