# tests/test_ids.py

import uuid

import pytest

from taskboard import ids
from taskboard.exceptions import InvalidIdentifier


@pytest.mark.parametrize(
    "value",
    [
        "00000000-0000-0000-0000-000000000000",
        "ffffffff-ffff-ffff-ffff-ffffffffffff",
        "7c9e6679-7425-40de-944b-e07fc1f90ae7",
    ],
)
def test_decode_inverts_encode(value):
    assert ids.decode(ids.encode(value)) == value


def test_random_uuids_survive_round_trip():
    for _ in range(50):
        value = str(uuid.uuid4())
        assert ids.decode(ids.encode(value)) == value


def test_encode_is_sixteen_bytes():
    assert len(ids.encode(str(uuid.uuid4()))) == 16


@pytest.mark.parametrize(
    "value",
    ["7C9E6679-7425-40DE-944B-E07FC1F90AE7", "7c9e6679-7425-40de-944B-e07fc1f90ae7"],
)
def test_uppercase_hex_is_rejected(value):
    assert not ids.is_valid(value)
    with pytest.raises(InvalidIdentifier):
        ids.encode(value)


@pytest.mark.parametrize(
    "value",
    [
        "",
        "not-a-uuid",
        "7c9e6679742540de944be07fc1f90ae7",
        "{7c9e6679-7425-40de-944b-e07fc1f90ae7}",
        "7c9e6679-7425-40de-944b-e07fc1f90ae",
        "7c9e6679-7425-40de-944b-e07fc1f90ae7 ",
        None,
        12345,
    ],
)
def test_encode_rejects_malformed_ids(value):
    with pytest.raises(InvalidIdentifier):
        ids.encode(value)


def test_optional_helpers_pass_none_through():
    assert ids.encode_optional(None) is None
    assert ids.decode_optional(None) is None


def test_generate_returns_distinct_binary_keys():
    keys = {ids.generate() for _ in range(100)}
    assert len(keys) == 100
    assert all(len(key) == 16 for key in keys)
