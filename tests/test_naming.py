"""Tests for asset object naming."""

import itertools

import pytest

from assetstore.storage.naming import AssetKey, describe_key, object_name, resolve_object_name


@pytest.mark.parametrize(
    "identifier,version,suffix,expected",
    [
        ("a1", 1, "", "a1_1"),
        ("a1", 1, None, "a1_1"),
        ("a1", 0, "", "a1_0"),
        ("a1", 12, "thumb", "a1_12_thumb"),
        ("3f2b-44aa", 7, "100_100_Crop", "3f2b-44aa_7_100_100_Crop"),
    ],
)
def test_object_name(identifier, version, suffix, expected):
    """Test joining non-empty parts with the delimiter."""
    assert object_name(identifier, version, suffix) == expected


def test_asset_key_object_name():
    """Test that equal keys map to the same object name."""
    assert AssetKey("a1", 2, "s").object_name == "a1_2_s"
    assert AssetKey("a1", 2).object_name == AssetKey("a1", 2, "").object_name
    assert AssetKey("a1", 2, None).suffix == ""


def test_object_names_are_unique():
    """Test that distinct keys never share an object name."""
    identifiers = ["a", "a1", "1", "a-1", "ab"]
    versions = [0, 1, 10, 11, 101]
    suffixes = ["", "1", "0", "thumb", "1_1", "10"]

    keys = {
        AssetKey(identifier, version, suffix)
        for identifier, version, suffix in itertools.product(identifiers, versions, suffixes)
    }
    names = {key.object_name for key in keys}

    assert len(names) == len(keys)


@pytest.mark.parametrize(
    "identifier,version",
    [
        ("", 1),
        ("a_b", 1),
        ("a1", -1),
        ("a1", "1"),
        ("a1", True),
        ("a1", 1.0),
    ],
)
def test_invalid_asset_keys(identifier, version):
    """Test validation of asset key fields."""
    with pytest.raises(ValueError):
        AssetKey(identifier, version)


def test_resolve_object_name():
    """Test resolving keys and transient file names."""
    assert resolve_object_name(AssetKey("a1", 3)) == "a1_3"
    assert resolve_object_name("upload-42.tmp") == "upload-42.tmp"

    with pytest.raises(ValueError, match="file name must not be empty"):
        resolve_object_name("")


def test_describe_key():
    """Test diagnostic text for keys and file names."""
    assert describe_key(AssetKey("a1", 3, "thumb")) == "Id=a1, Version=3"
    assert describe_key("upload-42.tmp") == "upload-42.tmp"
