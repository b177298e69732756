"""Tests for LookupBucket construction."""

from lookupcolumn.domain.lookup import LookupBucket


def test_from_pairs_builds_both_maps() -> None:
    """Both directions come from the same pairs."""
    bucket = LookupBucket.from_pairs(
        "PermissionType", "name", iter([(1, "Administrator"), (2, "User")])
    )
    assert bucket.table == "PermissionType"
    assert bucket.field_name == "name"
    assert dict(bucket.id_to_name) == {1: "Administrator", 2: "User"}
    assert dict(bucket.name_to_id) == {"Administrator": 1, "User": 2}
    assert len(bucket) == 2
    assert bucket.loaded_at.tzinfo is not None


def test_empty_table() -> None:
    """An empty lookup table yields an empty bucket."""
    bucket = LookupBucket.from_pairs("Empty", "name", [])
    assert len(bucket) == 0
    assert dict(bucket.name_to_id) == {}


def test_duplicate_names_keep_last_row() -> None:
    """Duplicate names keep every id but map the name to the last one."""
    bucket = LookupBucket.from_pairs("Dup", "name", [(1, "x"), (2, "x")])
    assert dict(bucket.id_to_name) == {1: "x", 2: "x"}
    assert dict(bucket.name_to_id) == {"x": 2}
