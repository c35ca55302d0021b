from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from userbase.core.errors import ConstraintViolation, InvalidArgument, StorageFailure
from userbase.repositories.user_store import user_store


def _insert(db, name, email, password_hash="hash"):
    return user_store.insert(db, name, email, password_hash, datetime.now(timezone.utc))


def test_insert_assigns_increasing_ids(db):
    first = _insert(db, "Ann", "ann@x.com")
    second = _insert(db, "Ben", "ben@x.com")
    assert second > first


def test_ids_are_not_reused_after_delete(db):
    _insert(db, "Ann", "ann@x.com")
    last = _insert(db, "Ben", "ben@x.com")
    assert user_store.delete(db, last) == 1

    new_id = _insert(db, "Cid", "cid@x.com")
    assert new_id > last


def test_insert_duplicate_email_raises_constraint_violation(db):
    _insert(db, "Ann", "ann@x.com")
    with pytest.raises(ConstraintViolation):
        _insert(db, "Other Ann", "ann@x.com")
    assert len(user_store.list(db)) == 1


def test_read_paths_never_expose_password_hash(db):
    user_id = _insert(db, "Ann", "ann@x.com", "very-secret-hash")

    user = user_store.get_by_id(db, user_id)
    assert user.name == "Ann"
    assert user.email == "ann@x.com"
    assert "password_hash" not in user.model_dump()
    assert all("password_hash" not in u.model_dump() for u in user_store.list(db))


def test_get_by_email_returns_full_record(db):
    _insert(db, "Ann", "ann@x.com", "very-secret-hash")
    user = user_store.get_by_email(db, "ann@x.com")
    assert user.password_hash == "very-secret-hash"
    assert user_store.get_by_email(db, "nobody@x.com") is None


def test_get_by_id_absent(db):
    assert user_store.get_by_id(db, 999) is None


def test_list_is_in_insertion_order_and_stable(db):
    for name, email in [("Ann", "ann@x.com"), ("Ben", "ben@x.com"), ("Cid", "cid@x.com")]:
        _insert(db, name, email)

    first = [u.name for u in user_store.list(db)]
    assert first == ["Ann", "Ben", "Cid"]
    assert [u.name for u in user_store.list(db)] == first


def test_find_by_name_substring_is_case_insensitive(db, sample_users):
    names = [u.name for u in user_store.find_by_name_substring(db, "jo")]
    assert names == ["John Doe", "Bob Johnson"]

    assert [u.name for u in user_store.find_by_name_substring(db, "SMITH")] == ["Jane Smith"]


def test_find_by_name_substring_matches_wildcards_literally(db):
    _insert(db, "Ann", "ann@x.com")
    _insert(db, "100% Ann", "pct@x.com")

    assert [u.name for u in user_store.find_by_name_substring(db, "0%")] == ["100% Ann"]
    assert user_store.find_by_name_substring(db, "A_n") == []


def test_exists_by_email(db):
    ann = _insert(db, "Ann", "ann@x.com")
    ben = _insert(db, "Ben", "ben@x.com")

    assert user_store.exists_by_email(db, "ann@x.com")
    assert not user_store.exists_by_email(db, "cid@x.com")
    assert not user_store.exists_by_email(db, "ann@x.com", exclude_id=ann)
    assert user_store.exists_by_email(db, "ann@x.com", exclude_id=ben)


def test_update_fields_touches_only_supplied_fields(db):
    user_id = _insert(db, "Ann", "ann@x.com")
    before = user_store.get_by_id(db, user_id)

    assert user_store.update_fields(db, user_id, {"name": "Annie", "email": None}) == 1

    after = user_store.get_by_id(db, user_id)
    assert after.name == "Annie"
    assert after.email == before.email
    assert after.created_at == before.created_at


def test_update_fields_requires_a_field(db):
    user_id = _insert(db, "Ann", "ann@x.com")
    with pytest.raises(InvalidArgument):
        user_store.update_fields(db, user_id, {})
    with pytest.raises(InvalidArgument):
        user_store.update_fields(db, user_id, {"name": None, "email": None})


def test_update_fields_rejects_other_columns(db):
    user_id = _insert(db, "Ann", "ann@x.com")
    with pytest.raises(InvalidArgument):
        user_store.update_fields(db, user_id, {"password_hash": "x"})


def test_update_fields_unknown_id_affects_nothing(db):
    assert user_store.update_fields(db, 999, {"name": "Ghost"}) == 0


def test_update_fields_duplicate_email_raises_constraint_violation(db):
    _insert(db, "Ann", "ann@x.com")
    ben = _insert(db, "Ben", "ben@x.com")
    with pytest.raises(ConstraintViolation):
        user_store.update_fields(db, ben, {"email": "ann@x.com"})
    assert user_store.get_by_id(db, ben).email == "ben@x.com"


def test_delete(db):
    user_id = _insert(db, "Ann", "ann@x.com")
    assert user_store.delete(db, user_id) == 1
    assert user_store.get_by_id(db, user_id) is None
    assert user_store.delete(db, user_id) == 0


def test_find_by_name_substring_folds_non_ascii_case(db):
    _insert(db, "Élodie Durand", "elodie@x.com")
    _insert(db, "Ann", "ann@x.com")

    assert [u.name for u in user_store.find_by_name_substring(db, "él")] == ["Élodie Durand"]
    assert [u.name for u in user_store.find_by_name_substring(db, "ÉLO")] == ["Élodie Durand"]


def _disk_error(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("disk I/O error"))


def test_storage_error_becomes_storage_failure(db, monkeypatch):
    _insert(db, "Ann", "ann@x.com")
    monkeypatch.setattr(db, "execute", _disk_error)

    with pytest.raises(StorageFailure):
        user_store.list(db)

    # Session was rolled back and keeps working
    monkeypatch.undo()
    assert [u.name for u in user_store.list(db)] == ["Ann"]


def test_failed_insert_is_rolled_back(db, monkeypatch):
    monkeypatch.setattr(db, "flush", _disk_error)
    with pytest.raises(StorageFailure):
        _insert(db, "Ann", "ann@x.com")

    monkeypatch.undo()
    assert user_store.list(db) == []
    user_id = _insert(db, "Ann", "ann@x.com")
    assert user_store.get_by_id(db, user_id).name == "Ann"
