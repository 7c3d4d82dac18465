from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from tadoku_client.errors import ValidationError
from tadoku_client.session import Session
from tadoku_client.storage import Storage


@pytest.fixture
def storage(tmp_path):
    return Storage(str(tmp_path / "storage"))


def test_restore_without_token_is_unauthenticated(storage):
    session = Session(storage)
    assert session.restore() is False
    assert session.token is None
    assert session.is_authenticated is False


def test_login_survives_reload(storage):
    Session(storage).login("abc.def.ghi")

    reloaded = Session(Storage(storage.storage_dir))
    assert reloaded.restore() is True
    assert reloaded.token == "abc.def.ghi"
    assert reloaded.is_authenticated is True


@pytest.mark.parametrize("token", ["", "   "])
def test_login_rejects_blank_token(storage, token):
    session = Session(storage)
    with pytest.raises(ValidationError):
        session.login(token)
    assert session.is_authenticated is False
    assert storage.get("token") is None


def test_logout_is_idempotent(storage):
    session = Session(storage)
    session.login("tok")
    session.logout()
    first = (session.token, session.is_authenticated, storage.get("token"))
    session.logout()
    assert (session.token, session.is_authenticated, storage.get("token")) == first
    assert first == (None, False, None)

    reloaded = Session(storage)
    assert reloaded.restore() is False


def test_corrupt_storage_reads_as_absent(storage, tmp_path):
    with open(tmp_path / "storage" / "token.json", "w") as f:
        f.write("{not json")
    session = Session(storage)
    assert session.restore() is False


def test_storage_rejects_path_like_keys(storage):
    with pytest.raises(ValueError):
        storage.get("../token")


def _break_storage(tmp_path):
    storage = Storage(str(tmp_path / "s"))
    os.rmdir(tmp_path / "s")
    (tmp_path / "s").write_text("not a directory")
    return storage


def test_unwritable_storage_keeps_session_in_memory(tmp_path):
    session = Session(_break_storage(tmp_path))

    session.login("tok")

    assert session.is_authenticated
    assert session.token == "tok"
    assert not os.path.exists(tmp_path / "s" / "token.json.tmp")


def test_logout_succeeds_on_unwritable_storage(tmp_path):
    session = Session(_break_storage(tmp_path))
    session.login("tok")
    session.logout()
    session.logout()
    assert session.is_authenticated is False


def test_failed_write_leaves_no_temp_file(storage, tmp_path):
    with patch("tadoku_client.storage.os.replace", side_effect=OSError("disk full")):
        assert storage.set("token", "tok") is False
    assert os.listdir(tmp_path / "storage") == []
    assert storage.get("token") is None
