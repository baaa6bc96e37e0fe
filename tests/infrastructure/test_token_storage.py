import json
import os

import pytest

from auth_state.application.exceptions import TokenStoreError
from auth_state.domain.authorized_state import AuthorizedState
from auth_state.infrastructure.token_storage import InMemoryTokenStore, JsonFileTokenStore


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryTokenStore()
    return JsonFileTokenStore(tmp_path / "nested" / "session.json")


def test_empty_store_reports_nothing(any_store) -> None:
    assert any_store.get_access_token() is None
    assert any_store.get_id_token() is None
    assert any_store.get_refresh_token() is None
    assert any_store.get_persisted_auth_state() is None
    assert any_store.get_auth_result() is None


def test_reset_clears_every_session_key(any_store) -> None:
    any_store.set_access_token("access")
    any_store.set_id_token("id")
    any_store.set_refresh_token("refresh")
    any_store.set_persisted_auth_state(AuthorizedState.Authorized)
    any_store.set_auth_result({"scope": "openid"})

    any_store.reset_auth_state()

    assert any_store.get_access_token() is None
    assert any_store.get_id_token() is None
    assert any_store.get_refresh_token() is None
    assert any_store.get_persisted_auth_state() is None
    assert any_store.get_auth_result() is None


def test_in_memory_snapshot_is_a_copy() -> None:
    store = InMemoryTokenStore({"access_token": "a"})

    snapshot = store.snapshot()
    snapshot["access_token"] = "changed"

    assert store.get_access_token() == "a"


def test_json_store_writes_readable_file(tmp_path) -> None:
    path = tmp_path / "session.json"
    store = JsonFileTokenStore(path)

    store.set_access_token("abc")
    store.set_persisted_auth_state(AuthorizedState.Authorized)

    with path.open("r", encoding="utf-8") as handle:
        assert json.load(handle) == {"access_token": "abc", "authorized_state": "Authorized"}

    reopened = JsonFileTokenStore(path)
    assert reopened.get_access_token() == "abc"
    assert reopened.get_persisted_auth_state() is AuthorizedState.Authorized


def test_json_store_leaves_no_temp_files(tmp_path) -> None:
    store = JsonFileTokenStore(tmp_path / "session.json")

    store.set_id_token("id")
    store.reset_auth_state()

    assert [p.name for p in tmp_path.iterdir()] == ["session.json"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX file permissions only")
def test_json_store_sets_restrictive_permissions(tmp_path) -> None:
    path = tmp_path / "session.json"

    JsonFileTokenStore(path).set_access_token("abc")

    assert path.stat().st_mode & 0o777 == 0o600


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_json_store_treats_unreadable_file_as_empty(tmp_path, content) -> None:
    path = tmp_path / "session.json"
    path.write_text(content, encoding="utf-8")

    store = JsonFileTokenStore(path)

    assert store.get_persisted_auth_state() is None
    assert store.get_access_token() is None


def test_json_store_treats_undecodable_bytes_as_empty(tmp_path) -> None:
    path = tmp_path / "session.json"
    path.write_bytes(b'{"access_token": "\xff\xfe"}')

    store = JsonFileTokenStore(path)

    assert store.get_persisted_auth_state() is None
    assert store.get_access_token() is None


def test_json_store_ignores_non_string_token_values(tmp_path) -> None:
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"access_token": 42, "authorized_state": "Authorized"}), encoding="utf-8")

    store = JsonFileTokenStore(path)

    assert store.get_access_token() is None
    assert store.get_persisted_auth_state() is AuthorizedState.Authorized


def test_json_store_raises_when_medium_unwritable(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = JsonFileTokenStore(blocker / "session.json")

    with pytest.raises(TokenStoreError) as excinfo:
        store.set_access_token("abc")

    assert excinfo.value.path == blocker / "session.json"


def test_json_store_rejects_unserialisable_auth_result(tmp_path) -> None:
    store = JsonFileTokenStore(tmp_path / "session.json")

    with pytest.raises(TokenStoreError):
        store.set_auth_result(object())
