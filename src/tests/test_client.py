from __future__ import annotations

import argparse
import asyncio
import json
from unittest.mock import MagicMock, patch

import pytest

from tadoku_client import config
from tadoku_client.client import TadokuClient
from tadoku_client.main import build_parser, cmd_configure, cmd_delete, cmd_read, main


def _response(body, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = json.dumps(body).encode() if body is not None else b""
    resp.json.return_value = body
    return resp


@pytest.fixture
def http():
    return MagicMock()


def _client(tmp_path, http):
    return TadokuClient({"api_base_url": "http://api.test"}, storage_dir=str(tmp_path), http=http)


def test_login_then_reload_sends_same_token(tmp_path, http):
    http.request.return_value = _response({"token": "jwt-1"})
    client = _client(tmp_path, http)
    asyncio.run(client.auth.login("reader@example.com", "secret"))

    reloaded = _client(tmp_path, http)
    assert reloaded.session.is_authenticated
    http.request.return_value = _response({"current_count": 0, "limit": 1})
    asyncio.run(reloaded.quota.refresh())

    assert http.request.call_args.kwargs["headers"] == {"Authorization": "Bearer jwt-1"}


def test_load_config_env_override(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"api_base_url": "http://file", "page_size": 20}))
    monkeypatch.setenv("TADOKU_API_BASE_URL", "http://env")

    cfg = config.load_config(str(path))

    assert cfg["api_base_url"] == "http://env"
    assert cfg["page_size"] == 20
    assert cfg["timeout"] == config.HTTP_TIMEOUT


def test_load_config_survives_corrupt_file(tmp_path, monkeypatch):
    monkeypatch.delenv("TADOKU_API_BASE_URL", raising=False)
    path = tmp_path / "config.json"
    path.write_text("{oops")
    assert config.load_config(str(path)) == config.DEFAULTS


def test_save_config_roundtrip(tmp_path, monkeypatch):
    monkeypatch.delenv("TADOKU_API_BASE_URL", raising=False)
    path = str(tmp_path / "nested" / "config.json")
    config.save_config({"page_size": 3}, path)
    assert config.load_config(path)["page_size"] == 3


def test_parser_knows_every_command():
    args = build_parser().parse_args(["delete", "7", "--page", "2"])
    assert (args.command, args.id, args.page) == ("delete", 7, 2)


def test_cli_delete_declined_keeps_story(tmp_path, http):
    client = _client(tmp_path, http)
    http.request.return_value = _response(
        {"stories": [{"id": 7, "title": "Seven"}, {"id": 6, "title": "Six"}], "total_pages": 1}
    )
    args = argparse.Namespace(id=7, page=1)

    asyncio.run(cmd_delete(client, args, confirm=lambda question: False))

    assert [c.args[0] for c in http.request.call_args_list] == ["GET"]
    assert [s.id for s in client.stories.stories] == [7, 6]


def test_cli_repeat_read_asks_before_sending(tmp_path, http):
    client = _client(tmp_path, http)
    http.request.side_effect = [
        _response({"id": 7, "title": "Seven", "read_count": 2}),
        _response(None, status_code=201),
    ]
    questions = []

    def confirm(question):
        questions.append(question)
        assert http.request.call_count == 1
        return True

    asyncio.run(cmd_read(client, argparse.Namespace(id=7), confirm=confirm))

    assert len(questions) == 1
    assert http.request.call_args.args == ("POST", "http://api.test/api/v1/stories/7/read")


def test_main_reports_auth_errors(tmp_path, monkeypatch):
    monkeypatch.delenv("TADOKU_API_BASE_URL", raising=False)
    http = MagicMock()
    http.request.return_value = _response({"message": "Unauthorized"}, status_code=401)

    def fake_client(cfg):
        return TadokuClient(cfg, storage_dir=str(tmp_path), http=http)

    with patch("tadoku_client.main.TadokuClient", side_effect=fake_client), patch(
        "tadoku_client.main.load_config", return_value=dict(config.DEFAULTS)
    ):
        assert main(["quota"]) == 1


def test_configure_saves_new_settings(tmp_path, http):
    client = _client(tmp_path, http)
    args = build_parser().parse_args(["configure", "--server", "http://prod.test", "--page-size", "20"])

    with patch("tadoku_client.main.save_config") as save:
        asyncio.run(cmd_configure(client, args))

    saved = save.call_args.args[0]
    assert saved["api_base_url"] == "http://prod.test"
    assert saved["page_size"] == 20
    assert "timeout" not in saved


def test_configure_without_options_saves_nothing(tmp_path, http):
    client = _client(tmp_path, http)
    with patch("tadoku_client.main.save_config") as save:
        asyncio.run(cmd_configure(client, build_parser().parse_args(["configure"])))
    save.assert_not_called()
