"""
Tests for the command-line interface. Network helpers are mocked.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from instapull import cli
from instapull.models import CanonicalPost, MediaAsset, MediaKind, PostKind, PostOwner

IMG = "https://scontent.cdninstagram.com/v/t51/a.jpg"


@pytest.fixture
def env(tmp_path):
    return ["--env", str(tmp_path / "none.env")]


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch.object(cli.LogConfig, "from_settings") as m:
        yield m


def resolved():
    return CanonicalPost.resolved(
        [MediaAsset.build(IMG, MediaKind.IMAGE, quality_label="1080x1350")],
        PostKind.POST,
        owner=PostOwner(username="testuser"),
        strategy="graphql",
    )


class TestParser:

    def test_resolve(self):
        args = cli.create_parser().parse_args(["resolve", "u1", "u2", "--json", "-c", "3"])
        assert args.command == "resolve"
        assert args.urls == ["u1", "u2"]
        assert args.as_json is True
        assert args.concurrency == 3

    def test_serve_defaults(self):
        args = cli.create_parser().parse_args(["serve"])
        assert args.host is None
        assert args.port is None

    def test_global_flags(self):
        args = cli.create_parser().parse_args(["--debug", "private", "https://www.instagram.com/someuser/"])
        assert args.debug is True
        assert args.url == "https://www.instagram.com/someuser/"


class TestMain:

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 0
        assert "resolve" in capsys.readouterr().out

    def test_resolve_text(self, env, capsys, no_logging_setup):
        with patch.object(cli, "_resolve", new=AsyncMock(return_value=[resolved()])) as m:
            with pytest.raises(SystemExit) as exc_info:
                cli.main(env + ["--debug", "resolve", "https://www.instagram.com/p/ABC123/"])

        assert exc_info.value.code == 0
        assert m.await_args.args[1] == ["https://www.instagram.com/p/ABC123/"]
        assert no_logging_setup.call_args.kwargs["debug"] is True
        out = capsys.readouterr().out
        assert "owner: @testuser" in out
        assert "1. image [1080x1350] " + IMG in out

    def test_resolve_json_single(self, env, capsys):
        with patch.object(cli, "_resolve", new=AsyncMock(return_value=[resolved()])):
            with pytest.raises(SystemExit):
                cli.main(env + ["resolve", "--json", "https://www.instagram.com/p/ABC123/"])
        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["media"][0]["sourceUrl"] == IMG

    def test_resolve_failure_exit_code(self, env, capsys):
        posts = [resolved(), CanonicalPost.failed("AllMethodsFailed")]
        with patch.object(cli, "_resolve", new=AsyncMock(return_value=posts)):
            with pytest.raises(SystemExit) as exc_info:
                cli.main(env + ["resolve", "--json", "https://www.instagram.com/p/A/", "https://www.instagram.com/p/B/"])
        assert exc_info.value.code == 1
        data = json.loads(capsys.readouterr().out)
        assert [d["success"] for d in data] == [True, False]
        assert data[1]["error"] == "AllMethodsFailed"

    def test_private(self, env, capsys):
        with patch.object(cli, "_check_private", new=AsyncMock(return_value=True)):
            with pytest.raises(SystemExit) as exc_info:
                cli.main(env + ["private", "https://www.instagram.com/someuser/"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == "private"

    def test_serve_uses_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / "serve.env"
        env_file.write_text("INSTAPULL_PORT=9123\n", encoding="utf-8")
        monkeypatch.setenv("INSTAPULL_PORT", "")
        with patch("instapull.server.create_app") as factory, patch("uvicorn.run") as run:
            cli.main(["--env", str(env_file), "serve"])

        assert factory.call_args.args[0].port == 9123
        assert run.call_args.kwargs["port"] == 9123
        assert run.call_args.args[0] is factory.return_value
