"""Tests for the ``python -m dirindex`` entry point."""

from dirindex import __main__ as cli
from dirindex.config import DIRINDEX_CONFIG


class TestParseArgs:
    def test_defaults_come_from_config(self):
        args = cli._parse_args([])
        assert args.root == DIRINDEX_CONFIG["root"]
        assert args.host == DIRINDEX_CONFIG["host"]
        assert args.port == DIRINDEX_CONFIG["port"]

    def test_flags(self, tmp_path):
        args = cli._parse_args(
            [str(tmp_path), "--host", "0.0.0.0", "--port", "9000", "--show-hidden"]
        )
        assert args.root == str(tmp_path)
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.show_hidden is True


class TestMain:
    def test_runs_uvicorn_with_the_app(self, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr(
            cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs))
        )

        cli.main([str(tmp_path), "--port", "9001"])

        (app, kwargs), = calls
        assert app.state.resolver.root == tmp_path.resolve()
        assert kwargs["port"] == 9001
