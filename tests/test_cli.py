"""Tests for the liveconfig CLI (init and serve commands)."""

from unittest.mock import patch

import pytest
import yaml

from liveconfig.cli import build_parser, cmd_init, cmd_serve, main
from liveconfig.server.config import LiveConfigConfig


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Run the CLI from an isolated working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("LIVECONFIG_CONFIG", raising=False)
    monkeypatch.delenv("LIVECONFIG_HOST", raising=False)
    monkeypatch.delenv("LIVECONFIG_STORAGE_PATH", raising=False)
    monkeypatch.delenv("LIVECONFIG_READ_POLICY", raising=False)
    return tmp_path


class TestInitCommand:
    """Tests for `liveconfig init`."""

    def test_init_creates_config_file(self, cli_env):
        """init should write liveconfig.yaml in the working directory."""
        args = build_parser().parse_args(["init"])

        assert cmd_init(args) == 0

        data = yaml.safe_load((cli_env / "liveconfig.yaml").read_text())
        assert data["server"]["port"] == 3000
        assert data["storage"] == {
            "path": "currentlyConfig.json",
            "read_policy": "memory",
        }

    def test_init_file_loads_as_config(self, cli_env):
        """The generated file round-trips through LiveConfigConfig."""
        args = build_parser().parse_args([
            "init", "--port", "8081", "--path", "data/config.json",
            "--read-policy", "disk",
        ])
        cmd_init(args)

        config = LiveConfigConfig.from_file(cli_env / "liveconfig.yaml")

        assert config.server.port == 8081
        assert config.storage.path == "data/config.json"
        assert config.storage.read_policy == "disk"

    def test_init_refuses_overwrite(self, cli_env):
        """init should not clobber an existing config without --force."""
        (cli_env / "liveconfig.yaml").write_text("server:\n  port: 1234\n")

        assert cmd_init(build_parser().parse_args(["init"])) == 1
        assert "1234" in (cli_env / "liveconfig.yaml").read_text()

    def test_init_force_overwrites(self, cli_env):
        (cli_env / "liveconfig.yaml").write_text("server:\n  port: 1234\n")

        assert cmd_init(build_parser().parse_args(["init", "--force"])) == 0
        assert "1234" not in (cli_env / "liveconfig.yaml").read_text()

    def test_init_custom_config_path(self, cli_env):
        args = build_parser().parse_args(["init", "-c", "conf/prod.yaml"])

        assert cmd_init(args) == 0
        assert (cli_env / "conf" / "prod.yaml").exists()

    def test_init_rejects_unknown_policy(self, cli_env):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["init", "--read-policy", "cache"])

    @pytest.mark.parametrize("flags", [["--port", "0"], ["--path", ""]])
    def test_init_reports_invalid_values(self, cli_env, flags, capsys):
        """Explicit bad values are reported, not replaced by defaults."""
        args = build_parser().parse_args(["init", *flags])

        assert cmd_init(args) == 1
        assert not (cli_env / "liveconfig.yaml").exists()
        assert "Invalid setting" in capsys.readouterr().out


class TestServeCommand:
    """Tests for `liveconfig serve`."""

    def test_serve_passes_overrides(self, cli_env):
        """Command-line host/port/log level reach run_server."""
        (cli_env / "liveconfig.yaml").write_text("storage:\n  path: served.json\n")
        args = build_parser().parse_args([
            "serve", "--host", "127.0.0.1", "-p", "9000", "--log-level", "debug",
        ])

        with patch("liveconfig.server.app.run_server") as run_server:
            cmd_serve(args)

        kwargs = run_server.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9000
        assert kwargs["log_level"] == "debug"
        assert kwargs["config"].storage.path == "served.json"

    def test_serve_defaults(self, cli_env):
        args = build_parser().parse_args(["serve"])

        with patch("liveconfig.server.app.run_server") as run_server:
            cmd_serve(args)

        kwargs = run_server.call_args.kwargs
        assert kwargs["host"] is None
        assert kwargs["port"] is None
        assert kwargs["log_level"] == "info"
        assert kwargs["config"].server.port == 3000


class TestMain:
    """Tests for the entry point dispatch."""

    def test_no_command_prints_help(self, cli_env, capsys):
        with patch("sys.argv", ["liveconfig"]):
            with pytest.raises(SystemExit) as exc:
                main()

        assert exc.value.code == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_init_exit_code(self, cli_env):
        with patch("sys.argv", ["liveconfig", "init"]):
            with pytest.raises(SystemExit) as exc:
                main()

        assert exc.value.code == 0
        assert (cli_env / "liveconfig.yaml").exists()


class TestRunServer:
    """Tests for run_server overrides."""

    def test_explicit_port_is_not_replaced(self, cli_env):
        """An explicit port, even an invalid one, reaches the config."""
        from liveconfig.server.app import run_server

        config = LiveConfigConfig()
        with patch("liveconfig.server.app.uvicorn.run") as uvicorn_run:
            run_server(config=config, host="127.0.0.1", port=0)

        assert config.server.port == 0
        assert config.validate() != []
        assert uvicorn_run.call_args.kwargs["port"] == 0
        assert uvicorn_run.call_args.kwargs["host"] == "127.0.0.1"

    def test_no_overrides_uses_config(self, cli_env):
        from liveconfig.server.app import run_server

        config = LiveConfigConfig()
        with patch("liveconfig.server.app.uvicorn.run") as uvicorn_run:
            run_server(config=config)

        assert uvicorn_run.call_args.kwargs["port"] == 3000
        assert uvicorn_run.call_args.kwargs["host"] == "0.0.0.0"
