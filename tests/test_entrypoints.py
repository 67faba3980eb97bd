"""Tests for the server entry point and the CLI wiring."""

import importlib.util
import logging
from pathlib import Path

import pytest

import app as entrypoint
from config import DEFAULT_JWT_SECRET, Config

CLI_PATH = Path(__file__).resolve().parent.parent / "scripts" / "cli" / "shortener_cli.py"


def load_cli_module():
    spec = importlib.util.spec_from_file_location("shortener_cli", CLI_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def test_logger():
    return logging.getLogger("tests.entrypoints")


class TestMain:
    """Test how main() starts uvicorn."""

    def test_multiple_workers_use_factory(self, monkeypatch):
        monkeypatch.setenv("WORKERS", "3")
        monkeypatch.setenv("STORAGE_BACKEND", "postgres")
        monkeypatch.setenv("JWT_SECRET", "test-secret")
        calls = []
        monkeypatch.setattr(entrypoint.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

        def fail_server(*args, **kwargs):
            raise AssertionError("single-process server must not start when WORKERS > 1")

        monkeypatch.setattr(entrypoint.uvicorn, "Server", fail_server)

        entrypoint.main()

        assert len(calls) == 1
        target, kwargs = calls[0]
        assert target == "app:create_application"
        assert kwargs["factory"] is True
        assert kwargs["workers"] == 3

    def test_memory_storage_refuses_workers(self, monkeypatch):
        monkeypatch.setenv("WORKERS", "2")
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setattr(entrypoint.uvicorn, "run", lambda *args, **kwargs: pytest.fail("uvicorn started"))

        with pytest.raises(SystemExit):
            entrypoint.main()


class TestCheckSettings:
    """Test startup warnings."""

    def test_default_secret_warns(self, test_logger, caplog):
        config = Config(storage_backend="postgres", jwt_secret=DEFAULT_JWT_SECRET)

        with caplog.at_level(logging.WARNING, logger="tests.entrypoints"):
            assert entrypoint.check_settings(config, test_logger)

        assert "JWT_SECRET" in caplog.text

    def test_custom_secret_is_quiet(self, test_logger, caplog):
        config = Config(storage_backend="postgres", jwt_secret="real-secret")

        with caplog.at_level(logging.WARNING, logger="tests.entrypoints"):
            assert entrypoint.check_settings(config, test_logger)

        assert caplog.text == ""

    def test_memory_with_workers_is_rejected(self, test_logger):
        config = Config(storage_backend="memory", workers=2, jwt_secret="real-secret")

        assert not entrypoint.check_settings(config, test_logger)


@pytest.mark.asyncio
class TestApplicationFactory:
    """Test the factory used by worker processes."""

    async def test_factory_wires_services_in_lifespan(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("JWT_SECRET", "test-secret")

        app = entrypoint.create_application()
        assert app.state.handlers is None

        async with app.router.lifespan_context(app):
            assert app.state.handlers is not None
            health = await app.state.service.health_check()
            assert health["overall"]


class TestCliDefaults:
    """Test that CLI connection defaults come from Config."""

    def test_defaults_follow_config(self):
        cli = load_cli_module()
        config = Config(database_url="postgres://app:pw@db/shortener", jwt_secret="from-env-file")

        args = cli.build_parser(config).parse_args(["health"])

        assert args.db_url == "postgresql://app:pw@db/shortener"
        assert args.jwt_secret == "from-env-file"

    def test_flags_override_config(self):
        cli = load_cli_module()
        config = Config(jwt_secret="from-env-file")

        args = cli.build_parser(config).parse_args(["--jwt-secret", "flag", "health"])

        assert args.jwt_secret == "flag"
