import logging

import manage
import pytest
import structlog
from commerce.utils.db import drop_db, setup_db
from commerce.utils.logging import add_context, clear_context, configure_logging, get_log_level


class TestLogLevel:
    @pytest.mark.parametrize(
        "env, level",
        [("production", "INFO"), ("staging", "INFO"), ("development", "DEBUG"), ("test", "WARNING")],
    )
    def test_level_follows_environment(self, monkeypatch, env, level):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", env)
        assert get_log_level() == level

    def test_log_level_override(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _restore(self):
        yield
        configure_logging()

    def test_file_handlers_only_with_log_dir(self, tmp_path):
        configure_logging()
        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

        configure_logging(log_dir=str(tmp_path))
        assert (tmp_path / "storefront.log").exists()
        assert (tmp_path / "storefront_error.log").exists()

    def test_context_is_bound_and_cleared(self):
        add_context(request_id="req-1")
        assert structlog.contextvars.get_contextvars()["request_id"] == "req-1"

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestDatabaseManagement:
    def test_schema_commands_are_noops_on_memory_provider(self, commerce_bed):
        from commerce.domain import commerce

        setup_db(commerce)
        drop_db(commerce)

    @pytest.mark.parametrize("command", ["setup-db", "drop-db"])
    def test_manage_cli(self, monkeypatch, capsys, command):
        from commerce.domain import commerce

        monkeypatch.setattr(manage, "_commerce", lambda: commerce)
        manage.main([command])
        assert "Done." in capsys.readouterr().out

    def test_manage_requires_command(self):
        with pytest.raises(SystemExit):
            manage.main([])
