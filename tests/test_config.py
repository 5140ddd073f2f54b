"""
Settings and logging setup tests - Review Dashboard
tests/test_config.py
"""

import logging

import pytest
import structlog
from pydantic import ValidationError

from review_dashboard.config import Settings
from review_dashboard.logging_config import configure_logging


class TestSettings:

    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.ELIGIBILITY_SET_NAME == "Eligibility Shortlisting"
        assert s.ELIGIBILITY_DISPLAY_MAX == 6.0
        assert s.DEFAULT_DISPLAY_MAX == 5.0
        assert s.GOODGRANTS_PER_PAGE == 50
        assert s.MUNICIPALITY_FIELD_SLUG == "rDkKljjz"

    def test_display_max_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ELIGIBILITY_DISPLAY_MAX=0)

    def test_debug_forbidden_in_production(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, APP_ENV="production", DEBUG=True)

    def test_api_key_is_secret(self):
        s = Settings(_env_file=None, GOODGRANTS_API_KEY="abc123")
        assert s.goodgrants_api_key == "abc123"
        assert "abc123" not in repr(s)

    def test_blank_api_key_counts_as_missing(self):
        assert Settings(_env_file=None, GOODGRANTS_API_KEY="").goodgrants_api_key is None


class TestLogging:

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_configure_logging_sets_level(self):
        configure_logging(level="WARNING", json_output=True)
        assert logging.getLogger().level == logging.WARNING

    def test_structlog_events_are_rendered_as_json(self, capsys):
        configure_logging(level="INFO", json_output=True)
        structlog.get_logger("review_dashboard.test").info("aggregates_computed", total_apps=2)

        out = capsys.readouterr().out
        assert '"event": "aggregates_computed"' in out
        assert '"total_apps": 2' in out
