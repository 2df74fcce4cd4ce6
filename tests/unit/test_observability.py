"""Tests for error reporting setup."""
from unittest.mock import patch

from src.core.observability import before_send, init_observability


class TestObservability:
    def test_disabled_without_dsn(self):
        with patch("src.core.observability.settings") as settings, \
                patch("src.core.observability.sentry_sdk.init") as init:
            settings.GLITCHTIP_DSN = ""

            assert init_observability() is False
            init.assert_not_called()

    def test_enabled_with_dsn(self):
        with patch("src.core.observability.settings") as settings, \
                patch("src.core.observability.sentry_sdk.init") as init:
            settings.GLITCHTIP_DSN = "https://key@glitchtip.example/1"
            settings.APP_VERSION = "0.3.0"
            settings.is_development = False

            assert init_observability() is True
            assert init.call_args.kwargs["release"] == "workout-tracker@0.3.0"

    def test_transient_errors_are_dropped(self):
        error = ConnectionError("Connection refused by peer")

        assert before_send({"level": "error"}, {"exc_info": (ConnectionError, error, None)}) is None

    def test_other_errors_are_kept(self):
        event = {"level": "error"}
        error = ValueError("bad value")

        assert before_send(event, {"exc_info": (ValueError, error, None)}) is event
        assert before_send(event, {}) is event
