"""Unit tests for logging setup."""

import logging

from loguru import logger

from evalrunner_core.logging import QUIET_LOGGERS, InterceptHandler, setup_logging


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_quiets_http_client_loggers(self):
        setup_logging("debug")

        for name in QUIET_LOGGERS:
            client_logger = logging.getLogger(name)
            assert client_logger.level == logging.WARNING
            assert client_logger.propagate is False
            assert isinstance(client_logger.handlers[0], InterceptHandler)

    def test_stdlib_records_reach_loguru(self):
        setup_logging("INFO")
        messages = []
        sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="INFO")

        try:
            logging.getLogger("some.library").warning("disk almost full")
            logging.getLogger("httpx").info("HTTP Request: POST /api/embeddings")
        finally:
            logger.remove(sink_id)

        assert "disk almost full" in messages
        assert all("HTTP Request" not in m for m in messages)
