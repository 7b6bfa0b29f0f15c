"""
Tests for request logging
"""
import logging

import pytest
from httpx import AsyncClient

from mentor_portal.core.logging_config import logger


def request_records(caplog):
    return [r for r in caplog.records if getattr(r, "event_type", None) == "http_request_complete"]


class TestLogRequest:

    @pytest.mark.parametrize("status_code,level", [
        (200, logging.INFO),
        (404, logging.WARNING),
        (500, logging.ERROR),
    ])
    def test_level_follows_status(self, caplog, status_code, level):
        caplog.set_level(logging.INFO, logger="mentor_portal")

        logger.log_request("GET", "/api/v1/teams", status_code, 12.5)

        record = request_records(caplog)[-1]
        assert record.levelno == level
        assert record.http_status == status_code
        assert record.getMessage() == f"GET /api/v1/teams - {status_code} (12.50ms)"


class TestRequestLoggingMiddleware:

    @pytest.mark.asyncio
    async def test_logs_completed_request(self, client: AsyncClient, caplog):
        caplog.set_level(logging.INFO, logger="mentor_portal")

        response = await client.get("/api/v1/teams")

        assert response.status_code == 401
        assert response.headers["X-Request-ID"]
        record = request_records(caplog)[-1]
        assert record.http_path == "/api/v1/teams"
        assert record.http_status == 401
        assert record.levelno == logging.WARNING
