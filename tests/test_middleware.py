"""Tests for logging, performance and rate-limit middleware."""

import json
import logging

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from eatrite.core.request_id import get_request_id, request_id_var, set_request_id
from eatrite.middleware.logging import mask_sensitive_data
from eatrite.middleware.performance import PerformanceMetrics, PerformanceMiddleware
from eatrite.middleware.rate_limit import get_client_key, get_rate_limit_exceeded_handler
from eatrite.utils.logging_config import JSONLogFormatter


def _request(headers: dict) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/recipes/suggestions",
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()],
        "client": ("203.0.113.7", 51000),
    }
    return Request(scope)


def test_mask_sensitive_data():
    """Test credentials and image payloads never reach the logs."""
    masked = mask_sensitive_data(
        {
            "api_key": "sk-abcdefghijklmnop",
            "password": "short",
            "imageBase64": "A" * 5000,
            "ingredients": [{"name": "Egg", "token": "abc"}],
            "Authorization": "Bearer secret-value",
            "servings": 2,
        }
    )

    assert masked["api_key"] == "sk-abcde..."
    assert masked["password"] == "***"
    assert masked["imageBase64"] == "<5000 chars>"
    assert masked["ingredients"] == [{"name": "Egg", "token": "***"}]
    assert masked["Authorization"] == "Bearer s..."
    assert masked["servings"] == 2


def test_mask_sensitive_data_matches_whole_keys():
    """Test keys that merely contain a sensitive word are left alone."""
    data = {"author": "Julia Child", "max_tokens": 300, "tokenizer": "cl100k", "apiKey": "sk-123456789"}

    masked = mask_sensitive_data(data)

    assert masked["author"] == "Julia Child"
    assert masked["max_tokens"] == 300
    assert masked["tokenizer"] == "cl100k"
    assert masked["apiKey"] == "sk-12345..."


def test_json_formatter_includes_extra_and_request_id():
    token = request_id_var.set("")
    try:
        set_request_id("ctx-42")
        record = logging.LogRecord("eatrite.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.backend = "mock"

        data = json.loads(JSONLogFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["severity"] == "INFO"
        assert data["logger"] == "eatrite.test"
        assert data["request_id"] == "ctx-42"
        assert data["backend"] == "mock"
        assert data["timestamp"].endswith("Z")
    finally:
        request_id_var.reset(token)

    assert get_request_id() == ""


def test_performance_metrics_summary():
    metrics = PerformanceMetrics(slow_threshold=1.0, very_slow_threshold=3.0)
    metrics.record_request(0.5)
    metrics.record_request(1.5)
    metrics.record_request(4.0, is_error=True)

    summary = metrics.get_summary()

    assert summary["total_requests"] == 3
    assert summary["slow_requests"] == 1
    assert summary["very_slow_requests"] == 1
    assert summary["errors"] == 1
    assert summary["average_duration_ms"] == 2000.0

    metrics.reset()
    assert metrics.get_summary()["total_requests"] == 0


def test_performance_middleware_logs_with_metric_thresholds(caplog):
    """Test slow-request logs and slow-request counters agree."""
    request_metrics = PerformanceMetrics(slow_threshold=0.0, very_slow_threshold=60.0)
    mini = FastAPI()
    mini.add_middleware(PerformanceMiddleware, request_metrics=request_metrics)

    @mini.get("/ping")
    async def ping():
        return {"ok": True}

    caplog.set_level(logging.WARNING, logger="eatrite.middleware.performance")
    with TestClient(mini) as test_client:
        response = test_client.get("/ping")

    assert response.status_code == 200
    summary = request_metrics.get_summary()
    assert summary["slow_requests"] == 1
    assert summary["very_slow_requests"] == 0
    slow_logs = [r for r in caplog.records if r.getMessage().startswith("Slow request: GET /ping")]
    assert len(slow_logs) == summary["slow_requests"]


def test_client_key_ignores_authorization_header():
    """Test the rate-limit key does not depend on unvalidated bearer tokens."""
    plain = get_client_key(_request({}))
    with_token = get_client_key(_request({"Authorization": "Bearer rotate-1"}))
    other_token = get_client_key(_request({"Authorization": "Bearer rotate-2"}))

    assert plain == with_token == other_token == "203.0.113.7"


def test_rotating_bearer_tokens_share_one_limit():
    """Test a client cannot reset its limit by changing bearer tokens."""
    test_limiter = Limiter(key_func=get_client_key, storage_uri="memory://")
    mini = FastAPI()
    mini.state.limiter = test_limiter
    mini.add_exception_handler(RateLimitExceeded, get_rate_limit_exceeded_handler())

    @mini.post("/limited")
    @test_limiter.limit("2/hour")
    async def limited(request: Request):
        return {"ok": True}

    with TestClient(mini) as test_client:
        codes = [
            test_client.post("/limited", headers={"Authorization": f"Bearer rotate-{i}"}).status_code
            for i in range(3)
        ]

    assert codes == [200, 200, 429]
