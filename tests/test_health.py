# =============================================================================
# tests/test_health.py - Health Check and Redis Client Lifetime Tests
# =============================================================================
# Redis clients created for readiness checks and dashboard requests must be
# closed again once they are done with.
# =============================================================================

from unittest.mock import MagicMock, patch

from app.routers.health import check_redis
from app.routers.queues import get_queue_service
from core.services.queue_service import QueueService


class TestCheckRedis:

    def test_healthy_client_is_closed(self):
        client = MagicMock()
        with patch("redis.from_url", return_value=client):
            assert check_redis() == "healthy"
        client.close.assert_called_once()

    def test_failing_client_is_closed(self):
        client = MagicMock()
        client.ping.side_effect = ConnectionError("refused")
        with patch("redis.from_url", return_value=client):
            assert check_redis().startswith("unhealthy: refused")
        client.close.assert_called_once()

    def test_bad_url_reports_unhealthy(self):
        with patch("redis.from_url", side_effect=ValueError("bad scheme")):
            assert check_redis() == "unhealthy: bad scheme"


class TestQueueServiceDependency:

    def test_client_closed_after_request(self):
        client = MagicMock()
        with patch("redis.from_url", return_value=client):
            dependency = get_queue_service()
            service = next(dependency)

            assert isinstance(service, QueueService)
            assert service.redis is client
            client.close.assert_not_called()

            dependency.close()

        client.close.assert_called_once()


class TestEndpoints:

    def test_liveness(self, client):
        response = client.get("/api/v1/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_readiness_degraded_without_redis(self, client):
        with patch("app.routers.health.check_redis", return_value="unhealthy: refused"):
            response = client.get("/api/v1/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["checks"]["database"] == "healthy"
