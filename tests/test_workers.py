# =============================================================================
# tests/test_workers.py - Background Worker Tests
# =============================================================================
# Tests for Celery configuration, the purge task and the embedded worker
# supervisor. No broker is needed: tasks are called directly.
# =============================================================================

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from core.entities import Verification
from workers.celery_app import celery_app
from workers.config import MAINTENANCE_QUEUE, QUEUE_NAMES, CeleryConfig
from workers.embedded import EmbeddedWorker
from workers.tasks import purge_expired_verifications


class TestCeleryConfig:

    def test_tasks_registered(self):
        assert "workers.tasks.purge_expired_verifications" in celery_app.tasks
        assert "workers.healthcheck" in celery_app.tasks

    def test_purge_routed_to_maintenance_queue(self):
        route = CeleryConfig.task_routes["workers.tasks.purge_expired_verifications"]
        assert route == {"queue": MAINTENANCE_QUEUE}

    def test_purge_is_scheduled(self):
        entry = CeleryConfig.beat_schedule["purge-expired-verifications"]
        assert entry["task"] == "workers.tasks.purge_expired_verifications"
        assert entry["schedule"] > 0

    def test_every_queue_declared(self):
        assert set(CeleryConfig.task_queues) == set(QUEUE_NAMES)


class TestPurgeTask:

    def _add(self, db_session, identifier, delta):
        db_session.add(Verification(
            identifier=identifier,
            value="tok",
            expires_at=datetime.now(timezone.utc) + delta,
        ))
        db_session.commit()

    def test_purges_only_expired_and_broadcasts(self, db_session):
        # Arrange
        self._add(db_session, "old@example.com", timedelta(minutes=-5))
        self._add(db_session, "new@example.com", timedelta(minutes=5))

        # Act
        with patch("app.websocket.broadcast.publish_event") as publish:
            result = purge_expired_verifications()

        # Assert
        assert result == {"success": True, "deleted": 1}
        publish.assert_called_once_with("verifications", "verifications_purged", {"deleted": 1})
        db_session.expire_all()
        remaining = [v.identifier for v in db_session.query(Verification).all()]
        assert remaining == ["new@example.com"]

    def test_nothing_to_purge_does_not_broadcast(self, db_session):
        self._add(db_session, "new@example.com", timedelta(minutes=5))

        with patch("app.websocket.broadcast.publish_event") as publish:
            result = purge_expired_verifications()

        assert result["deleted"] == 0
        publish.assert_not_called()


class TestEmbeddedWorker:

    def test_defaults_to_every_queue(self):
        assert EmbeddedWorker().queues == QUEUE_NAMES

    def test_start_spawns_process_once(self):
        with patch("workers.embedded.multiprocessing.Process") as process_cls:
            process = process_cls.return_value
            process.is_alive.return_value = True

            worker = EmbeddedWorker(concurrency=3)
            worker.start()
            worker.start()

        process_cls.assert_called_once()
        assert process_cls.call_args.kwargs["args"] == (3, QUEUE_NAMES, True)
        process.start.assert_called_once()
        assert worker.running

    def test_stop_terminates_then_kills_if_stuck(self):
        worker = EmbeddedWorker()
        process = MagicMock()
        process.is_alive.return_value = True
        worker.process = process

        worker.stop(timeout=2)

        process.terminate.assert_called_once()
        process.join.assert_any_call(2)
        process.kill.assert_called_once()
        assert worker.process is None

    def test_stop_without_start_is_noop(self):
        EmbeddedWorker().stop()

    def test_worker_argv(self):
        with patch("workers.celery_app.celery_app.worker_main") as worker_main:
            from workers.embedded import _run_worker

            _run_worker(2, ["default"], beat=True)

        argv = worker_main.call_args.args[0]
        assert argv[0] == "worker"
        assert "--concurrency=2" in argv
        assert "--queues=default" in argv
        assert "--beat" in argv
