# =============================================================================
# workers/embedded.py - In-Process Worker Supervisor
# =============================================================================
# In worker mode the HTTP server (health + queue dashboard) and the Celery
# worker run side by side. The worker lives in a child process because
# Celery installs its own signal handlers and must own a main thread.
# =============================================================================

import logging
import multiprocessing

from workers.config import QUEUE_NAMES

logger = logging.getLogger(__name__)


def _run_worker(concurrency: int, queues: list[str], beat: bool) -> None:
    from workers.celery_app import celery_app

    argv = [
        "worker",
        "--loglevel=info",
        f"--concurrency={concurrency}",
        f"--queues={','.join(queues)}",
    ]
    if beat:
        argv.append("--beat")

    celery_app.worker_main(argv)


class EmbeddedWorker:
    """
    Start and stop a Celery worker in a child process.

    Args:
        concurrency: Worker pool size
        queues: Queues to consume (defaults to every configured queue)
        beat: Also run the periodic task scheduler
    """

    def __init__(
        self,
        concurrency: int = 2,
        queues: list[str] | None = None,
        beat: bool = True,
    ):
        self.concurrency = concurrency
        self.queues = queues or list(QUEUE_NAMES)
        self.beat = beat
        self.process: multiprocessing.Process | None = None

    @property
    def running(self) -> bool:
        return self.process is not None and self.process.is_alive()

    def start(self) -> None:
        if self.running:
            return

        self.process = multiprocessing.Process(
            target=_run_worker,
            args=(self.concurrency, self.queues, self.beat),
            name="celery-worker",
            daemon=False,
        )
        self.process.start()
        logger.info(
            f"Started Celery worker (pid={self.process.pid}, "
            f"concurrency={self.concurrency}, queues={self.queues})"
        )

    def stop(self, timeout: float = 10.0) -> None:
        """Ask the worker to finish its current jobs, then force it down after `timeout`."""
        if self.process is None:
            return

        if self.process.is_alive():
            # SIGTERM triggers Celery's warm shutdown
            self.process.terminate()
            self.process.join(timeout)
            if self.process.is_alive():
                logger.warning("Celery worker did not stop in time, killing it")
                self.process.kill()
                self.process.join()

        logger.info("Celery worker stopped")
        self.process = None
