# =============================================================================
# app/server.py - Process Entry Point
# =============================================================================
# Starts uvicorn for the role selected by IS_WORKER:
#   main   -> APP_PORT
#   worker -> APP_WORKER_PORT
# Both bind API_HOST (all interfaces by default).
#
# Usage:
#   poetry run authgate
#   IS_WORKER=true poetry run authgate
# =============================================================================

import logging

import uvicorn

from app.config import Settings, settings
from app.shutdown import uvicorn_shutdown_timeout

logger = logging.getLogger(__name__)


def resolve_bind(config: Settings) -> tuple[str, int]:
    """Host and port this process should listen on."""
    return config.API_HOST, config.bind_port


def server_url(host: str, port: int) -> str:
    return f"http://{host}:{port}"


def server_banner(url: str, is_worker: bool) -> str:
    """Startup line: yellow for the worker, blue for the main server."""
    colour = "33" if is_worker else "34"
    label = "Worker Server" if is_worker else "Server"
    return f"\x1b[{colour}m{label} running at {url}\x1b[0m"


def build_server_config(config: Settings) -> uvicorn.Config:
    """uvicorn configuration for the current role."""
    from app.main import create_app

    host, port = resolve_bind(config)

    return uvicorn.Config(
        create_app(config),
        host=host,
        port=port,
        proxy_headers=config.IS_HTTPS,
        forwarded_allow_ips="*" if config.IS_HTTPS else None,
        access_log=config.APP_LOGGING,
        timeout_graceful_shutdown=uvicorn_shutdown_timeout(config),
        log_config=None,
    )


class BannerServer(uvicorn.Server):
    """uvicorn server that prints the startup banner once its socket is bound."""

    def __init__(self, config: uvicorn.Config, banner: str):
        super().__init__(config)
        self.banner = banner

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            print(self.banner)


def run(config: Settings | None = None) -> None:
    """Start the HTTP server (blocks until shutdown)."""
    config = config or settings
    host, port = resolve_bind(config)

    server = BannerServer(
        build_server_config(config),
        banner=server_banner(server_url(host, port), config.IS_WORKER),
    )
    server.run()


if __name__ == "__main__":
    run()
