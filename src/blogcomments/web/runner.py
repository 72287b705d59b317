"""Uvicorn server runner."""

import structlog
import uvicorn
from uvicorn.config import LOGGING_CONFIG

from blogcomments.app import App
from blogcomments.config import Config
from blogcomments.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def run_server(app: App, config: Config) -> None:
    """Serve the comments API; uvicorn logs at debug level when debug is set."""
    log_config = LOGGING_CONFIG.copy()
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - "%(request_line)s" %(status_code)s'

    logger.info("starting_server", host=config.host, port=config.port, cors_origins=config.cors_origins)
    uvicorn.run(
        create_fastapi_app(app, config),
        host=config.host,
        port=config.port,
        log_config=log_config,
        log_level="debug" if config.debug else "info",
    )
