"""
CLI entrypoint that serves the API with uvicorn on HOST:PORT:

  python -m app.serve
"""

import logging
import sys

import uvicorn

from app.core.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    logger.info("API listening on %s:%s (env=%s)", settings.HOST, settings.PORT, settings.APP_ENV)
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.DEBUG else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
