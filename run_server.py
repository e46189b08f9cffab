#!/usr/bin/env python3
"""
API server entry point.
Runs the FastAPI app with uvicorn on the configured host and port.
"""
import logging

import uvicorn

from app.core.config import get_settings
from app.core.logging import setup_logging

logger = logging.getLogger(__name__)


def main():
    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_dir=settings.log_dir)
    logger.info(f"API server listening on http://{settings.host}:{settings.port}")
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
