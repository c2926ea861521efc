#!/usr/bin/env python3
"""
Campfire Cash Cannon - Dashboard Server

Loads configuration, then serves the disbursement dashboard:
- GET  /                              statistics page
- GET  /api/preview?custom_amount=    what a run would do
- POST /trigger-disbursements         standard run
- POST /trigger-custom-disbursements  fixed-amount run

Usage:
    python run_server.py
"""

import logging
import sys

import uvicorn

from src.config import load_settings
from src.dashboard.app import create_app

logger = logging.getLogger(__name__)


def main():
    """Start the dashboard server."""
    try:
        settings = load_settings()
    except RuntimeError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Configuration error: {e}")
        return 1

    # Configure logging
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = create_app(settings)

    logger.info(f"Starting server on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == '__main__':
    sys.exit(main())
