#!/usr/bin/env python3
"""
Saturno Affiliates Backend Startup Script
This script starts the FastAPI server.
"""

import logging

import uvicorn

from src.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    settings = get_settings()

    logger.info("Starting Saturno Affiliates Backend...")
    logger.info("Available endpoints:")
    logger.info("  - Health Check: GET /health")
    logger.info("  - Products: GET /api/products, GET /api/products/{id}")
    logger.info("  - Click Tracking: POST /api/products/track-click")
    logger.info("  - Stores: GET /api/stores, GET /api/stores/{id}")
    logger.info("  - Admin: POST /api/admin/login, /api/admin/*")
    logger.info(f"  - API Docs: http://localhost:{settings.port}/docs")

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower()
    )
