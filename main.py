"""Main entry point for the application: uvicorn main:app"""
import logging
import os

from backend.main import create_app

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()

__all__ = ["app"]
