"""Serve the API with uvicorn.

Host and port come from the ``HOST`` and ``PORT`` environment variables
(defaults ``0.0.0.0`` and ``5000``).

Usage:
    volunteer-api
"""
import uvicorn

from volunteer_api.core.config import settings
from volunteer_api.core.logging_config import setup_logging


def main() -> None:
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    uvicorn.run(
        "volunteer_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
