"""Run the salary service with uvicorn."""

import uvicorn

from .app import create_app
from .config import get_settings
from .logging_config import setup_logging


def main() -> None:
    settings = get_settings()
    setup_logging(log_level=settings.LOG_LEVEL, use_json=settings.LOG_JSON)
    uvicorn.run(
        create_app(settings),
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
