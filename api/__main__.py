"""Run the report endpoint: ``python -m api``."""

import uvicorn

from core.config import get_settings
from core.log import configure_logging


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("api.app:app", host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()
