"""Run the CallMeLater webhook receiver: ``python -m callmelater``."""
import logging

import uvicorn

from callmelater.config import DEFAULT_LOG_FORMAT, Settings
from callmelater.server import create_app


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=DEFAULT_LOG_FORMAT)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
