import logging
import sys
import uvicorn
from pydantic import ValidationError

from taskboard.config import get_settings

logger = logging.getLogger(__name__)


def run() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig()
        logger.critical(f"Invalid configuration, DB_USER and DB_PASS are required: {e}")
        sys.exit(1)

    uvicorn.run(
        "taskboard.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
