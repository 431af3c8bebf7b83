import sys

from loguru import logger

from quickbill.core.config import settings


def setup_logging() -> None:
    logger.remove()
    logger.configure(extra={"service": settings.SERVICE_NAME})
    if settings.LOG_JSON:
        logger.add(sys.stdout, level=settings.LOG_LEVEL, serialize=True)
    else:
        logger.add(
            sys.stdout,
            level=settings.LOG_LEVEL,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "{extra[service]} | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
            ),
        )
