# Loguru setup: console sink plus a rotating file sink under LOG_DIR.
import sys
from pathlib import Path
from loguru import logger
from finagent.config import settings

def setup_logging(level: str | None = None) -> None:
    level = (level or settings.LOG_LEVEL).upper()
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(exist_ok=True, parents=True)

    logger.remove()
    logger.add(sys.stderr, level=level,
               format="{time:HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}")
    logger.add(
        log_dir / "finagent.log",
        rotation="10 MB",
        retention=10,
        enqueue=True,
        backtrace=True,
        diagnose=False,
        level=level,
    )
    logger.info(f"Logging configured at level {level} (dir: {log_dir})")
