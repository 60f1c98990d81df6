"""
Logging setup using Loguru.

Every module logs through `from loguru import logger`; this module only
configures the sinks once at startup.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def setup_loguru(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console_output: bool = True,
) -> None:
    """
    Configure loguru sinks for the server process.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path for a rotating file sink
        console_output: Whether to also log to stderr
    """
    # Remove default handler
    logger.remove()

    if console_output:
        logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

    if log_file is not None:
        log_file = Path(log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention=5,  # Keep 5 backup files
            level=level.upper(),
            format=LOG_FORMAT,
            enqueue=False,  # Synchronous writes (thread-safe but blocking)
        )

    logger.info(f"Loguru initialized (level={level}, file={log_file})")
