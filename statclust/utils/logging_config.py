"""statclust logging configuration."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

ENGINE_LOGGER = 'statclust.engine'


def setup_logging(
        level: str, filename: Optional[str], fmt: str,
        add_console: bool = False, reset_file: bool = True
) -> None:
    """Initialize Python root logger with a fresh file per run when reset_file=True."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt)

    root = logging.getLogger()
    for h in list(root.handlers):
        h.close()
        root.removeHandler(h)

    handlers = []

    if filename:
        p = Path(filename)
        p.parent.mkdir(parents=True, exist_ok=True)
        if reset_file:
            p.unlink(missing_ok=True)

        fh = RotatingFileHandler(
            p, mode='w', maxBytes=5_000_000, backupCount=3, encoding='utf-8', delay=False
        )
        handlers.append(fh)
        if add_console:
            handlers.append(logging.StreamHandler())
    else:
        handlers.append(logging.StreamHandler())

    for h in handlers:
        h.setLevel(numeric_level)
        h.setFormatter(formatter)

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)


def log_observer(event: str, payload: Dict[str, Any]) -> None:
    """Engine observer writing every event to the engine logger at DEBUG."""
    details = ', '.join(f'{k}={v}' for k, v in payload.items())
    logging.getLogger(ENGINE_LOGGER).debug('%s: %s', event, details)
