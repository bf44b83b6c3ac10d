"""Loggoppsett for appen og kommandolinjen"""
import logging
from pathlib import Path
from typing import List, Optional, Union

from config.settings import LOG_FILE, LOG_FORMAT, LOG_LEVEL, NOISY_LOG_LEVEL, NOISY_LOGGERS


def _resolve_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    """Nivånavn ("debug", "INFO") eller tall -> logging-nivå, ukjente navn gir ``default``"""
    if isinstance(level, int):
        return level
    resolved = getattr(logging, str(level or "").upper(), default)
    return resolved if isinstance(resolved, int) else default


def configure_logging(
    level: Union[str, int, None] = LOG_LEVEL,
    file_path: Optional[Union[str, Path]] = LOG_FILE,
) -> int:
    """Sett opp rotloggeren og returner nivået som ble brukt

    Kan kalles flere ganger: Streamlit kjører app.py på nytt ved hver
    interaksjon, og CLI-gruppen kaller den for hver kommando.
    """
    numeric_level = _resolve_level(level)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True)

    noisy_level = _resolve_level(NOISY_LOG_LEVEL, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    logging.getLogger(__name__).debug(
        "logging configured: level=%s file=%s", logging.getLevelName(numeric_level), file_path,
    )
    return numeric_level
