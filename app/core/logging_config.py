# app/core/logging_config.py
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the service.

    Plain-text output to stdout. Calling this more than once only adjusts the
    level, so repeated app factory calls (tests) do not stack handlers.
    """
    root = logging.getLogger()
    resolved_level = logging.getLevelName(level.upper())
    if not isinstance(resolved_level, int):
        resolved_level = logging.INFO

    if not any(getattr(h, "_standupbot", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._standupbot = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(resolved_level)

    # SQLAlchemy echoes every statement at INFO; keep it quiet unless debugging.
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if resolved_level <= logging.DEBUG else logging.WARNING
    )
