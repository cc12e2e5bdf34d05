import logging
import sys

from trip_planner.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    if any(getattr(handler, "_trip_planner", False) for handler in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._trip_planner = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    # openai/httpx log every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
