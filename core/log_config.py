import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def setup_logging(level: str = None):
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    # Uvicorn reload imports main twice; keep a single handler
    if not any(getattr(h, "_bettr", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._bettr = True
        root.addHandler(handler)
    return root
