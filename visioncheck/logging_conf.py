import logging, sys

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(eye)s] %(message)s"

class EyeFilter(logging.Filter):
    def filter(self, record):
        if not hasattr(record, "eye"):
            record.eye = "-"
        return True

def configure_logging(level: str | None = None):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(EyeFilter())
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    root.addHandler(handler)
    return handler
