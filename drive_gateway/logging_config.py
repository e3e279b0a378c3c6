# drive_gateway/logging_config.py
import json
import logging
from datetime import datetime, timezone

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS = ("googleapiclient.discovery_cache", "google_auth_oauthlib", "urllib3")


class JsonFormatter(logging.Formatter):
    """One JSON object per line; `extra={"props": {...}}` is merged into the object."""

    def format(self, record):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
            "lineno": record.lineno,
        }
        props = getattr(record, "props", None)
        if props:
            payload.update(props)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO"):
    """Route every log record through a single JSON handler on stderr."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
