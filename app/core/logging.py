import logging
import sys
import contextvars

# Context var for correlation id
request_id_ctx_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

# Libraries that log every statement or connection at INFO
CHATTY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx", "httpcore")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx_var.get() or "none"
        return True


def configure_logging(level: str | None = None, sql_echo: bool = False) -> None:
    """Configure the root logger so every line carries the request id.

    Driver and HTTP client chatter is held at WARNING unless ``sql_echo`` asks
    for SQL statements to be logged.
    """
    root = logging.getLogger()
    if root.handlers:
        # keep existing handlers (pytest, uvicorn) but make sure request_id is always set
        for h in root.handlers:
            if not any(isinstance(f, RequestIdFilter) for f in h.filters):
                h.addFilter(RequestIdFilter())
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(RequestIdFilter())
        root.addHandler(handler)
    root.setLevel(level or logging.INFO)

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
