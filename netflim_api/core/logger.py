import logging
import sys
from logging.handlers import QueueHandler, QueueListener
from queue import Queue

from pythonjsonlogger import jsonlogger

from netflim_api.core.config import settings
from netflim_api.core.trace import get_session_id, get_trace_id


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # fields must be present before the record reaches the formatter
        record.trace_id = (getattr(record, "trace_id", None)
                           or get_trace_id() or "-")
        record.session_id = (getattr(record, "session_id", None)
                             or get_session_id() or "-")
        record.service = getattr(record, "service", None) or settings.app_name
        record.env = getattr(record, "env", None) or settings.env
        return True


_listener: QueueListener | None = None


def setup_json_logging(service: str = "netflim_api",
                       level: int = logging.INFO) -> None:
    global _listener

    if _listener is not None:
        return

    root = logging.getLogger()
    root.setLevel(level)

    fmt = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s"
        " %(message)s %(pathname)s %(lineno)d "
        "%(trace_id)s %(session_id)s %(service)s %(env)s"
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(fmt)
    stream_handler.addFilter(RequestContextFilter())

    q: Queue = Queue(-1)
    queue_handler = QueueHandler(q)
    # enrich on the producer side, the contextvars are gone in the listener
    queue_handler.addFilter(RequestContextFilter())

    _listener = QueueListener(q, stream_handler, respect_handler_level=True)
    _listener.start()

    root.handlers = [queue_handler]

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    # sqlalchemy echoes through its own loggers, keep them quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "logger_initialized",
        extra={"service": service})


def shutdown_logging() -> None:
    """Stop the queue listener, flushing pending records."""
    global _listener
    if _listener:
        _listener.stop()
        _listener = None
