from contextvars import ContextVar

_trace_id: ContextVar[str] = ContextVar("trace_id", default="-")
_session_id: ContextVar[str] = ContextVar("session_id", default="-")


def get_trace_id() -> str:
    return _trace_id.get()


def set_trace_id(value: str) -> None:
    _trace_id.set(value)


def get_session_id() -> str:
    return _session_id.get()


def set_session_id(value: str) -> None:
    # tokens are opaque, only a prefix goes into the logs
    _session_id.set(value[:12] if value else "-")
