"""Langfuse integration for mock API observability."""

from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable

from langfuse import Langfuse

from .config import Config


class TracingClient:
    """Langfuse tracing client for observability."""

    def __init__(self, config: Config):
        self.config = config
        self.enabled = config.tracing.enabled
        self._client: Langfuse | None = None

        if self.enabled:
            self._client = Langfuse(
                public_key=config.tracing.public_key,
                secret_key=config.tracing.secret_key,
                host=config.tracing.host,
            )

    @contextmanager
    def trace(self, name: str, metadata: dict | None = None):
        """Create a trace context for an operation."""
        if not self.enabled or not self._client:
            yield None
            return

        trace = self._client.trace(
            name=name,
            metadata=metadata or {},
        )
        try:
            yield trace
        finally:
            trace.update(status="completed")

    def span(
        self,
        trace_id: str | None,
        name: str,
        input_data: Any = None,
        output_data: Any = None,
        metadata: dict | None = None,
    ) -> None:
        """Log a span (one store operation) to Langfuse."""
        if not self.enabled or not self._client:
            return

        self._client.span(
            trace_id=trace_id,
            name=name,
            input=input_data,
            output=output_data,
            metadata=metadata or {},
        )

    def flush(self) -> None:
        """Flush pending events to Langfuse."""
        if self._client:
            self._client.flush()


def traced_operation(name: str):
    """Decorator to trace SessionStore operations."""
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            tracing = getattr(self, "tracing", None)

            if not tracing or not tracing.enabled:
                return func(self, *args, **kwargs)

            with tracing.trace(name, metadata={"session": self.session_id}) as trace:
                trace_id = trace.id if trace else None
                response = func(self, *args, **kwargs)

                # Never ship the password to the tracing backend
                if name == "login":
                    args = args[:1]
                input_data = {
                    "args": [str(a)[:200] for a in args],
                    "kwargs": {k: str(v)[:200] for k, v in kwargs.items() if k != "password"},
                }
                tracing.span(
                    trace_id=trace_id,
                    name=name,
                    input_data=input_data,
                    output_data={"status": response.status, "body": str(response.body)[:1000]},
                    metadata={"function": func.__name__},
                )

                return response

        return wrapper
    return decorator


# Global tracing instance (initialized by CLI)
_tracing: TracingClient | None = None


def init_tracing(config: Config) -> TracingClient:
    """Initialize global tracing client."""
    global _tracing
    _tracing = TracingClient(config)
    return _tracing


def get_tracing() -> TracingClient | None:
    """Get the global tracing client."""
    return _tracing
