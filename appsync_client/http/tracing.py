"""
Transport tracing hooks.

``request_trace_config`` plugs into aiohttp's ``TraceConfig`` and records one
span per HTTP attempt, reported to the ``TransportTracer`` the request carries.
Spans are only recorded for requests that carry a ``TraceContext``; without
one every hook returns immediately, so tracing is transparent for untraced
calls.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import aiohttp

logger = logging.getLogger(__name__)


@dataclass
class TraceContext:
    """Caller-supplied trace identity propagated to transport spans."""

    trace_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    parent_id: Optional[str] = None
    name: str = "appsync"


@dataclass
class TransportSpan:
    """Timing and outcome of one traced HTTP attempt."""

    trace_id: str
    parent_id: Optional[str]
    name: str
    method: str
    url: str
    start_time: float
    end_time: Optional[float] = None
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def duration(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trace_id": self.trace_id,
            "parent_id": self.parent_id,
            "name": self.name,
            "method": self.method,
            "url": self.url,
            "duration": self.duration,
            "status_code": self.status_code,
            "error": self.error,
        }


SpanSink = Callable[[TransportSpan], None]


class TransportTracer:
    """Turn traced HTTP attempts into ``TransportSpan`` records for a set of sinks."""

    def __init__(self, sinks: Optional[List[SpanSink]] = None) -> None:
        self.sinks: List[SpanSink] = list(sinks or [])

    def add_sink(self, sink: SpanSink) -> None:
        self.sinks.append(sink)

    def start_span(self, context: TraceContext, method: str, url: str) -> TransportSpan:
        return TransportSpan(
            trace_id=context.trace_id,
            parent_id=context.parent_id,
            name=context.name,
            method=method,
            url=url,
            start_time=time.monotonic(),
        )

    def finish_span(
        self,
        span: TransportSpan,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        span.end_time = time.monotonic()
        span.status_code = status_code
        span.error = error
        logger.debug("Transport span %s", span.to_dict())
        for sink in self.sinks:
            sink(span)


@dataclass(frozen=True)
class TracedRequest:
    """Tracer and trace identity travelling with one request as ``trace_request_ctx``."""

    tracer: TransportTracer
    context: TraceContext


def _traced_request(trace_config_ctx: SimpleNamespace) -> Optional[TracedRequest]:
    traced = getattr(trace_config_ctx, "trace_request_ctx", None)
    return traced if isinstance(traced, TracedRequest) else None


async def _on_request_start(
    session: aiohttp.ClientSession, trace_config_ctx: SimpleNamespace, params: Any
) -> None:
    traced = _traced_request(trace_config_ctx)
    if traced is None:
        return
    trace_config_ctx.span = traced.tracer.start_span(
        traced.context, params.method, str(params.url)
    )


async def _on_request_end(
    session: aiohttp.ClientSession, trace_config_ctx: SimpleNamespace, params: Any
) -> None:
    traced = _traced_request(trace_config_ctx)
    span = getattr(trace_config_ctx, "span", None)
    if traced is None or span is None:
        return
    traced.tracer.finish_span(span, status_code=params.response.status)


async def _on_request_exception(
    session: aiohttp.ClientSession, trace_config_ctx: SimpleNamespace, params: Any
) -> None:
    traced = _traced_request(trace_config_ctx)
    span = getattr(trace_config_ctx, "span", None)
    if traced is None or span is None:
        return
    traced.tracer.finish_span(span, error=repr(params.exception))


def request_trace_config() -> aiohttp.TraceConfig:
    """
    Build the trace config installed on every transport session.

    The hooks read the tracer from the request itself, so one session can
    serve clients with different tracers.
    """
    config = aiohttp.TraceConfig()
    config.on_request_start.append(_on_request_start)
    config.on_request_end.append(_on_request_end)
    config.on_request_exception.append(_on_request_exception)
    return config


default_tracer = TransportTracer()
