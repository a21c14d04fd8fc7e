"""
W3C Trace Context middleware for the reservation API

Every request carries a trace id: taken from an incoming `traceparent`
header or generated. Reservation events published during the request reuse
it as their correlation id, so a notification can be followed back to the
API call that caused it.
"""
import re
import uuid
import logging
from typing import Optional, Tuple
from flask import Response, g, request, current_app

# 00-{trace-id}-{parent-id}-{trace-flags}
TRACEPARENT_PATTERN = re.compile(r'^00-([0-9a-f]{32})-([0-9a-f]{16})-[0-9a-f]{2}$')

logger = logging.getLogger(__name__)


class TraceContextMiddleware:
    """Flask middleware for W3C Trace Context propagation"""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.before_request(self.before_request)
        app.after_request(self.after_request)

    def before_request(self):
        context = self.extract_trace_context(request.headers.get('traceparent'))
        if context is None:
            if request.headers.get('traceparent'):
                logger.warning("Invalid traceparent header, starting a new trace")
            context = self.generate_trace_context()

        g.trace_id, g.span_id = context
        current_app.logger.debug(f"[{g.trace_id[:16]}] {request.method} {request.path}")

    def after_request(self, response: Response) -> Response:
        trace_id = getattr(g, 'trace_id', None)
        if trace_id:
            response.headers['traceparent'] = create_traceparent_header()
            response.headers['X-Trace-ID'] = trace_id

        current_app.logger.info(
            f"[{(trace_id or 'untraced')[:16]}] {request.method} {request.path} -> {response.status_code}"
        )
        return response

    @staticmethod
    def extract_trace_context(traceparent: Optional[str]) -> Optional[Tuple[str, str]]:
        """
        Parse a traceparent header into (trace_id, span_id).

        Returns None for a missing or malformed header, or one whose ids are all zeros.
        """
        if not traceparent:
            return None

        match = TRACEPARENT_PATTERN.match(traceparent.strip().lower())
        if not match:
            return None

        trace_id, span_id = match.group(1), match.group(2)
        if trace_id == '0' * 32 or span_id == '0' * 16:
            return None
        return trace_id, span_id

    @staticmethod
    def generate_trace_context() -> Tuple[str, str]:
        # 128-bit trace id, 64-bit span id
        return uuid.uuid4().hex, uuid.uuid4().hex[:16]


def get_trace_id() -> Optional[str]:
    """Trace id of the current request, or None outside a traced request"""
    return getattr(g, 'trace_id', None)


def create_traceparent_header() -> Optional[str]:
    trace_id = getattr(g, 'trace_id', None)
    if not trace_id:
        return None
    return f"00-{trace_id}-{getattr(g, 'span_id', None) or '0' * 16}-01"
