"""HTTP middleware: request timeout and request ID.

Applied in create_app(); first added is outermost.
"""

from console_access.middleware.request_id import RequestIDMiddleware
from console_access.middleware.timeout import TimeoutMiddleware

__all__ = ["RequestIDMiddleware", "TimeoutMiddleware"]
