"""HTTP middleware: upload size limit and request ID.

Applied in stash.main; the last one added is outermost.
"""

from stash.middleware.request_id import RequestIDMiddleware
from stash.middleware.request_size_limit import RequestSizeLimitMiddleware

__all__ = ["RequestIDMiddleware", "RequestSizeLimitMiddleware"]
