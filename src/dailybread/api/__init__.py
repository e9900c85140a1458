"""API module for the Bible content service.

Provides the rate-limited, queued client plus connectivity checks and the
shared error taxonomy.
"""

from .bible import BibleAPIClient, PassageResult
from .connectivity import NetworkMonitor, StaticNetwork
from .errors import BibleAPIError, ErrorCode, classify_status
from .queue import RequestQueue
from .ratelimit import RateLimiter

__all__ = [
    "BibleAPIClient",
    "PassageResult",
    "NetworkMonitor",
    "StaticNetwork",
    "BibleAPIError",
    "ErrorCode",
    "classify_status",
    "RequestQueue",
    "RateLimiter",
]
