"""Collaborators the manager talks to the backend through.

- protocol.py: PresentationTransport protocol (request/response)
- http.py: httpx implementation of PresentationTransport
- push.py: PushChannel protocol with in-process and SSE implementations
"""

from .http import USER_AGENT, HttpPresentationTransport
from .protocol import PresentationTransport
from .push import InProcessPushChannel, PushCallback, PushChannel, SsePushChannel

__all__ = [
    # Request/response
    "HttpPresentationTransport",
    "PresentationTransport",
    "USER_AGENT",
    # Push
    "InProcessPushChannel",
    "PushCallback",
    "PushChannel",
    "SsePushChannel",
]
