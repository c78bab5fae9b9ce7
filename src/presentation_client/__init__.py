"""presentation-client: client-side mediator for a paginated presentation service.

Normalizes hierarchy/content requests, stitches partial response windows into
complete pages and routes push notifications into typed change events.
"""

__version__ = "0.1.0"

from presentation_client.manager import PresentationManager, PresentationManagerProps

__all__ = [
    "PresentationManager",
    "PresentationManagerProps",
    "__version__",
]
