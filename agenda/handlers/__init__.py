from agenda.handlers.views import (
    CsrfTokenView,
    EventFeedView,
    EventListView,
    EventManageView,
)

__all__ = [
    "CsrfTokenView",
    "EventFeedView",
    "EventListView",
    "EventManageView",
]
