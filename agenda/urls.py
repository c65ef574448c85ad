from django.urls import path

from agenda.handlers import CsrfTokenView, EventFeedView, EventListView, EventManageView

urlpatterns = [
    path("api/csrf", CsrfTokenView.as_view(), name="csrf-token"),
    path("api/events", EventListView.as_view(), name="event-list"),
    path("events.json", EventFeedView.as_view(), name="event-feed"),
    path("admin/manage", EventManageView.as_view(), name="event-manage"),
]
