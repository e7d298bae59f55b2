from django.urls import path

from rsvpman.views import InviteDetailView, InviteRsvpView, InviteStatusView

app_name = "rsvpman"

urlpatterns = [
    path("invite/<str:group_id>/", InviteDetailView.as_view(), name="invite-detail"),
    path("invite/<str:group_id>/rsvp/", InviteRsvpView.as_view(), name="invite-rsvp"),
    path(
        "invite/<str:group_id>/status/<str:phone>/",
        InviteStatusView.as_view(),
        name="invite-status",
    ),
]
