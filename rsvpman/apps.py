from django.apps import AppConfig


class RsvpmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "rsvpman"
    verbose_name = "RSVPman - Guests & RSVPs"
