# Initial schema for users, events, guest groups and guest records

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import rsvpman.models.group


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "phone",
                    models.CharField(
                        help_text="Normalized phone number (+15550102030).",
                        max_length=20,
                        unique=True,
                        verbose_name="phone",
                    ),
                ),
                ("name", models.CharField(blank=True, max_length=200, verbose_name="name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                (
                    "verification_status",
                    models.CharField(
                        choices=[("unverified", "Unverified"), ("verified", "Verified")],
                        db_index=True,
                        default="unverified",
                        max_length=20,
                        verbose_name="verification status",
                    ),
                ),
                (
                    "verified_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="verified at"),
                ),
                (
                    "date_of_birth",
                    models.DateField(blank=True, null=True, verbose_name="date of birth"),
                ),
                (
                    "gender",
                    models.CharField(
                        choices=[
                            ("M", "Male"),
                            ("F", "Female"),
                            ("unspecified", "Unspecified"),
                        ],
                        default="unspecified",
                        max_length=20,
                        verbose_name="gender",
                    ),
                ),
                (
                    "preferred_language",
                    models.CharField(
                        blank=True, max_length=20, verbose_name="preferred language"
                    ),
                ),
                (
                    "profile_pic",
                    models.URLField(
                        blank=True, max_length=500, verbose_name="profile picture"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "db_table": "rsvpman_user",
                "ordering": ["name", "phone"],
            },
        ),
        migrations.CreateModel(
            name="VerifiedPhone",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("phone", models.CharField(max_length=20, unique=True, verbose_name="phone")),
                (
                    "verified_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, verbose_name="verified at"
                    ),
                ),
                (
                    "consumed_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="consumed at"),
                ),
                (
                    "consumed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="rsvpman.user",
                        verbose_name="consumed by",
                    ),
                ),
            ],
            options={
                "verbose_name": "verified phone",
                "verbose_name_plural": "verified phones",
                "db_table": "rsvpman_verified_phone",
                "ordering": ["-verified_at"],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("title", models.CharField(max_length=200, verbose_name="title")),
                ("start_at", models.DateTimeField(db_index=True, verbose_name="starts at")),
                ("end_at", models.DateTimeField(verbose_name="ends at")),
                ("location", models.CharField(blank=True, max_length=200, verbose_name="location")),
                ("address", models.CharField(blank=True, max_length=500, verbose_name="address")),
                ("invite_message", models.TextField(blank=True, verbose_name="invite message")),
                ("image", models.URLField(blank=True, max_length=500, verbose_name="image")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="hosted_events",
                        to="rsvpman.user",
                        verbose_name="host",
                    ),
                ),
                (
                    "co_hosts",
                    models.ManyToManyField(
                        blank=True,
                        related_name="cohosted_events",
                        to="rsvpman.user",
                        verbose_name="co-hosts",
                    ),
                ),
            ],
            options={
                "verbose_name": "event",
                "verbose_name_plural": "events",
                "db_table": "rsvpman_event",
                "ordering": ["start_at"],
            },
        ),
        migrations.CreateModel(
            name="GuestGroup",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="created_groups",
                        to="rsvpman.user",
                        verbose_name="created by",
                    ),
                ),
            ],
            options={
                "verbose_name": "guest group",
                "verbose_name_plural": "guest groups",
                "db_table": "rsvpman_guest_group",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="GroupMembership",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "added_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="rsvpman.user",
                        verbose_name="added by",
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="rsvpman.guestgroup",
                        verbose_name="group",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="rsvpman.user",
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "group membership",
                "verbose_name_plural": "group memberships",
                "db_table": "rsvpman_group_membership",
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("group", "user"),
                        name="rsvpman_unique_group_member",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventGroup",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="group_links",
                        to="rsvpman.event",
                        verbose_name="event",
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_links",
                        to="rsvpman.guestgroup",
                        verbose_name="group",
                    ),
                ),
            ],
            options={
                "verbose_name": "event group",
                "verbose_name_plural": "event groups",
                "db_table": "rsvpman_event_group",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "group"),
                        name="rsvpman_unique_event_group",
                    ),
                ],
            },
        ),
        migrations.AddField(
            model_name="guestgroup",
            name="members",
            field=models.ManyToManyField(
                blank=True,
                related_name="guest_groups",
                through="rsvpman.GroupMembership",
                through_fields=("group", "user"),
                to="rsvpman.user",
                verbose_name="members",
            ),
        ),
        migrations.AddField(
            model_name="guestgroup",
            name="events",
            field=models.ManyToManyField(
                blank=True,
                related_name="guest_groups",
                through="rsvpman.EventGroup",
                to="rsvpman.event",
                verbose_name="events",
            ),
        ),
        migrations.CreateModel(
            name="InviteLink",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "token",
                    models.CharField(
                        default=rsvpman.models.group._new_token,
                        editable=False,
                        max_length=64,
                        unique=True,
                        verbose_name="token",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="rsvpman.user",
                        verbose_name="created by",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invite_links",
                        to="rsvpman.event",
                        verbose_name="event",
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invite_links",
                        to="rsvpman.guestgroup",
                        verbose_name="group",
                    ),
                ),
            ],
            options={
                "verbose_name": "invite link",
                "verbose_name_plural": "invite links",
                "db_table": "rsvpman_invite_link",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="GuestRecord",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(blank=True, max_length=200, null=True, verbose_name="name")),
                (
                    "phone",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        max_length=20,
                        null=True,
                        verbose_name="phone",
                    ),
                ),
                (
                    "email",
                    models.EmailField(blank=True, max_length=254, null=True, verbose_name="email"),
                ),
                (
                    "rsvp",
                    models.CharField(
                        choices=[
                            ("no_response", "No response"),
                            ("accepted", "Accepted"),
                            ("declined", "Declined"),
                            ("maybe", "Maybe"),
                            ("failed_delivery", "Failed delivery"),
                        ],
                        db_index=True,
                        default="no_response",
                        max_length=20,
                        verbose_name="RSVP",
                    ),
                ),
                ("food", models.CharField(blank=True, max_length=100, verbose_name="food")),
                ("alcohol", models.CharField(blank=True, max_length=100, verbose_name="alcohol")),
                (
                    "accommodation",
                    models.CharField(blank=True, max_length=100, verbose_name="accommodation"),
                ),
                ("count", models.PositiveIntegerField(default=1, verbose_name="party size")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guests",
                        to="rsvpman.event",
                        verbose_name="event",
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="guests",
                        to="rsvpman.guestgroup",
                        verbose_name="group",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guest_records",
                        to="rsvpman.user",
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "guest",
                "verbose_name_plural": "guests",
                "db_table": "rsvpman_guest",
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["event", "rsvp"], name="rsvpman_guest_event_rsvp_idx"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(user__isnull=False),
                        fields=("event", "user"),
                        name="rsvpman_unique_linked_guest",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(user__isnull=True),
                        fields=("event", "group", "phone"),
                        name="rsvpman_unique_unlinked_guest",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                email__isnull=True,
                                name__isnull=True,
                                phone__isnull=True,
                                user__isnull=False,
                            ),
                            models.Q(name__isnull=False, phone__isnull=False, user__isnull=True),
                            _connector="OR",
                        ),
                        name="rsvpman_guest_identity_xor",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invite",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("phone", models.CharField(max_length=20, verbose_name="phone")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invites",
                        to="rsvpman.event",
                        verbose_name="event",
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invites",
                        to="rsvpman.guestgroup",
                        verbose_name="group",
                    ),
                ),
            ],
            options={
                "verbose_name": "invite",
                "verbose_name_plural": "invites",
                "db_table": "rsvpman_invite",
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("phone", "event"),
                        name="rsvpman_unique_invite_phone_event",
                    ),
                ],
            },
        ),
    ]
