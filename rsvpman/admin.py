"""RSVPman admin."""

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from rsvpman.models import (
    Event,
    EventGroup,
    GroupMembership,
    GuestGroup,
    GuestRecord,
    Invite,
    InviteLink,
    User,
    VerifiedPhone,
)


# ===========================================
# Inline Classes
# ===========================================


class GroupMembershipInline(admin.TabularInline):
    model = GroupMembership
    fk_name = "group"
    extra = 0
    fields = ["user", "added_by", "created_at"]
    readonly_fields = ["created_at"]
    raw_id_fields = ["user", "added_by"]


class EventGroupInline(admin.TabularInline):
    model = EventGroup
    extra = 0
    fields = ["event", "group", "created_at"]
    readonly_fields = ["created_at"]
    raw_id_fields = ["event", "group"]


class InviteLinkInline(admin.TabularInline):
    model = InviteLink
    extra = 0
    fields = ["token", "event", "is_active", "created_at"]
    readonly_fields = ["token", "created_at"]
    raw_id_fields = ["event"]


class GuestRecordInline(admin.TabularInline):
    model = GuestRecord
    fk_name = "user"
    extra = 0
    fields = ["event", "group", "rsvp", "count"]
    readonly_fields = ["event", "group"]
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


# ===========================================
# User Admin
# ===========================================


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["name", "phone", "email", "verified_badge", "created_at"]
    list_filter = ["verification_status", "gender"]
    search_fields = ["name", "phone", "email"]
    readonly_fields = ["id", "verified_at", "created_at", "updated_at"]
    inlines = [GuestRecordInline]

    fieldsets = [
        ("Identification", {"fields": ["id", "phone", "name", "email"]}),
        ("Verification", {"fields": ["verification_status", "verified_at"]}),
        (
            "Profile",
            {
                "fields": ["date_of_birth", "gender", "preferred_language", "profile_pic"],
                "classes": ["collapse"],
            },
        ),
        ("Timestamps", {"fields": ["created_at", "updated_at"], "classes": ["collapse"]}),
    ]

    def verified_badge(self, obj):
        if obj.is_verified:
            return format_html('<span style="color: {};">{}</span>', "green", "V")
        return format_html('<span style="color: {};">{}</span>', "gray", "o")

    verified_badge.short_description = "Verified"


@admin.register(VerifiedPhone)
class VerifiedPhoneAdmin(admin.ModelAdmin):
    list_display = ["phone", "verified_at", "consumed_at", "consumed_by"]
    list_filter = ["consumed_at"]
    search_fields = ["phone"]
    raw_id_fields = ["consumed_by"]
    readonly_fields = ["verified_at", "consumed_at"]


# ===========================================
# Event Admin
# ===========================================


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "host", "start_at", "end_at", "guest_count"]
    search_fields = ["title", "location", "host__name", "host__phone"]
    date_hierarchy = "start_at"
    raw_id_fields = ["host"]
    filter_horizontal = ["co_hosts"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [EventGroupInline]

    def guest_count(self, obj):
        return obj.guests.count()

    guest_count.short_description = "Guests"


# ===========================================
# GuestGroup Admin
# ===========================================


@admin.register(GuestGroup)
class GuestGroupAdmin(admin.ModelAdmin):
    list_display = ["name", "created_by", "member_count", "created_at"]
    search_fields = ["name", "created_by__name", "created_by__phone"]
    raw_id_fields = ["created_by"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [GroupMembershipInline, EventGroupInline, InviteLinkInline]

    def member_count(self, obj):
        return obj.member_count

    member_count.short_description = "Members"


# ===========================================
# GuestRecord Admin
# ===========================================


@admin.register(GuestRecord)
class GuestRecordAdmin(admin.ModelAdmin):
    list_display = ["who", "event", "group", "rsvp", "count", "linked_badge", "updated_at"]
    list_filter = ["rsvp", "event"]
    search_fields = ["name", "phone", "email", "user__name", "user__phone"]
    raw_id_fields = ["event", "group", "user"]
    readonly_fields = ["id", "created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["id", "event", "group"]}),
        ("Linked identity", {"fields": ["user"]}),
        ("Unlinked identity", {"fields": ["name", "phone", "email"]}),
        ("Response", {"fields": ["rsvp", "count", "food", "alcohol", "accommodation"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"], "classes": ["collapse"]}),
    ]

    def who(self, obj):
        if obj.is_linked:
            url = reverse("admin:rsvpman_user_change", args=[obj.user_id])
            return format_html('<a href="{}">{}</a>', url, obj.display_name or obj.user_id)
        return obj.display_name

    who.short_description = "Guest"

    def linked_badge(self, obj):
        if obj.is_linked:
            return format_html('<span style="color: {};">{}</span>', "green", "linked")
        return format_html('<span style="color: {};">{}</span>', "gray", "web")

    linked_badge.short_description = "Identity"


# ===========================================
# Invite Admin
# ===========================================


@admin.register(Invite)
class InviteAdmin(admin.ModelAdmin):
    list_display = ["name", "phone", "event", "group", "created_at"]
    list_filter = ["event"]
    search_fields = ["name", "phone", "email"]
    raw_id_fields = ["event", "group"]


@admin.register(InviteLink)
class InviteLinkAdmin(admin.ModelAdmin):
    list_display = ["token", "group", "event", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["token", "group__name"]
    raw_id_fields = ["group", "event", "created_by"]
    readonly_fields = ["token", "url", "created_at"]
