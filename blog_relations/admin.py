"""
Django admin configuration for blog_relations.
"""
from django.contrib import admin

from .forms import RedirectForm
from .models import Category, Tag, Post, Redirect
from .services import related_posts


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "parent", "slug", "post_count"]
    list_filter = ["parent"]
    search_fields = ["name", "slug", "description"]
    prepopulated_fields = {"slug": ("name",)}
    ordering = ["parent__name", "name"]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "post_count", "created_at"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["created_at"]


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "author",
        "is_draft",
        "is_deleted",
        "published_at",
    ]
    list_filter = ["is_draft", "is_deleted", "categories", "tags", "published_at"]
    search_fields = ["title", "body", "author__username"]
    raw_id_fields = ["author"]
    filter_horizontal = ["tags", "categories"]
    date_hierarchy = "published_at"
    readonly_fields = ["created_at", "updated_at", "deleted_at"]
    prepopulated_fields = {"slug": ("title",)}

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "body", "author")
        }),
        ("Taxonomy", {
            "fields": ("categories", "tags")
        }),
        ("Status", {
            "fields": ("is_draft", "published_at", "is_deleted", "deleted_at"),
        }),
        ("Metadata", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_posts", "delete_posts"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        if obj.title:
            return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title
        return obj.body[:40] + "..." if len(obj.body) > 40 else obj.body

    title_preview.short_description = "Title"

    def save_related(self, request, form, formsets, change):
        # Drop caches for old neighbours before M2M rows change
        if change:
            related_posts.invalidate_post(form.instance)
        super().save_related(request, form, formsets, change)
        related_posts.invalidate_post(form.instance)

    @admin.action(description="Publish selected posts")
    def publish_posts(self, request, queryset):
        for post in queryset:
            post.publish()
        self.message_user(request, f"{queryset.count()} posts published.")

    @admin.action(description="Soft delete selected posts")
    def delete_posts(self, request, queryset):
        count = 0
        for post in queryset:
            post.soft_delete()
            count += 1
        self.message_user(request, f"{count} posts deleted.")


@admin.register(Redirect)
class RedirectAdmin(admin.ModelAdmin):
    form = RedirectForm
    list_display = [
        "source_url",
        "target_url",
        "status_code",
        "is_active",
        "is_automatic",
        "hits",
        "last_hit_at",
    ]
    list_filter = ["status_code", "is_active", "is_automatic"]
    search_fields = ["source_url", "target_url"]
    readonly_fields = ["hits", "last_hit_at", "created_at", "updated_at"]
    actions = ["activate_redirects", "deactivate_redirects", "reset_hits"]

    @admin.action(description="Activate selected redirects")
    def activate_redirects(self, request, queryset):
        # Activating can close a loop, so check each one
        activated = 0
        for redirect in queryset.filter(is_active=False):
            redirect.is_active = True
            if redirect.would_create_loop():
                self.message_user(
                    request,
                    f"Skipped {redirect}: it would create a redirect loop.",
                    level="warning",
                )
                continue
            redirect.save(update_fields=["is_active", "updated_at"])
            activated += 1
        self.message_user(request, f"{activated} redirects activated.")

    @admin.action(description="Deactivate selected redirects")
    def deactivate_redirects(self, request, queryset):
        count = queryset.update(is_active=False)
        Redirect.clear_cache()
        self.message_user(request, f"{count} redirects deactivated.")

    @admin.action(description="Reset hit counters")
    def reset_hits(self, request, queryset):
        count = queryset.update(hits=0, last_hit_at=None)
        self.message_user(request, f"{count} redirect counters reset.")
