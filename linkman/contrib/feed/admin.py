"""Feed admin."""

from django.contrib import admin

from linkman.contrib.feed.models import Post


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ["created_at", "author", "network_type", "visibility", "module", "excerpt"]
    list_filter = ["network_type", "visibility", "module"]
    search_fields = ["author__username", "content"]
    raw_id_fields = ["author"]
    readonly_fields = ["created_at"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    def excerpt(self, obj):
        return obj.content[:60]

    excerpt.short_description = "Content"
