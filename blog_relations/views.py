"""
Views for django-blog-relations.
"""
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View
from django.views.generic import DetailView

from .conf import relations_settings
from .models import Post
from .services import related_posts


class PostDetailView(DetailView):
    """Display a single published post with its related posts."""

    model = Post
    template_name = "blog_relations/post_detail.html"
    context_object_name = "post"

    def get_queryset(self):
        return Post.objects.published().prefetch_related("tags", "categories")

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["related_posts"] = related_posts.get_related_posts(self.object)
        return context


class RelatedPostsView(View):
    """Related posts for a post as JSON."""

    def get(self, request, slug):
        post = get_object_or_404(Post.objects.published(), slug=slug)

        try:
            limit = int(request.GET.get("limit", relations_settings.RELATED_DEFAULT_LIMIT))
        except ValueError:
            return JsonResponse({"error": "limit must be an integer"}, status=400)
        limit = max(0, min(limit, relations_settings.RELATED_MAX_LIMIT))

        related = related_posts.get_related_posts(post, limit=limit)

        return JsonResponse({
            "post": post.pk,
            "limit": limit,
            "related": [
                {
                    "id": item.pk,
                    "title": item.title,
                    "url": item.get_absolute_url(),
                    "published_at": item.published_at.isoformat(),
                }
                for item in related
            ],
        })
