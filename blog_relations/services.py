"""
Related posts service.

Bridges Post rows and the pure ranking engine in relatedness.py, using
Django's cache for results.
"""
import logging

from django.core.cache import cache
from django.utils import timezone

from .conf import relations_settings
from .models import Post
from .relatedness import RelatedPostsEngine

logger = logging.getLogger(__name__)


class RelatedPostsService:
    """
    Find related posts for a post.

    Settings are read when the engine is built, so overriding
    BLOG_RELATIONS in tests takes effect on the next call.
    """

    def __init__(self, cache_backend=None):
        self._cache = cache_backend

    @property
    def cache(self):
        return self._cache if self._cache is not None else cache

    @property
    def engine(self):
        return RelatedPostsEngine(
            cache=self.cache,
            timeout=relations_settings.RELATED_CACHE_TIMEOUT,
            cached_limits=relations_settings.RELATED_CACHE_LIMITS,
            tag_weight=relations_settings.RELATED_TAG_WEIGHT,
            category_weight=relations_settings.RELATED_CATEGORY_WEIGHT,
            window_days=relations_settings.RELATED_RECENCY_DAYS,
        )

    def get_related_posts(self, post, limit=None, use_cache=True):
        """
        Return related posts for ``post`` in ranked order.

        On a cache hit the candidate pool is never loaded; the cached ids are
        fetched directly and anything no longer published is skipped.
        """
        if limit is None:
            limit = relations_settings.RELATED_DEFAULT_LIMIT

        now = timezone.now()
        published = Post.objects.published(now=now)

        def load_pool():
            candidates = published.exclude(pk=post.pk).prefetch_related("tags", "categories")
            return [candidate.as_content_item() for candidate in candidates]

        ids = self.engine.get_related_ids(
            post.as_content_item(),
            load_pool,
            limit,
            use_cache=use_cache,
            now=now,
        )

        posts = published.in_bulk(ids)
        return [posts[pk] for pk in ids if pk in posts]

    def clear_cache(self, post):
        """Clear cached results for a single post."""
        self.engine.clear_cache(post.pk)

    def clear_all_cache(self):
        """Clear the whole cache backend."""
        self.cache.clear()

    def invalidate_post(self, post):
        """
        Clear cached results for a post and every post sharing its taxonomy.

        Call after changing a post's tags, categories or publish state.
        """
        engine = self.engine
        engine.clear_cache(post.pk)

        neighbour_ids = list(
            Post.objects.sharing_taxonomy_with(post).values_list("pk", flat=True)
        )
        for pk in neighbour_ids:
            engine.clear_cache(pk)

        logger.debug(
            "Invalidated related posts for %s and %d neighbours",
            post.pk,
            len(neighbour_ids),
        )


related_posts = RelatedPostsService()
