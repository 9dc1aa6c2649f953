"""
Configuration settings for django-blog-relations.

Override these in your Django settings.py:

    BLOG_RELATIONS = {
        'RELATED_TAG_WEIGHT': 3,
        'RELATED_RECENCY_DAYS': 30,
        'REDIRECT_CACHE_TIMEOUT': 3600,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Related posts scoring
    "RELATED_TAG_WEIGHT": 3,
    "RELATED_CATEGORY_WEIGHT": 1,
    "RELATED_RECENCY_DAYS": 30,

    # Related posts caching
    "RELATED_CACHE_TIMEOUT": 3600,
    "RELATED_CACHE_LIMITS": [3, 4, 5, 6],
    "RELATED_DEFAULT_LIMIT": 4,
    "RELATED_MAX_LIMIT": 12,

    # Redirects
    "REDIRECT_CACHE_KEY": "redirects:all_active",
    "REDIRECT_CACHE_TIMEOUT": 3600,

    # SEO
    "SLUG_MAX_LENGTH": 100,
}


class RelationsSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blog_relations.conf import relations_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blog_relations setting: {name}")

        user_settings = getattr(settings, "BLOG_RELATIONS", {})
        return user_settings.get(name, DEFAULTS[name])


relations_settings = RelationsSettings()
