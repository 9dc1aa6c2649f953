"""
Redirect model for django-blog-relations.

Redirects are matched against request paths by RedirectMiddleware using a
cached map of active rules.
"""
import logging

from django.core.cache import cache
from django.db import models
from django.utils import timezone

from ..conf import relations_settings
from ..redirect_loops import (
    RewriteRule,
    clean_path,
    clean_target,
    normalize_path,
    would_create_loop,
)

logger = logging.getLogger(__name__)


class RedirectQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def automatic(self):
        return self.filter(is_automatic=True)

    def manual(self):
        return self.filter(is_automatic=False)


class Redirect(models.Model):
    """
    Source path to target URL rewrite rule.

    Source paths are stored cleaned ("/old-page", no trailing slash) with
    their case kept, but are matched case-insensitively. Targets may be site
    paths (cleaned the same way) or absolute URLs.
    """

    STATUS_PERMANENT = 301
    STATUS_TEMPORARY = 302
    STATUS_CHOICES = [
        (STATUS_PERMANENT, "301 Permanent"),
        (STATUS_TEMPORARY, "302 Temporary"),
    ]

    source_url = models.CharField(max_length=2048, db_index=True)
    target_url = models.CharField(max_length=2048)
    status_code = models.PositiveSmallIntegerField(
        choices=STATUS_CHOICES,
        default=STATUS_PERMANENT,
    )
    is_active = models.BooleanField(default=True)
    is_automatic = models.BooleanField(
        default=False,
        help_text="Created by the system (e.g. slug change) rather than by hand",
    )
    hits = models.PositiveIntegerField(default=0)
    last_hit_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = RedirectQuerySet.as_manager()

    class Meta:
        ordering = ["source_url"]
        indexes = [
            models.Index(fields=["is_active", "source_url"]),
        ]

    def __str__(self):
        return f"{self.source_url} -> {self.target_url} ({self.status_code})"

    def save(self, *args, **kwargs):
        self.source_url = clean_path(self.source_url)
        self.target_url = clean_target(self.target_url)
        super().save(*args, **kwargs)
        Redirect.clear_cache()

    def delete(self, *args, **kwargs):
        result = super().delete(*args, **kwargs)
        Redirect.clear_cache()
        return result

    @property
    def is_permanent(self):
        return self.status_code == self.STATUS_PERMANENT

    @classmethod
    def find_by_source_url(cls, url):
        """Return the active redirect for a source path, or None."""
        return (
            cls.objects.active()
            .filter(source_url__iexact=clean_path(url))
            .order_by("pk")
            .first()
        )

    @classmethod
    def get_cached_redirects(cls):
        """
        Return active redirects keyed by normalized source path.

        Sources differing only in case collapse to the lowest pk, the same
        rule the loop detector follows.

        Shape: {normalized_source: {"target_url": ..., "status_code": ..., "id": ...}}
        """
        key = relations_settings.REDIRECT_CACHE_KEY
        redirects = cache.get(key)
        if redirects is None:
            redirects = {}
            for redirect in cls.objects.active().order_by("pk"):
                redirects.setdefault(normalize_path(redirect.source_url), {
                    "target_url": redirect.target_url,
                    "status_code": redirect.status_code,
                    "id": redirect.pk,
                })
            cache.set(key, redirects, relations_settings.REDIRECT_CACHE_TIMEOUT)
            logger.debug("Cached %d active redirects", len(redirects))
        return redirects

    @classmethod
    def clear_cache(cls):
        """Drop the cached redirect map."""
        cache.delete(relations_settings.REDIRECT_CACHE_KEY)

    def record_hit(self):
        """Increment hit counter atomically and stamp the hit time."""
        now = timezone.now()
        Redirect.objects.filter(pk=self.pk).update(
            hits=models.F("hits") + 1,
            last_hit_at=now,
        )
        self.last_hit_at = now

    def as_rule(self):
        """Snapshot this redirect for loop detection."""
        return RewriteRule(
            source_path=self.source_url,
            target_path=self.target_url,
            is_active=self.is_active,
            id=self.pk,
        )

    def would_create_loop(self):
        """Check this (possibly unsaved) redirect against all active rules."""
        active_rules = [redirect.as_rule() for redirect in Redirect.objects.active().order_by("pk")]
        return would_create_loop(self.as_rule(), active_rules)
