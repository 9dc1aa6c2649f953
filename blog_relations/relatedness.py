"""
Related content ranking for blog_relations.

Pure scoring over snapshots of published items. Nothing here touches the
ORM; the Django layer builds ContentItem snapshots and hands them in.

    engine = RelatedPostsEngine(cache=cache)
    related = engine.get_related(item, pool, limit=4)
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

TAG_WEIGHT = 3
CATEGORY_WEIGHT = 1
RECENCY_DAYS = 30
CACHE_TIMEOUT = 3600
CACHE_LIMITS = (3, 4, 5, 6)


@dataclass(frozen=True)
class ContentItem:
    """Read-only view of a post as seen by the ranking code."""

    id: object
    published_at: datetime = None
    tag_ids: frozenset = field(default_factory=frozenset)
    category_ids: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        # Accept any iterable for the id sets
        object.__setattr__(self, "tag_ids", frozenset(self.tag_ids))
        object.__setattr__(self, "category_ids", frozenset(self.category_ids))

    def is_published(self, now):
        return self.published_at is not None and self.published_at <= now


@dataclass(frozen=True)
class RelevanceScore:
    item: ContentItem
    score: float

    @property
    def item_id(self):
        return self.item.id


def cache_key(item_id, limit):
    """Return the cache key for a related-items query."""
    return f"related:{item_id}:{limit}"


def recency_bonus(published_at, now, window_days=RECENCY_DAYS):
    """
    Linear bonus for fresh content.

    1.0 for an item published today, falling to 0.0 at window_days.
    Age is counted in whole days.
    """
    if published_at is None:
        return 0.0

    age_days = (now - published_at).days
    if age_days >= window_days:
        return 0.0

    return 1.0 - (max(age_days, 0) / window_days)


def score_candidate(
    item,
    candidate,
    now,
    tag_weight=TAG_WEIGHT,
    category_weight=CATEGORY_WEIGHT,
    window_days=RECENCY_DAYS,
):
    """Score a candidate against the subject item."""
    shared_tags = len(candidate.tag_ids & item.tag_ids)
    shared_categories = len(candidate.category_ids & item.category_ids)

    score = shared_tags * tag_weight + shared_categories * category_weight
    return RelevanceScore(
        item=candidate,
        score=score + recency_bonus(candidate.published_at, now, window_days),
    )


def _shares_taxonomy(item, candidate):
    return bool(
        (candidate.tag_ids & item.tag_ids)
        or (candidate.category_ids & item.category_ids)
    )


def rank_related(
    item,
    pool,
    limit,
    now=None,
    tag_weight=TAG_WEIGHT,
    category_weight=CATEGORY_WEIGHT,
    window_days=RECENCY_DAYS,
):
    """
    Rank related items without any caching.

    Scored matches come first in score order (newer wins ties). Any
    remaining slots are filled with the newest other items from the pool.
    Items tied on both score and publish date keep their pool order.

    Args:
        item: ContentItem to find relations for
        pool: iterable of ContentItem candidates
        limit: maximum number of items to return
        now: evaluation time (aware datetime), defaults to current UTC time

    Returns:
        List of ContentItem, at most ``limit`` long
    """
    if limit <= 0:
        return []

    if now is None:
        now = datetime.now(timezone.utc)

    eligible = [
        candidate
        for candidate in pool
        if candidate.id != item.id and candidate.is_published(now)
    ]

    scored = [
        score_candidate(item, candidate, now, tag_weight, category_weight, window_days)
        for candidate in eligible
        if _shares_taxonomy(item, candidate)
    ]
    # sorted() is stable with reverse=True, so full ties keep pool order
    scored = sorted(
        scored,
        key=lambda s: (s.score, s.item.published_at),
        reverse=True,
    )
    selected = [s.item for s in scored[:limit]]

    if len(selected) < limit:
        taken = {candidate.id for candidate in selected}
        recent = sorted(
            (c for c in eligible if c.id not in taken),
            key=lambda c: c.published_at,
            reverse=True,
        )
        selected.extend(recent[: limit - len(selected)])

    return selected


class RelatedPostsEngine:
    """
    Related items ranking with an optional result cache.

    The cache only needs ``get``, ``set(key, value, timeout)`` and
    ``delete``; Django's cache framework fits directly. Cached values are
    ordered id lists, never the items themselves.
    """

    def __init__(
        self,
        cache=None,
        timeout=CACHE_TIMEOUT,
        cached_limits=CACHE_LIMITS,
        tag_weight=TAG_WEIGHT,
        category_weight=CATEGORY_WEIGHT,
        window_days=RECENCY_DAYS,
    ):
        self.cache = cache
        self.timeout = timeout
        self.cached_limits = tuple(cached_limits)
        self.tag_weight = tag_weight
        self.category_weight = category_weight
        self.window_days = window_days

    def rank(self, item, pool, limit, now=None):
        return rank_related(
            item,
            pool,
            limit,
            now=now,
            tag_weight=self.tag_weight,
            category_weight=self.category_weight,
            window_days=self.window_days,
        )

    def get_related_ids(self, item, pool, limit, use_cache=True, now=None):
        """
        Return ids of related items in ranked order.

        ``pool`` may be a zero-argument callable, in which case it is only
        called on a cache miss.
        """
        if limit <= 0:
            return []

        key = cache_key(item.id, limit)
        if use_cache and self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Related cache hit for %s", key)
                return list(cached)
            logger.debug("Related cache miss for %s", key)

        if callable(pool):
            pool = pool()

        ids = [related.id for related in self.rank(item, pool, limit, now=now)]

        if use_cache and self.cache is not None:
            self.cache.set(key, ids, self.timeout)

        return ids

    def get_related(self, item, pool, limit, use_cache=True, now=None):
        """
        Return related ContentItems from ``pool`` in ranked order.

        Cached ids that are no longer in the pool are dropped.
        """
        pool = list(pool() if callable(pool) else pool)
        ids = self.get_related_ids(item, pool, limit, use_cache=use_cache, now=now)

        by_id = {candidate.id: candidate for candidate in pool}
        return [by_id[item_id] for item_id in ids if item_id in by_id]

    def clear_cache(self, item_id):
        """Forget cached results for an item across the common limits."""
        if self.cache is None:
            return
        for limit in self.cached_limits:
            self.cache.delete(cache_key(item_id, limit))
