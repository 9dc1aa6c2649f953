"""System checks for blog_relations settings."""
from django.core import checks

from .conf import relations_settings


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@checks.register(checks.Tags.compatibility)
def check_settings(app_configs=None, **kwargs):
    errors = []

    for name in ("RELATED_TAG_WEIGHT", "RELATED_CATEGORY_WEIGHT"):
        value = getattr(relations_settings, name)
        if not _is_number(value) or value < 0:
            errors.append(
                checks.Error(
                    f"BLOG_RELATIONS['{name}'] must be a non-negative number.",
                    id="blog_relations.E001",
                )
            )

    recency_days = relations_settings.RELATED_RECENCY_DAYS
    if not _is_number(recency_days) or recency_days <= 0:
        errors.append(
            checks.Error(
                "BLOG_RELATIONS['RELATED_RECENCY_DAYS'] must be a positive number.",
                id="blog_relations.E002",
            )
        )

    default_limit = relations_settings.RELATED_DEFAULT_LIMIT
    max_limit = relations_settings.RELATED_MAX_LIMIT
    limits_are_ints = all(
        isinstance(value, int) and not isinstance(value, bool)
        for value in (default_limit, max_limit)
    )
    if not limits_are_ints or default_limit < 0 or default_limit > max_limit:
        errors.append(
            checks.Error(
                "BLOG_RELATIONS['RELATED_DEFAULT_LIMIT'] and RELATED_MAX_LIMIT "
                "must be integers, with the default between 0 and the max.",
                id="blog_relations.E003",
            )
        )

    if default_limit not in relations_settings.RELATED_CACHE_LIMITS:
        errors.append(
            checks.Warning(
                "RELATED_DEFAULT_LIMIT is not in RELATED_CACHE_LIMITS; "
                "cached results for it will not be invalidated on change.",
                id="blog_relations.W001",
            )
        )

    return errors
