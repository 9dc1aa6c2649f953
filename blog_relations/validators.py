"""
Validators for redirect targets.

Both take the source path at construction and are called with the target,
matching how a form knows the source before validating the target field.
"""
import logging

from django.core.exceptions import ValidationError
from django.utils.deconstruct import deconstructible
from django.utils.translation import gettext_lazy as _

from .redirect_loops import normalize_path

logger = logging.getLogger(__name__)


@deconstructible
class NotSelfRedirectValidator:
    message = _("The target URL cannot be the same as the source URL.")
    code = "self_redirect"

    def __init__(self, source_url=None):
        self.source_url = source_url

    def __call__(self, value):
        if self.source_url is None:
            return
        if normalize_path(self.source_url) == normalize_path(value):
            raise ValidationError(self.message, code=self.code)

    def __eq__(self, other):
        return (
            isinstance(other, NotSelfRedirectValidator)
            and self.source_url == other.source_url
        )


@deconstructible
class NoRedirectLoopValidator:
    """
    Reject targets that would send visitors around in a circle.

    Pass ``redirect_id`` when editing an existing redirect so its current
    rule is ignored.
    """

    message = _("This redirect would create a redirect loop.")
    code = "redirect_loop"

    def __init__(self, source_url=None, redirect_id=None):
        self.source_url = source_url
        self.redirect_id = redirect_id

    def __call__(self, value):
        from .models import Redirect

        if self.source_url is None:
            return

        candidate = Redirect(source_url=self.source_url, target_url=value)
        candidate.pk = self.redirect_id

        if candidate.would_create_loop():
            logger.info(
                "Rejected redirect %s -> %s: would create a loop",
                self.source_url,
                value,
            )
            raise ValidationError(self.message, code=self.code)

    def __eq__(self, other):
        return (
            isinstance(other, NoRedirectLoopValidator)
            and self.source_url == other.source_url
            and self.redirect_id == other.redirect_id
        )
