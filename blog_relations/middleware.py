"""
Middleware that serves stored redirects.

Add to MIDDLEWARE:

    "blog_relations.middleware.RedirectMiddleware",
"""
import logging

from django.http import HttpResponsePermanentRedirect, HttpResponseRedirect

from .models import Redirect
from .redirect_loops import normalize_path

logger = logging.getLogger(__name__)


class RedirectMiddleware:
    """Redirect GET requests whose path matches an active Redirect."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.method != "GET":
            return self.get_response(request)

        redirects = Redirect.get_cached_redirects()
        match = redirects.get(normalize_path(request.path))
        if match is None:
            return self.get_response(request)

        self.record_hit(match["id"])

        target_url = match["target_url"]
        query_string = request.META.get("QUERY_STRING", "")
        if query_string:
            separator = "&" if "?" in target_url else "?"
            target_url = f"{target_url}{separator}{query_string}"

        logger.debug("Redirecting %s to %s", request.path, target_url)
        if match["status_code"] == Redirect.STATUS_PERMANENT:
            return HttpResponsePermanentRedirect(target_url)
        return HttpResponseRedirect(target_url)

    def record_hit(self, redirect_id):
        instance = Redirect.objects.filter(pk=redirect_id).first()
        if instance:
            instance.record_hit()
