"""URL configuration for tests."""
from django.urls import include, path

urlpatterns = [
    path("blog/", include("blog_relations.urls")),
]
