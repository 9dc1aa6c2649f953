"""
URL configuration for django-blog-relations.

Include in your project urls.py:

    path('blog/', include('blog_relations.urls')),
"""
from django.urls import path

from . import views

app_name = "blog_relations"

urlpatterns = [
    path("post/<slug:slug>/", views.PostDetailView.as_view(), name="post_detail"),
    path("post/<slug:slug>/related/", views.RelatedPostsView.as_view(), name="post_related"),
]
