"""
Models for django-blog-relations.

All models are importable from blog_relations.models:

    from blog_relations.models import Post, Category, Tag, Redirect
"""
from .posts import Category, Tag, Post
from .redirects import Redirect

__all__ = [
    # Posts
    "Category",
    "Tag",
    "Post",
    # Redirects
    "Redirect",
]
