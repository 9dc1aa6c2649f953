"""
django-blog-relations - Related posts and redirect management for Django blogs.

Features:
- Related post ranking by shared tags and categories with a recency bonus
- Cached rankings with explicit invalidation when taxonomy changes
- Path redirects served from a cached rule map
- Redirect loop detection for direct and chained loops
"""

__version__ = "0.1.0"
__author__ = "Nestor Wheelock"
