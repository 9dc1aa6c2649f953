"""
Post, Category, and Tag models for django-blog-relations.
"""
from django.conf import settings
from django.db import models
from django.urls import reverse
from django.utils import timezone
from django.utils.text import slugify

from ..conf import relations_settings
from ..relatedness import ContentItem


class Category(models.Model):
    """
    Hierarchical category for organizing posts.

    Categories support nesting via parent field for tree structures.
    """

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="children",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Categories"

    def __str__(self):
        if self.parent:
            return f"{self.parent} > {self.name}"
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)[:relations_settings.SLUG_MAX_LENGTH]
        super().save(*args, **kwargs)

    @property
    def post_count(self):
        """Return count of published posts in this category."""
        return Post.objects.published().filter(categories=self).count()

    def get_ancestors(self):
        """Return list of ancestor categories from root to parent."""
        ancestors = []
        current = self.parent
        while current:
            ancestors.insert(0, current)
            current = current.parent
        return ancestors


class Tag(models.Model):
    """
    Flat tag for posts.

    Tags weigh more than categories when ranking related posts.
    """

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)[:relations_settings.SLUG_MAX_LENGTH]
        super().save(*args, **kwargs)

    @property
    def post_count(self):
        """Return count of published posts with this tag."""
        return Post.objects.published().filter(tags=self).count()


class PostQuerySet(models.QuerySet):
    def published(self, now=None):
        """Posts that are live: not draft, not deleted, publish time passed."""
        if now is None:
            now = timezone.now()
        return self.filter(
            is_draft=False,
            is_deleted=False,
            published_at__isnull=False,
            published_at__lte=now,
        )

    def sharing_taxonomy_with(self, post):
        """Other posts that share at least one tag or category with post."""
        return (
            self.filter(
                models.Q(tags__in=post.tags.all())
                | models.Q(categories__in=post.categories.all())
            )
            .exclude(pk=post.pk)
            .distinct()
        )


class Post(models.Model):
    """
    Blog post / article.

    The unit that related-post ranking works on. Taxonomy changes should go
    through set_taxonomy() so cached rankings are dropped.
    """

    title = models.CharField(max_length=255, blank=True)
    slug = models.SlugField(max_length=255, blank=True, db_index=True)
    body = models.TextField()

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="related_blog_posts",
    )

    # Status
    is_draft = models.BooleanField(default=False)
    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    published_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When post was actually published",
    )

    # Taxonomy
    categories = models.ManyToManyField(Category, related_name="posts", blank=True)
    tags = models.ManyToManyField(Tag, related_name="posts", blank=True)

    # Timestamps
    created_at = models.DateTimeField(db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["is_draft", "is_deleted", "-published_at"]),
        ]

    def __str__(self):
        if self.title:
            return self.title
        return f"{self.body[:50]}..." if len(self.body) > 50 else self.body

    def save(self, *args, **kwargs):
        # Auto-generate slug from title
        if not self.slug and self.title:
            base_slug = slugify(self.title)[:relations_settings.SLUG_MAX_LENGTH]
            slug = base_slug
            counter = 1
            while Post.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base_slug}-{counter}"
                counter += 1
            self.slug = slug

        if not self.created_at:
            self.created_at = timezone.now()

        # Set published_at when transitioning from draft
        if not self.is_draft and not self.published_at:
            self.published_at = timezone.now()

        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse("blog_relations:post_detail", kwargs={"slug": self.slug})

    @property
    def is_published(self):
        """Check if post is live right now."""
        return (
            not self.is_draft
            and not self.is_deleted
            and self.published_at is not None
            and self.published_at <= timezone.now()
        )

    def as_content_item(self):
        """Snapshot this post for the ranking code."""
        return ContentItem(
            id=self.pk,
            published_at=self.published_at,
            tag_ids=[tag.pk for tag in self.tags.all()],
            category_ids=[category.pk for category in self.categories.all()],
        )

    def set_taxonomy(self, tags=None, categories=None):
        """
        Replace tags and/or categories and drop stale related-post caches.

        Neighbours are invalidated both before and after the change so posts
        that stop sharing taxonomy with this one are refreshed too.
        """
        from ..services import related_posts

        related_posts.invalidate_post(self)
        if tags is not None:
            self.tags.set(tags)
        if categories is not None:
            self.categories.set(categories)
        related_posts.invalidate_post(self)

    def publish(self):
        """Publish the post immediately."""
        from ..services import related_posts

        self.is_draft = False
        self.published_at = timezone.now()
        self.save(update_fields=["is_draft", "published_at", "updated_at"])
        related_posts.invalidate_post(self)

    def soft_delete(self):
        """Soft delete the post."""
        from ..services import related_posts

        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.save(update_fields=["is_deleted", "deleted_at", "updated_at"])
        related_posts.invalidate_post(self)
