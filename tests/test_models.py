"""
Tests for django-blog-relations models.
"""
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone

from blog_relations.models import Category, Tag, Post, Redirect

User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
    )


@pytest.fixture
def category(db):
    """Create a test category."""
    return Category.objects.create(
        name="Test Category",
        slug="test-category",
    )


@pytest.fixture
def tag(db):
    """Create a test tag."""
    return Tag.objects.create(
        name="test-tag",
        slug="test-tag",
    )


@pytest.fixture
def post(db, user):
    """Create a test post."""
    return Post.objects.create(
        title="Test Post",
        body="This is a test post body.",
        author=user,
    )


class TestCategory:
    """Tests for Category model."""

    def test_create_category(self, db):
        """Test creating a category."""
        cat = Category.objects.create(name="My Category")
        assert cat.name == "My Category"
        assert cat.slug == "my-category"

    def test_category_hierarchy(self, db, category):
        """Test nested categories."""
        child = Category.objects.create(
            name="Child Category",
            parent=category,
        )
        assert child.parent == category
        assert str(child) == "Test Category > Child Category"

    def test_get_ancestors(self, db, category):
        """Test getting category ancestors."""
        child = Category.objects.create(name="Child", parent=category)
        grandchild = Category.objects.create(name="Grandchild", parent=child)

        ancestors = grandchild.get_ancestors()
        assert ancestors == [category, child]

    def test_post_count_ignores_drafts(self, db, category, user):
        live = Post.objects.create(title="Live", body="x", author=user)
        draft = Post.objects.create(title="Draft", body="x", author=user, is_draft=True)
        live.categories.add(category)
        draft.categories.add(category)

        assert category.post_count == 1


class TestTag:
    """Tests for Tag model."""

    def test_create_tag(self, db):
        """Test creating a tag."""
        tag = Tag.objects.create(name="Django")
        assert tag.name == "Django"
        assert tag.slug == "django"

    def test_tag_post_count(self, db, tag, post):
        """Test tag post count property."""
        post.tags.add(tag)
        assert tag.post_count == 1


class TestPost:
    """Tests for Post model."""

    def test_create_post(self, db, user):
        """Test creating a post."""
        post = Post.objects.create(
            title="Hello World",
            body="My first post!",
            author=user,
        )
        assert post.slug == "hello-world"
        assert post.published_at is not None
        assert post.is_published

    def test_unique_slugs(self, db, user):
        first = Post.objects.create(title="Same", body="a", author=user)
        second = Post.objects.create(title="Same", body="b", author=user)

        assert first.slug == "same"
        assert second.slug == "same-1"

    def test_draft_is_not_published(self, db, user):
        post = Post.objects.create(title="Draft", body="WIP", author=user, is_draft=True)

        assert post.published_at is None
        assert not post.is_published
        assert post not in Post.objects.published()

    def test_future_post_is_not_published(self, db, user):
        post = Post.objects.create(
            title="Later",
            body="Soon",
            author=user,
            published_at=timezone.now() + timedelta(days=2),
        )

        assert not post.is_published
        assert post not in Post.objects.published()

    def test_publish_post(self, db, user):
        """Test publishing a draft post."""
        post = Post.objects.create(
            title="Draft",
            body="Content",
            author=user,
            is_draft=True,
        )
        post.publish()
        post.refresh_from_db()

        assert post.is_published
        assert post in Post.objects.published()

    def test_soft_delete(self, db, post):
        post.soft_delete()
        post.refresh_from_db()

        assert post.deleted_at is not None
        assert post not in Post.objects.published()

    def test_as_content_item(self, db, post, tag, category):
        post.tags.add(tag)
        post.categories.add(category)

        item = post.as_content_item()

        assert item.id == post.pk
        assert item.published_at == post.published_at
        assert item.tag_ids == {tag.pk}
        assert item.category_ids == {category.pk}

    def test_sharing_taxonomy_with(self, db, user, post, tag, category):
        post.tags.add(tag)
        post.categories.add(category)
        by_tag = Post.objects.create(title="By tag", body="x", author=user)
        by_tag.tags.add(tag)
        by_both = Post.objects.create(title="By both", body="x", author=user)
        by_both.tags.add(tag)
        by_both.categories.add(category)
        Post.objects.create(title="Unrelated", body="x", author=user)

        neighbours = set(Post.objects.sharing_taxonomy_with(post))

        assert neighbours == {by_tag, by_both}

    def test_set_taxonomy_clears_related_cache(self, db, user, post, tag):
        neighbour = Post.objects.create(title="Neighbour", body="x", author=user)
        neighbour.tags.add(tag)
        cache.set(f"related:{post.pk}:4", [neighbour.pk], 3600)
        cache.set(f"related:{neighbour.pk}:4", [], 3600)

        post.set_taxonomy(tags=[tag])

        assert list(post.tags.all()) == [tag]
        assert cache.get(f"related:{post.pk}:4") is None
        assert cache.get(f"related:{neighbour.pk}:4") is None

    def test_set_taxonomy_clears_former_neighbours(self, db, user, post, tag):
        post.tags.add(tag)
        former = Post.objects.create(title="Former", body="x", author=user)
        former.tags.add(tag)
        cache.set(f"related:{former.pk}:4", [post.pk], 3600)

        post.set_taxonomy(tags=[])

        assert cache.get(f"related:{former.pk}:4") is None


class TestRedirect:
    """Tests for Redirect model."""

    def test_create_redirect(self, db):
        redirect = Redirect.objects.create(source_url="/old-page", target_url="/new-page")

        assert redirect.status_code == Redirect.STATUS_PERMANENT
        assert redirect.is_permanent
        assert redirect.is_active
        assert str(redirect) == "/old-page -> /new-page (301)"

    def test_source_url_is_cleaned(self, db):
        redirect = Redirect.objects.create(source_url="old-page/", target_url="/new")

        assert redirect.source_url == "/old-page"

    def test_relative_target_is_cleaned(self, db):
        redirect = Redirect.objects.create(source_url="/old", target_url="landing/")

        assert redirect.target_url == "/landing"

    def test_absolute_target_is_kept(self, db):
        redirect = Redirect.objects.create(
            source_url="/old", target_url="https://example.com/New/"
        )

        assert redirect.target_url == "https://example.com/New/"

    def test_scopes(self, db):
        for i in range(3):
            Redirect.objects.create(source_url=f"/a{i}", target_url="/x")
        Redirect.objects.create(source_url="/b", target_url="/x", is_active=False)
        Redirect.objects.create(source_url="/c", target_url="/x", is_automatic=True)

        assert Redirect.objects.active().count() == 4
        assert Redirect.objects.automatic().count() == 1
        assert Redirect.objects.manual().count() == 4

    def test_record_hit(self, db):
        redirect = Redirect.objects.create(source_url="/tracked", target_url="/x")

        redirect.record_hit()
        redirect.record_hit()
        redirect.refresh_from_db()

        assert redirect.hits == 2
        assert redirect.last_hit_at is not None

    def test_find_by_source_url(self, db):
        redirect = Redirect.objects.create(source_url="/find-me", target_url="/found")
        Redirect.objects.create(source_url="/inactive", target_url="/x", is_active=False)

        assert Redirect.find_by_source_url("find-me/") == redirect
        assert Redirect.find_by_source_url("/does-not-exist") is None
        assert Redirect.find_by_source_url("/inactive") is None

    def test_find_by_source_url_ignores_case(self, db):
        redirect = Redirect.objects.create(source_url="/Find-Me", target_url="/found")

        assert Redirect.find_by_source_url("/find-me") == redirect

    def test_cached_redirects_keyed_by_lowercase_source(self, db):
        first = Redirect.objects.create(source_url="/Foo", target_url="/x")
        Redirect.objects.create(source_url="/foo", target_url="/y")

        cached = Redirect.get_cached_redirects()

        assert list(cached) == ["/foo"]
        assert cached["/foo"]["id"] == first.pk
        assert Redirect(source_url="/y", target_url="/FOO").would_create_loop() is False

    def test_case_colliding_source_detected_as_loop(self, db):
        Redirect.objects.create(source_url="/Foo", target_url="/y")

        assert Redirect(source_url="/y", target_url="/foo").would_create_loop()

    def test_cached_redirects_only_include_active(self, db):
        active = Redirect.objects.create(
            source_url="/cached-source",
            target_url="/cached-target",
            status_code=Redirect.STATUS_TEMPORARY,
        )
        Redirect.objects.create(source_url="/inactive-source", target_url="/x", is_active=False)

        cached = Redirect.get_cached_redirects()

        assert cached == {
            "/cached-source": {
                "target_url": "/cached-target",
                "status_code": 302,
                "id": active.pk,
            }
        }
        assert cache.get("redirects:all_active") == cached

    def test_save_clears_cache(self, db):
        redirect = Redirect.objects.create(source_url="/a", target_url="/b")
        cache.set("redirects:all_active", {"test": "value"}, 3600)

        redirect.target_url = "/updated"
        redirect.save()

        assert cache.get("redirects:all_active") is None

    def test_delete_clears_cache(self, db):
        redirect = Redirect.objects.create(source_url="/a", target_url="/b")
        cache.set("redirects:all_active", {"test": "value"}, 3600)

        redirect.delete()

        assert cache.get("redirects:all_active") is None

    def test_would_create_loop(self, db):
        Redirect.objects.create(source_url="/page-b", target_url="/page-c")
        Redirect.objects.create(source_url="/page-c", target_url="/page-a")

        assert Redirect(source_url="/page-a", target_url="/page-b").would_create_loop()
        assert not Redirect(source_url="/page-a", target_url="/page-z").would_create_loop()

    def test_would_create_loop_ignores_inactive(self, db):
        Redirect.objects.create(source_url="/page-b", target_url="/page-a", is_active=False)

        assert not Redirect(source_url="/page-a", target_url="/page-b").would_create_loop()

    def test_would_create_loop_excludes_self(self, db):
        existing = Redirect.objects.create(source_url="/page-a", target_url="/page-b")
        Redirect.objects.create(source_url="/page-c", target_url="/page-d")

        existing.target_url = "/page-c"
        assert not existing.would_create_loop()
