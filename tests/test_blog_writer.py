from datetime import datetime, timezone

import pytest

from shapeless_blog.data import blogs, tags, tokens, users
from shapeless_blog.errors import ConflictError, NotFoundError, UnauthorizedError
from shapeless_blog.models import Blog, Token
from shapeless_blog.services import blog_writer


def _create(session, owner, url="hello", tag_names=("intro",)):
    return blog_writer.create_blog_with_tags(
        session, owner.id, url, "Hi", "p", "c", list(tag_names)
    )


def test_create_with_tags(session, make_user):
    alice = make_user("alice")

    created = _create(session, alice)

    assert created.tags == ["intro"]
    assert created.version == 0
    assert blogs.get_full_by_url(session, "hello").tags == ["intro"]


def test_failed_tag_insert_leaves_no_blog(session, make_user, monkeypatch):
    alice = make_user("alice")
    seen = {}

    def failing_batch(session, names, blog_id):
        seen["blog_id"] = blog_id
        raise RuntimeError("tag insert failed")

    monkeypatch.setattr(tags, "create_batch", failing_batch)

    with pytest.raises(RuntimeError):
        _create(session, alice)

    with pytest.raises(NotFoundError):
        blogs.get(session, seen["blog_id"])
    assert session.query(Blog).count() == 0


def test_partial_update_keeps_tags(session, make_user):
    alice = make_user("alice")
    created = _create(session, alice)

    updated = blog_writer.update_blog_with_tags(session, alice.id, created.id, {"title": "Hi2"})

    assert updated.version == 1
    full = blogs.get_full_by_id(session, created.id)
    assert full.title == "Hi2"
    assert full.preview == "p"
    assert full.tags == ["intro"]


def test_update_replaces_tag_set(session, make_user):
    alice = make_user("alice")
    created = _create(session, alice, tag_names=["a", "b"])

    blog_writer.update_blog_with_tags(session, alice.id, created.id, {}, tags=["c"])

    assert blogs.get_full_by_id(session, created.id).tags == ["c"]
    assert tags.list_names_distinct(session) == ["c"]


def test_stale_version_rolls_back_tag_change(session, make_user):
    alice = make_user("alice")
    created = _create(session, alice)
    blog_writer.update_blog_with_tags(session, alice.id, created.id, {"title": "Hi2"}, version=0)

    with pytest.raises(ConflictError):
        blog_writer.update_blog_with_tags(
            session, alice.id, created.id, {"title": "Hi3"}, tags=["other"], version=0
        )

    full = blogs.get_full_by_id(session, created.id)
    assert full.title == "Hi2"
    assert full.version == 1
    assert full.tags == ["intro"]


def test_other_user_cannot_touch_blog(session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    created = _create(session, alice)

    with pytest.raises(UnauthorizedError):
        blog_writer.update_blog_with_tags(session, bob.id, created.id, {"title": "pwned"}, tags=[])
    with pytest.raises(UnauthorizedError):
        blog_writer.delete_blog(session, bob.id, created.id)

    full = blogs.get_full_by_id(session, created.id)
    assert full.title == "Hi"
    assert full.version == 0
    assert full.tags == ["intro"]


def test_force_update_overwrites_everything(session, make_user):
    alice = make_user("alice")
    created = _create(session, alice)
    stamp = datetime(2018, 7, 1, tzinfo=timezone.utc)
    fields = dict(url="moved", title="T", preview="P", content="C", create_time=stamp, edit_time=stamp)

    blog_writer.force_update_blog_with_tags(session, alice.id, created.id, fields, tags=["x", "y"])

    full = blogs.get_full_by_url(session, "moved")
    assert (full.title, full.preview, full.content) == ("T", "P", "C")
    assert full.create_time == stamp
    assert full.edit_time == stamp
    assert sorted(full.tags) == ["x", "y"]
    assert full.version == 1


def test_force_create(session, make_user):
    alice = make_user("alice")
    stamp = datetime(2017, 1, 1, tzinfo=timezone.utc)

    created = blog_writer.force_create_blog_with_tags(
        session, alice.id, "imported", "I", "p", "c", stamp, stamp, ["old"]
    )

    full = blogs.get_full_by_id(session, created.id)
    assert full.create_time == stamp
    assert full.tags == ["old"]


def test_delete_blog_removes_tags(session, make_user):
    alice = make_user("alice")
    created = _create(session, alice)

    blog_writer.delete_blog(session, alice.id, created.id)

    with pytest.raises(NotFoundError):
        blogs.get(session, created.id)
    assert tags.list_names_distinct(session) == []
    with pytest.raises(NotFoundError):
        blog_writer.delete_blog(session, alice.id, created.id)


def test_delete_user_with_content(session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    _create(session, alice)
    kept = _create(session, bob, url="bobs")
    tokens.issue(session, alice.id)
    session.commit()

    with pytest.raises(UnauthorizedError):
        blog_writer.delete_user_with_content(session, bob.id, alice.id)

    blog_writer.delete_user_with_content(session, alice.id, alice.id)

    with pytest.raises(NotFoundError):
        users.get(session, alice.id)
    assert session.query(Token).count() == 0
    assert [b.id for b in blogs.get_all_simple(session)] == [kept.id]
