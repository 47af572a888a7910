"""Multi-table writes (blog row plus its tag set) run as one transaction.

Every public function here either commits all of its changes or none of them:
`transaction` rolls the session back on any exception and re-raises it.
"""
from contextlib import contextmanager

from ..data import blogs, tokens, users
from ..data import tags as tag_repo
from ..errors import NotFoundError, UnauthorizedError

EDITABLE_FIELDS = ('url', 'title', 'preview', 'content')


@contextmanager
def transaction(session):
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def create_blog_with_tags(session, user_id, url, title, preview, content, tags):
    with transaction(session):
        blog = blogs.create(session, user_id, url, title, preview, content)
        tag_repo.create_batch(session, tags, blog.id)
        full_blog = blogs.FullBlog.from_blog(blog, tags)
    return full_blog


def force_create_blog_with_tags(session, user_id, url, title, preview, content,
                                create_time, edit_time, tags):
    with transaction(session):
        blog = blogs.force_create(session, user_id, url, title, preview, content, create_time, edit_time)
        tag_repo.create_batch(session, tags, blog.id)
        full_blog = blogs.FullBlog.from_blog(blog, tags)
    return full_blog


def _owned_blog(session, current_user_id, blog_id):
    blog = blogs.get(session, blog_id)
    if blog.user_id != current_user_id:
        raise UnauthorizedError()
    return blog


def update_blog_with_tags(session, current_user_id, blog_id, changes, tags=None, version=None):
    """Patch a blog. Fields missing from `changes` (or None) keep their value.

    The tag set is replaced only when `tags` is given. `version` is the version
    the client last read; without it the version read here is used.
    """
    with transaction(session):
        blog = _owned_blog(session, current_user_id, blog_id)
        merged = {}
        for name in EDITABLE_FIELDS:
            value = changes.get(name)
            merged[name] = getattr(blog, name) if value is None else value

        expected = blog.version if version is None else version
        updated = blogs.update(session, blog_id, expected, **merged)

        if tags is not None:
            tag_repo.delete_all_for_blog(session, blog_id)
            tag_repo.create_batch(session, tags, blog_id)
    return updated


def force_update_blog_with_tags(session, current_user_id, blog_id, fields, tags, version=None):
    """Overwrite every field, both timestamps included, and replace the tag set."""
    with transaction(session):
        blog = _owned_blog(session, current_user_id, blog_id)
        expected = blog.version if version is None else version
        updated = blogs.force_update(
            session, blog_id, expected,
            url=fields['url'],
            title=fields['title'],
            preview=fields['preview'],
            content=fields['content'],
            create_time=fields['create_time'],
            edit_time=fields['edit_time'],
        )
        tag_repo.delete_all_for_blog(session, blog_id)
        tag_repo.create_batch(session, tags, blog_id)
    return updated


def delete_blog(session, current_user_id, blog_id):
    with transaction(session):
        if blogs.get_owner_id(session, blog_id) != current_user_id:
            raise UnauthorizedError()
        tag_repo.delete_all_for_blog(session, blog_id)
        if not blogs.delete(session, blog_id):
            raise NotFoundError()


def delete_user_with_content(session, current_user_id, user_id):
    """Delete a user together with their tokens, blogs and the blogs' tags."""
    if user_id != current_user_id:
        raise UnauthorizedError()

    with transaction(session):
        tokens.delete_all_for_user(session, user_id)
        for blog_id in blogs.list_ids_for_owner(session, user_id):
            tag_repo.delete_all_for_blog(session, blog_id)
            blogs.delete(session, blog_id)
        if not users.delete(session, user_id):
            raise NotFoundError()
