from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from ..errors import ConflictError, NotFoundError
from ..models import Blog, as_utc, db, utcnow
from ..models import tags as tags_table


@dataclass
class SimpleBlog:
    """Listing projection: a blog without its content, plus its tag names."""
    id: int
    user_id: int
    url: str
    title: str
    preview: str
    create_time: datetime
    edit_time: datetime
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_blog(cls, blog, tags):
        return cls(
            id=blog.id,
            user_id=blog.user_id,
            url=blog.url,
            title=blog.title,
            preview=blog.preview,
            create_time=as_utc(blog.create_time),
            edit_time=as_utc(blog.edit_time),
            tags=list(tags),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'url': self.url,
            'title': self.title,
            'preview': self.preview,
            'create_time': self.create_time.isoformat(),
            'edit_time': self.edit_time.isoformat(),
            'tags': self.tags,
        }


@dataclass
class FullBlog:
    """Single-post projection: every blog column plus its tag names."""
    id: int
    user_id: int
    url: str
    title: str
    preview: str
    content: str
    create_time: datetime
    edit_time: datetime
    version: int
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_blog(cls, blog, tags):
        return cls(
            id=blog.id,
            user_id=blog.user_id,
            url=blog.url,
            title=blog.title,
            preview=blog.preview,
            content=blog.content,
            create_time=as_utc(blog.create_time),
            edit_time=as_utc(blog.edit_time),
            version=blog.version,
            tags=list(tags),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'url': self.url,
            'title': self.title,
            'preview': self.preview,
            'content': self.content,
            'create_time': self.create_time.isoformat(),
            'edit_time': self.edit_time.isoformat(),
            'version': self.version,
            'tags': self.tags,
        }


def create(session, user_id, url, title, preview, content):
    now = utcnow()
    return force_create(session, user_id, url, title, preview, content, now, now)


def force_create(session, user_id, url, title, preview, content, create_time, edit_time):
    blog = Blog(
        user_id=user_id,
        url=url,
        title=title,
        preview=preview,
        content=content,
        create_time=create_time,
        edit_time=edit_time,
        version=0,
    )
    session.add(blog)
    session.flush()
    return blog


def update(session, blog_id, version, url, title, preview, content):
    """Conditional update on (id, version); refreshes `edit_time` to now."""
    return _conditional_update(
        session, blog_id, version,
        url=url, title=title, preview=preview, content=content, edit_time=utcnow(),
    )


def force_update(session, blog_id, version, url, title, preview, content, create_time, edit_time):
    """Same contract as `update`, but both timestamps come from the caller."""
    return _conditional_update(
        session, blog_id, version,
        url=url, title=title, preview=preview, content=content,
        create_time=create_time, edit_time=edit_time,
    )


def _conditional_update(session, blog_id, version, **values):
    stmt = (
        db.update(Blog)
        .where(Blog.id == blog_id, Blog.version == version)
        .values(version=Blog.version + 1, **values)
        .execution_options(synchronize_session=False)
    )
    result = session.execute(stmt)

    if result.rowcount == 0:
        # Tell a missing row apart from a stale version.
        if session.get(Blog, blog_id, populate_existing=True) is None:
            raise NotFoundError()
        raise ConflictError()

    return session.get(Blog, blog_id, populate_existing=True)


def get(session, blog_id):
    blog = session.get(Blog, blog_id)
    if blog is None:
        raise NotFoundError()
    return blog


def _with_tags(session, stmt, projection):
    # Inner join: blogs without any tag row never show up here.
    grouped = {}
    for blog, name in session.execute(stmt):
        if blog.id not in grouped:
            grouped[blog.id] = (blog, [])
        grouped[blog.id][1].append(name)
    return [projection.from_blog(blog, names) for blog, names in grouped.values()]


def _joined_select():
    return db.select(Blog, tags_table.c.name).join(tags_table, tags_table.c.blog_id == Blog.id)


def _one(rows):
    if not rows:
        raise NotFoundError()
    return rows[0]


def get_full_by_id(session, blog_id):
    return _one(_with_tags(session, _joined_select().where(Blog.id == blog_id), FullBlog))


def get_full_by_url(session, url):
    # url is not unique; the lowest id wins
    stmt = _joined_select().where(Blog.url == url).order_by(Blog.id)
    return _one(_with_tags(session, stmt, FullBlog))


def get_simple(session, blog_id):
    return _one(_with_tags(session, _joined_select().where(Blog.id == blog_id), SimpleBlog))


def get_all_simple(session):
    stmt = _joined_select().order_by(Blog.create_time.desc(), Blog.id.desc())
    return _with_tags(session, stmt, SimpleBlog)


def delete(session, blog_id):
    result = session.execute(
        db.delete(Blog)
        .where(Blog.id == blog_id)
        .execution_options(synchronize_session='fetch')
    )
    return result.rowcount > 0


def get_owner_id(session, blog_id):
    user_id = session.scalar(db.select(Blog.user_id).where(Blog.id == blog_id))
    if user_id is None:
        raise NotFoundError()
    return user_id


def list_ids_for_owner(session, user_id):
    return list(session.scalars(db.select(Blog.id).where(Blog.user_id == user_id).order_by(Blog.id)))
