from ..models import Blog, db
from ..models import tags as tags_table
from . import blogs


def create_batch(session, names, blog_id):
    """Insert every `(name, blog_id)` pair in a single statement. Duplicates are kept."""
    if not names:
        return
    session.execute(
        db.insert(tags_table).values([{'name': name, 'blog_id': blog_id} for name in names])
    )


def delete_all_for_blog(session, blog_id):
    result = session.execute(db.delete(tags_table).where(tags_table.c.blog_id == blog_id))
    return result.rowcount > 0


def list_names_distinct(session):
    stmt = db.select(tags_table.c.name).distinct().order_by(tags_table.c.name.asc())
    return list(session.scalars(stmt))


def find_blog_ids_by_tag_name(session, name):
    # Highest id first, a cheap stand-in for "newest first".
    stmt = (
        db.select(Blog.id)
        .join(tags_table, tags_table.c.blog_id == Blog.id)
        .where(tags_table.c.name == name)
        .order_by(Blog.id.desc())
    )
    return list(session.scalars(stmt))


def find_simple_blogs_by_tag_name(session, name):
    return [blogs.get_simple(session, blog_id) for blog_id in find_blog_ids_by_tag_name(session, name)]
