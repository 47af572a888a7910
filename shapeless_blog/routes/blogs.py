# shapeless_blog/routes/blogs.py
from flask import jsonify

from ..data import blogs
from ..middleware.auth import auth_required
from ..models import db
from ..services import blog_writer
from . import api_bp
from .helpers import (
    json_body,
    optional_str,
    optional_version,
    parse_date,
    required_str,
    tag_list,
)


# ------------------------------------------------------------------- #
#                       CREATE BLOG ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/blog/', methods=['POST'])
@auth_required
def create_blog(current_user_id):
    """
    Create a blog post and its tags in one transaction.

    Request Body (JSON):
        {
            "url": "hello",
            "title": "Hi",
            "preview": "p",
            "content": "c",
            "tags": ["intro"]
        }

    Returns:
        - 201: The full blog, tags included
        - 400: Missing or malformed fields
    """
    data = json_body()
    full_blog = blog_writer.create_blog_with_tags(
        db.session,
        current_user_id,
        url=required_str(data, 'url'),
        title=required_str(data, 'title'),
        preview=required_str(data, 'preview'),
        content=required_str(data, 'content'),
        tags=tag_list(data),
    )
    return jsonify(full_blog.to_dict()), 201


# ------------------------------------------------------------------- #
#                       SHOW BLOG ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/blog/<int:blog_id>', methods=['GET'])
@auth_required
def show_blog(blog_id, current_user_id):
    full_blog = blogs.get_full_by_id(db.session, blog_id)
    return jsonify(full_blog.to_dict()), 200


# ------------------------------------------------------------------- #
#                       UPDATE BLOG ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/blog/<int:blog_id>', methods=['PATCH'])
@auth_required
def update_blog(blog_id, current_user_id):
    """
    Partially update a blog you own.

    Every field is optional; missing ones keep their value. The tag set is
    replaced only when "tags" is present. Send the "version" you read to
    detect concurrent edits (409 on mismatch).
    """
    data = json_body()
    changes = {name: optional_str(data, name) for name in blog_writer.EDITABLE_FIELDS}
    blog_writer.update_blog_with_tags(
        db.session,
        current_user_id,
        blog_id,
        changes,
        tags=tag_list(data, required=False),
        version=optional_version(data),
    )
    return '', 204


# ------------------------------------------------------------------- #
#                       DELETE BLOG ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/blog/<int:blog_id>', methods=['DELETE'])
@auth_required
def delete_blog(blog_id, current_user_id):
    blog_writer.delete_blog(db.session, current_user_id, blog_id)
    return '', 204


# ------------------------------------------------------------------- #
#                       LIST BLOGS ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/blogs/', methods=['GET'])
@auth_required
def list_blogs(current_user_id):
    return jsonify([blog.to_dict() for blog in blogs.get_all_simple(db.session)]), 200


# ------------------------------------------------------------------- #
#                       FORCE CREATE / UPDATE ENDPOINTS
# ------------------------------------------------------------------- #
def _force_fields(data):
    return {
        'url': required_str(data, 'url'),
        'title': required_str(data, 'title'),
        'preview': required_str(data, 'preview'),
        'content': required_str(data, 'content'),
        'create_time': parse_date(required_str(data, 'create_time')),
        'edit_time': parse_date(required_str(data, 'edit_time')),
    }


@api_bp.route('/force-blog/', methods=['POST'])
@auth_required
def force_create_blog(current_user_id):
    """
    Import a blog with explicit timestamps.

    "create_time" and "edit_time" use YYYY-MM-DD and are stored as midnight UTC.
    """
    data = json_body()
    fields = _force_fields(data)
    full_blog = blog_writer.force_create_blog_with_tags(
        db.session, current_user_id, tags=tag_list(data), **fields
    )
    return jsonify(full_blog.to_dict()), 201


@api_bp.route('/force-blog/<int:blog_id>', methods=['PUT'])
@auth_required
def force_update_blog(blog_id, current_user_id):
    data = json_body()
    fields = _force_fields(data)
    blog_writer.force_update_blog_with_tags(
        db.session,
        current_user_id,
        blog_id,
        fields,
        tags=tag_list(data),
        version=optional_version(data),
    )
    return '', 204
