# shapeless_blog/web.py
import os

from flask import Blueprint, abort, current_app, render_template
from jinja2 import TemplateError
from sqlalchemy.exc import SQLAlchemyError

from .data import blogs, tags
from .errors import BlogError, NotFoundError
from .models import db

web_bp = Blueprint('web', __name__)

DATE_FORMAT = '%Y-%m-%d'


@web_bp.app_template_filter('blogdate')
def format_datetime(value):
    return value.strftime(DATE_FORMAT)


def strip_html_extension(name):
    """`post.html` -> `post`; names without an extension pass through.

    Any other extension yields an empty name, which never matches.
    """
    stem, extension = os.path.splitext(name)
    if not extension:
        return name
    if extension == '.html':
        return stem
    return ''


# ------------------------------------------------------------------- #
#                       PAGES
# ------------------------------------------------------------------- #
@web_bp.route('/')
def home():
    return render_template('home.html', blogs=blogs.get_all_simple(db.session))


@web_bp.route('/posts/<url>')
def show_post(url):
    url = strip_html_extension(url)
    if not url:
        abort(404)
    blog = blogs.get_full_by_url(db.session, url)
    return render_template('post.html', blog=blog)


@web_bp.route('/tags/')
def list_tags():
    return render_template('list_tags.html', tags=tags.list_names_distinct(db.session))


@web_bp.route('/tags/<name>')
def show_tag(name):
    name = strip_html_extension(name)
    if not name:
        abort(404)
    return render_template(
        'tag.html',
        tag=name,
        blogs=tags.find_simple_blogs_by_tag_name(db.session, name),
    )


# ------------------------------------------------------------------- #
#                       ERROR PAGES
# ------------------------------------------------------------------- #
def not_found_page():
    return render_template('not_found.html'), 404


def server_error_page():
    return render_template('server_error.html'), 500


@web_bp.errorhandler(NotFoundError)
def handle_not_found(e):
    return not_found_page()


@web_bp.errorhandler(BlogError)
@web_bp.errorhandler(SQLAlchemyError)
@web_bp.errorhandler(TemplateError)
def handle_server_error(e):
    db.session.rollback()
    current_app.logger.error(f"Web page error: {str(e)}")
    return server_error_page()
