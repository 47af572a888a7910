# shapeless_blog/models.py
from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, timezone

# db instance to be imported
db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc)


def as_utc(value):
    """Attach UTC to naive datetimes read back from backends without time zones (sqlite)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class User(db.Model):
    """User model for authentication; `version` is the optimistic-lock token."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(120), unique=True, nullable=False)
    hashed_password = db.Column(db.String(256), nullable=False)
    version = db.Column(db.Integer, nullable=False, default=0, server_default='0')

    def to_dict(self):
        return {'id': self.id, 'username': self.username}


class Token(db.Model):
    """Opaque bearer tokens handed out at login."""
    __tablename__ = 'tokens'

    token = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    expired_time = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'token': self.token,
            'expired_time': as_utc(self.expired_time).isoformat(),
        }


class Blog(db.Model):
    """Blog post owned by a single user."""
    __tablename__ = 'blogs'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    url = db.Column(db.String(255), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    preview = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)
    create_time = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    edit_time = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    version = db.Column(db.Integer, nullable=False, default=0, server_default='0')


# No primary key: a blog may carry the same tag twice.
tags = db.Table(
    'tags',
    db.Column('name', db.String(120), nullable=False, index=True),
    db.Column('blog_id', db.Integer, db.ForeignKey('blogs.id'), nullable=False, index=True),
)
