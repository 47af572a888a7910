import re
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from shapeless_blog.data import tokens
from shapeless_blog.errors import NotFoundError
from shapeless_blog.models import Token, as_utc, utcnow
from shapeless_blog.services import cleanup


def test_issue_then_lookup_returns_live_token(session, make_user):
    alice = make_user("alice")

    issued = tokens.issue(session, alice.id, timedelta(hours=24))
    session.commit()

    assert re.fullmatch(r"[0-9a-f]{64}", issued.token)
    found = tokens.lookup(session, issued.token)
    assert found.user_id == alice.id
    assert tokens.is_expired(found) is False

    remaining = as_utc(found.expired_time) - utcnow()
    assert timedelta(hours=23, minutes=59) < remaining <= timedelta(hours=24)


def test_tokens_are_unique_and_several_per_user_allowed(session, make_user):
    alice = make_user("alice")

    first = tokens.issue(session, alice.id)
    second = tokens.issue(session, alice.id)
    session.commit()

    assert first.token != second.token
    assert session.query(Token).filter_by(user_id=alice.id).count() == 2


def test_lookup_unknown_token(session):
    with pytest.raises(NotFoundError):
        tokens.lookup(session, "0" * 64)


def test_issue_for_missing_user(session):
    with pytest.raises(NotFoundError):
        tokens.issue(session, 4242)


def test_expired_token_is_expired_until_swept(session, make_user):
    alice = make_user("alice")
    old = tokens.issue(session, alice.id, timedelta(seconds=-5))
    live = tokens.issue(session, alice.id)
    session.commit()
    old_value, live_value = old.token, live.token

    assert tokens.is_expired(tokens.lookup(session, old_value))

    assert tokens.sweep_expired(session) is True
    session.commit()

    with pytest.raises(NotFoundError):
        tokens.lookup(session, old_value)
    assert tokens.lookup(session, live_value).user_id == alice.id
    assert tokens.sweep_expired(session) is False


def test_cleanup_swallows_database_errors(session, monkeypatch):
    def broken_sweep(session):
        raise OperationalError("DELETE FROM tokens", {}, Exception("database is locked"))

    monkeypatch.setattr(tokens, "sweep_expired", broken_sweep)

    assert cleanup.cleanup_expired_tokens(session) is False


def test_delete_all_for_user(session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    tokens.issue(session, alice.id)
    kept = tokens.issue(session, bob.id)
    session.commit()

    assert tokens.delete_all_for_user(session, alice.id) is True
    session.commit()

    assert session.query(Token).count() == 1
    assert tokens.lookup(session, kept.token).user_id == bob.id
