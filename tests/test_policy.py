from __future__ import annotations

import pytest

from potluck.auth.policy import (
    CONTENT_WRITE,
    EVENT_MANAGE,
    PERSON_DELETE,
    PERSON_UPDATE,
    Admin,
    Anonymous,
    AuthorizationPolicy,
    Credentials,
    EventKeyHolder,
    EventOwner,
    EventScope,
    GuestIdentity,
    keys_match,
    permits,
)


class FakeDirectory:
    def __init__(self, tokens=None, users=None):
        self.tokens = tokens or {}
        self.users = users or {}
        self.calls = 0

    def person_for_token(self, event_id, token):
        self.calls += 1
        return self.tokens.get((event_id, token))

    def person_for_user(self, event_id, user_id):
        return self.users.get((event_id, user_id))


SCOPE = EventScope(event_id=1, admin_key="K1", owner_id=10)


def _policy(**kwargs):
    directory = FakeDirectory(tokens={(1, "tok-7"): 7}, users={(1, 30): 8})
    return AuthorizationPolicy(directory, **kwargs)


def test_admin_wins_over_everything():
    decision = _policy().authorize(SCOPE, Credentials(user_id=99, role="admin", key="wrong"))
    assert decision.allowed
    assert decision.context == Admin(user_id=99)


def test_owner_session():
    decision = _policy().authorize(SCOPE, Credentials(user_id=10, role="user"))
    assert decision.context == EventOwner(event_id=1, user_id=10)


def test_key_holder():
    decision = _policy().authorize(SCOPE, Credentials(key="K1"))
    assert decision.context == EventKeyHolder(event_id=1)


def test_guest_token():
    decision = _policy().authorize(SCOPE, Credentials(token="tok-7"))
    assert decision.context == GuestIdentity(event_id=1, person_id=7)


def test_linked_account_is_guest():
    decision = _policy().authorize(SCOPE, Credentials(user_id=30, role="user"))
    assert decision.context == GuestIdentity(event_id=1, person_id=8, user_id=30)


def test_token_of_other_event_is_denied():
    decision = _policy().authorize(EventScope(event_id=2, admin_key="K2", owner_id=None), Credentials(token="tok-7"))
    assert not decision.allowed
    assert decision.reason == "forbidden"


@pytest.mark.parametrize(
    "credentials, reason",
    [
        (Credentials(), "unauthenticated"),
        (Credentials(key="K2"), "forbidden"),
        (Credentials(token="unknown"), "forbidden"),
        (Credentials(user_id=55, role="user"), "forbidden"),
    ],
)
def test_denials(credentials, reason):
    decision = _policy().authorize(SCOPE, credentials)
    assert isinstance(decision.context, Anonymous)
    assert decision.reason == reason


def test_missing_keys_never_match():
    scope = EventScope(event_id=1, admin_key=None, owner_id=None)
    assert not _policy().authorize(scope, Credentials(key="")).allowed
    assert not _policy().authorize(scope, Credentials(key="anything")).allowed


def test_write_key_is_only_a_fallback():
    policy = _policy(write_key="LEGACY")
    legacy_scope = EventScope(event_id=1, admin_key=None, owner_id=None)
    assert policy.authorize(legacy_scope, Credentials(key="LEGACY")).allowed
    assert not policy.authorize(SCOPE, Credentials(key="LEGACY")).allowed


def test_decisions_are_recomputed():
    directory = FakeDirectory(tokens={(1, "tok-7"): 7})
    policy = AuthorizationPolicy(directory)
    first = policy.authorize(SCOPE, Credentials(token="tok-7"))
    second = policy.authorize(SCOPE, Credentials(token="tok-7"))
    assert first == second
    assert directory.calls == 2


def test_keys_match_is_exact():
    assert keys_match("abc", "abc")
    assert not keys_match("abc", "abcd")
    assert not keys_match(None, "abc")
    assert not keys_match("abc", None)


def test_permissions_matrix():
    guest = GuestIdentity(event_id=1, person_id=7)
    holder = EventKeyHolder(event_id=1)
    assert permits(guest, CONTENT_WRITE)
    assert not permits(guest, EVENT_MANAGE)
    assert not permits(guest, PERSON_DELETE)
    assert permits(guest, PERSON_UPDATE, person_id=7)
    assert not permits(guest, PERSON_UPDATE, person_id=8)
    assert permits(holder, EVENT_MANAGE)
    assert permits(holder, PERSON_UPDATE, person_id=8)
    assert not permits(Anonymous(), CONTENT_WRITE)


def test_logged_in_guest_owns_person_by_account():
    guest = GuestIdentity(event_id=1, person_id=7, user_id=30)
    assert permits(guest, PERSON_UPDATE, person_id=9, person_user_id=30)
    assert not permits(guest, PERSON_UPDATE, person_id=9, person_user_id=31)
