"""권한 규칙 테스트 — 수정/종료/삭제 가능 여부.

Permission rule tests. Actors: a@x (creator), b@x (admin), c@x (bystander).
"""

from observations.services.lifecycle_service import LifecyclePolicy
from observations.services.permission_service import (
    Actor,
    can_close,
    can_delete,
    can_edit,
    can_manage_users,
    permissions_for,
    same_identity,
)

CREATOR = Actor(id="1", email="a@x", display_name="Ana", role="user")
ADMIN = Actor(id="2", email="b@x", display_name="Beto", role="admin")
BYSTANDER = Actor(id="3", email="c@x", display_name="Caro", role="user")

PENDING = {"state": "pending", "created_by": " A@X "}
CLOSED = {"state": "closed", "created_by": "a@x"}

OPEN_POLICY = LifecyclePolicy()
OWNER_POLICY = LifecyclePolicy(close_requires_ownership=True)


class TestSameIdentity:

    def test_trim_and_case_insensitive(self):
        assert same_identity(" A@X ", "a@x")

    def test_empty_never_matches(self):
        assert not same_identity("", "")
        assert not same_identity(None, None)


class TestEdit:

    def test_creator_and_admin_can_edit_pending(self):
        assert can_edit(CREATOR, PENDING)
        assert can_edit(ADMIN, PENDING)

    def test_bystander_cannot_edit(self):
        assert not can_edit(BYSTANDER, PENDING)

    def test_nobody_edits_closed(self):
        assert not can_edit(CREATOR, CLOSED)
        assert not can_edit(ADMIN, CLOSED)


class TestDelete:

    def test_admin_deletes_closed_only(self):
        assert can_delete(ADMIN, CLOSED)
        assert not can_delete(ADMIN, PENDING)

    def test_creator_cannot_delete(self):
        assert not can_delete(CREATOR, CLOSED)


class TestClose:

    def test_anyone_closes_without_ownership_policy(self):
        assert can_close(BYSTANDER, PENDING, OPEN_POLICY)
        assert can_close(CREATOR, PENDING, OPEN_POLICY)

    def test_ownership_policy_restricts_to_creator_or_admin(self):
        assert not can_close(BYSTANDER, PENDING, OWNER_POLICY)
        assert can_close(CREATOR, PENDING, OWNER_POLICY)
        assert can_close(ADMIN, PENDING, OWNER_POLICY)

    def test_closed_cannot_be_closed(self):
        assert not can_close(ADMIN, CLOSED, OPEN_POLICY)


class TestFlags:

    def test_permissions_for(self):
        assert permissions_for(BYSTANDER, PENDING, OPEN_POLICY) == {
            "can_edit": False,
            "can_close": True,
            "can_delete": False,
        }
        assert permissions_for(ADMIN, CLOSED, OPEN_POLICY) == {
            "can_edit": False,
            "can_close": False,
            "can_delete": True,
        }

    def test_only_admin_manages_users(self):
        assert can_manage_users(ADMIN)
        assert not can_manage_users(CREATOR)
