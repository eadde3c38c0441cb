from __future__ import annotations

import pytest

from common.models.user import SessionInput, UserRole
from booking_service.app.exceptions import Forbidden, UserNotFound
from booking_service.app.services.users_service import UsersService

from booking_service.tests.fakes import (
    FakeStore,
    FakeUserRepository,
    build_user,
)


def _build_service() -> tuple[UsersService, FakeStore]:
    store = FakeStore()
    return UsersService(user_repo=FakeUserRepository(store)), store


def test_resolve_session_creates_plain_user_profile() -> None:
    service, store = _build_service()

    user = service.resolve_session(
        SessionInput(user_id="idp|123", email="a@example.com", name="Alice")
    )

    assert user.role == UserRole.USER
    assert (user.cylinders_allocated, user.cylinders_remaining) == (0, 0)
    assert store.users["idp|123"].email == "a@example.com"


def test_resolve_session_returns_existing_profile_unchanged() -> None:
    service, store = _build_service()
    store.users["admin-1"] = build_user("admin-1", allocated=4, role=UserRole.ADMIN)

    user = service.resolve_session(
        SessionInput(user_id="admin-1", email="other@example.com", name="Other")
    )

    assert user.role == UserRole.ADMIN
    assert user.email == "admin-1@example.com"
    assert user.cylinders_allocated == 4


def test_update_profile_changes_contact_details_only() -> None:
    service, store = _build_service()
    store.users["user-1"] = build_user("user-1", allocated=3, remaining=2)

    user = service.update_profile("user-1", "Bob Kim", "01055556666", "7 River Road")

    assert (user.name, user.phone, user.address) == (
        "Bob Kim",
        "01055556666",
        "7 River Road",
    )
    assert (user.cylinders_allocated, user.cylinders_remaining) == (3, 2)
    assert user.role == UserRole.USER


def test_profile_of_unknown_user() -> None:
    service, _ = _build_service()

    with pytest.raises(UserNotFound):
        service.get_profile("ghost")
    with pytest.raises(UserNotFound):
        service.update_profile("ghost", "Name", "0101234567", "Somewhere")


def test_list_users_is_admin_only() -> None:
    service, store = _build_service()
    store.users["user-1"] = build_user("user-1")
    store.users["admin-1"] = build_user("admin-1", role=UserRole.ADMIN)

    users, total = service.list_users("admin-1")

    assert total == 2
    assert {u.user_id for u in users} == {"user-1", "admin-1"}
    with pytest.raises(Forbidden):
        service.list_users("user-1")
