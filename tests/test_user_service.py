import pytest
from pydantic import ValidationError

from user_directory_api.app.core.exceptions import DuplicateResourceError, ResourceNotFoundError
from user_directory_api.app.core.security import PasswordHasher
from user_directory_api.app.models import UserRole
from user_directory_api.app.repositories import SQLiteUserRepository
from user_directory_api.app.services.user_service import UserService


class StaleExistsUserRepository(SQLiteUserRepository):
    """Reports every username as free, as if another writer raced the check."""

    def exists_by_username(self, username):
        return False


def test_create_user_returns_response_without_password(user_service, user_repository, user_data):
    created = user_service.create_user(user_data())

    assert created.id is not None
    assert created.username == "testuser"
    assert created.role is UserRole.USER
    assert created.is_active is True
    assert created.created_at == created.updated_at
    assert "password" not in created.model_dump()

    stored = user_repository.find_by_username("testuser")
    assert stored.password != "password123"
    assert stored.password.startswith("$2b$")


def test_create_user_hashes_with_fresh_salt(user_service, user_repository, user_data):
    user_service.create_user(user_data(username="one", email="one@x.com"))
    user_service.create_user(user_data(username="two", email="two@x.com"))

    first = user_repository.find_by_username("one").password
    second = user_repository.find_by_username("two").password
    assert first != second
    assert user_service.password_hasher.verify("password123", first)


def test_create_user_duplicate_username_conflicts(user_service, user_data):
    user_service.create_user(user_data())

    with pytest.raises(DuplicateResourceError, match="Username already exists: testuser"):
        user_service.create_user(user_data(email="fresh@example.com"))


def test_create_user_duplicate_email_conflicts(user_service, user_data):
    user_service.create_user(user_data())

    with pytest.raises(DuplicateResourceError, match="Email already exists"):
        user_service.create_user(user_data(username="someoneelse"))


def test_create_user_does_not_touch_cache(user_service, users_cache, user_data):
    user_service.create_user(user_data())
    assert len(users_cache) == 0


def test_get_user_by_id_missing_raises_not_found(user_service):
    with pytest.raises(ResourceNotFoundError):
        user_service.get_user_by_id(12345)


def test_get_user_by_id_is_served_from_cache(user_service, user_repository, users_cache, user_data):
    created = user_service.create_user(user_data())

    first = user_service.get_user_by_id(created.id)
    second = user_service.get_user_by_id(created.id)

    assert first == second
    assert user_repository.find_by_id_calls == 1
    assert created.id in users_cache


def test_update_is_visible_after_cached_read(user_service, user_data):
    created = user_service.create_user(user_data())
    user_service.get_user_by_id(created.id)

    user_service.update_user(
        created.id,
        user_data(first_name="Jane", last_name="Roe", age=31, email="jane@example.com"),
    )
    fetched = user_service.get_user_by_id(created.id)

    assert fetched.first_name == "Jane"
    assert fetched.last_name == "Roe"
    assert fetched.age == 31
    assert fetched.email == "jane@example.com"
    assert fetched.updated_at > created.updated_at
    assert fetched.created_at == created.created_at


def test_update_missing_user_raises_not_found(user_service, user_data):
    with pytest.raises(ResourceNotFoundError):
        user_service.update_user(99, user_data())


def test_update_to_other_users_username_conflicts(user_service, user_data):
    user_service.create_user(user_data(username="alice", email="a@x.com"))
    bob = user_service.create_user(user_data(username="bob", email="b@x.com"))

    with pytest.raises(DuplicateResourceError, match="Username already exists: alice"):
        user_service.update_user(bob.id, user_data(username="alice", email="b@x.com"))


def test_update_to_other_users_email_conflicts(user_service, user_data):
    user_service.create_user(user_data(username="alice", email="a@x.com"))
    bob = user_service.create_user(user_data(username="bob", email="b@x.com"))

    with pytest.raises(DuplicateResourceError, match="Email already exists: a@x.com"):
        user_service.update_user(bob.id, user_data(username="bob", email="a@x.com"))


def test_update_keeping_own_username_and_email_succeeds(user_service, user_data):
    alice = user_service.create_user(user_data(username="alice", email="a@x.com"))

    updated = user_service.update_user(alice.id, user_data(username="alice", email="a@x.com", age=44))

    assert updated.username == "alice"
    assert updated.age == 44


def test_failed_update_keeps_cached_entry_and_row(user_service, user_repository, users_cache, user_data):
    user_service.create_user(user_data(username="alice", email="a@x.com"))
    bob = user_service.create_user(user_data(username="bob", email="b@x.com", first_name="Bob"))
    user_service.get_user_by_id(bob.id)

    with pytest.raises(DuplicateResourceError):
        user_service.update_user(bob.id, user_data(username="alice", email="b@x.com", first_name="Changed"))

    assert bob.id in users_cache
    assert user_repository.find_by_id(bob.id).first_name == "Bob"


def test_constraint_violation_on_save_keeps_cached_entry(db_path, clock, users_cache, user_data):
    service = UserService(
        repository=StaleExistsUserRepository(db_path, clock=clock),
        password_hasher=PasswordHasher(rounds=4),
        cache=users_cache,
        clock=clock,
    )
    service.create_user(user_data(username="alice", email="a@x.com"))
    bob = service.create_user(user_data(username="bob", email="b@x.com", first_name="Bob"))
    cached = service.get_user_by_id(bob.id)

    with pytest.raises(DuplicateResourceError):
        service.update_user(bob.id, user_data(username="alice", email="b@x.com", first_name="Changed"))

    assert users_cache.get(bob.id) == cached
    assert service.get_user_by_id(bob.id).first_name == "Bob"


def test_update_ignores_password(user_service, user_repository, user_data):
    created = user_service.create_user(user_data())
    before = user_repository.find_by_id(created.id).password

    user_service.update_user(created.id, user_data(password="another-password"))

    assert user_repository.find_by_id(created.id).password == before


def test_delete_is_soft(user_service, user_data):
    created = user_service.create_user(user_data())
    user_service.get_user_by_id(created.id)

    user_service.delete_user(created.id)

    fetched = user_service.get_user_by_id(created.id)
    assert fetched.is_active is False
    active = user_service.list_active_users(page=0, size=10)
    assert all(user.id != created.id for user in active.content)
    assert active.total_elements == 0


def test_delete_missing_user_raises_not_found(user_service):
    with pytest.raises(ResourceNotFoundError):
        user_service.delete_user(5)


def test_list_users_preserves_pagination_metadata(user_service, user_data):
    for i in range(5):
        user_service.create_user(user_data(username=f"user{i}", email=f"user{i}@x.com"))

    page = user_service.list_users(page=1, size=2, sort_by="username", sort_direction="desc")

    assert [u.username for u in page.content] == ["user2", "user1"]
    assert page.total_elements == 5
    assert page.total_pages == 3
    assert page.page == 1
    assert page.size == 2


def test_list_users_rejects_bad_sort_direction(user_service):
    with pytest.raises(ValueError):
        user_service.list_users(sort_direction="sideways")


def test_list_active_users_newest_first(user_service, user_data):
    ids = [
        user_service.create_user(user_data(username=f"user{i}", email=f"user{i}@x.com")).id
        for i in range(3)
    ]

    page = user_service.list_active_users(page=0, size=10)

    assert [u.id for u in page.content] == list(reversed(ids))


def test_list_users_by_role(user_service, user_data):
    created = user_service.create_user(user_data())

    assert [u.id for u in user_service.list_users_by_role(UserRole.USER)] == [created.id]
    assert user_service.list_users_by_role(UserRole.ADMIN) == []


def test_search_users_by_name(user_service, user_data):
    user_service.create_user(user_data(username="ann1", email="ann1@x.com", first_name="Anna", last_name="Smith"))
    user_service.create_user(user_data(username="bob1", email="bob1@x.com", first_name="Bob", last_name="Annapolis"))
    user_service.create_user(user_data(username="carl1", email="carl1@x.com", first_name="Carl", last_name="Jones"))

    assert [u.username for u in user_service.search_users_by_name("ann")] == ["ann1", "bob1"]
    assert user_service.search_users_by_name("zzz") == []


def test_create_user_strips_padded_fields(user_service, user_repository, user_data):
    created = user_service.create_user(user_data(username="  padded  ", email=" t@example.com "))

    assert created.username == "padded"
    assert created.email == "t@example.com"
    assert user_repository.find_by_email("t@example.com").id == created.id


def test_padding_does_not_count_towards_username_length(user_data):
    with pytest.raises(ValidationError):
        user_data(username="  a  ")


@pytest.mark.parametrize("value", ["   ", ""])
def test_blank_names_are_rejected(user_data, value):
    with pytest.raises(ValidationError):
        user_data(first_name=value)


def test_password_length_bounds(user_data):
    assert user_data(password="x" * 100).password == "x" * 100
    with pytest.raises(ValidationError):
        user_data(password="x" * 101)
    with pytest.raises(ValidationError):
        user_data(password="x" * 5)


def test_create_user_accepts_password_longer_than_bcrypt_limit(user_service, user_repository, user_data):
    password = "p" * 80
    created = user_service.create_user(user_data(password=password))

    stored = user_repository.find_by_id(created.id).password
    assert user_service.password_hasher.verify(password, stored)
