"""
Business logic for users.

``UserService`` validates uniqueness, hashes passwords, coordinates
the repository with the ``users`` response cache and maps entities to
``UserRead``.  Its collaborators (repository, password hasher, cache
and clock) are passed in explicitly; ``app.main.create_app`` wires
the production instances at startup.

Cache discipline: ``get_user_by_id`` is read‑through, keyed strictly on
the user id.  ``update_user`` and ``delete_user`` evict the id only
after the repository write has succeeded, so a failed write leaves no
gap in which a stale row could be cached again.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..core.cache import ResponseCache
from ..core.exceptions import DuplicateResourceError, ResourceNotFoundError
from ..core.security import PasswordHasher
from ..models import PageRequest, Sort, User, UserRole
from ..repositories import UserRepository
from ..schemas.user import UserCreate, UserPage, UserRead

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserService:
    """Service for user business logic."""

    def __init__(
        self,
        repository: UserRepository,
        password_hasher: PasswordHasher,
        cache: ResponseCache,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.repository = repository
        self.password_hasher = password_hasher
        self.cache = cache
        self.clock = clock or _utcnow

    def create_user(self, data: UserCreate) -> UserRead:
        """Create a new user with role ``USER``.

        Raises ``DuplicateResourceError`` when the username or the email
        is already taken.  Nothing is cached: the id is new.
        """
        if self.repository.exists_by_username(data.username):
            logger.warning("Rejected new user: username %r taken", data.username)
            raise DuplicateResourceError(f"Username already exists: {data.username}")
        if self.repository.exists_by_email(data.email):
            logger.warning("Rejected new user: email %r taken", data.email)
            raise DuplicateResourceError(f"Email already exists: {data.email}")

        now = self.clock()
        user = User(
            username=data.username,
            email=data.email,
            password=self.password_hasher.hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            age=data.age,
            role=UserRole.USER,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        saved = self.repository.save(user)
        logger.info("Created user %s (%s)", saved.id, saved.username)
        return UserRead.from_entity(saved)

    def get_user_by_id(self, user_id: int) -> UserRead:
        """Return the user, serving repeated lookups from the cache."""
        cached = self.cache.get(user_id)
        if cached is not None:
            logger.debug("Cache hit for user %s", user_id)
            return cached.model_copy()

        logger.debug("Cache miss for user %s", user_id)
        user = self.repository.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError(f"User not found with id: {user_id}")
        result = UserRead.from_entity(user)
        self.cache.put(user_id, result)
        return result.model_copy()

    def list_users(
        self,
        page: int = 0,
        size: int = 10,
        sort_by: str = "id",
        sort_direction: str = "ASC",
    ) -> UserPage:
        """Page through all users, active or not.

        Raises ``ValueError`` for a negative page, a non‑positive size,
        an unknown sort field or direction.
        """
        page_request = PageRequest(page=page, size=size, sort=Sort.by(sort_by, sort_direction))
        users = self.repository.find_all(page_request)
        return UserPage.from_page(users.map(UserRead.from_entity))

    def list_users_by_role(self, role: UserRole) -> List[UserRead]:
        return [UserRead.from_entity(user) for user in self.repository.find_by_role(role)]

    def list_active_users(self, page: int = 0, size: int = 10) -> UserPage:
        """Page through active users, newest first."""
        page_request = PageRequest(page=page, size=size, sort=Sort.by("created_at", "DESC"))
        users = self.repository.find_active(page_request)
        return UserPage.from_page(users.map(UserRead.from_entity))

    def search_users_by_name(self, name: str) -> List[UserRead]:
        """Case‑insensitive substring search on first or last name."""
        return [
            UserRead.from_entity(user)
            for user in self.repository.find_by_name_containing(name)
        ]

    def update_user(self, user_id: int, data: UserCreate) -> UserRead:
        """Update profile fields, username and email.

        First name, last name and age are always overwritten.  Username
        and email are only checked for conflicts, and only changed, when
        they differ from the stored values; each field is checked on its
        own.  The password in ``data`` is ignored.
        """
        user = self.repository.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError(f"User not found with id: {user_id}")

        user.first_name = data.first_name
        user.last_name = data.last_name
        user.age = data.age

        if user.username != data.username:
            if self.repository.exists_by_username(data.username):
                logger.warning("Rejected update of user %s: username %r taken", user_id, data.username)
                raise DuplicateResourceError(f"Username already exists: {data.username}")
            user.username = data.username

        if user.email != data.email:
            if self.repository.exists_by_email(data.email):
                logger.warning("Rejected update of user %s: email %r taken", user_id, data.email)
                raise DuplicateResourceError(f"Email already exists: {data.email}")
            user.email = data.email

        saved = self.repository.save(user)
        self.cache.evict(user_id)
        logger.info("Updated user %s", user_id)
        return UserRead.from_entity(saved)

    def delete_user(self, user_id: int) -> None:
        """Soft delete: mark the user inactive.  The row is kept."""
        user = self.repository.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError(f"User not found with id: {user_id}")
        user.is_active = False
        self.repository.save(user)
        self.cache.evict(user_id)
        logger.info("Deactivated user %s", user_id)
