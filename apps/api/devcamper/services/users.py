"""User administration service layer."""

from typing import Any

from devcamper.domain.query import QueryDescriptor
from devcamper.errors import bad_request, not_found
from devcamper.repositories.memory import InMemoryStore
from devcamper.schemas.user import CreateUserRequest, UpdateUserRequest, User
from devcamper.services.pagination import Page, PaginationExecutor


class UserService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_users(self, descriptor: QueryDescriptor) -> Page[dict[str, Any]]:
        return PaginationExecutor(self._store).execute(descriptor, self._store.users)

    def get_user(self, user_id: str) -> User:
        document = self._store.users.get(user_id)
        if document is None:
            raise not_found(user_id)
        return User.model_validate(document)

    def create_user(self, payload: CreateUserRequest) -> User:
        self._ensure_email_available(payload.email)
        record = self._store.users.insert(payload.model_dump(mode="json"))
        return User.model_validate(record)

    def update_user(self, *, user_id: str, payload: UpdateUserRequest) -> User:
        user = self.get_user(user_id)
        changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if "email" in changes and changes["email"].lower() != user.email.lower():
            self._ensure_email_available(changes["email"])
        record = self._store.users.update(user.id, changes)
        if record is None:
            raise not_found(user_id)
        return User.model_validate(record)

    def delete_user(self, user_id: str) -> None:
        if not self._store.users.delete(user_id):
            raise not_found(user_id)

    def _ensure_email_available(self, email: str) -> None:
        taken = any(
            str(document.get("email", "")).lower() == email.lower()
            for document in self._store.users.find(projection=["email"])
        )
        if taken:
            raise bad_request("Email is already registered", details={"field": "email"})
