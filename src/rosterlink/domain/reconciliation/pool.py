"""Working set of provider users not yet claimed during one matching run."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from rosterlink.domain.model import ExternalUser


class CandidatePool:
    """Ordered, consumable collection of provider users.

    The pool only ever shrinks while members are matched. Taking a user out of
    the pool is the single mechanism that keeps one provider user from being
    paired with two members.
    """

    def __init__(self, users: Iterable[ExternalUser] = ()) -> None:
        self._users: list[ExternalUser] = list(users)

    def __len__(self) -> int:
        return len(self._users)

    def __iter__(self) -> Iterator[ExternalUser]:
        return iter(tuple(self._users))

    def __contains__(self, user: object) -> bool:
        return any(candidate.id == getattr(user, "id", None) for candidate in self._users)

    def find(self, predicate: Callable[[ExternalUser], bool]) -> ExternalUser | None:
        """Return the first user (in pool order) matching ``predicate``."""

        for user in self._users:
            if predicate(user):
                return user
        return None

    def take(self, user: ExternalUser) -> ExternalUser:
        """Remove ``user`` from the pool and return it."""

        for index, candidate in enumerate(self._users):
            if candidate.id == user.id:
                return self._users.pop(index)
        raise KeyError(user.id)

    def release(self, user: ExternalUser) -> None:
        """Return a previously taken user to the end of the pool."""

        if user in self:
            raise ValueError(f"External user {user.id} is already in the pool")
        self._users.append(user)

    def snapshot(self) -> tuple[ExternalUser, ...]:
        return tuple(self._users)
