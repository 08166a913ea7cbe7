from __future__ import annotations

import pytest

from rosterlink.domain.reconciliation import CandidatePool
from tests.helpers.reconciliation import make_user


def test_take_removes_user_and_preserves_order() -> None:
    users = [make_user(1, "A", "A"), make_user(2, "B", "B"), make_user(3, "C", "C")]
    pool = CandidatePool(users)

    taken = pool.take(users[1])

    assert taken == users[1]
    assert pool.snapshot() == (users[0], users[2])
    assert users[1] not in pool
    assert len(pool) == 2


def test_take_unknown_user_raises() -> None:
    pool = CandidatePool([make_user(1, "A", "A")])

    with pytest.raises(KeyError):
        pool.take(make_user(2, "B", "B"))


def test_release_appends_and_rejects_duplicates() -> None:
    first, second = make_user(1, "A", "A"), make_user(2, "B", "B")
    pool = CandidatePool([first, second])
    pool.take(first)

    pool.release(first)

    assert pool.snapshot() == (second, first)
    with pytest.raises(ValueError, match="already in the pool"):
        pool.release(first)


def test_iteration_tolerates_mutation() -> None:
    users = [make_user(1, "A", "A"), make_user(2, "B", "B")]
    pool = CandidatePool(users)

    for user in pool:
        pool.take(user)

    assert len(pool) == 0
    assert pool.find(lambda user: user.id == 1) is None


def test_pool_does_not_alias_input() -> None:
    users = [make_user(1, "A", "A")]
    pool = CandidatePool(users)

    pool.take(users[0])

    assert len(users) == 1
