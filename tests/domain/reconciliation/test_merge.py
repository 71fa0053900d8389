from __future__ import annotations

import pytest

from contactlink.domain.model import LinkRole
from contactlink.domain.reconciliation import InvariantViolationError, merge_groups
from tests.helpers.contacts import BASE_TIME, FakeContactRepository, make_member, make_root


def _two_groups() -> FakeContactRepository:
    return FakeContactRepository(
        [
            make_root(1, email="a@x.com", phone="100"),
            make_member(2, 1, email="b@x.com", phone="100", minutes=1),
            make_root(3, email="c@x.com", phone="200", minutes=10),
            make_member(4, 3, email="d@x.com", phone="200", minutes=11),
            make_member(5, 3, email="e@x.com", phone="200", minutes=12),
        ]
    )


def test_merge_demotes_loser_and_reparents_its_members() -> None:
    repo = _two_groups()

    result = merge_groups(repo, repo.items[1], [repo.items[3]], at=BASE_TIME)

    assert result.survivor_id == 1
    assert result.demoted_ids == (3,)
    assert result.reparented == 2
    assert repo.items[3].role is LinkRole.MEMBER
    assert repo.items[3].parent_id == 1
    assert repo.items[3].updated_at == BASE_TIME
    assert repo.items[4].parent_id == 1
    assert repo.items[5].parent_id == 1
    assert [root.id for root in repo.roots] == [1]


def test_merge_keeps_groups_one_level_deep() -> None:
    repo = _two_groups()

    merge_groups(repo, repo.items[1], [repo.items[3]], at=BASE_TIME)

    for contact in repo.items.values():
        if contact.parent_id is not None:
            assert repo.items[contact.parent_id].is_root


def test_merge_folds_several_losers_in_one_call() -> None:
    repo = _two_groups()
    repo.items[6] = make_root(6, phone="600", minutes=20)
    repo.items[7] = make_member(7, 6, email="g@x.com", phone="600", minutes=21)

    result = merge_groups(repo, repo.items[1], [repo.items[3], repo.items[6]], at=BASE_TIME)

    assert result.demoted_ids == (3, 6)
    assert result.reparented == 3
    assert [root.id for root in repo.roots] == [1]
    assert sorted(c.id for c in repo.find_group(1) if c.id is not None) == [1, 2, 3, 4, 5, 6, 7]


def test_merge_rejects_a_survivor_that_is_not_a_root() -> None:
    repo = _two_groups()

    with pytest.raises(InvariantViolationError, match="survivor"):
        merge_groups(repo, repo.items[2], [repo.items[3]], at=BASE_TIME)


@pytest.mark.parametrize(
    ("loser_ids", "message"),
    [
        ((), "at least one"),
        ((4,), "not a stored root"),
        ((1,), "into itself"),
        ((3, 3), "twice"),
    ],
)
def test_merge_rejects_invalid_losers(loser_ids: tuple[int, ...], message: str) -> None:
    repo = _two_groups()

    with pytest.raises(InvariantViolationError, match=message):
        merge_groups(repo, repo.items[1], [repo.items[i] for i in loser_ids], at=BASE_TIME)


def test_merge_rejects_a_survivor_newer_than_a_loser() -> None:
    repo = _two_groups()

    with pytest.raises(InvariantViolationError, match="newer"):
        merge_groups(repo, repo.items[3], [repo.items[1]], at=BASE_TIME)


def test_invalid_batch_changes_nothing() -> None:
    repo = _two_groups()
    repo.items[6] = make_root(6, phone="600", minutes=20)

    with pytest.raises(InvariantViolationError):
        merge_groups(repo, repo.items[1], [repo.items[6], repo.items[2]], at=BASE_TIME)

    assert repo.items[6].is_root
    assert [root.id for root in repo.roots] == [1, 3, 6]
