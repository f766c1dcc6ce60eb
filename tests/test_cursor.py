import threading

import pytest

from pyproblems.action import query
from pyproblems.cursor import CursorState, PaginatedCursor, Predicate
from pyproblems.exc import BackendError, ExhaustedCursor
from pyproblems.model import SubmissionStatus, SUBMISSIONS
from tests.conftest import make_submission


def insert_submissions(client, count, **kwargs):
    records = [make_submission(i, user_id=f"user{i % 3}", **kwargs) for i in range(1, count + 1)]
    if records:
        client.upsert_submissions(records)
    return records


@pytest.mark.parametrize("page_size", [1, 2, 3, 7, 1000])
@pytest.mark.parametrize("count", [0, 1, 6, 7])
def test_iterates_every_row_once(client, page_size, count):
    records = insert_submissions(client, count)

    cursor = client.query(query.accepted_submissions(), page_size=page_size)

    assert list(cursor) == records


def test_has_next_is_idempotent(client, database):
    insert_submissions(client, 3)
    cursor = client.query(query.accepted_submissions(), page_size=2)
    reads = database.reads

    assert cursor.has_next()
    assert cursor.has_next()
    assert cursor.has_next()
    assert database.reads == reads + 1
    assert cursor.offset == 2
    assert cursor.next().id == 1


def test_short_page_ends_iteration_without_extra_fetch(client, database):
    insert_submissions(client, 5)
    cursor = client.query(query.accepted_submissions(), page_size=2)
    reads = database.reads

    assert len(list(cursor)) == 5
    assert database.reads == reads + 3
    assert cursor.state is CursorState.EXHAUSTED


def test_full_last_page_needs_one_empty_fetch(client, database):
    insert_submissions(client, 4)
    cursor = client.query(query.accepted_submissions(), page_size=2)
    reads = database.reads

    assert len(list(cursor)) == 4
    assert database.reads == reads + 3
    assert not cursor.has_next()
    assert database.reads == reads + 3


def test_next_past_end_fails(client):
    insert_submissions(client, 1)
    cursor = client.query_all_accepted()

    cursor.next()
    with pytest.raises(ExhaustedCursor):
        cursor.next()


def test_empty_result(client):
    cursor = client.query_all_accepted()

    assert not cursor.has_next()
    with pytest.raises(StopIteration):
        next(cursor)


def test_empty_id_list_does_not_query(client, database):
    cursor = client.query_by_ids([])
    reads = database.reads

    assert not cursor.has_next()
    assert list(client.query_by_users([])) == []
    assert database.reads == reads


def test_query_by_ids(client):
    records = insert_submissions(client, 6)

    found = list(client.query_by_ids([5, 2, 42]))

    assert found == [records[1], records[4]]


def test_query_by_users(client):
    records = insert_submissions(client, 6)

    found = list(client.query_by_users(["user1"]))

    assert [s.id for s in found] == [1, 4]
    assert all(s.user_id == "user1" for s in found)
    assert found[0] == records[0]


def test_query_all_accepted_skips_other_results(client):
    client.upsert_submissions([
        make_submission(1),
        make_submission(2, result=SubmissionStatus.WRONG_ANSWER),
        make_submission(3, result="TLE"),
        make_submission(4),
    ])

    assert [s.id for s in client.query_all_accepted()] == [1, 4]


def test_backend_error_propagates_and_fetch_can_be_retried(client, database):
    records = insert_submissions(client, 3)
    cursor = client.query(query.accepted_submissions(), page_size=2)
    database.fail_on_read = database.reads + 1

    with pytest.raises(BackendError):
        cursor.has_next()
    assert cursor.state is CursorState.NEEDS_FETCH
    assert cursor.offset == 0

    assert list(cursor) == records


def test_rejects_non_positive_page_size(database):
    with pytest.raises(ValueError):
        PaginatedCursor(database, SUBMISSIONS, Predicate("1 = 1"), page_size=0)


def test_concurrent_consumers_share_one_pass(client):
    insert_submissions(client, 50)
    cursor = client.query(query.accepted_submissions(), page_size=4)
    seen = []
    seen_lock = threading.Lock()

    def consume():
        for submission in cursor:
            with seen_lock:
                seen.append(submission.id)

    threads = [threading.Thread(target=consume) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(seen) == list(range(1, 51))
