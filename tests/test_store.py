"""
Tests for the data model and JSON store: tasks, stats, reset, corruption.
"""
import json
import threading

import pytest

from pkg.insighthub.errors import CorruptData, InvalidInput, NotFound
from pkg.insighthub.schema import Document, Stats, StatKind, Task, User
from pkg.insighthub.store import JsonStore, next_id


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Schema Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_task_wire_format():
    """Tasks serialize with camelCase createdAt"""
    task = Task(id=7, text="Write report")
    data = task.to_dict()
    assert data["id"] == 7
    assert data["done"] is False
    assert "createdAt" in data
    assert "created_at" not in data


def test_user_public_dict_hides_password():
    user = User(id=1, email="a@b.c", password="secret")
    assert user.public_dict() == {"id": 1, "email": "a@b.c"}


def test_stat_kind_counters():
    assert StatKind.SUMMARY.counter == "summaries"
    assert StatKind.SENTIMENT.counter == "sentiments"
    assert StatKind.from_str("chat") is StatKind.CHAT
    assert StatKind.from_str("bogus") is None


def test_document_defaults_missing_containers():
    """Older files without users or stats still load"""
    doc = Document.from_dict({"tasks": []})
    assert doc.users == []
    assert doc.stats == Stats()


@pytest.mark.parametrize("data", [
    [],
    {"tasks": "nope"},
    {"users": {}},
    {"stats": {"summaries": -1}},
    {"stats": {"tasks": "3"}},
    {"tasks": [{"id": "x", "text": "t"}]},
    {"tasks": [{"id": 1}]},
    {"tasks": [{"id": 1, "text": "t", "done": "false"}]},
    {"tasks": [{"id": 1, "text": "t", "done": 0}]},
    {"users": [{"id": 1}]},
])
def test_document_rejects_bad_shapes(data):
    with pytest.raises(CorruptData):
        Document.from_dict(data)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Document I/O Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_store_creates_default_file(data_file):
    """A missing data file is created with zeroed defaults"""
    JsonStore(str(data_file))
    data = json.loads(data_file.read_text())
    assert data == {
        "tasks": [],
        "stats": {"summaries": 0, "tasks": 0, "ideas": 0, "sentiments": 0, "chats": 0},
        "users": [],
    }


def test_store_creates_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "data.json"
    JsonStore(str(path))
    assert path.exists()


def test_load_invalid_json_raises(store, data_file):
    data_file.write_text("{not json")
    with pytest.raises(CorruptData):
        store.load()


def test_save_replaces_whole_file(store, data_file):
    doc = store.load()
    doc.tasks.append(Task(id=1, text="one"))
    store.save(doc)

    store.save(Document())
    assert json.loads(data_file.read_text())["tasks"] == []
    # No temp files left behind
    assert [p.name for p in data_file.parent.iterdir()] == ["data.json"]


def test_transaction_discards_on_error(store):
    store.add_task("keep me")
    with pytest.raises(RuntimeError):
        with store.transaction() as doc:
            doc.tasks.clear()
            raise RuntimeError("boom")
    assert [t.text for t in store.list_tasks()] == ["keep me"]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Task Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_add_task_appends_last(store):
    """New task shows up last with done=False"""
    store.add_task("first")
    task = store.add_task("second")

    tasks = store.list_tasks()
    assert tasks[-1].id == task.id
    assert tasks[-1].text == "second"
    assert tasks[-1].done is False


@pytest.mark.parametrize("text", ["", "   ", None, 42])
def test_add_task_rejects_empty(store, text):
    with pytest.raises(InvalidInput):
        store.add_task(text)
    assert store.list_tasks() == []


def test_task_ids_increase_within_same_millisecond(store, monkeypatch):
    """Rapid adds never collide even when the clock does not move"""
    monkeypatch.setattr("pkg.insighthub.store.time.time", lambda: 1_700_000_000.0)
    ids = [store.add_task(f"task {i}").id for i in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_next_id_passes_existing():
    assert next_id([]) > 0
    far_future = 10 ** 15
    assert next_id([far_future]) == far_future + 1


def test_add_tasks_bulk(store):
    created = store.add_tasks(["a", "b", "c"])
    assert [t.text for t in store.list_tasks()] == ["a", "b", "c"]
    assert [t.id for t in created] == [t.id for t in store.list_tasks()]


def test_add_tasks_validates_before_writing(store):
    with pytest.raises(InvalidInput):
        store.add_tasks(["ok", ""])
    assert store.list_tasks() == []


def test_set_task_done_only_touches_target(store):
    a = store.add_task("a")
    b = store.add_task("b")

    updated = store.set_task_done(a.id, True)
    assert updated.done is True

    by_id = {t.id: t for t in store.list_tasks()}
    assert by_id[a.id].done is True
    assert by_id[b.id].done is False
    assert by_id[b.id].text == "b"


def test_set_task_done_unknown_id(store):
    with pytest.raises(NotFound):
        store.set_task_done(123, True)


def test_set_task_done_requires_bool(store):
    task = store.add_task("a")
    with pytest.raises(InvalidInput):
        store.set_task_done(task.id, "yes")


def test_remove_task_twice(store):
    """Second delete of the same id fails"""
    task = store.add_task("temp")
    store.remove_task(task.id)
    assert store.list_tasks() == []
    with pytest.raises(NotFound):
        store.remove_task(task.id)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Stats Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_record_event_increments_one_counter(store):
    before = store.get_stats()
    after = store.record_event("summary")
    assert after.summaries == before.summaries + 1
    assert after.tasks == before.tasks
    assert after.ideas == before.ideas
    assert after.sentiments == before.sentiments
    assert after.chats == before.chats
    assert store.get_stats() == after


def test_record_event_accepts_enum(store):
    store.record_event(StatKind.CHAT)
    store.record_event(StatKind.CHAT)
    assert store.get_stats().chats == 2


def test_record_event_unknown_kind_is_noop(store):
    store.record_event("idea")
    stats = store.record_event("nonsense")
    assert stats.to_dict() == {"summaries": 0, "tasks": 0, "ideas": 1, "sentiments": 0, "chats": 0}


def test_reset_all_keeps_users(store):
    store.add_task("a")
    store.record_event("task")
    with store.transaction() as doc:
        doc.users.append(User(id=1, email="u@x.io", password="pw"))

    store.reset_all()

    doc = store.load()
    assert doc.tasks == []
    assert doc.stats == Stats()
    assert [u.email for u in doc.users] == ["u@x.io"]


def test_reset_all_recovers_corrupt_file(store, data_file):
    data_file.write_text("garbage")
    store.reset_all()
    assert store.load() == Document()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Concurrency Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_concurrent_writers_lose_nothing(data_file):
    """Threads hammering one file through separate stores keep every update"""
    JsonStore(str(data_file))
    workers, per_worker = 8, 10
    start = threading.Barrier(workers)
    errors = []

    def worker(n):
        # One store per thread, like one store per request
        store = JsonStore(str(data_file))
        start.wait()
        try:
            for i in range(per_worker):
                store.add_task(f"worker {n} task {i}")
                store.record_event("chat")
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    doc = JsonStore(str(data_file)).load()
    assert len(doc.tasks) == workers * per_worker
    assert doc.stats.chats == workers * per_worker
    ids = [t.id for t in doc.tasks]
    assert len(set(ids)) == len(ids)
    assert ids == sorted(ids)
