import json

import pytest

from scorekeeper.models import HistoryEntry, Player, Session
from scorekeeper.services.scoreboard.errors import PersistenceError
from scorekeeper.services.scoreboard.persistence import FileStore, MemoryStore, PersistenceAdapter


def make_session(phase='playing'):
    return Session(phase=phase, players=[
        Player(1, 'Alice', 2, (HistoryEntry(2, '10:00:00', 'add'),)),
        Player(2, 'Bob', 0, (HistoryEntry(-5, '10:01:00', 'subtract'),)),
    ])


class BrokenStore:
    def get(self, key):
        raise PersistenceError('storage disabled')

    def set(self, key, value, expires_at):
        raise PersistenceError('quota exceeded')

    def delete(self, key):
        raise PersistenceError('storage disabled')


def test_round_trip(persistence):
    session = make_session()
    assert persistence.save(session)
    assert persistence.load() == session


def test_envelope_shape(persistence, store, clock):
    persistence.save(make_session())
    envelope = json.loads(store.get('scoreTrackerData'))
    assert set(envelope) == {'players', 'phase', 'savedAt'}
    assert envelope['savedAt'] == int(clock() * 1000)
    assert envelope['players'][1]['history'] == [{'points': -5, 'timestamp': '10:01:00', 'type': 'subtract'}]


def test_load_twice_is_identical(persistence):
    persistence.save(make_session())
    assert persistence.load() == persistence.load()


def test_entry_expires_two_hours_after_last_write(persistence, clock):
    persistence.save(make_session())
    clock.advance(hours=1)
    persistence.save(make_session('setup'))
    clock.advance(hours=1, seconds=59 * 60)
    assert persistence.load().phase == 'setup'
    clock.advance(seconds=61)
    assert persistence.load() is None


def test_custom_ttl(persistence, clock):
    persistence.save(make_session(), ttl_hours=0.5)
    clock.advance(hours=0.5)
    assert persistence.load() is None


def test_save_overwrites(persistence):
    persistence.save(make_session('playing'))
    persistence.save(make_session('setup'))
    assert persistence.load().phase == 'setup'


def test_clear_is_idempotent(persistence):
    persistence.save(make_session())
    persistence.clear()
    persistence.clear()
    assert persistence.load() is None


def test_missing_entry(persistence):
    assert persistence.load() is None


@pytest.mark.parametrize('raw', [
    'not json',
    '[]',
    '{"phase": "setup"}',
    '{"players": [{"id": 1, "name": "A", "score": 0, "history": []}]}',
    '{"players": [{"id": 1, "name": "A", "score": -1, "history": []},'
    ' {"id": 2, "name": "B", "score": 0, "history": []}]}',
    '{"players": [{"id": 1, "name": "A", "score": 0, "history": []},'
    ' {"id": 3, "name": "B", "score": 0, "history": []}]}',
    '{"players": [{"id": 1, "name": "A", "score": 0, "history": [{"points": 0, "timestamp": "x", "type": "add"}]},'
    ' {"id": 2, "name": "B", "score": 0, "history": []}]}',
    '{"players": [{"id": 1, "name": "A", "score": 0, "history": []},'
    ' {"id": 2, "name": "B", "score": 0, "history": []}], "phase": "paused"}',
])
def test_structurally_invalid_content_loads_as_none(persistence, store, clock, raw):
    store.set('scoreTrackerData', raw, clock() + 60)
    assert persistence.load() is None


def test_missing_phase_means_setup(persistence, store, clock):
    raw = json.dumps({'players': [
        {'id': 1, 'name': 'A', 'score': 1, 'history': []},
        {'id': 2, 'name': 'B', 'score': 0, 'history': []},
    ]})
    store.set('scoreTrackerData', raw, clock() + 60)
    assert persistence.load().phase == 'setup'


def test_store_failures_degrade_silently():
    adapter = PersistenceAdapter(BrokenStore())
    assert adapter.save(make_session()) is False
    assert adapter.load() is None
    adapter.clear()


def test_memory_store_expiry(clock):
    store = MemoryStore(clock)
    store.set('k', 'v', clock() + 10)
    assert store.get('k') == 'v'
    clock.advance(seconds=10)
    assert store.get('k') is None


def test_file_store_round_trip_and_expiry(tmp_path, clock):
    path = tmp_path / 'instance' / 'scoreboard.json'
    adapter = PersistenceAdapter(FileStore(str(path), clock))
    session = make_session()
    adapter.save(session)
    assert path.exists()

    reopened = PersistenceAdapter(FileStore(str(path), clock))
    assert reopened.load() == session

    clock.advance(hours=2)
    assert reopened.load() is None
    assert 'scoreTrackerData' not in json.loads(path.read_text(encoding='utf-8'))


def test_file_store_corrupt_file_raises_persistence_error(tmp_path, clock):
    path = tmp_path / 'scoreboard.json'
    path.write_text('{broken', encoding='utf-8')
    store = FileStore(str(path), clock)
    with pytest.raises(PersistenceError):
        store.get('scoreTrackerData')
    assert PersistenceAdapter(store).load() is None


def test_save_overwrites_corrupt_file(tmp_path, clock):
    path = tmp_path / 'scoreboard.json'
    path.write_text('{broken', encoding='utf-8')
    adapter = PersistenceAdapter(FileStore(str(path), clock))
    assert adapter.load() is None

    session = make_session()
    assert adapter.save(session)
    assert adapter.load() == session
    assert 'scoreTrackerData' in json.loads(path.read_text(encoding='utf-8'))


def test_clear_on_corrupt_file_does_not_fail(tmp_path, clock):
    path = tmp_path / 'scoreboard.json'
    path.write_text('{broken', encoding='utf-8')
    adapter = PersistenceAdapter(FileStore(str(path), clock))
    adapter.clear()
    assert adapter.save(make_session())


def test_blank_stored_name_loads_as_default(persistence, store, clock):
    raw = json.dumps({'players': [
        {'id': 1, 'name': '   ', 'score': 1, 'history': []},
        {'id': 2, 'name': '', 'score': 0, 'history': []},
    ], 'phase': 'playing'})
    store.set('scoreTrackerData', raw, clock() + 60)
    assert [p.name for p in persistence.load().players] == ['Player 1', 'Player 2']
