import json
import logging
from datetime import datetime

import pytest

from history_store import FileBlobStore, HistoryEntry, HistoryStore, MemoryBlobStore

KEY = 'calculatorHistory'


class BrokenStore(MemoryBlobStore):
    def set(self, key, value):
        raise OSError('disk full')


@pytest.fixture
def blob():
    return MemoryBlobStore()


def test_empty_store_loads_empty_history(blob):
    assert len(HistoryStore(blob)) == 0


def test_append_is_newest_first_and_persisted(blob):
    history = HistoryStore(blob)
    history.append('1 + 1', '2')
    history.append('2 + 2', '4')

    assert [e.expression for e in history.entries] == ['2 + 2', '1 + 1']
    saved = json.loads(blob.get(KEY))
    assert [d['result'] for d in saved] == ['4', '2']


def test_history_is_reloaded_from_store(blob):
    history = HistoryStore(blob)
    entry = history.append('5 + 3', '8')

    reloaded = HistoryStore(blob)
    assert len(reloaded) == 1
    assert reloaded.entries[0].expression == '5 + 3'
    assert reloaded.entries[0].result == '8'
    assert reloaded.entries[0].created_at == entry.created_at.replace(microsecond=0)


def test_append_caps_at_limit(blob):
    history = HistoryStore(blob)
    for i in range(51):
        history.append(f'{i} + 0', str(i))
        assert len(history) <= 50

    assert len(history) == 50
    assert history.entries[0].result == '50'
    assert history.entries[-1].result == '1'
    assert len(json.loads(blob.get(KEY))) == 50


def test_custom_limit(blob):
    history = HistoryStore(blob, limit=3)
    for i in range(5):
        history.append(f'{i} × 1', str(i))
    assert [e.result for e in history.entries] == ['4', '3', '2']


def test_clear_removes_blob(blob):
    history = HistoryStore(blob)
    history.append('1 + 1', '2')
    history.clear()
    assert len(history) == 0
    assert blob.get(KEY) is None


@pytest.mark.parametrize('raw', ['not json', '{"a": 1}', '42', 'null'])
def test_corrupt_blob_loads_empty(raw, caplog):
    blob = MemoryBlobStore({KEY: raw})
    with caplog.at_level(logging.WARNING, logger='calculator.history'):
        history = HistoryStore(blob)
    assert len(history) == 0


def test_malformed_entries_are_skipped():
    good = HistoryEntry('1 + 1', '2', datetime(2024, 1, 2, 3, 4, 5)).to_dict()
    raw = json.dumps([good, {'expression': 'x'}, 7, dict(good, created_at='yesterday')])
    history = HistoryStore(MemoryBlobStore({KEY: raw}))
    assert len(history) == 1
    assert history.entries[0].time_text == '03:04:05'


def test_loaded_history_is_truncated():
    entry = HistoryEntry('1 + 1', '2').to_dict()
    history = HistoryStore(MemoryBlobStore({KEY: json.dumps([entry] * 60)}))
    assert len(history) == 50


def test_save_failure_keeps_entries(caplog):
    history = HistoryStore(BrokenStore())
    with caplog.at_level(logging.ERROR, logger='calculator.history'):
        history.append('1 + 1', '2')
    assert len(history) == 1
    assert '기록을 저장하지 못했습니다' in caplog.text


def test_file_blob_store(tmp_path):
    store = FileBlobStore(tmp_path / 'data')
    assert store.get(KEY) is None

    store.set(KEY, '[]')
    assert (tmp_path / 'data' / f'{KEY}.json').read_text(encoding='utf-8') == '[]'
    assert store.get(KEY) == '[]'

    store.remove(KEY)
    assert store.get(KEY) is None
    store.remove(KEY)


def test_history_over_file_store(tmp_path):
    history = HistoryStore(FileBlobStore(tmp_path))
    history.append('7 ÷ 2', '3.5')

    reloaded = HistoryStore(FileBlobStore(tmp_path))
    assert reloaded.entries[0].expression == '7 ÷ 2'
