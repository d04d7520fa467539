# history_store.py
# Python 3.x
# 계산 기록(최신순, 최대 50개)을 키-값 저장소에 JSON으로 보관한다.

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

from app_config import HISTORY_KEY, HISTORY_LIMIT

logger = logging.getLogger('calculator.history')


class BlobStore(Protocol):
    """문자열 blob 저장소: get/set/remove"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryBlobStore:
    """메모리 저장소(테스트, --storage memory)"""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileBlobStore:
    """디렉터리 안에 키마다 <key>.json 파일 하나"""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f'{key}.json'

    def get(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding='utf-8')
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding='utf-8')

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


@dataclass
class HistoryEntry:
    expression: str
    result: str
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def time_text(self) -> str:
        return self.created_at.strftime('%H:%M:%S')

    def to_dict(self) -> dict:
        return {
            'expression': self.expression,
            'result': self.result,
            'created_at': self.created_at.isoformat(timespec='seconds'),
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'HistoryEntry':
        """KeyError/TypeError/ValueError는 호출한 쪽에서 처리"""
        return cls(
            expression=str(d['expression']),
            result=str(d['result']),
            created_at=datetime.fromisoformat(d['created_at']),
        )


class HistoryStore:
    def __init__(self, store: BlobStore, key: str = HISTORY_KEY,
                 limit: int = HISTORY_LIMIT) -> None:
        self.store = store
        self.key = key
        self.limit = limit
        self._entries: List[HistoryEntry] = []
        self.load()

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> None:
        """저장된 기록을 읽는다. 없거나 깨진 데이터는 빈 기록으로 취급"""
        self._entries = []
        try:
            raw = self.store.get(self.key)
        except OSError as e:
            logger.warning('기록을 읽지 못했습니다: %r', e)
            return
        if raw is None:
            return

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning('기록 데이터가 손상되어 무시합니다(key=%s)', self.key)
            return
        if not isinstance(data, list):
            logger.warning('기록 데이터 형식이 올바르지 않습니다(key=%s)', self.key)
            return

        skipped = 0
        for item in data:
            try:
                self._entries.append(HistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                skipped += 1
        if skipped:
            logger.warning('손상된 기록 %d개를 건너뛰었습니다', skipped)
        del self._entries[self.limit:]
        logger.debug('기록 %d개를 불러왔습니다', len(self._entries))

    def append(self, expression: str, result: str) -> HistoryEntry:
        entry = HistoryEntry(expression, result)
        self._entries.insert(0, entry)
        # 최근 limit개만 유지
        del self._entries[self.limit:]
        self._save()
        return entry

    def clear(self) -> None:
        self._entries = []
        self.store.remove(self.key)

    def _save(self) -> None:
        payload = json.dumps([e.to_dict() for e in self._entries], ensure_ascii=False)
        try:
            self.store.set(self.key, payload)
        except OSError as e:
            # 메모리의 기록은 유지
            logger.error('기록을 저장하지 못했습니다: %r', e)
