from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from fenix.schemas.payable import PayableOut

logger = logging.getLogger(__name__)

PAYABLES_KEY = "fenix_payables"

_payables_adapter = TypeAdapter(list[PayableOut])


class LocalStore:
    """
    Small persistent key/value store (string values) kept in one JSON file.

    Stands in for the browser's localStorage: the sync client writes the payables
    collection here whenever the backend cannot take it.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Local store %s is not valid JSON; starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


def dump_payables(payables: Iterable[PayableOut]) -> str:
    return _payables_adapter.dump_json(list(payables)).decode("utf-8")


def save_payables(store: LocalStore, payables: Iterable[PayableOut]) -> None:
    store.set(PAYABLES_KEY, dump_payables(payables))


def load_payables(store: LocalStore) -> list[PayableOut]:
    raw = store.get(PAYABLES_KEY)
    if raw is None:
        return []
    try:
        return _payables_adapter.validate_json(raw)
    except ValidationError:
        logger.warning("Cached payables under %s are unreadable; discarding them", PAYABLES_KEY)
        store.remove(PAYABLES_KEY)
        return []
