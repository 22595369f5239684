import json
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog
from pydantic import ValidationError

from worktime.errors import StorageError
from worktime.models import Company, Snapshot

log = structlog.get_logger(__name__)


class Database(ABC):
    """
    Whole-document store: ``load`` returns the full state, ``save`` replaces it.

    Writers go through ``transaction``, which holds the store lock for the
    whole load/mutate/save so in-process writers never interleave.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @abstractmethod
    def load(self) -> Snapshot:
        raise NotImplementedError

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None:
        raise NotImplementedError

    @contextmanager
    def transaction(self) -> Iterator[Snapshot]:
        """
        Yield a fresh snapshot and save it when the block exits cleanly.
        Nothing is written if the block raises.
        """
        with self._lock:
            snapshot = self.load()
            yield snapshot
            self.save(snapshot)


def _dump(snapshot: Snapshot) -> str:
    return json.dumps(
        snapshot.model_dump(mode="json", by_alias=True),
        indent=2,
        ensure_ascii=False,
    )


def _parse(raw: str, source: str) -> Snapshot:
    try:
        return Snapshot.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise StorageError(f"Uszkodzony plik danych: {source}") from exc


class InMemoryDatabase(Database):
    """
    Keeps the serialized document in memory. Every load hands out an
    independent copy, like reading the file would.
    """

    def __init__(self, snapshot: Snapshot | None = None) -> None:
        super().__init__()
        self._raw = _dump(snapshot or Snapshot())

    def load(self) -> Snapshot:
        return _parse(self._raw, "<memory>")

    def save(self, snapshot: Snapshot) -> None:
        self._raw = _dump(snapshot)


class JsonFileDatabase(Database):
    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self.path = Path(path)

    def initialize(self, company: Company | None = None) -> None:
        """Create the document with empty collections if the file is missing."""
        with self._lock:
            if self.path.exists():
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.save(Snapshot(company=company))
            log.info("database_created", path=str(self.path))

    def load(self) -> Snapshot:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Nie można odczytać pliku danych: {self.path}") from exc
        return _parse(raw, str(self.path))

    def save(self, snapshot: Snapshot) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(_dump(snapshot), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StorageError(f"Nie można zapisać pliku danych: {self.path}") from exc
