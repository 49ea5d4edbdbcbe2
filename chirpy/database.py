"""Flat-file JSON storage with one read/write lock per backing file.

Each collection (users, chirps, revoked tokens) lives in its own file as a
single JSON array. A ``FlatFileStore`` binds one file to one
``ReadWriteLock``; the process-wide ``StoreManager`` guarantees there is
exactly one store (and so one lock) per resolved path.
"""

import contextlib
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generic, Iterable, Iterator, List, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from chirpy.config import get_settings
from chirpy.exceptions import StorageUnavailable
from chirpy.models.chirp import Chirp
from chirpy.models.user import RevokedToken, User

logger = structlog.get_logger(__name__)

USERS_FILE = "users.json"
CHIRPS_FILE = "chirps.json"
REVOKED_TOKENS_FILE = "revoked_tokens.json"

RecordT = TypeVar("RecordT", bound=BaseModel)

# Global store manager
_manager: Optional["StoreManager"] = None


class Rollback(Exception):
    """Raise inside ``FlatFileStore.transaction()`` to leave the file untouched."""


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    Writers that are waiting block new readers, so a steady stream of reads
    cannot starve a save. The lock is not reentrant.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def ensure_exists(path: Path) -> None:
    """Create an empty backing file (and parent directory) if absent.

    Raises:
        StorageUnavailable: If the file or directory cannot be created
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
    except OSError as e:
        logger.error("storage_create_failed", path=str(path), error=str(e))
        raise StorageUnavailable() from e


def reset_files(paths: Iterable[Path]) -> None:
    """Delete and recreate every named backing file.

    Only for test and debug bootstrap. Callers are responsible for holding
    the write lock of any store bound to these paths.
    """
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("storage_reset_failed", path=str(path), error=str(e))
            raise StorageUnavailable() from e
        ensure_exists(path)


class FlatFileStore(Generic[RecordT]):
    """An ordered collection of records persisted as one JSON array."""

    def __init__(
        self,
        path: Path,
        model: Type[RecordT],
        lock: Optional[ReadWriteLock] = None,
    ):
        self.path = Path(path)
        self.model = model
        self.lock = lock or ReadWriteLock()
        self._adapter = TypeAdapter(List[model])
        ensure_exists(self.path)

    def load(self) -> List[RecordT]:
        """Return every record in storage order.

        A missing or empty file is an empty collection.

        Raises:
            StorageUnavailable: If the file cannot be read or parsed
        """
        with self.lock.read_lock():
            return self._read()

    def save(self, records: List[RecordT]) -> None:
        """Rewrite the whole file with ``records``.

        Raises:
            StorageUnavailable: If the file cannot be written
        """
        with self.lock.write_lock():
            self._write(records)

    @contextmanager
    def transaction(self) -> Iterator[List[RecordT]]:
        """Load, let the caller mutate, then save, all under the write lock.

        The yielded list is saved when the block exits normally. If the
        block raises, nothing is written. ``Rollback`` is swallowed; any
        other exception propagates.

        Example::

            with store.transaction() as chirps:
                chirps.append(Chirp(id=len(chirps) + 1, body=body))
        """
        with self.lock.write_lock():
            records = self._read()
            try:
                yield records
            except Rollback:
                return
            self._write(records)

    def _read(self) -> List[RecordT]:
        try:
            content = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("storage_read_failed", path=str(self.path), error=str(e))
            raise StorageUnavailable() from e

        if not content.strip():
            return []

        try:
            return self._adapter.validate_json(content)
        except ValidationError as e:
            logger.error(
                "storage_decode_failed",
                path=str(self.path),
                error_count=e.error_count(),
            )
            raise StorageUnavailable() from e

    def _write(self, records: List[RecordT]) -> None:
        data = self._adapter.dump_json(records)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.remove(tmp_path)
            logger.error("storage_write_failed", path=str(self.path), error=str(e))
            raise StorageUnavailable() from e

        logger.debug("storage_saved", path=str(self.path), records=len(records))


class StoreManager:
    """Owns the long-lived store handles for one data directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self._stores: Dict[Path, FlatFileStore] = {}
        self._guard = threading.Lock()

        self.users: FlatFileStore[User] = self.get_store(USERS_FILE, User)
        self.chirps: FlatFileStore[Chirp] = self.get_store(CHIRPS_FILE, Chirp)
        self.revoked_tokens: FlatFileStore[RevokedToken] = self.get_store(
            REVOKED_TOKENS_FILE, RevokedToken
        )

    def get_store(self, filename: str, model: Type[RecordT]) -> FlatFileStore[RecordT]:
        """Return the single store bound to ``data_dir / filename``.

        Raises:
            ValueError: If the path is already bound to a different model
        """
        path = (self.data_dir / filename).resolve()
        with self._guard:
            store = self._stores.get(path)
            if store is None:
                store = FlatFileStore(path, model)
                self._stores[path] = store
            elif store.model is not model:
                raise ValueError(
                    f"{filename} is already bound to {store.model.__name__}"
                )
            return store

    @property
    def paths(self) -> List[Path]:
        return list(self._stores)

    def reset(self) -> None:
        """Empty every store. Test and debug bootstrap only."""
        for store in list(self._stores.values()):
            with store.lock.write_lock():
                reset_files([store.path])
        logger.warning("stores_reset", data_dir=str(self.data_dir))


def get_store_manager() -> StoreManager:
    """Get the process-wide store manager.

    Raises:
        RuntimeError: If the manager is not initialized
    """
    if _manager is None:
        raise RuntimeError("Store manager not initialized. Call init_database() first.")
    return _manager


def init_database(data_dir: Optional[Path] = None, reset: bool = False) -> StoreManager:
    """Initialize the store manager and create any missing backing files.

    Args:
        data_dir: Directory holding the JSON files (defaults to settings)
        reset: Empty all stores after initialization

    Returns:
        The process-wide StoreManager
    """
    global _manager

    if _manager is None:
        settings = get_settings()
        _manager = StoreManager(data_dir or settings.data_dir)
        logger.info("store_manager_created", data_dir=str(_manager.data_dir))

    if reset:
        _manager.reset()

    return _manager


def close_database() -> None:
    """Drop the store manager."""
    global _manager

    if _manager is not None:
        _manager = None
        logger.info("store_manager_closed")
