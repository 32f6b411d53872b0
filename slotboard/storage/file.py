"""Flat-file storage: all collections in one JSON document under ``DATA_DIR``.

Reads are served from memory; every write rewrites the document while the
state lock is held. A single ``os.replace`` commits a save, so a booking and
its activity reach disk together or not at all.
"""

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

from slotboard.core.errors import UnavailableError
from slotboard.schemas import Activity, Booking, Comment, Member
from slotboard.storage.base import Storage
from slotboard.storage.memory import (
    MemoryActivityStore,
    MemoryBookingStore,
    MemoryCommentStore,
    MemoryMemberStore,
    MemoryState,
)

logger = logging.getLogger(__name__)

DATA_FILE_NAME = 'slotboard.json'
COLLECTIONS = ('members', 'bookings', 'activities', 'comments')
UNAVAILABLE_MESSAGE = 'Data files are unavailable.'


class DataFile(BaseModel):
    members: list[Member] = Field(default_factory=list)
    bookings: list[Booking] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)


class FileState(MemoryState):
    def __init__(self, data_dir: str | os.PathLike):
        super().__init__()
        self.data_dir = Path(data_dir)
        self.path = self.data_dir / DATA_FILE_NAME
        self.loaded = False
        self._saved = DataFile()

    def _snapshot(self) -> DataFile:
        return DataFile(**{collection: list(getattr(self, collection)) for collection in COLLECTIONS})

    def _restore(self, data: DataFile) -> None:
        for collection in COLLECTIONS:
            setattr(self, collection, list(getattr(data, collection)))

    def load(self) -> None:
        with self.lock:
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
                data = DataFile.model_validate_json(self.path.read_bytes()) if self.path.exists() else DataFile()
            except (OSError, ValueError) as exc:
                # Writes stay refused so the unreadable file is never overwritten.
                self.loaded = False
                logger.exception('Could not load data file %s', self.path)
                raise UnavailableError(UNAVAILABLE_MESSAGE) from exc

            self._restore(data)
            self._saved = data
            self.loaded = True

    def changed(self) -> None:
        if not self.loaded:
            self._restore(self._saved)
            logger.error('Refusing to write %s before it has been loaded', self.path)
            raise UnavailableError(UNAVAILABLE_MESSAGE)

        snapshot = self._snapshot()
        temporary_path = self.path.with_suffix('.json.tmp')
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            temporary_path.write_text(snapshot.model_dump_json(by_alias=True, indent=2), encoding='utf-8')
            os.replace(temporary_path, self.path)
        except OSError as exc:
            logger.exception('Could not write data file %s', self.path)
            # Drop the unsaved write so memory matches the last saved document.
            self._restore(self._saved)
            raise UnavailableError(UNAVAILABLE_MESSAGE) from exc

        self._saved = snapshot


class FileStorage(Storage):
    def __init__(self, state: FileState):
        super().__init__(
            members=MemoryMemberStore(state),
            bookings=MemoryBookingStore(state),
            activities=MemoryActivityStore(state),
            comments=MemoryCommentStore(state),
        )
        self.state = state

    def initialize(self) -> None:
        self.state.load()


def build_file_storage(data_dir: str | os.PathLike) -> FileStorage:
    return FileStorage(FileState(data_dir))
