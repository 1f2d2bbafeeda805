import logging
import uuid
from typing import Any, Iterable

from ..schemas import ActivityEntry, ActivityUpdate

logger = logging.getLogger(__name__)


class EntryStore:
    """
    In-memory, insertion-ordered list of trip entries.

    Entries are immutable; edits replace the stored entry with an updated copy
    carrying over everything except title and color.
    """

    def __init__(self, entries: Iterable[ActivityEntry] = ()):
        self._entries: list[ActivityEntry] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[ActivityEntry]:
        return list(self._entries)

    def _index_of(self, entry_id: uuid.UUID) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        return None

    def get(self, entry_id: uuid.UUID) -> ActivityEntry | None:
        index = self._index_of(entry_id)
        return None if index is None else self._entries[index]

    def add(self, entry: ActivityEntry) -> ActivityEntry:
        self._entries.append(entry)
        logger.info("Added entry %s (%.3f kg CO2e)", entry.id, entry.emission_kg)
        return entry

    def remove(self, entry_id: uuid.UUID) -> ActivityEntry | None:
        index = self._index_of(entry_id)
        if index is None:
            logger.debug("Remove ignored, no entry %s", entry_id)
            return None
        return self._entries.pop(index)

    def update(self, entry_id: uuid.UUID, changes: ActivityUpdate) -> ActivityEntry | None:
        index = self._index_of(entry_id)
        if index is None:
            logger.debug("Update ignored, no entry %s", entry_id)
            return None

        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        updated = self._entries[index].model_copy(update=fields)
        self._entries[index] = updated
        return updated

    def total(self) -> float:
        return sum((entry.emission_kg for entry in self._entries), 0.0)

    def export(self) -> list[dict[str, Any]]:
        return [entry.model_dump(mode="json") for entry in self._entries]

    def load(self, items: Iterable[dict[str, Any]]) -> None:
        # Validate everything before touching the current contents
        entries = [ActivityEntry.model_validate(item) for item in items]
        self._entries = entries
        logger.info("Loaded %s entries", len(entries))
