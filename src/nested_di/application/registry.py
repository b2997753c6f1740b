"""Application layer - Per-container registration storage."""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from nested_di.domain import DuplicateRegistrationError, RegistrationEntry, RegistrationNotFoundError


class Registry:
    """Maps (type identifier, key) pairs to registration entries for one container.

    The default registration of a type is stored under the ``None`` key, which
    is distinct from the empty string. Parents are never merged in here; the
    resolver walks the hierarchy at lookup time.

    Attributes:
        _entries: Nested mapping type identifier -> key -> entry, in insertion order.
    """

    def __init__(self) -> None:
        self._entries: Dict[Any, Dict[Optional[str], RegistrationEntry]] = {}

    def add(self, entry: RegistrationEntry) -> None:
        """Store an entry under its type identifier and key.

        Raises:
            DuplicateRegistrationError: If the pair is already present.
        """
        by_key = self._entries.setdefault(entry.dependency_type, {})
        if entry.key in by_key:
            raise DuplicateRegistrationError(entry.dependency_type, entry.key)
        by_key[entry.key] = entry

    def find(self, dependency_type: Any, key: Optional[str] = None) -> Optional[RegistrationEntry]:
        """Return the exact entry for the pair, or None."""
        return self._entries.get(dependency_type, {}).get(key)

    def get(self, dependency_type: Any, key: Optional[str] = None) -> RegistrationEntry:
        """Return the exact entry for the pair.

        Raises:
            RegistrationNotFoundError: If the pair is not registered here.
        """
        entry = self.find(dependency_type, key)
        if entry is None:
            raise RegistrationNotFoundError(dependency_type, key)
        return entry

    def get_all(self, dependency_type: Any) -> List[RegistrationEntry]:
        """Return every entry for a type identifier in insertion order, ignoring keys."""
        return list(self._entries.get(dependency_type, {}).values())

    def remove(self, dependency_type: Any, key: Optional[str] = None) -> RegistrationEntry:
        """Remove and return the entry for the pair.

        Raises:
            RegistrationNotFoundError: If the pair is not registered here.
        """
        by_key = self._entries.get(dependency_type, {})
        if key not in by_key:
            raise RegistrationNotFoundError(dependency_type, key)
        entry = by_key.pop(key)
        if not by_key:
            del self._entries[dependency_type]
        return entry

    def entries(self) -> Iterator[Tuple[Any, Optional[str], RegistrationEntry]]:
        """Iterate (type identifier, key, entry) triples in insertion order."""
        for dependency_type, by_key in list(self._entries.items()):
            for key, entry in list(by_key.items()):
                yield dependency_type, key, entry

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, item: Tuple[Any, Optional[str]]) -> bool:
        dependency_type, key = item
        return self.find(dependency_type, key) is not None

    def __len__(self) -> int:
        return sum(len(by_key) for by_key in self._entries.values())
