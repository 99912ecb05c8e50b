"""
Append-only registries of uniquely named entries.

``SiteRegistry`` holds every site of a catalog; each site owns a
``TagRegistry`` for its tags. Entries are never updated or removed, and an
entry only becomes visible once it is fully constructed.
"""
import threading
from typing import Dict, Generic, Iterator, List, Tuple, Type, TypeVar

from sitetags.core.config import UINT256_MAX
from sitetags.core.errors import DuplicateName, NotFound
from sitetags.core.logging_config import LoggingConfig
from sitetags.registry.entries import NamedEntry, Site, Tag, validate_name
from sitetags.registry.sinks import PaymentSink

logger = LoggingConfig.get_logger(__name__)

E = TypeVar('E', bound=NamedEntry)


class EntryRegistry(Generic[E]):
    """Name-unique, insertion-ordered collection of entries"""

    entry_class: Type[E]

    def __init__(self, sink: PaymentSink, max_weight: int = UINT256_MAX):
        self._sink = sink
        self._max_weight = max_weight
        self._by_name: Dict[str, E] = {}
        self._order: List[E] = []
        self._lock = threading.Lock()

    def add(self, name: str) -> E:
        """
        Create and register a new entry

        Raises:
            DuplicateName: ``name`` is already registered here
            InvalidName: ``name`` is empty or contains the separator
        """
        with self._lock:
            if isinstance(name, str) and name in self._by_name:
                raise DuplicateName(
                    f"{self.entry_class.kind} '{name}' already exists",
                    metadata={"name": name},
                )
            validate_name(name)
            entry = self.entry_class(name, self._sink, max_weight=self._max_weight)
            self._by_name[name] = entry
            self._order.append(entry)
        logger.debug(f"Added {entry.kind} '{name}'", extra={"entry_kind": entry.kind, "entry_name": name})
        return entry

    def get(self, name: str) -> E:
        try:
            return self._by_name[name]
        except (KeyError, TypeError):
            raise NotFound(
                f"{self.entry_class.kind} '{name}' not found",
                metadata={"name": name},
            ) from None

    def enumerate_all(self) -> Tuple[E, ...]:
        """Snapshot of all entries in insertion order"""
        with self._lock:
            return tuple(self._order)

    def __contains__(self, name) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[E]:
        return iter(self.enumerate_all())


class TagRegistry(EntryRegistry[Tag]):
    entry_class = Tag


class SiteRegistry(EntryRegistry[Site]):
    entry_class = Site

    def dump(self) -> List[str]:
        """One ``site;pos.neg;tag;pos.neg;...`` line per site, insertion order"""
        return [site.format() for site in self.enumerate_all()]
