"""
Catalog entries: sites and their tags.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from sitetags.core.config import UINT256_MAX
from sitetags.core.errors import InvalidName
from sitetags.registry.sinks import PaymentSink
from sitetags.registry.voting import VotingCounter

if TYPE_CHECKING:
    from sitetags.registry.store import TagRegistry

# Separates fields in the flattened dump, so it may never appear in a name
FIELD_SEPARATOR = ";"


def validate_name(name) -> str:
    """Raise InvalidName unless ``name`` is a non-empty string free of the separator"""
    if not isinstance(name, str):
        raise InvalidName(f"name must be a string, got {type(name).__name__}")
    if not name:
        raise InvalidName("name must not be empty")
    if FIELD_SEPARATOR in name:
        raise InvalidName(
            f"name must not contain '{FIELD_SEPARATOR}'",
            metadata={"name": name},
        )
    return name


class NamedEntry:
    """A name plus independent positive and negative voting counters"""

    kind = "entry"

    def __init__(self, name: str, sink: PaymentSink, max_weight: int = UINT256_MAX):
        self._name = validate_name(name)
        self.positive = VotingCounter(sink, max_weight=max_weight)
        self.negative = VotingCounter(sink, max_weight=max_weight)

    @property
    def name(self) -> str:
        return self._name

    def counter(self, positive: bool) -> VotingCounter:
        return self.positive if positive else self.negative

    def format_weights(self) -> str:
        return f"{self.positive.current_weight()}.{self.negative.current_weight()}"

    def format(self) -> str:
        return FIELD_SEPARATOR.join((self._name, self.format_weights()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, +{self.positive.current_weight()}, -{self.negative.current_weight()})"


class Tag(NamedEntry):
    kind = "tag"


class Site(NamedEntry):
    """A named entry owning its own tag registry"""

    kind = "site"

    def __init__(self, name: str, sink: PaymentSink, max_weight: int = UINT256_MAX):
        from sitetags.registry.store import TagRegistry

        super().__init__(name, sink, max_weight=max_weight)
        self.tags: TagRegistry = TagRegistry(sink, max_weight=max_weight)

    def format(self) -> str:
        """``name;pos.neg`` followed by ``tag;pos.neg`` for each tag in insertion order"""
        fields = [self.name, self.format_weights()]
        for tag in self.tags.enumerate_all():
            fields.append(tag.name)
            fields.append(tag.format_weights())
        return FIELD_SEPARATOR.join(fields)
