"""Per-field value-kind tallies accumulated over a whole file."""
import enum
from typing import Any, Dict, Iterator, Tuple

from jsonshape.config import DEFAULT_STRING_THRESHOLD


class ValueKind(enum.Enum):
    SHORT_STRING = "short_str"
    LONG_STRING = "long_str"
    NUMBER = "number"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"


def classify(value: Any, threshold: int = DEFAULT_STRING_THRESHOLD) -> ValueKind:
    """Map a parsed JSON value onto its ValueKind.

    bool is checked before number because it subclasses int in Python;
    booleans and nulls fall through to UNKNOWN.
    """
    if isinstance(value, str):
        if len(value) > threshold:
            return ValueKind.LONG_STRING
        return ValueKind.SHORT_STRING
    if isinstance(value, bool) or value is None:
        return ValueKind.UNKNOWN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    return ValueKind.UNKNOWN


_COUNTER_FOR_KIND = {
    ValueKind.SHORT_STRING: "short_string_count",
    ValueKind.LONG_STRING: "long_string_count",
    ValueKind.NUMBER: "number_count",
    ValueKind.ARRAY: "array_count",
    ValueKind.OBJECT: "object_count",
}


class FieldTally:
    """Counters for one field name; each observation bumps exactly one."""

    __slots__ = tuple(_COUNTER_FOR_KIND.values())

    def __init__(self, short_string_count=0, long_string_count=0, number_count=0,
                 array_count=0, object_count=0):
        self.short_string_count = short_string_count
        self.long_string_count = long_string_count
        self.number_count = number_count
        self.array_count = array_count
        self.object_count = object_count

    def increment(self, kind: ValueKind) -> None:
        attr = _COUNTER_FOR_KIND.get(kind)
        if attr is None:
            raise ValueError(f"no counter for {kind}")
        setattr(self, attr, getattr(self, attr) + 1)

    @property
    def total(self) -> int:
        return sum(getattr(self, attr) for attr in self.__slots__)

    def as_dict(self) -> Dict[str, int]:
        return {kind.value: getattr(self, attr) for kind, attr in _COUNTER_FOR_KIND.items()}

    def __eq__(self, other):
        if not isinstance(other, FieldTally):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        counts = " ".join(f"{k}={v}" for k, v in self.as_dict().items())
        return f"FieldTally({counts})"


class StatsTable:
    """Flat mapping of field name to FieldTally; names are not scoped by path."""

    def __init__(self, threshold: int = DEFAULT_STRING_THRESHOLD):
        if threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {threshold}")
        self.threshold = threshold
        self.unknown_count = 0
        self._tallies: Dict[str, FieldTally] = {}

    def tally_for(self, name: str) -> FieldTally:
        """Return the tally for name, inserting an all-zero one if needed."""
        tally = self._tallies.get(name)
        if tally is None:
            tally = self._tallies[name] = FieldTally()
        return tally

    def record(self, name: str, kind: ValueKind) -> None:
        tally = self.tally_for(name)
        if kind is ValueKind.UNKNOWN:
            self.unknown_count += 1
        else:
            tally.increment(kind)

    def classify(self, value: Any) -> ValueKind:
        return classify(value, self.threshold)

    def items(self) -> Iterator[Tuple[str, FieldTally]]:
        return iter(self._tallies.items())

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {name: self._tallies[name].as_dict() for name in sorted(self._tallies)}

    def __getitem__(self, name: str) -> FieldTally:
        return self._tallies[name]

    def __contains__(self, name) -> bool:
        return name in self._tallies

    def __iter__(self):
        return iter(self._tallies)

    def __len__(self):
        return len(self._tallies)

    def __eq__(self, other):
        if not isinstance(other, StatsTable):
            return NotImplemented
        return (self.threshold == other.threshold
                and self.unknown_count == other.unknown_count
                and self._tallies == other._tallies)

    def __repr__(self):
        return f"StatsTable({len(self)} fields, threshold={self.threshold})"
