import logging
from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

K = TypeVar('K')
V = TypeVar('V')

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 16
LOAD_FACTOR = 0.7


class SlotMap(Generic[K, V]):
    """Key/value map built directly on a fixed-size slot array.

    Entries are kept in an insertion-ordered arena. Each slot holds the arena
    positions of the keys that hash to it, so colliding keys share a chain
    instead of overwriting each other. When the number of entries reaches
    LOAD_FACTOR of the capacity, the next new key doubles the slot array.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        self._capacity = capacity
        self._size = 0
        self._entries: List[Optional[Tuple[K, V]]] = []
        self._slots: List[List[int]] = [[] for _ in range(capacity)]

    @staticmethod
    def get_hash(key, capacity: int) -> int:
        if capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        # Python ints are unbounded, so abs() is exact even for the most negative hash
        return abs(hash(key)) % capacity

    def _find(self, key) -> Tuple[int, int]:
        """Return (slot index, arena position) for key; position is -1 when absent."""
        index = self.get_hash(key, self._capacity)
        for position in self._slots[index]:
            k, _ = self._entries[position]
            if k is key or k == key:
                return index, position
        return index, -1

    def _rebuild(self, capacity: int) -> None:
        entries = [entry for entry in self._entries if entry is not None]
        slots: List[List[int]] = [[] for _ in range(capacity)]
        for position, (key, _) in enumerate(entries):
            slots[self.get_hash(key, capacity)].append(position)
        self._capacity = capacity
        self._entries = entries
        self._slots = slots

    def resize(self) -> None:
        """Double the capacity and re-chain every live entry.

        The new slot array is built in full before it replaces the old one.
        Tombstones left by removals are dropped along the way.
        """
        self._rebuild(self._capacity * 2)
        logger.debug("Resized to %d", self._capacity)

    def put(self, key: K, value: V) -> None:
        index, position = self._find(key)
        if position >= 0:
            self._entries[position] = (self._entries[position][0], value)
            return
        if self._size >= LOAD_FACTOR * self._capacity:
            self.resize()
            index = self.get_hash(key, self._capacity)
        self._slots[index].append(len(self._entries))
        self._entries.append((key, value))
        self._size += 1

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        _, position = self._find(key)
        if position < 0:
            return default
        return self._entries[position][1]

    def remove(self, key: K, default: Optional[V] = None) -> Optional[V]:
        index, position = self._find(key)
        if position < 0:
            return default
        _, value = self._entries[position]
        self._slots[index].remove(position)
        self._entries[position] = None
        self._size -= 1
        # compact once tombstones outnumber live entries
        if len(self._entries) - self._size > self._size:
            self._rebuild(self._capacity)
        return value

    def is_empty(self) -> bool:
        return self._size == 0

    def has_value(self, value: V) -> bool:
        for entry in self._entries:
            if entry is not None and entry[1] == value:
                return True
        return False

    def contains_key(self, key: K) -> bool:
        _, position = self._find(key)
        return position >= 0

    def capacity(self) -> int:
        return self._capacity

    def size(self) -> int:
        return self._size

    def load_factor(self) -> float:
        return self._size / self._capacity

    def chain_lengths(self) -> List[int]:
        """Number of entries in each slot, indexed by slot."""
        return [len(chain) for chain in self._slots]

    def clear(self) -> None:
        self._entries = []
        self._slots = [[] for _ in range(self._capacity)]
        self._size = 0

    def keys(self) -> List[K]:
        return [entry[0] for entry in self._entries if entry is not None]

    def values(self) -> List[V]:
        return [entry[1] for entry in self._entries if entry is not None]

    def items(self) -> List[Tuple[K, V]]:
        return [entry for entry in self._entries if entry is not None]

    def copy(self) -> 'SlotMap[K, V]':
        """Create a copy of this SlotMap with the same capacity and order.

        Note: Values are shared, not copied. Mutating a mutable value through
        one map is visible through the other.
        """
        clone: SlotMap[K, V] = SlotMap(self._capacity)
        clone._entries = self.items()
        clone._size = self._size
        clone._rebuild(self._capacity)
        return clone

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key) -> bool:
        return self.contains_key(key)

    def __getitem__(self, key: K) -> V:
        _, position = self._find(key)
        if position < 0:
            raise KeyError(key)
        return self._entries[position][1]

    def __setitem__(self, key: K, value: V) -> None:
        self.put(key, value)

    def __delitem__(self, key: K) -> None:
        if not self.contains_key(key):
            raise KeyError(key)
        self.remove(key)

    def __iter__(self) -> Iterator[K]:
        for entry in self._entries:
            if entry is not None:
                yield entry[0]

    def __eq__(self, other) -> bool:
        if not isinstance(other, SlotMap):
            return NotImplemented
        if self._size != other._size:
            return False
        for key, value in self.items():
            _, position = other._find(key)
            if position < 0 or other._entries[position][1] != value:
                return False
        return True

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"SlotMap({{{pairs}}})"
