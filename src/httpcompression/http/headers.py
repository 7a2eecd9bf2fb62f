"""
=============================================================================
HTTP HEADER COLLECTION
=============================================================================

An ordered, immutable list of header name/value pairs.

=============================================================================
WHY NOT A DICT?
=============================================================================

A dict looks like the obvious container for headers, but it loses two
things HTTP cares about:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  1. ORDER       Headers are written in the order they were added.   │
    │  2. DUPLICATES  Set-Cookie, Via, Warning... may legally repeat.     │
    └─────────────────────────────────────────────────────────────────────┘

So headers are stored as a tuple of (name, value) pairs. Lookups compare
names case-insensitively (RFC 7230 section 3.2), while the original
spelling is kept for writing.

=============================================================================
IMMUTABILITY
=============================================================================

A Headers object is never changed in place. "Changing" headers means
building a new collection:

    headers = Headers([("Content-Type", "text/plain"), ("Content-Length", "11")])

    rewritten = headers.without("content-length").plus(
        ("content-length", "19"),
        ("content-encoding", "deflate"),
    )

    # headers is untouched, rewritten is a fresh object

The same response object can be shared by several threads (or reused by
a cache) without anyone observing a half-updated header list.

=============================================================================
"""

from typing import Iterable, Iterator, List, Optional, Tuple


HeaderPair = Tuple[str, str]


class Headers:
    """
    Immutable ordered collection of HTTP headers.

    Names are matched case-insensitively; duplicates are preserved.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Optional[Iterable[HeaderPair]] = None):
        """
        Create a header collection.

        Args:
            items: (name, value) pairs, or a mapping of name -> value.
        """
        if items is None:
            items = ()
        elif hasattr(items, "items"):
            items = items.items()
        self._items: Tuple[HeaderPair, ...] = tuple(
            (str(name), str(value)) for name, value in items
        )

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the first value for a header.

        Args:
            name: Header name (any case)
            default: Returned when the header is absent

        Returns:
            The first matching value, or default
        """
        wanted = name.lower()
        for key, value in self._items:
            if key.lower() == wanted:
                return value
        return default

    def get_all(self, name: str) -> List[str]:
        """Get every value for a header, in order."""
        wanted = name.lower()
        return [value for key, value in self._items if key.lower() == wanted]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        wanted = name.lower()
        return any(key.lower() == wanted for key, _ in self._items)

    # =========================================================================
    # DERIVED COLLECTIONS
    # =========================================================================

    def without(self, *names: str) -> "Headers":
        """
        Return a copy with every entry for the given names removed.

        Args:
            *names: Header names to drop (any case)

        Returns:
            New Headers object
        """
        dropped = {name.lower() for name in names}
        return Headers(
            (key, value) for key, value in self._items
            if key.lower() not in dropped
        )

    def plus(self, *pairs: HeaderPair) -> "Headers":
        """Return a copy with the given (name, value) pairs appended."""
        return Headers(self._items + tuple(pairs))

    # =========================================================================
    # CONTAINER PROTOCOL
    # =========================================================================

    def items(self) -> Tuple[HeaderPair, ...]:
        """Get all (name, value) pairs in order."""
        return self._items

    def __iter__(self) -> Iterator[HeaderPair]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"Headers({list(self._items)!r})"
