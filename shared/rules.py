"""
Boolean rule primitives shared by the access evaluator and the
configurable entity lifecycle.

Both subsystems reduce their decisions to the same few checks: is a value
in a fixed set, and do all (or any) of a list of keys pass a lookup.
Lookup exceptions are never caught here.
"""

from typing import Any, Callable, Collection, Iterable, Optional

PermissionLookup = Callable[[str], bool]


def is_member(value: Optional[Any], collection: Optional[Collection[Any]]) -> bool:
    """Membership test that treats a missing value or set as no match."""
    if value is None or not collection:
        return False
    return value in collection


def all_granted(keys: Iterable[str], lookup: PermissionLookup) -> bool:
    """Logical AND over ``lookup``; stops at the first denial."""
    return all(lookup(key) for key in keys)


def any_granted(keys: Iterable[str], lookup: PermissionLookup) -> bool:
    """Logical OR over ``lookup``; stops at the first grant."""
    return any(lookup(key) for key in keys)
