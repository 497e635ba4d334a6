"""Public API visibility classification."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from symbols.model import MAX_CONTAINMENT_DEPTH, Accessibility

if TYPE_CHECKING:
    from symbols.model import Symbol

logger = logging.getLogger(__name__)

_PROTECTED_ACCESSIBILITIES = frozenset(
    {Accessibility.PROTECTED, Accessibility.PROTECTED_OR_INTERNAL}
)


def is_public_api(symbol: Symbol) -> bool:
    """Return True when ``symbol`` is part of the externally visible surface.

    A public symbol counts when every enclosing type is public. A protected
    (or protected-or-internal) symbol counts when it has an enclosing type
    that itself counts; top-level protected declarations never do. Event
    add/remove accessors are excluded because they belong to the event.
    """
    if symbol.is_event_accessor:
        return False

    current = symbol
    # Once a public symbol is reached, every outer type must be public too.
    strict = False
    for _ in range(MAX_CONTAINMENT_DEPTH):
        accessibility = current.accessibility
        container = current.containing_type

        if accessibility is Accessibility.PUBLIC:
            if container is None:
                return True
            strict = True
        elif accessibility in _PROTECTED_ACCESSIBILITIES and not strict:
            if container is None:
                return False
        else:
            return False

        current = container

    logger.warning(
        "Containment chain of %r exceeds %d levels; treating it as not public",
        symbol.name,
        MAX_CONTAINMENT_DEPTH,
    )
    return False


__all__ = ["is_public_api"]
