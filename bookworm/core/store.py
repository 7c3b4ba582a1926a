"""FilterStateStore: the single owner of a session's FilterCriteria."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from bookworm.core.errors import UnknownFilterError
from bookworm.models.criteria import DEFAULT_CRITERIA, FilterCriteria, resolve_field_name

logger = logging.getLogger(__name__)

Listener = Callable[[FilterCriteria], None]


class FilterStateStore:
    """Holds the canonical filter criteria.

    Every mutation builds a new immutable FilterCriteria and swaps it in with
    a single assignment, so ``get()`` always returns a complete snapshot.
    Values are stored as given; the compiler decides what to ignore.
    ``reset()`` goes back to ``defaults``, which a session can take from
    the [search] config table.

    Example:
        store = FilterStateStore()
        store.update("yearFrom", 2000)
        store.update("sort_by", "title_asc")
        store.get().year_from  # 2000
        store.reset()
    """

    def __init__(
        self,
        initial: Optional[FilterCriteria] = None,
        defaults: Optional[FilterCriteria] = None,
    ) -> None:
        self.defaults = defaults if defaults is not None else DEFAULT_CRITERIA
        self._criteria = initial if initial is not None else self.defaults
        self._listeners: list[Listener] = []

    def get(self) -> FilterCriteria:
        """Return the current criteria snapshot."""
        return self._criteria

    def update(self, key: str, value: Any) -> FilterCriteria:
        """Replace exactly one field, keeping all others.

        Args:
            key: Field name or its camelCase alias.
            value: New value. Not validated.

        Returns:
            The new criteria snapshot.

        Raises:
            UnknownFilterError: If the key names no FilterCriteria field.
        """
        return self.update_many({key: value})

    def update_many(self, updates: Mapping[str, Any]) -> FilterCriteria:
        """Replace several fields in one new snapshot.

        Raises:
            UnknownFilterError: If any key names no FilterCriteria field.
                Nothing is changed in that case.
        """
        resolved: dict[str, Any] = {}
        for key, value in updates.items():
            name = resolve_field_name(key)
            if name is None:
                raise UnknownFilterError(key)
            resolved[name] = value

        self._set(self._criteria.model_copy(update=resolved))
        return self._criteria

    def reset(self) -> FilterCriteria:
        """Restore the default criteria."""
        self._set(self.defaults)
        return self._criteria

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run with the new snapshot after each change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, criteria: FilterCriteria) -> None:
        self._criteria = criteria
        logger.debug("Filter criteria now %r", criteria)
        for listener in list(self._listeners):
            listener(criteria)
