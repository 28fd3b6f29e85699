"""
Property collection accessor.
Turns property API calls into a {items, loading, error, pagination} view for
one list screen, guarding it against out-of-order responses.
"""

import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Set, TypeVar, Union

from galactavista.api.client import APIClient
from galactavista.schemas import (
    AgentPropertyFilters,
    PaginatedProperties,
    PaginationInfo,
    PropertyCreate,
    PropertyResponse,
    PropertySearchFilters,
    PropertyUpdate,
)
from galactavista.services.error_handler import ErrorHandlerService
from galactavista.utils.exceptions import ClientError

logger = logging.getLogger(__name__)

ResultType = TypeVar("ResultType")
Filters = Union[PropertySearchFilters, Mapping[str, Any]]


@dataclass(frozen=True)
class PropertyCollectionState:
    """Snapshot of the accessor's query result set."""

    items: List[PropertyResponse] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    pagination: Optional[PaginationInfo] = None


class PropertyCollection:
    """
    Stateful facade over the property endpoints for one list view.

    Every call is tagged with an increasing sequence number. Results that
    replace the whole list (fetch, fetch_one, fetch_by_agent) are dropped when
    a newer call has already been applied; incremental results (create,
    update, delete) always apply. Callers get their result or exception
    either way.
    """

    def __init__(self, api_client: APIClient):
        self.api = api_client
        self._state = PropertyCollectionState()
        self._subscribers: List[Callable[[PropertyCollectionState], None]] = []
        self._sequence = itertools.count(1)
        self._pending: Set[int] = set()
        self._applied_seq = 0

    @property
    def state(self) -> PropertyCollectionState:
        return self._state

    @property
    def items(self) -> List[PropertyResponse]:
        return list(self._state.items)

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def pagination(self) -> Optional[PaginationInfo]:
        return self._state.pagination

    def subscribe(self, callback: Callable[[PropertyCollectionState], None]) -> Callable[[], None]:
        """Register a state-change callback; returns the unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def clear_error(self) -> None:
        self._set_state(replace(self._state, error=None))

    # Queries

    async def fetch(self, filters: Optional[Filters] = None) -> PropertyCollectionState:
        """
        Load a page of properties, replacing items and pagination.

        A failure sets ``error`` and keeps the previous items; it is not raised.
        """
        await self._run(
            lambda: self.api.get_properties(filters),
            _replace_page,
            fallback="Failed to fetch properties",
            wholesale=True,
            raise_errors=False,
        )
        return self._state

    async def search(self, filters: Filters) -> PropertyCollectionState:
        return await self.fetch(filters)

    async def fetch_one(self, property_id: int) -> PropertyResponse:
        """Load a single property for a detail view. Failures are raised."""
        return await self._run(
            lambda: self.api.get_property(property_id),
            lambda state, prop: replace(state, items=[prop]),
            fallback="Failed to fetch property",
            wholesale=True,
        )

    async def fetch_by_agent(
        self,
        filters: Optional[Union[AgentPropertyFilters, Mapping[str, Any]]] = None
    ) -> PaginatedProperties:
        """Load the current agent's properties and return the raw page."""
        return await self._run(
            lambda: self.api.get_properties_by_agent(filters),
            _replace_page,
            fallback="Failed to fetch agent properties",
            wholesale=True,
        )

    # Mutations

    async def create(self, property_data: Union[PropertyCreate, Mapping[str, Any]]) -> PropertyResponse:
        """Create a property and put it first in the list."""
        return await self._run(
            lambda: self.api.create_property(property_data),
            lambda state, prop: replace(state, items=[prop] + list(state.items)),
            fallback="Failed to create property",
        )

    async def update(
        self,
        property_id: int,
        property_data: Union[PropertyUpdate, Mapping[str, Any]]
    ) -> PropertyResponse:
        """Update a property; the local copy is replaced only if present."""
        return await self._run(
            lambda: self.api.update_property(property_id, property_data),
            lambda state, prop: replace(
                state,
                items=[prop if p.id == property_id else p for p in state.items]
            ),
            fallback="Failed to update property",
        )

    async def delete(self, property_id: int) -> None:
        """Delete a property; it leaves the list only after the server confirms."""
        await self._run(
            lambda: self.api.delete_property(property_id),
            lambda state, _: replace(state, items=[p for p in state.items if p.id != property_id]),
            fallback="Failed to delete property",
        )

    # Internals

    async def _run(
        self,
        call: Callable[[], Awaitable[ResultType]],
        apply: Callable[[PropertyCollectionState, ResultType], PropertyCollectionState],
        fallback: str,
        wholesale: bool = False,
        raise_errors: bool = True,
    ) -> Optional[ResultType]:
        seq = next(self._sequence)
        self._pending.add(seq)
        self._set_state(replace(self._state, loading=True, error=None))

        try:
            result = await call()
        except ClientError as e:
            self._pending.discard(seq)
            stale = wholesale and seq < self._applied_seq
            if stale:
                self._set_state(replace(self._state, loading=bool(self._pending)))
            else:
                message = ErrorHandlerService.user_message(e, fallback)
                logger.debug(f"Property call {seq} failed: {message}")
                self._set_state(replace(self._state, loading=bool(self._pending), error=message))
            if raise_errors:
                raise
            return None

        self._pending.discard(seq)
        if wholesale and seq < self._applied_seq:
            logger.debug(f"Discarding stale property result {seq} (applied {self._applied_seq})")
            self._set_state(replace(self._state, loading=bool(self._pending)))
            return result

        if wholesale:
            self._applied_seq = max(self._applied_seq, seq)
        new_state = apply(self._state, result)
        self._set_state(replace(new_state, loading=bool(self._pending), error=None))
        return result

    def _set_state(self, state: PropertyCollectionState) -> None:
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("Property collection subscriber failed")


def _replace_page(state: PropertyCollectionState, page: PaginatedProperties) -> PropertyCollectionState:
    return replace(state, items=list(page.data), pagination=page.pagination)
