"""Spend catalog and the request/approval book."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .exceptions import InvalidAmountError, NotFoundError, RequestAlreadyPendingError
from .models import (
    RequestItem,
    SpendCategory,
    SpendItem,
    SpendItemDraft,
    SpendItemUpdate,
    SpendRequest,
)

DEFAULT_SPEND_ITEMS: tuple[SpendItemDraft, ...] = (
    SpendItemDraft("Watch a movie", "🎬", 40, 1, 1, SpendCategory.SCREEN_TIME, "Pick a movie to watch"),
    SpendItemDraft("Watch TV episode", "📺", 20, 1, 3, SpendCategory.SCREEN_TIME, "Watch your favorite show"),
    SpendItemDraft("iPad time", "📱", 1, 15, 30, SpendCategory.SCREEN_TIME, "Minutes of iPad time"),
    SpendItemDraft("Junk food", "🍪", 5, 1, 3, SpendCategory.TREATS, "A yummy treat"),
    SpendItemDraft("Games", "🎮", 20, 30, 60, SpendCategory.GAMES, "Minutes of game time"),
    SpendItemDraft("Extra story", "📖", 15, 1, 2, SpendCategory.ACTIVITIES, "Bedtime story at bedtime"),
)


class SpendCatalog:
    """Items a child may request, maintained by a parent."""

    def __init__(self, items: Iterable[SpendItem] = ()) -> None:
        self._items: Dict[str, SpendItem] = {}
        for item in items:
            self.add(item)

    @classmethod
    def with_defaults(cls) -> "SpendCatalog":
        return cls(draft.build(f"spend-{index}") for index, draft in enumerate(DEFAULT_SPEND_ITEMS))

    def __len__(self) -> int:
        return len(self._items)

    def items(self, *, category: SpendCategory | None = None) -> Sequence[SpendItem]:
        if category is None:
            return tuple(self._items.values())
        return tuple(item for item in self._items.values() if item.category is category)

    def get(self, item_id: str) -> SpendItem:
        try:
            return self._items[item_id]
        except KeyError as exc:
            raise NotFoundError(f"Spend item '{item_id}' not found.", item_id=item_id) from exc

    def add(self, item: SpendItem) -> SpendItem:
        if item.id in self._items:
            raise ValueError(f"Spend item '{item.id}' already exists.")
        self._items[item.id] = item
        return item

    def update(self, item_id: str, update: SpendItemUpdate) -> SpendItem:
        return update.apply(self.get(item_id))

    def remove(self, item_id: str) -> SpendItem:
        item = self.get(item_id)
        del self._items[item_id]
        return item

    def request_item(self, item_id: str, quantity: Optional[int] = None) -> RequestItem:
        """Snapshot a catalog entry for a request, checking the quantity bounds."""

        item = self.get(item_id)
        amount = item.quantity if quantity is None else quantity
        if not 1 <= amount <= item.max_quantity:
            raise InvalidAmountError(
                f"Quantity for '{item.name}' must be between 1 and {item.max_quantity}.",
                item_id=item_id,
                quantity=amount,
            )
        return RequestItem(
            item_ref=item.id,
            name=item.name,
            icon=item.icon,
            unit_cost=item.unit_cost,
            quantity=amount,
        )


class SpendRequestBook:
    """Pending requests plus the resolved history (newest first)."""

    def __init__(
        self,
        pending: Iterable[SpendRequest] = (),
        history: Iterable[SpendRequest] = (),
        *,
        id_factory: Callable[[str], str],
    ) -> None:
        self._pending: List[SpendRequest] = list(pending)
        self._history: List[SpendRequest] = list(history)
        self._id_factory = id_factory

    @property
    def pending(self) -> Sequence[SpendRequest]:
        return tuple(self._pending)

    @property
    def history(self) -> Sequence[SpendRequest]:
        return tuple(self._history)

    def pending_for(self, child_id: str) -> Optional[SpendRequest]:
        for request in self._pending:
            if request.child_id == child_id:
                return request
        return None

    def get_pending(self, request_id: str) -> SpendRequest:
        for request in self._pending:
            if request.id == request_id:
                return request
        raise NotFoundError(f"Request '{request_id}' not found.", request_id=request_id)

    def create(self, child_id: str, items: Sequence[RequestItem], *, at: datetime) -> SpendRequest:
        if self.pending_for(child_id) is not None:
            raise RequestAlreadyPendingError(
                "A request is already waiting for a parent.", child_id=child_id
            )
        request = SpendRequest.create(self._id_factory("req"), child_id, items, when=at)
        self._pending.append(request)
        return request

    def approve(self, request_id: str, *, at: datetime) -> SpendRequest:
        request = self.get_pending(request_id)
        request.approve(when=at)
        self._archive(request)
        return request

    def deny(self, request_id: str, *, at: datetime) -> SpendRequest:
        request = self.get_pending(request_id)
        request.deny(when=at)
        self._archive(request)
        return request

    def cancel(self, request_id: str) -> SpendRequest:
        """Withdraw a pending request without recording it in history."""

        request = self.get_pending(request_id)
        self._pending.remove(request)
        return request

    def discard_child(self, child_id: str) -> None:
        self._pending = [request for request in self._pending if request.child_id != child_id]

    def _archive(self, request: SpendRequest) -> None:
        self._pending.remove(request)
        self._history.insert(0, request)


__all__ = ["DEFAULT_SPEND_ITEMS", "SpendCatalog", "SpendRequestBook"]
