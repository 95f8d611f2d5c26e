"""Approval confirmations waiting to be shown to a child."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from .exceptions import NotFoundError
from .models import ApprovedRequestNotification, SpendRequest


class ApprovalNotifications:
    """Deliver each approval at least once until the child acknowledges it.

    Unseen notifications are handed out oldest approval first so a child who
    had several requests approved sees them in the order they happened.
    """

    def __init__(self, notifications: Iterable[ApprovedRequestNotification] = ()) -> None:
        self._items: List[ApprovedRequestNotification] = list(notifications)

    def __len__(self) -> int:
        return len(self._items)

    def all(self) -> Sequence[ApprovedRequestNotification]:
        return tuple(self._items)

    def queue(self, request: SpendRequest, *, at: datetime) -> ApprovedRequestNotification:
        notification = ApprovedRequestNotification(
            request_id=request.id,
            child_id=request.child_id,
            items=request.items,
            total_cost=request.total_cost,
            approved_at=at,
        )
        self._items.append(notification)
        return notification

    def unshown(self, *, child_id: str | None = None) -> Sequence[ApprovedRequestNotification]:
        pending = [
            item
            for item in self._items
            if not item.shown_to_child and item.items and (child_id is None or item.child_id == child_id)
        ]
        return tuple(sorted(pending, key=lambda item: item.approved_at))

    def next_unshown(self, *, child_id: str | None = None) -> Optional[ApprovedRequestNotification]:
        pending = self.unshown(child_id=child_id)
        return pending[0] if pending else None

    def mark_shown(self, request_id: str) -> ApprovedRequestNotification:
        for item in self._items:
            if item.request_id == request_id:
                item.shown_to_child = True
                return item
        raise NotFoundError(f"No notification for request '{request_id}'.", notification_id=request_id)

    def discard_child(self, child_id: str) -> None:
        self._items = [item for item in self._items if item.child_id != child_id]


__all__ = ["ApprovalNotifications"]
