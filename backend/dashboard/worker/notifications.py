"""Local reminder notifications fired from in-memory timers.

Timers live in the running event loop only: a worker restart drops every
reminder that has not fired yet. Clients that need durable reminders must
re-send ``SCHEDULE_NOTIFICATION`` after reconnecting.
"""

import asyncio
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from dashboard.schemas.worker import NotificationAction, NotificationRead, ScheduledNotification
from dashboard.worker.clients import ClientRegistry, WorkerClient

logger = logging.getLogger(__name__)

DAILY_CHECK_TAG = "daily-check"

REMINDER_ACTIONS = [
    NotificationAction(action="open", title="Open Dashboard"),
    NotificationAction(action="dismiss", title="Dismiss"),
]

_notification_ids = itertools.count(1)


@dataclass
class Notification:
    """A notification on display."""

    title: str
    body: str = ""
    tag: str | None = None
    icon: str | None = None
    badge: str | None = None
    require_interaction: bool = False
    actions: list[NotificationAction] = field(default_factory=list)
    id: str = field(default_factory=lambda: f"notification-{next(_notification_ids)}")
    shown_at: float = field(default_factory=time.time)

    def to_read(self) -> NotificationRead:
        return NotificationRead(
            id=self.id,
            title=self.title,
            body=self.body,
            tag=self.tag,
            icon=self.icon,
            badge=self.badge,
            require_interaction=self.require_interaction,
            actions=self.actions,
            shown_at=self.shown_at,
        )


class NotificationCenter:
    """Displayed notifications. A new one with the same tag replaces the old one."""

    def __init__(self):
        self._displayed: dict[str, Notification] = {}

    def show(self, title: str, **options) -> Notification:
        notification = Notification(title=title, **options)
        if notification.tag:
            for existing in self.displayed(tag=notification.tag):
                self.close(existing.id)
        self._displayed[notification.id] = notification
        logger.info("Showing notification %r (%s)", title, notification.id)
        return notification

    def close(self, notification_id: str) -> bool:
        return self._displayed.pop(notification_id, None) is not None

    def get(self, notification_id: str) -> Notification | None:
        return self._displayed.get(notification_id)

    def displayed(self, tag: str | None = None) -> list[Notification]:
        return [n for n in self._displayed.values() if tag is None or n.tag == tag]


class NotificationScheduler:
    """Maps reminder ids to pending timers."""

    def __init__(
        self,
        center: NotificationCenter,
        clients: ClientRegistry,
        *,
        icon: str | None = None,
        badge: str | None = None,
        main_page: str = "./index.html",
        clock: Callable[[], float] = time.time,
    ):
        self.center = center
        self.clients = clients
        self.icon = icon
        self.badge = badge
        self.main_page = main_page
        self.clock = clock
        self._timers: dict[str, asyncio.TimerHandle] = {}

    @property
    def pending(self) -> list[str]:
        return list(self._timers)

    def schedule(self, reminder: ScheduledNotification) -> bool:
        """
        Arm a timer for ``reminder.timestamp``, replacing any timer with the same id.

        Returns False (and arms nothing) when the timestamp is not in the future.
        """
        self.cancel(reminder.id)
        delay_ms = reminder.timestamp - self.clock() * 1000
        if delay_ms <= 0:
            logger.debug("Reminder %s is in the past, not scheduled", reminder.id)
            return False

        loop = asyncio.get_running_loop()
        self._timers[reminder.id] = loop.call_later(delay_ms / 1000, self._fire, reminder)
        logger.info("Reminder %s scheduled in %.0f ms", reminder.id, delay_ms)
        return True

    def cancel(self, reminder_id: str) -> bool:
        handle = self._timers.pop(reminder_id, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def shutdown(self) -> None:
        for reminder_id in list(self._timers):
            self.cancel(reminder_id)

    def _fire(self, reminder: ScheduledNotification) -> None:
        self._timers.pop(reminder.id, None)
        self.center.show(
            reminder.title,
            body=reminder.body,
            tag=reminder.tag,
            icon=self.icon,
            badge=self.badge,
            require_interaction=True,
            actions=list(REMINDER_ACTIONS),
        )
        self.clients.broadcast({"type": "NOTIFICATION_SHOWN", "id": reminder.id})

    def handle_click(self, notification_id: str, action: str | None = None) -> WorkerClient | None:
        """
        Close the notification; for ``open`` (or a body click) focus a window.

        Focuses the first open window, or opens the main page when none is
        connected. Returns the client that was focused or opened.
        """
        self.center.close(notification_id)
        if action not in (None, "", "open"):
            return None

        windows = self.clients.match_all(type="window")
        if windows:
            windows[0].focus()
            return windows[0]
        return self.clients.open_window(self.main_page)

    def send_daily_reminder(self) -> Notification:
        return self.center.show(
            "Daily Check",
            body="Time to review your goals for today!",
            icon=self.icon,
            badge=self.badge,
        )
