"""
Event bus: notifies a UI layer of board changes.

The board emits:
  tasks_changed    - local task list mutated (re-render)
  drag_confirmed   - server accepted a drag's status change (task=)
  drag_reverted    - drag write failed, board reloaded (task_id=)
  notify           - blocking user-facing message (message=)
"""
import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

TASKS_CHANGED = "tasks_changed"
DRAG_CONFIRMED = "drag_confirmed"
DRAG_REVERTED = "drag_reverted"
NOTIFY = "notify"


class EventBus:
    """Routes board events to subscribed callbacks."""

    def __init__(self):
        self.subscribers: Dict[str, List[Callable]] = {}  # event_type -> callbacks

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """Register a callback for an event type."""
        if event_type not in self.subscribers:
            self.subscribers[event_type] = []
        self.subscribers[event_type].append(callback)

    def unsubscribe(self, event_type: str, callback: Callable) -> None:
        callbacks = self.subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event_type: str, **kwargs) -> None:
        """Emit an event to all subscribers. A failing callback does not stop the rest."""
        for callback in list(self.subscribers.get(event_type, [])):
            try:
                callback(**kwargs)
            except Exception:
                logger.exception("Error in %s callback", event_type)
