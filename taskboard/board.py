"""Board state: the local task list and drag-and-drop reconciliation.

The board owns the ordered task list a UI renders as three columns.
Drag gestures mutate it optimistically; only a completed drag that
changes a card's column is written back, with a full reload from the
API if that write fails. Order within a column is local-only and is
never sent to the server.

Gesture contract (one gesture at a time, enforced by the UI):

    begin_drag(task_id)
    drag_over(dragged_id, target)   # repeatedly, synchronous
    await end_drag(target)          # or cancel_drag()

Targets are column tokens ("todo", "in-progress", "done"), task ids, or
the Column/TaskRef values from taskboard.schema.
"""
import asyncio
import logging
from dataclasses import replace
from typing import Any, List, Optional, Union

from .client import TaskClientError
from .events import EventBus, TASKS_CHANGED, DRAG_CONFIRMED, DRAG_REVERTED, NOTIFY
from .schema import (
    Task, TaskStatus, Column, TaskRef, DropTarget, DragState, Dragging, IDLE,
    COLUMN_TITLES,
    as_drop_target, target_id,
)

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load tasks. Make sure the task API is running."

Target = Union[str, DropTarget, None]


class TaskBoard:
    """
    Local view of the board plus the drag reconciliation state machine.

    `client` is anything with the TaskClient methods (list_tasks,
    update_task, create_task, delete_task). Its calls block, so they
    run in a worker thread; the event loop stays free for new gestures
    while a write is in flight. Whichever response lands last wins.
    """

    def __init__(self, client, events: Optional[EventBus] = None):
        self.client = client
        self.events = events or EventBus()
        self.tasks: List[Task] = []
        self.drag: DragState = IDLE
        self.loading: bool = False
        self.error: Optional[str] = None

    # -------------------- queries --------------------
    def find(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def _index(self, task_id: str) -> int:
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return -1

    def tasks_by_status(self, status: TaskStatus) -> List[Task]:
        return [t for t in self.tasks if t.status == status]

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.drag, Dragging)

    @property
    def active_task(self) -> Optional[Task]:
        """The card under the pointer, with its live (possibly mid-drag) status."""
        if self.is_dragging:
            return self.find(self.drag.task_id)
        return None

    def _changed(self) -> None:
        self.events.emit(TASKS_CHANGED, tasks=self.tasks)

    def _replace(self, updated: Task) -> bool:
        idx = self._index(updated.id)
        if idx < 0:
            return False
        self.tasks[idx] = updated
        self._changed()
        return True

    # -------------------- loading --------------------
    async def load_tasks(self) -> bool:
        """Replace the local list with the server's. Returns False on failure."""
        self.loading = True
        self.error = None
        try:
            tasks = await asyncio.to_thread(self.client.list_tasks)
        except TaskClientError as e:
            logger.warning("Loading tasks failed: %s", e)
            self.error = LOAD_ERROR
            return False
        finally:
            self.loading = False
        self.tasks = list(tasks)
        if self.is_dragging:
            # Hover history refers to the old list.
            self.drag = replace(self.drag, last_over=None)
        self._changed()
        return True

    # -------------------- drag gestures --------------------
    def begin_drag(self, task_id: str) -> None:
        """Start a gesture. Unknown ids (e.g. raced with a delete) are ignored."""
        task = self.find(task_id)
        if task is None:
            logger.debug("begin_drag: %s not on board", task_id)
            return
        self.drag = Dragging(task_id=task.id, original_status=task.status)

    def drag_over(self, dragged_id: str, target: Target) -> None:
        """
        Pointer moved over a candidate drop target.

        Over a column: the card takes that column's status (no reorder).
        Over a card in the same column: the dragged card moves to that
        card's index, once per hover. Anything else is ignored. Purely
        local.
        """
        target = as_drop_target(target)
        if target is None or target_id(target) == dragged_id:
            return

        dragged = self.find(dragged_id)
        if dragged is None:
            return

        key = (dragged_id, target)
        repeated = self.is_dragging and self.drag.last_over == key
        if self.is_dragging:
            self.drag = replace(self.drag, last_over=key)

        if isinstance(target, Column):
            if dragged.status != target.status:
                dragged.status = target.status
                self._changed()
            return

        over = self.find(target.task_id)
        # A repeated hover over the same card would swap the pair back.
        if repeated or over is None or over.status != dragged.status:
            return
        old_index = self._index(dragged_id)
        new_index = self._index(target.task_id)
        self.tasks.insert(new_index, self.tasks.pop(old_index))
        self._changed()

    def _drop_status(self, target: Optional[DropTarget]) -> Optional[TaskStatus]:
        if isinstance(target, Column):
            return target.status
        if isinstance(target, TaskRef):
            over = self.find(target.task_id)
            if over is not None:
                return over.status
        return None

    async def end_drag(self, target: Target = None) -> Optional[Task]:
        """
        Finish the gesture.

        Writes the new status once if the final column differs from the
        column the drag started in; a pass through another column that
        ends back home writes nothing. On a failed write the whole list
        is reloaded from the server.

        Returns the server's copy of the task when a write succeeded,
        else None.
        """
        drag, self.drag = self.drag, IDLE
        if not isinstance(drag, Dragging):
            return None
        dragged = self.find(drag.task_id)
        if dragged is None:
            return None

        new_status = self._drop_status(as_drop_target(target))

        if new_status is None or new_status == drag.original_status:
            # Nothing to persist; settle any column the card passed through.
            final = new_status or drag.original_status
            if dragged.status != final:
                dragged.status = final
                self._changed()
            return None

        if dragged.status != new_status:
            dragged.status = new_status
            self._changed()

        try:
            confirmed = await asyncio.to_thread(
                self.client.update_task, drag.task_id, {"status": new_status}
            )
        except TaskClientError as e:
            logger.warning("Moving %s to %s failed (%s); reloading board",
                           drag.task_id, new_status.value, e)
            await self.load_tasks()
            self.events.emit(DRAG_REVERTED, task_id=drag.task_id)
            return None

        logger.info("Moved %s: %s -> %s", drag.task_id,
                    drag.original_status.value, confirmed.status.value)
        self._replace(confirmed)
        self.events.emit(DRAG_CONFIRMED, task=confirmed)
        return confirmed

    def cancel_drag(self) -> None:
        """Abort the gesture (e.g. Escape): put the card back in its starting column."""
        drag, self.drag = self.drag, IDLE
        if not isinstance(drag, Dragging):
            return
        dragged = self.find(drag.task_id)
        if dragged is not None and dragged.status != drag.original_status:
            dragged.status = drag.original_status
            self._changed()

    # -------------------- form flows --------------------
    def _notify_failure(self, message: str, err: Exception) -> None:
        logger.warning("%s: %s", message, err)
        self.events.emit(NOTIFY, message=message)

    async def create_task(self, title: str, description: str = "",
                          status: TaskStatus = TaskStatus.TODO) -> Optional[Task]:
        try:
            task = await asyncio.to_thread(self.client.create_task, title, description, status)
        except TaskClientError as e:
            self._notify_failure("Failed to create task", e)
            return None
        self.tasks.append(task)
        self._changed()
        return task

    async def edit_task(self, task_id: str, **fields: Any) -> Optional[Task]:
        """Save form edits (title, description, status) for one card."""
        try:
            updated = await asyncio.to_thread(self.client.update_task, task_id, fields)
        except TaskClientError as e:
            self._notify_failure("Failed to update task", e)
            return None
        self._replace(updated)
        return updated

    async def delete_task(self, task_id: str) -> bool:
        try:
            await asyncio.to_thread(self.client.delete_task, task_id)
        except TaskClientError as e:
            self._notify_failure("Failed to delete task", e)
            return False
        self.tasks = [t for t in self.tasks if t.id != task_id]
        self._changed()
        return True

    def __str__(self) -> str:
        return ", ".join(
            f"{COLUMN_TITLES[status]}: {len(self.tasks_by_status(status))} tasks"
            for status in TaskStatus
        )
