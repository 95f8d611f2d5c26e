"""Parent-managed catalog of earnable tasks."""

from __future__ import annotations

from typing import Dict, Iterable, Sequence

from .exceptions import NotFoundError
from .models import Task, TaskCategory, TaskDraft, TaskUpdate

DEFAULT_TASKS: tuple[TaskDraft, ...] = (
    TaskDraft("Clean up after yourself", "🧹", 2, 5, TaskCategory.CHORES),
    TaskDraft("Make bed", "🛏️", 3, 1, TaskCategory.CHORES),
    TaskDraft("Workbook page", "📚", 5, 7, TaskCategory.LEARNING),
    TaskDraft("Read a page", "📖", 3, 7, TaskCategory.LEARNING),
    TaskDraft("Help with laundry", "👕", 3, 3, TaskCategory.HELPING),
    TaskDraft("Pooper scoop", "💩", 10, 1, TaskCategory.CHORES),
    TaskDraft("Wash dishes", "🍽️", 2, 3, TaskCategory.CHORES),
    TaskDraft("Wipe table", "🧽", 2, 5, TaskCategory.CHORES),
    TaskDraft("Wash hands", "🧼", 1, 10, TaskCategory.HYGIENE),
    TaskDraft("Brush teeth AM", "🪥", 5, 1, TaskCategory.HYGIENE),
    TaskDraft("Brush teeth PM", "🪥", 5, 1, TaskCategory.HYGIENE),
)


class TaskRegistry:
    """Hold tasks in display order; completion counts reset nightly."""

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: Dict[str, Task] = {}
        for task in tasks:
            self.add(task)

    @classmethod
    def with_defaults(cls) -> "TaskRegistry":
        return cls(draft.build(f"task-{index}") for index, draft in enumerate(DEFAULT_TASKS))

    def __len__(self) -> int:
        return len(self._tasks)

    def tasks(self, *, include_inactive: bool = True) -> Sequence[Task]:
        if include_inactive:
            return tuple(self._tasks.values())
        return tuple(task for task in self._tasks.values() if task.is_active)

    def get(self, task_id: str) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError as exc:
            raise NotFoundError(f"Task '{task_id}' not found.", task_id=task_id) from exc

    def add(self, task: Task) -> Task:
        if task.id in self._tasks:
            raise ValueError(f"Task '{task.id}' already exists.")
        self._tasks[task.id] = task
        return task

    def update(self, task_id: str, update: TaskUpdate) -> Task:
        return update.apply(self.get(task_id))

    def remove(self, task_id: str) -> Task:
        task = self.get(task_id)
        del self._tasks[task_id]
        return task

    def toggle_active(self, task_id: str) -> Task:
        task = self.get(task_id)
        task.is_active = not task.is_active
        return task

    def reset_completions(self) -> int:
        """Zero every completion counter and return how many were cleared."""

        cleared = 0
        for task in self._tasks.values():
            cleared += task.completions
            task.completions = 0
        return cleared


__all__ = ["DEFAULT_TASKS", "TaskRegistry"]
