"""Service layer for per-project weekly task boards."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from stride_cli.models import DayColumn, Priority, Task
from stride_cli.repositories import ProjectRepository
from stride_cli.utils.id_utils import new_id
from stride_cli.utils.logger import get_component_logger
from stride_cli.utils.sanitize import Sanitizer, sanitize_input

DAYS_PER_WEEK = 7


def monday_of_week(day: date) -> datetime:
    """Midnight of the Monday starting the week that contains ``day``."""
    monday = day - timedelta(days=day.weekday())
    return datetime(monday.year, monday.month, monday.day)


def build_empty_week(today: date | None = None) -> list[DayColumn]:
    """Seven empty columns, Monday first."""
    monday = monday_of_week(today or date.today())
    return [DayColumn(date=monday + timedelta(days=i)) for i in range(DAYS_PER_WEEK)]


class BoardService:
    """Loads and saves task boards through the project repository.

    Saving is fire-and-forget: failures are logged, never raised.
    """

    def __init__(self, repository: ProjectRepository, sanitizer: Sanitizer = sanitize_input):
        self.repository = repository
        self.sanitize = sanitizer
        self._log = get_component_logger("board")

    async def load_board(self, project_id: str) -> list[DayColumn]:
        """Stored board of a project, or a fresh empty week."""
        columns = await self.repository.fetch_tasks(project_id)
        if not columns:
            return build_empty_week()
        return columns

    async def save_board(self, project_id: str, columns: list[DayColumn]) -> None:
        try:
            await self.repository.save_tasks(project_id, columns)
        except Exception as e:
            self._log.warning("Saving board for %s failed: %s", project_id, e)

    async def add_task(
        self,
        project_id: str,
        day: int,
        title: str,
        *,
        description: str = "",
        priority: Priority | None = None,
    ) -> Task:
        """Append a task to one day of the board and save it.

        Args:
            project_id: Board owner
            day: Column index, 0 for Monday
            title: Task title
            description: Optional details
            priority: Optional priority

        Raises:
            ValueError: If day is out of range or the title is empty after cleaning
        """
        clean_title = self.sanitize(title)
        if not clean_title:
            raise ValueError("Task title cannot be empty")

        columns = await self.load_board(project_id)
        if not 0 <= day < len(columns):
            raise ValueError(f"day must be between 0 and {len(columns) - 1}")
        taken = {task.id for column in columns for task in column.tasks}
        task = Task(
            id=new_id("task", taken),
            title=clean_title,
            description=self.sanitize(description),
            priority=priority,
        )
        columns[day].tasks.append(task)
        await self.save_board(project_id, columns)
        return task
