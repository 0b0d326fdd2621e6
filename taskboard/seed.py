#!/usr/bin/env python3
"""
Reset the task database to a small sample board.

Usage:
    taskboard-seed --db ./tasks.db
"""
import argparse
from typing import List, Tuple

from .config import Settings, ConfigError, setup_logging
from .schema import Task, TaskStatus
from .store import TaskStore

SAMPLE_TASKS: List[Tuple[str, str, TaskStatus]] = [
    ("Set up project repository", "Initialize Git repository and create README", TaskStatus.DONE),
    ("Design database schema", "Plan out the task data model", TaskStatus.DONE),
    ("Build REST API endpoints", "Implement CRUD operations for task management", TaskStatus.IN_PROGRESS),
    ("Add API documentation", "Document the /tasks endpoints", TaskStatus.IN_PROGRESS),
    ("Create board client", "Build the drag-and-drop task board", TaskStatus.TODO),
    ("Implement authentication", "Require an API key for mutating routes", TaskStatus.TODO),
    ("Write unit tests", "Add test coverage for API endpoints", TaskStatus.TODO),
    ("Deploy to production", "Set up CI/CD and deploy", TaskStatus.TODO),
]

STATUS_ICONS = {
    TaskStatus.TODO: "⏳",
    TaskStatus.IN_PROGRESS: "🔨",
    TaskStatus.DONE: "✅",
}


def seed(store: TaskStore) -> List[Task]:
    """Clear the store and insert SAMPLE_TASKS in order."""
    store.clear()
    return [store.create(title, description, status) for title, description, status in SAMPLE_TASKS]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the TaskBoard database")
    parser.add_argument("--db", help="Path to tasks.db (overrides TASKBOARD_DB env var)")
    parser.add_argument("--config", help="Path to taskboard.yaml")
    args = parser.parse_args(argv)

    try:
        settings = Settings.load(args.config)
    except ConfigError as e:
        parser.error(str(e))
    if args.db:
        settings.db_path = args.db
        settings.resolve_paths()
    setup_logging(settings.log_level)

    print("=" * 60)
    print("Seeding TaskBoard database")
    print("=" * 60)

    store = TaskStore(settings.db_path)
    tasks = seed(store)

    print(f"\n✅ Created {len(tasks)} sample tasks in {settings.db_path}\n")
    for index, task in enumerate(tasks, start=1):
        print(f"{index}. {STATUS_ICONS[task.status]} [{task.status.value.upper()}] {task.title}")
        if task.description:
            print(f"   {task.description}")
    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
