"""Command-line entry point: `python -m smart_tasks <command> ...`."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pymongo.errors import PyMongoError

from .logging_config import logging as _  # noqa: F401  # ensure config applied early
from .errors import SmartTasksError
from .models import PRIORITIES, STATUSES
from .services.search import search_tasks
from .services.subtasks import suggest_subtasks
from .workflows import task_manager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smart_tasks", description="AI-assisted task manager")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="create a task")
    add.add_argument("--owner", required=True)
    add.add_argument("title")
    add.add_argument("--priority", choices=PRIORITIES, default="medium")

    lst = sub.add_parser("list", help="list tasks, newest first")
    lst.add_argument("--owner", required=True)

    upd = sub.add_parser("update", help="update a task")
    upd.add_argument("--owner", required=True)
    upd.add_argument("task_id")
    upd.add_argument("--title")
    upd.add_argument("--priority", choices=PRIORITIES)
    upd.add_argument("--status", choices=STATUSES)

    rm = sub.add_parser("delete", help="delete a task and its subtasks")
    rm.add_argument("--owner", required=True)
    rm.add_argument("task_id")

    search = sub.add_parser("search", help="semantic search over tasks")
    search.add_argument("--owner", required=True)
    search.add_argument("query")

    suggest = sub.add_parser("suggest", help="suggest subtasks for a title")
    suggest.add_argument("title")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.command == "add":
            task = task_manager.create_task(args.owner, args.title, args.priority)
            print(f"{task.id}\t{task.title}")
        elif args.command == "list":
            for task in task_manager.list_tasks(args.owner):
                print(f"{task.id}\t{task.priority}\t{task.status}\t{task.title}")
        elif args.command == "update":
            updates = {
                key: value
                for key, value in (
                    ("title", args.title),
                    ("priority", args.priority),
                    ("status", args.status),
                )
                if value is not None
            }
            task = task_manager.update_task(args.task_id, args.owner, updates)
            print(f"{task.id}\t{task.priority}\t{task.status}\t{task.title}")
        elif args.command == "delete":
            task_manager.delete_task(args.task_id, args.owner)
        elif args.command == "search":
            for result in search_tasks(args.query, args.owner):
                print(f"{result.similarity:.3f}\t{result.id}\t{result.title}")
        elif args.command == "suggest":
            for step in suggest_subtasks(args.title):
                print(step)
    except (SmartTasksError, EnvironmentError, PyMongoError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
