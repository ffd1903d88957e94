"""CLI entrypoint for the scheduler service"""
import argparse
import logging
import sys

from shared.queue.rq_client import ALL_QUEUES, get_redis_connection
from shared.utils.logging_config import configure_logging

from .scheduler import Scheduler, run_scheduled_task
from .tasks import SCHEDULE

logger = logging.getLogger(__name__)


def _run(args) -> int:
    Scheduler.from_settings().start()
    return 0


def _run_task(args) -> int:
    try:
        result = run_scheduled_task(args.name)
    except KeyError as e:
        logger.error(str(e.args[0]))
        return 1
    except Exception as e:
        logger.error(f"Task {args.name} failed: {e}", exc_info=True)
        return 1
    if result is not None:
        print(result)
    return 0


def _list(args) -> int:
    for task in SCHEDULE:
        flags = []
        if task.on_one_server:
            flags.append("one-server")
        if task.without_overlapping is not None:
            flags.append(f"no-overlap {int(task.without_overlapping.total_seconds())}s")
        print(f"{task.name:<36} every {task.cadence.every} at {task.cadence.at:%H:%M}  [{', '.join(flags)}]")
        if task.description:
            print(f"    {task.description}")
    return 0


def _worker(args) -> int:
    from rq import Worker

    queues = args.queues or list(ALL_QUEUES)
    worker = Worker(queues, connection=get_redis_connection())
    worker.work(with_scheduler=True)
    return 0


def main(argv=None):
    """Main entry point for the scheduler service."""
    parser = argparse.ArgumentParser(
        description="Run bill lifecycle, notification and analytics background work"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Start the periodic scheduler loop")
    run_parser.set_defaults(handler=_run)

    run_task_parser = subparsers.add_parser(
        "run-task", help="Run one scheduled task now (exit 0 on success, 1 on failure)"
    )
    run_task_parser.add_argument("name", help="Task name, e.g. bills:close-expired")
    run_task_parser.set_defaults(handler=_run_task)

    list_parser = subparsers.add_parser("list", help="List scheduled tasks")
    list_parser.set_defaults(handler=_list)

    worker_parser = subparsers.add_parser("worker", help="Start an RQ worker for the job queues")
    worker_parser.add_argument(
        "--queue",
        dest="queues",
        action="append",
        default=None,
        metavar="NAME",
        help=f"Queue to listen on (repeatable, default: {', '.join(ALL_QUEUES)})",
    )
    worker_parser.set_defaults(handler=_worker)

    args = parser.parse_args(argv)

    # Setup logging
    configure_logging()

    sys.exit(args.handler(args))


if __name__ == "__main__":
    main()
