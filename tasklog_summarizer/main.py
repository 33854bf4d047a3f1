#!/usr/bin/env python3
"""
Main entry point for the task log summarizer.

Reads tracked tasks from a JSON file, summarizes the selected time window,
and writes the grouped summary as JSON.
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from tasklog_summarizer.agents.summary_agent import TaskSummaryAgent
from tasklog_summarizer.config.settings import GROUPING_STRATEGIES, Settings
from tasklog_summarizer.storage.task_store import JsonTaskStore, created_between


def setup_logging(log_level: str = "INFO", log_file: str = "tasklog_summarizer.log") -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Not an ISO date/time: {value}")


def print_progress(status: str):
    print(status, file=sys.stderr)


async def summarize_file(
    input_path: str,
    output_path: str,
    settings: Settings,
    since: datetime = None,
    until: datetime = None
) -> List[Dict[str, Any]]:
    """
    Summarize the tasks of one JSON file.

    Args:
        input_path: Path to the tasks JSON file
        output_path: Path for the summary JSON file
        settings: Configuration settings
        since: Optional inclusive lower bound on task start time
        until: Optional exclusive upper bound on task start time

    Returns:
        The summary groups as dictionaries
    """
    logger = logging.getLogger(__name__)

    store = JsonTaskStore(input_path)
    task_filter = created_between(since, until) if (since or until) else None
    tasks = store.get_tasks(task_filter)
    logger.info(f"Loaded {len(tasks)} task(s) from {input_path}")

    agent = TaskSummaryAgent(settings)
    groups = await agent.summarize(tasks, on_progress=print_progress)
    results = [group.to_dict() for group in groups]

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(results, f, indent=2, ensure_ascii=False)

    logger.info(f"Summary saved to {output_path}")
    return results


def main():
    """Main entry point for the command-line interface."""
    parser = argparse.ArgumentParser(
        description="Summarize time-tracked tasks into grouped work items",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Path to tasks JSON file"
    )

    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Path for output summary JSON file"
    )

    parser.add_argument(
        "--config", "-c",
        default="config/default.yaml",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (overrides the configuration)"
    )

    parser.add_argument(
        "--threshold", "-t",
        type=float,
        help="Similarity threshold for removing duplicate work items"
    )

    parser.add_argument(
        "--strategy",
        choices=GROUPING_STRATEGIES,
        help="How task titles are grouped"
    )

    parser.add_argument("--since", type=parse_datetime, help="Only tasks started at or after this time")
    parser.add_argument("--until", type=parse_datetime, help="Only tasks started before this time")

    args = parser.parse_args()

    # Load settings
    settings = Settings.from_yaml(args.config)
    if args.log_level:
        settings.log_level = args.log_level
    if args.threshold is not None:
        settings.summarization.similarity_threshold = args.threshold
    if args.strategy:
        settings.summarization.grouping_strategy = args.strategy

    # Setup logging
    setup_logging(settings.log_level, settings.log_file)
    logger = logging.getLogger(__name__)

    if not settings.validate():
        return 1

    # Validate input file
    if not Path(args.input).exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    # Create output directory if needed
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        results = asyncio.run(summarize_file(
            args.input,
            args.output,
            settings,
            since=args.since,
            until=args.until
        ))

        # Print summary
        print("\n" + "=" * 50)
        print("SUMMARY")
        print("=" * 50)
        for group in results:
            print(f"{group['title']}:")
            for item in group['tasks']:
                print(f"  - {item}")
        print("=" * 50)

        return 0

    except Exception as e:
        logger.error(f"Failed to summarize tasks: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
