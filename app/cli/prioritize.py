"""
Command-line client for the prioritization API.

Usage:
    python -m app.cli "Fix critical bug in production" "Plan team meeting"
    python -m app.cli --file tasks.txt
    cat tasks.txt | python -m app.cli
    python -m app.cli --url http://localhost:8787 --json "Task one" "Task two"

Accepts both the structured `{"items": [...]}` response and the older
`{"text": "2, 1, 3"}` response.
"""
import sys
import json
import argparse
import logging
from typing import Any, List, Optional, TextIO, Tuple

import requests

from app.core.exceptions import PrioritizeRequestError
from app.models.domain import PrioritizationResult, PriorityAssignment, PriorityTier
from app.services.ai.response_normalizer import normalize_service_payload

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:8787"
DEFAULT_TIMEOUT = 120
FAILURE_MESSAGE = "AI service error. Please check the server and API key."

TIER_LEGEND = {
    PriorityTier.URGENT: "Do first",
    PriorityTier.IMPORTANT: "Do today",
    PriorityTier.LOW: "When possible",
}


def clean_tasks(lines: List[str]) -> List[str]:
    """Strip each entry and drop blank ones."""
    return [line.strip() for line in lines if line and line.strip()]


def collect_tasks(args: argparse.Namespace, stdin: Optional[TextIO] = None) -> List[str]:
    """Gather tasks from positional arguments, --file, or piped stdin."""
    tasks = clean_tasks(list(args.tasks or []))

    if args.file:
        with open(args.file, 'r', encoding='utf-8') as f:
            tasks.extend(clean_tasks(f.read().splitlines()))

    stdin = stdin if stdin is not None else sys.stdin
    if not tasks and stdin is not None and not stdin.isatty():
        tasks.extend(clean_tasks(stdin.read().splitlines()))

    return tasks


def request_prioritization(
    tasks: List[str],
    base_url: str = DEFAULT_URL,
    timeout: int = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None
) -> Any:
    """
    POST tasks to /api/prioritize and return the decoded response body.

    Raises:
        PrioritizeRequestError: On transport failure, non-2xx status, or non-JSON body
    """
    http = session or requests
    url = f"{base_url.rstrip('/')}/api/prioritize"

    try:
        response = http.post(url, json={"tasks": tasks}, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise PrioritizeRequestError(str(e))

    if not response.ok:
        raise PrioritizeRequestError(
            f"{response.status_code} {response.text}",
            status_code=response.status_code
        )

    try:
        return response.json()
    except ValueError as e:
        raise PrioritizeRequestError(f"invalid JSON response: {e}")


def rank_tasks(
    tasks: List[str],
    result: PrioritizationResult
) -> List[Tuple[int, PriorityAssignment, str]]:
    """Pair each assignment with its 1-based rank and task text."""
    return [
        (rank, assignment, tasks[assignment.index - 1])
        for rank, assignment in enumerate(result, start=1)
    ]


def render_result(tasks: List[str], result: PrioritizationResult) -> str:
    """Format a result as ranked lines followed by the tier legend."""
    lines = ["Prioritized Tasks:", ""]
    for rank, assignment, text in rank_tasks(tasks, result):
        lines.append(f"#{rank:<3} [{assignment.tier.value.upper()}] {text}")

    lines.append("")
    lines.append("Priority Legend: " + ", ".join(
        f"{tier.value.capitalize()} - {hint}" for tier, hint in TIER_LEGEND.items()
    ))
    return "\n".join(lines)


def render_json(tasks: List[str], result: PrioritizationResult) -> str:
    """Format a result as JSON with task text and rank attached."""
    items = [
        {**assignment.to_dict(), "rank": rank, "task": text}
        for rank, assignment, text in rank_tasks(tasks, result)
    ]
    return json.dumps({"items": items}, indent=2, ensure_ascii=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m app.cli",
        description="Prioritize tasks with the Task Prioritizer API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Tasks as arguments
  python -m app.cli "Research new project ideas" "Fix critical bug in production"

  # One task per line from a file
  python -m app.cli --file tasks.txt

  # Machine-readable output
  python -m app.cli --json "Task one" "Task two"
        """
    )
    parser.add_argument('tasks', nargs='*', help='Task descriptions')
    parser.add_argument('--file', '-f', help='Read tasks from a file, one per line')
    parser.add_argument('--url', default=DEFAULT_URL, help=f'API base URL (default: {DEFAULT_URL})')
    parser.add_argument('--timeout', type=int, default=DEFAULT_TIMEOUT, help='Request timeout in seconds')
    parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    return parser


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        tasks = collect_tasks(args, stdin=stdin)
    except OSError as e:
        print(f"Error: could not read tasks: {e}", file=sys.stderr)
        return 2

    if not tasks:
        parser.print_usage(sys.stderr)
        print("Error: no tasks given", file=sys.stderr)
        return 2

    try:
        payload = request_prioritization(tasks, base_url=args.url, timeout=args.timeout)
    except PrioritizeRequestError as e:
        logger.error(f"Error prioritizing tasks: {e.message}")
        print(FAILURE_MESSAGE, file=sys.stderr)
        return 1

    result = normalize_service_payload(payload, len(tasks))

    if args.json:
        print(render_json(tasks, result))
    else:
        print(render_result(tasks, result))
    return 0


if __name__ == '__main__':
    sys.exit(main())
