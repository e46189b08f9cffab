"""
Prompt building for task prioritization.

The prompt is assembled from fixed sections (persona, guidelines, output
schema, worked example) followed by the numbered task list, so that the
same task list always yields the same prompt text.
"""
from typing import List, Sequence

from app.models.domain import Task

PERSONA_SECTION = (
    "You are an expert productivity consultant using the Eisenhower Matrix "
    "to prioritize daily tasks."
)

GUIDELINES_SECTION = """Guidelines (strict):
- ALWAYS put production incidents, critical bugs, outages, and emergencies as priority "urgent".
- Then time-sensitive items with deadlines as "urgent" or "important" depending on immediacy.
- Meetings/planning are typically "important" unless truly urgent.
- Research/ideas are typically "low" unless a deadline is stated."""

OUTPUT_REQUIREMENT_TEMPLATE = (
    "Return ONLY valid JSON, no prose, matching this schema and including "
    "ALL {task_count} tasks exactly once."
)

SCHEMA_SECTION = """Strict JSON schema:
{
  "items": [
    { "index": 1, "priority": "urgent" | "important" | "low" },
    { "index": 2, "priority": "urgent" | "important" | "low" },
    ... one object per task index ...
  ]
}"""

EXAMPLE_TASKS = (
    "Research new project ideas",
    "Plan team meeting for next week",
    "Fix critical bug in production",
)

EXAMPLE_OUTPUT = (
    '{"items":[{"index":3,"priority":"urgent"},'
    '{"index":2,"priority":"important"},'
    '{"index":1,"priority":"low"}]}'
)

TASK_LIST_HEADER_TEMPLATE = "Now prioritize the following {task_count} tasks:"

CLOSING_SECTION = "Return STRICT JSON only:"


def number_tasks(tasks: Sequence[str]) -> List[Task]:
    """Attach 1-based positions; the position is the task's only identifier."""
    return [Task(index=i, text=text) for i, text in enumerate(tasks, start=1)]


def format_task_list(tasks: Sequence[str]) -> str:
    """Render tasks as `<1-based-index>. <task text>` lines."""
    return "\n".join(f"{task.index}. {task.text}" for task in number_tasks(tasks))


def build_example_section() -> str:
    return (
        f"Example for {len(EXAMPLE_TASKS)} tasks:\n"
        f"Input tasks:\n{format_task_list(EXAMPLE_TASKS)}\n"
        f"Output JSON (no extra text):\n{EXAMPLE_OUTPUT}"
    )


class PromptBuilder:
    """Build the prioritization prompt sent to the completion model."""

    @staticmethod
    def validate_tasks(tasks: Sequence[str]) -> List[str]:
        """
        Check that tasks is a non-empty list of non-blank strings.

        Raises:
            ValueError: If the task list is empty or holds a blank/non-string entry
        """
        if isinstance(tasks, (str, bytes)) or not tasks:
            raise ValueError("tasks must be a non-empty sequence of strings")
        for position, task in enumerate(tasks, start=1):
            if not isinstance(task, str) or not task.strip():
                raise ValueError(f"task {position} must be a non-empty string")
        return list(tasks)

    @staticmethod
    def build_prioritization_prompt(tasks: Sequence[str]) -> str:
        """
        Build the prompt for classifying tasks by priority tier.

        Args:
            tasks: Ordered task descriptions; position i becomes index i + 1

        Returns:
            Complete prompt string
        """
        tasks = PromptBuilder.validate_tasks(tasks)
        task_count = len(tasks)

        sections = [
            PERSONA_SECTION,
            GUIDELINES_SECTION,
            OUTPUT_REQUIREMENT_TEMPLATE.format(task_count=task_count) + "\n" + SCHEMA_SECTION,
            build_example_section(),
            TASK_LIST_HEADER_TEMPLATE.format(task_count=task_count) + "\n" + format_task_list(tasks),
            CLOSING_SECTION,
        ]
        return "\n\n".join(sections)


def build_prompt(tasks: Sequence[str]) -> str:
    """Module-level shortcut for PromptBuilder.build_prioritization_prompt."""
    return PromptBuilder.build_prioritization_prompt(tasks)
