"""Dependency ordering and cycle detection over ``depends_on`` edges.

Both traversals are depth-first with an explicit stack so long chains do not
hit the interpreter's recursion limit. A task that is re-encountered while it
is still on the stack closes a cycle: the traversal does not enter it again
and carries on, so malformed data degrades to a partial order instead of an
error.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any

from sprintly.exceptions import CircularDependencyError, MissingReferenceError
from sprintly.logger import get_logger
from sprintly.models import Task

logger = get_logger()

SortKey = Callable[[Task], Any]


def _walk(
    tasks: list[Task],
    key: SortKey | None,
    on_cycle: Callable[[int], None] | None = None,
) -> list[Task]:
    """Post-order DFS; returns tasks with dependencies ahead of dependents."""
    by_id: dict[int, Task] = {}
    for task in tasks:
        by_id.setdefault(task.id, task)

    def ordered(items: Iterable[Task]) -> list[Task]:
        return sorted(items, key=key) if key is not None else list(items)

    def children(task: Task) -> Iterator[Task]:
        known = [by_id[dep_id] for dep_id in task.depends_on if dep_id in by_id]
        return iter(ordered(known))

    visited: set[int] = set()
    on_stack: set[int] = set()
    result: list[Task] = []

    for root in ordered(by_id.values()):
        if root.id in visited:
            continue
        stack: list[tuple[Task, Iterator[Task]]] = [(root, children(root))]
        on_stack.add(root.id)

        while stack:
            task, pending = stack[-1]
            for child in pending:
                if child.id in visited:
                    continue
                if child.id in on_stack:
                    logger.debug(f"Cycle: task {task.id} depends on in-progress task {child.id}")
                    if on_cycle is not None:
                        on_cycle(child.id)
                    continue
                on_stack.add(child.id)
                stack.append((child, children(child)))
                break
            else:
                stack.pop()
                on_stack.discard(task.id)
                visited.add(task.id)
                result.append(task)

    return result


def topological_order(tasks: list[Task], key: SortKey | None = None) -> list[Task]:
    """Order tasks so that every task comes after the tasks it depends on.

    Tasks are taken in ``key`` order (input order when no key is given) and
    each task's dependencies are placed ahead of it, so ``key`` only breaks
    ties the dependency graph leaves open. Unknown dependency IDs are ignored
    and cycles are broken wherever the traversal first closes them.

    Args:
        tasks: Tasks to order (first occurrence wins for duplicate IDs)
        key: Optional sort key for tie-breaking

    Returns:
        The tasks in dependency order
    """
    return _walk(tasks, key)


def find_cycles(tasks: list[Task]) -> set[int]:
    """Find tasks whose dependencies loop back on themselves.

    The traversal starts from tasks in ascending ID order, so the result does
    not depend on the order of ``tasks``. At least one member of every cycle
    is reported.

    Returns:
        IDs of tasks re-encountered while still on the traversal stack
    """
    cycles: set[int] = set()
    _walk(tasks, key=lambda t: t.id, on_cycle=cycles.add)
    if cycles:
        logger.changes(f"Circular dependencies involve task(s): {sorted(cycles)}")
    return cycles


def check_dependencies(tasks: list[Task]) -> None:
    """Strict validation of the dependency graph.

    The engine tolerates both problems checked here; callers who prefer a
    hard failure run this first.

    Raises:
        MissingReferenceError: If a task depends on an unknown task ID
        CircularDependencyError: If any dependency cycle exists
    """
    known_ids = {task.id for task in tasks}
    for task in tasks:
        missing = sorted(set(task.depends_on) - known_ids)
        if missing:
            raise MissingReferenceError(
                f"Task {task.id} ({task.name}) depends on unknown task(s): "
                f"{', '.join(str(m) for m in missing)}"
            )

    cycles = find_cycles(tasks)
    if cycles:
        raise CircularDependencyError(cycles)
