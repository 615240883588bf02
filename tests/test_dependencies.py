"""Tests for dependency ordering and cycle detection."""

import pytest

from sprintly.exceptions import CircularDependencyError, MissingReferenceError
from sprintly.models import Task
from sprintly.scheduler.dependencies import check_dependencies, find_cycles, topological_order
from tests.conftest import make_task


def _ids(tasks: list[Task]) -> list[int]:
    return [t.id for t in tasks]


class TestTopologicalOrder:
    """Dependencies come before dependents."""

    def test_independent_tasks_keep_input_order(self) -> None:
        tasks = [make_task(3), make_task(1), make_task(2)]
        assert _ids(topological_order(tasks)) == [3, 1, 2]

    def test_dependency_moves_ahead(self) -> None:
        tasks = [make_task(1, depends_on=[2]), make_task(2)]
        assert _ids(topological_order(tasks)) == [2, 1]

    def test_chain(self) -> None:
        tasks = [make_task(1, depends_on=[2]), make_task(2, depends_on=[3]), make_task(3)]
        assert _ids(topological_order(tasks)) == [3, 2, 1]

    def test_diamond(self) -> None:
        tasks = [
            make_task(4, depends_on=[2, 3]),
            make_task(2, depends_on=[1]),
            make_task(3, depends_on=[1]),
            make_task(1),
        ]
        order = _ids(topological_order(tasks))
        assert order.index(1) < order.index(2) < order.index(4)
        assert order.index(1) < order.index(3) < order.index(4)
        assert sorted(order) == [1, 2, 3, 4]

    def test_key_breaks_ties_only(self) -> None:
        tasks = [make_task(1), make_task(2, depends_on=[3]), make_task(3)]
        order = _ids(topological_order(tasks, key=lambda t: -t.id))
        # 3 sorts first by key; 2 follows; 1 last, and 3 still precedes 2
        assert order == [3, 2, 1]

    def test_unknown_dependency_ignored(self) -> None:
        tasks = [make_task(1, depends_on=[99])]
        assert _ids(topological_order(tasks)) == [1]

    def test_cycle_does_not_raise_and_keeps_every_task(self) -> None:
        tasks = [make_task(1, depends_on=[2]), make_task(2, depends_on=[1])]
        assert sorted(_ids(topological_order(tasks))) == [1, 2]

    def test_long_chain_does_not_recurse(self) -> None:
        count = 5000
        tasks = [make_task(i, depends_on=[i + 1]) for i in range(1, count)] + [make_task(count)]
        order = _ids(topological_order(tasks))
        assert order[0] == count
        assert order[-1] == 1


class TestFindCycles:
    """Cycle detection."""

    def test_no_cycles(self) -> None:
        tasks = [make_task(1, depends_on=[2]), make_task(2)]
        assert find_cycles(tasks) == set()

    def test_two_task_cycle(self) -> None:
        tasks = [make_task(1, depends_on=[2]), make_task(2, depends_on=[1])]
        found = find_cycles(tasks)
        assert found
        assert found <= {1, 2}

    def test_result_independent_of_input_order(self) -> None:
        tasks = [
            make_task(1, depends_on=[2]),
            make_task(2, depends_on=[3]),
            make_task(3, depends_on=[1]),
            make_task(4, depends_on=[5]),
            make_task(5, depends_on=[4]),
            make_task(6, depends_on=[1]),
        ]
        expected = find_cycles(tasks)
        assert find_cycles(list(reversed(tasks))) == expected
        assert find_cycles(tasks[2:] + tasks[:2]) == expected

    def test_reports_member_of_every_cycle(self) -> None:
        tasks = [
            make_task(1, depends_on=[2]),
            make_task(2, depends_on=[1]),
            make_task(3, depends_on=[4]),
            make_task(4, depends_on=[5]),
            make_task(5, depends_on=[3]),
        ]
        found = find_cycles(tasks)
        assert found & {1, 2}
        assert found & {3, 4, 5}

    def test_task_depending_on_cycle_is_not_reported(self) -> None:
        tasks = [
            make_task(1, depends_on=[2]),
            make_task(2, depends_on=[1]),
            make_task(3, depends_on=[1]),
        ]
        assert 3 not in find_cycles(tasks)


class TestCheckDependencies:
    """Strict validation."""

    def test_valid_graph_passes(self) -> None:
        check_dependencies([make_task(1, depends_on=[2]), make_task(2)])

    def test_missing_reference(self) -> None:
        with pytest.raises(MissingReferenceError, match="unknown task"):
            check_dependencies([make_task(1, depends_on=[42])])

    def test_cycle_raises_with_ids(self) -> None:
        tasks = [make_task(1, depends_on=[2]), make_task(2, depends_on=[1])]
        with pytest.raises(CircularDependencyError) as exc_info:
            check_dependencies(tasks)
        assert exc_info.value.task_ids
        assert "Circular dependency" in str(exc_info.value)
