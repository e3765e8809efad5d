# planner.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .dag import DependencyGraph
from .errors import CommandError, CycleWarning, NotFoundError, ResolutionError
from .model import Node, NodeState
from .probe import FileSystemProbe, OsFileSystemProbe
from .shell import CommandRunner, ShellCommandRunner
from .ui.console import Console, get_console


@dataclass
class BuildResult:
    target: str
    executed: List[str] = field(default_factory=list)
    cycles: List[CycleWarning] = field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        return not self.executed


@dataclass
class _Frame:
    node_id: int
    next_dep: int = 0


class BuildPlanner:
    """
    Brings one target up to date.

    Walks the graph depth-first, post-order, with an explicit stack of
    (node, next dependency index) frames. A node is rebuilt when its file is
    missing, a dependency is missing, or a dependency is strictly newer.
    Dependencies are visited in rule-file order and each node is evaluated at
    most once per run.
    """

    def __init__(
        self,
        graph: DependencyGraph,
        *,
        runner: Optional[CommandRunner] = None,
        probe: Optional[FileSystemProbe] = None,
        console: Optional[Console] = None,
    ):
        self.graph = graph
        self.runner = runner if runner is not None else ShellCommandRunner()
        self.probe = probe if probe is not None else OsFileSystemProbe()
        self.console = console if console is not None else get_console()

    def build(self, target: str) -> BuildResult:
        root = self.graph.lookup(target)
        if root is None:
            raise NotFoundError(
                f"Target '{target}' was not found",
                details={"known": ", ".join(n.name for n in self.graph if n.is_declared_target)},
            )

        self.graph.reset_traversal()
        result = BuildResult(target=target)

        self._enter(root, [])
        stack: List[_Frame] = [_Frame(root.id)]

        while stack:
            frame = stack[-1]
            node = self.graph.node(frame.node_id)

            if frame.next_dep < len(node.deps):
                child = self.graph.node(node.deps[frame.next_dep])
                frame.next_dep += 1

                if child.state is NodeState.VISITING:
                    self._report_cycle(result, stack, node, child)
                elif child.state is NodeState.UNVISITED:
                    self._enter(child, stack)
                    stack.append(_Frame(child.id))
                else:
                    self._account(node, child)
                continue

            # all dependencies resolved
            self._finish(node, result)
            stack.pop()
            if stack:
                self._account(self.graph.node(stack[-1].node_id), node)

        return result

    # -----------------------------------------------------------------
    # Traversal steps
    # -----------------------------------------------------------------

    def _enter(self, node: Node, stack: List[_Frame]) -> None:
        node.state = NodeState.VISITING

        stat = self.probe.probe(node.name)
        if stat.exists:
            node.exists = True
            node.modified_at = stat.modified_at
        elif not node.is_declared_target:
            details = {"needed_by": self._path(stack)}
            if stat.error:
                details["error"] = stat.error
            raise ResolutionError(
                f"'{node.name}' does not exist and no rule builds it",
                details=details,
            )
        else:
            node.must_rebuild = True

        if not node.exists and not node.deps and not node.commands:
            raise ResolutionError(
                f"'{node.name}' does not exist and has no dependencies or commands to build it from",
                details={"needed_by": self._path(stack)},
            )

    def _account(self, node: Node, child: Node) -> None:
        """Fold a finished dependency into the parent's staleness."""
        if node.must_rebuild:
            return
        if not child.exists:
            self.console.print_debug(f"{node.name}: dependency '{child.name}' is missing")
            node.must_rebuild = True
        elif child.modified_at > node.modified_at:
            self.console.print_debug(f"{node.name}: dependency '{child.name}' is newer")
            node.must_rebuild = True

    def _finish(self, node: Node, result: BuildResult) -> None:
        if node.must_rebuild:
            for cmd in node.commands:
                try:
                    self.runner.execute(cmd.text)
                except CommandError as e:
                    e.details.setdefault("target", node.name)
                    if cmd.line_number is not None:
                        e.details.setdefault("line", cmd.line_number)
                    raise
                result.executed.append(cmd.text)

            stat = self.probe.probe(node.name)
            node.exists = stat.exists
            node.modified_at = stat.modified_at
        else:
            self.console.print_debug(f"{node.name}: up to date")

        node.state = NodeState.DONE

    def _report_cycle(self, result: BuildResult, stack: List[_Frame], node: Node, child: Node) -> None:
        names = [self.graph.node(f.node_id).name for f in stack]
        path = names[names.index(child.name):]
        cycle = CycleWarning(node=node.name, dependency=child.name, path=path)
        result.cycles.append(cycle)
        self.console.print_warning(str(cycle))

    def _path(self, stack: List[_Frame]) -> str:
        return " -> ".join(self.graph.node(f.node_id).name for f in stack) or "<root>"
