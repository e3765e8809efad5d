# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class NodeState(Enum):
    """Traversal marker used by the planner's post-order walk."""
    UNVISITED = "unvisited"
    VISITING = "visiting"
    DONE = "done"


@dataclass(frozen=True)
class Command:
    """A single shell command line scoped to one target."""
    text: str
    line_number: int | None = None


@dataclass
class Node:
    """
    A target or a bare dependency in the rule graph.

    Nodes live in the graph's arena and are addressed by `id`.
    `deps` holds ids of other nodes, in rule-file declaration order.
    """
    id: int
    name: str
    is_declared_target: bool = False
    commands: List[Command] = field(default_factory=list)
    deps: List[int] = field(default_factory=list)

    # ---- per-run traversal state ----
    state: NodeState = NodeState.UNVISITED
    exists: bool = False
    modified_at: Optional[float] = None
    must_rebuild: bool = False

    def reset_traversal(self) -> None:
        self.state = NodeState.UNVISITED
        self.exists = False
        self.modified_at = None
        self.must_rebuild = False
