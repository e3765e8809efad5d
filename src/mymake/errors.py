# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List


@dataclass(eq=False)
class MakeError(Exception):
    """
    Structured build error with enough context for:
      - clean CLI output
      - tests asserting on the specific failure kind
    """
    message: str
    details: dict = field(default_factory=dict)

    kind: ClassVar[str] = "MakeError"

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class FormatError(MakeError):
    """Malformed rule file (colon count, misplaced command, duplicate target)."""
    kind = "FormatError"


class ResourceError(MakeError):
    """Ran out of memory while building the graph."""
    kind = "ResourceError"


class ResolutionError(MakeError):
    """A node has no file on disk and nothing that could produce it."""
    kind = "ResolutionError"


class NotFoundError(MakeError):
    """Requested target is not in the graph."""
    kind = "NotFoundError"


class CommandError(MakeError):
    """A target's command exited nonzero or could not be started."""
    kind = "CommandError"


class RuleFileError(MakeError):
    """The rule file could not be read."""
    kind = "RuleFileError"


@dataclass(frozen=True)
class CycleWarning:
    """
    A back-edge found during traversal.

    Not raised: the planner records it, reports it, and ignores the edge.
    """
    node: str
    dependency: str
    path: List[str]

    def __str__(self) -> str:
        chain = " -> ".join([*self.path, self.dependency])
        return f"Cycle found: {chain} (dependency '{self.dependency}' of '{self.node}' ignored)"
