# parser.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .dag import DependencyGraph
from .errors import FormatError, MakeError, ResourceError
from .model import Node

# ---------------------------------------------------------------------
# Rule-file format
# ---------------------------------------------------------------------
#   target : dep1 dep2 ...
#   <TAB>command line
#
# - a line starting with a tab is a command for the last declared target
# - a blank line is ignored
# - anything else is a target line and must contain exactly one colon
# ---------------------------------------------------------------------

_COLON_RE = re.compile(r"\s*:\s*")


@dataclass
class ParsedRules:
    graph: DependencyGraph
    default_target: Optional[str]


def normalize_rule_line(line: str) -> str:
    """
    Put exactly one space on each side of the colon and collapse whitespace,
    so `a:b`, `a :b` and `a:  b` all read `a : b`.
    """
    spaced = _COLON_RE.sub(" : ", line)
    return " ".join(spaced.split())


def split_lines(text: str) -> List[str]:
    # only \n and \r\n are line terminators; str.splitlines() knows too many
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


class RuleParser:
    """
    Turns rule-file text into a DependencyGraph.

    The current target is parse state, not module state. Every parse()
    call builds a fresh graph.
    """

    def __init__(self, source: str = "<rules>") -> None:
        self.source = source
        self.graph = DependencyGraph()
        self._current: Optional[Node] = None
        self._line_number = 0

    def parse(self, text: str) -> ParsedRules:
        return self.parse_lines(split_lines(text))

    def parse_lines(self, lines: Iterable[str]) -> ParsedRules:
        # each call starts from an empty graph
        self.graph = DependencyGraph()
        self._current = None
        self._line_number = 0

        try:
            for number, line in enumerate(lines, start=1):
                self._line_number = number
                self._parse_line(line)
        except MakeError:
            self.graph.release()
            raise
        except MemoryError as e:
            self.graph.release()
            raise ResourceError(
                "Ran out of memory while building the graph",
                details=self._where(),
            ) from e

        return ParsedRules(graph=self.graph, default_target=self.graph.default_root)

    # -----------------------------------------------------------------
    # Line handlers
    # -----------------------------------------------------------------

    def _parse_line(self, line: str) -> None:
        if line.startswith("\t"):
            self._command_line(line)
        elif not line.strip():
            return
        else:
            self._target_line(line)

    def _command_line(self, line: str) -> None:
        if self._current is None:
            raise FormatError(
                "Commands cannot come before the first target",
                details=self._where(line),
            )

        text = line.strip()
        if text:
            self.graph.append_command(self._current, text, self._line_number)

    def _target_line(self, line: str) -> None:
        colons = line.count(":")
        if colons != 1:
            what = "no colon" if colons == 0 else f"{colons} colons"
            raise FormatError(
                f"Target line must contain exactly one colon, found {what}",
                details=self._where(line),
            )

        lhs, rhs = normalize_rule_line(line).split(":", 1)
        names = lhs.split()
        if len(names) != 1:
            raise FormatError(
                "Target line must name exactly one target before the colon",
                details=self._where(line),
            )
        name = names[0]

        existing = self.graph.lookup(name)
        if existing is not None and existing.deps:
            raise FormatError(
                f"Target '{name}' is already declared",
                details=self._where(line),
            )

        target = self.graph.lookup_or_create(name, is_target=True)
        for dep_name in rhs.split():
            dep = self.graph.lookup_or_create(dep_name, is_target=False)
            self.graph.add_edge(target, dep)

        self._current = target

    def _where(self, line: str | None = None) -> dict:
        where = {"file": self.source, "line": self._line_number}
        if line is not None:
            where["text"] = line.rstrip("\r\n")
        return where


def parse_rules(text: str, *, source: str = "<rules>") -> ParsedRules:
    """Parse rule-file text into a fresh graph."""
    return RuleParser(source=source).parse(text)
