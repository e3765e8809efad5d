# runner.py
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .errors import NotFoundError, RuleFileError
from .parser import ParsedRules, parse_rules
from .planner import BuildPlanner, BuildResult
from .shell import CommandRunner

if TYPE_CHECKING:
    from .dag import DependencyGraph
    from .probe import FileSystemProbe


DEFAULT_RULE_FILE = "myMakefile"
RULE_FILE_ENV = "MYMAKE_FILE"


# ----------------------------------------------------------------------
# Rule file loading
# ----------------------------------------------------------------------

def load_rules(path: str | Path) -> ParsedRules:
    """
    Read and parse a rule file.

    Raises:
      RuleFileError if the file can't be read
      FormatError / ResourceError if its contents are malformed
    """
    rule_path = Path(path).expanduser()
    try:
        # newline="" keeps \r\n intact; the parser handles both endings
        with rule_path.open("r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise RuleFileError(
            "Could not open rule file",
            details={"file": str(rule_path), "error": str(e)},
        ) from e

    return parse_rules(text, source=str(rule_path))


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def run_build(
    graph: DependencyGraph,
    target: str,
    *,
    runner: Optional[CommandRunner] = None,
    probe: Optional[FileSystemProbe] = None,
) -> BuildResult:
    planner = BuildPlanner(graph, runner=runner, probe=probe)
    return planner.build(target)


def make(
    rule_file: str | Path = DEFAULT_RULE_FILE,
    target: str | None = None,
    *,
    runner: Optional[CommandRunner] = None,
    probe: Optional[FileSystemProbe] = None,
) -> BuildResult:
    """Load `rule_file` and bring `target` (default: first target) up to date."""
    rules = load_rules(rule_file)
    try:
        name = target or rules.default_target
        if name is None:
            raise NotFoundError(
                "Rule file declares no targets",
                details={"file": str(rule_file)},
            )
        return run_build(rules.graph, name, runner=runner, probe=probe)
    finally:
        rules.graph.release()
