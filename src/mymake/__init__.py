from .dag import DependencyGraph
from .parser import RuleParser, parse_rules
from .planner import BuildPlanner, BuildResult
from .runner import load_rules, run_build, make
from .shell import ShellCommandRunner
from .model import Node, Command

__all__ = [
    "DependencyGraph",
    "RuleParser",
    "parse_rules",
    "BuildPlanner",
    "BuildResult",
    "ShellCommandRunner",
    "load_rules",
    "run_build",
    "make",
    "Node",
    "Command",
]
