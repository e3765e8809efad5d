# dag.py
from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from .model import Command, Node


class DependencyGraph:
    """
    Owns every Node of a rule file.

    Nodes are stored in an insertion-ordered arena and addressed by integer id;
    edges are id lists on the depending node, so the graph is the only owner.
    The first declared target is the implicit default root.
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._by_name: Dict[str, int] = {}
        self.default_root: Optional[str] = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def node(self, node_id: int) -> Node:
        return self._nodes[node_id]

    def lookup(self, name: str) -> Optional[Node]:
        node_id = self._by_name.get(name)
        if node_id is None:
            return None
        return self._nodes[node_id]

    def create_node(self, name: str, is_target: bool) -> Node:
        if name in self._by_name:
            raise ValueError(f"Node already exists: {name}")

        node = Node(id=len(self._nodes), name=name, is_declared_target=is_target)
        self._nodes.append(node)
        self._by_name[name] = node.id

        if is_target and self.default_root is None:
            self.default_root = name
        return node

    def lookup_or_create(self, name: str, is_target: bool) -> Node:
        """
        Return the node called `name`, creating it if needed.

        A node first seen as a dependency is promoted once it shows up on the
        left-hand side of a rule.
        """
        node = self.lookup(name)
        if node is None:
            return self.create_node(name, is_target)

        if is_target and not node.is_declared_target:
            node.is_declared_target = True
            if self.default_root is None:
                self.default_root = name
        return node

    def add_edge(self, src: Node, dst: Node) -> bool:
        """Add src -> dst. Returns False if the edge was already there."""
        if dst.id in src.deps:
            return False
        src.deps.append(dst.id)
        return True

    def append_command(self, node: Node, text: str, line_number: int | None = None) -> Command:
        cmd = Command(text=text, line_number=line_number)
        node.commands.append(cmd)
        return cmd

    def dependencies(self, node: Node) -> List[Node]:
        return [self._nodes[i] for i in node.deps]

    def reset_traversal(self) -> None:
        for node in self._nodes:
            node.reset_traversal()

    def release(self) -> None:
        """Drop every node; used when parsing aborts half way."""
        self._nodes.clear()
        self._by_name.clear()
        self.default_root = None
