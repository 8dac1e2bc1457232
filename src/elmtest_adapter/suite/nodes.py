# src/elmtest_adapter/suite/nodes.py

"""
The suite tree shown in a test explorer.

A ``Suite`` owns its children; a ``Test`` is a leaf. Node ids are the ids of
all ancestors joined with ``/``, so two nodes with the same id in different
trees describe the same test.
"""

from collections.abc import Iterator
from typing import TypeAlias

from attrs import field, mutable


@mutable(slots=True)
class Test:
    """A single test case. Its id is the key into a run's event table."""

    __test__ = False

    id: str = field()
    label: str = field()
    file: str | None = field(default=None)
    line: int | None = field(default=None)


@mutable(slots=True)
class Suite:
    """A named group of tests: a module or a ``describe`` block."""

    id: str = field()
    label: str = field()
    children: list["Node"] = field(factory=list)
    file: str | None = field(default=None)
    line: int | None = field(default=None)

    def find_child(self, label: str) -> "Node | None":
        return next((child for child in self.children if child.label == label), None)


Node: TypeAlias = Suite | Test


def child_id(parent_id: str, label: str) -> str:
    return f"{parent_id}/{label}"


def walk(node: Node) -> Iterator[Node]:
    """Yields ``node`` and all of its descendants, depth first."""
    yield node
    if isinstance(node, Suite):
        for child in node.children:
            yield from walk(child)


def leaves(node: Node) -> Iterator[Test]:
    return (n for n in walk(node) if isinstance(n, Test))


# 🔼⚙️
