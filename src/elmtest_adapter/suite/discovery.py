# src/elmtest_adapter/suite/discovery.py

"""
Converts the language server's view of the test sources into suite nodes.
"""

from collections.abc import Iterable

from elmtest_adapter.protocols import TestSuiteDescription
from elmtest_adapter.suite.nodes import Node, Suite, Test, child_id


def from_test_suite(description: TestSuiteDescription, prefix_id: str = "") -> Node | None:
    """Returns None for descriptions without a label."""
    if not description.label:
        return None
    node_id = child_id(prefix_id, description.label)
    line = description.position.line if description.position is not None else None
    if description.tests:
        return Suite(
            id=node_id,
            label=description.label,
            file=description.file,
            line=line,
            children=from_test_suites(description.tests, node_id),
        )
    return Test(id=node_id, label=description.label, file=description.file, line=line)


def from_test_suites(descriptions: Iterable[TestSuiteDescription], prefix_id: str = "") -> list[Node]:
    nodes = (from_test_suite(d, prefix_id) for d in descriptions)
    return [node for node in nodes if node is not None]


def from_run_node(node: Node, prefix_id: str = "") -> Node | None:
    """
    Re-ids a run tree node below ``prefix_id``.

    Files found while running are derived from the module name and there
    are no lines; the loaded tree supplies real locations during the merge.
    """
    if not node.label:
        return None
    node_id = child_id(prefix_id, node.label)
    if isinstance(node, Suite):
        children = (from_run_node(child, node_id) for child in node.children)
        return Suite(
            id=node_id,
            label=node.label,
            file=node.file,
            children=[c for c in children if c is not None],
        )
    return Test(id=node_id, label=node.label, file=node.file)


# 🔼⚙️
