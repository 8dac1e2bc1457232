# src/elmtest_adapter/suite/merge.py

"""
Merges the tree of a (possibly partial) run into the previously loaded tree.

Both functions are pure: they return new nodes and never touch their inputs.
"""

import attrs

from elmtest_adapter.suite.nodes import Node, Suite, walk


def copy_locations(source: Suite, dest: Suite) -> Suite:
    """
    Returns a copy of ``dest`` carrying the file/line of same-id nodes in ``source``.

    Ids are compared over the whole tree, so a node keeps its location even
    when it moved to a different parent. Absent values in ``source`` never
    erase a location ``dest`` already has.
    """
    by_id = {node.id: node for node in walk(source)}

    def go(node: Node) -> Node:
        found = by_id.get(node.id)
        changes = {}
        if isinstance(node, Suite):
            changes["children"] = [go(child) for child in node.children]
        if found is not None:
            if found.file is not None:
                changes["file"] = found.file
            if found.line is not None:
                changes["line"] = found.line
        return attrs.evolve(node, **changes)

    return go(dest)


def merge_top_level_suites(fresh: Suite, stale: Suite) -> Suite:
    """
    Combines a freshly run tree with the previously known one.

    Roots with different ids are unrelated projects: ``fresh`` is appended to
    ``stale``. Otherwise the stale children keep their order, each replaced by
    its fresh counterpart (with stale locations copied in), and children only
    the fresh run knows about are appended.
    """
    if fresh.id != stale.id:
        return attrs.evolve(stale, children=[*stale.children, fresh])

    located = copy_locations(stale, fresh)
    fresh_by_id = {child.id: child for child in located.children}
    stale_ids = {child.id for child in stale.children}
    children = [fresh_by_id.get(child.id, child) for child in stale.children]
    news = [child for child in located.children if child.id not in stale_ids]
    return attrs.evolve(stale, children=[*children, *news])


# 🔼⚙️
