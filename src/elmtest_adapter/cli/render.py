# src/elmtest_adapter/cli/render.py

"""
Console rendering of run results with rich.
"""

from collections import Counter
from collections.abc import Mapping

from rich.text import Text
from rich.tree import Tree

from elmtest_adapter.results import Fail, Pass, TestCompleted, Todo, build_message
from elmtest_adapter.suite import Node, Suite

STATUS_STYLES = {
    "passed": ("✅", "green"),
    "failed": ("❌", "red"),
    "skipped": ("⏭️", "yellow"),
    "unknown": ("❔", "dim"),
}


def status_of(event: TestCompleted | None) -> str:
    match event:
        case TestCompleted(status=Pass()):
            return "passed"
        case TestCompleted(status=Todo()):
            return "skipped"
        case TestCompleted(status=Fail()):
            return "failed"
    return "unknown"


def count_statuses(events: Mapping[str, TestCompleted]) -> Counter[str]:
    return Counter(status_of(event) for event in events.values())


def _leaf_label(label: str, event: TestCompleted | None) -> Text:
    emoji, style = STATUS_STYLES[status_of(event)]
    text = Text(f"{emoji} ")
    text.append(label, style=style)
    if event is not None and isinstance(event.status, Pass):
        text.append(f" ({event.duration}ms)", style="dim")
    return text


def _add_node(parent: Tree, node: Node, events: Mapping[str, TestCompleted]) -> None:
    if isinstance(node, Suite):
        branch = parent.add(Text(node.label, style="bold"))
        for child in node.children:
            _add_node(branch, child, events)
        return

    event = events.get(node.id)
    leaf = parent.add(_leaf_label(node.label, event))
    if event is not None and not isinstance(event.status, Pass):
        message = build_message(event)
        if message:
            leaf.add(Text(message, style="dim" if isinstance(event.status, Todo) else "red"))


def build_result_tree(suite: Suite, events: Mapping[str, TestCompleted], title: str) -> Tree:
    """Renders every module of ``suite``; failed and todo tests carry their message."""
    tree = Tree(Text(title, style="bold"))
    for child in suite.children:
        _add_node(tree, child, events)
    return tree


def summary_line(counts: Counter[str]) -> Text:
    text = Text()
    text.append(f"{counts['passed']} passed", style="green")
    text.append(", ")
    text.append(f"{counts['failed']} failed", style="red" if counts["failed"] else "")
    if counts["skipped"]:
        text.append(", ")
        text.append(f"{counts['skipped']} todo", style="yellow")
    return text


# 🖥️⚙️
