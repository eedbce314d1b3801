from __future__ import annotations

from org_ast import (
    OrgColorfulTextNode,
    OrgEmphasisNode,
    OrgLinkNode,
    OrgStateNode,
    OrgTextChildNode,
    OrgTextNode,
    OrgTimestampNode,
)


def print_event_gray(text: str) -> None:
    """
    Print event/debug output in gray using ANSI escape codes.
    """
    GRAY = "\033[90m"
    RESET = "\033[0m"
    print(f"{GRAY}{text}{RESET}")


def _describe(node: OrgTextChildNode) -> str:
    if isinstance(node, OrgTextNode):
        return "text" if node.content is None else f"text {node.content!r}"
    if isinstance(node, OrgEmphasisNode):
        return f"emphasis {node.sign!r}"
    if isinstance(node, OrgTimestampNode):
        return f"timestamp {node.timestamp.raw!r}"
    if isinstance(node, OrgLinkNode):
        parts = [f"link ({node.link_type}) {node.url!r}"]
        if node.description is not None:
            parts.append(f"description={node.description!r}")
        if node.abbrev:
            parts.append(f"abbrev={node.abbrev!r}")
        return " ".join(parts)
    if isinstance(node, OrgColorfulTextNode):
        return f"colorful_text {node.color!r} {node.content!r}"
    if isinstance(node, OrgStateNode):
        return f"state {node.state.value}"
    return repr(node)


def format_node_tree(node: OrgTextChildNode, indent: int = 0) -> list[str]:
    """
    Render a node tree as indented lines, one node per line.

    Example:
        text
          emphasis '_'
            text 'abc'
    """
    lines = ["  " * indent + _describe(node)]
    for child in getattr(node, "children", None) or []:
        lines.extend(format_node_tree(child, indent + 1))
    return lines
