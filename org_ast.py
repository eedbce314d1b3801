#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from timestamp import OrgTimestamp

# Node type discriminators
TEXT = "text"
EMPHASIS = "emphasis"
TIMESTAMP = "timestamp"
LINK = "link"
COLORFUL_TEXT = "colorful_text"
STATE = "state"

# Opening delimiter -> closing delimiter
TAG_MAP: dict[str, str] = {
    "_": "_",  # underline
    "<": ">",  # inner link, timestamp, colored text, ...
    "+": "+",  # line through
    "[": "]",  # external link
    "/": "/",  # italic
}

# Characters the plain-text scanner stops at
END_TOKENS: tuple[str, ...] = ("_", ">", "+", "<", "[", "/", "]")


class OrgStates(str, Enum):
    TODO = "TODO"
    DONE = "DONE"
    WAITING = "WAITING"
    STARTED = "STARTED"
    CANCELLED = "CANCELLED"


@dataclass
class OrgTextNode:
    """
    Plain text leaf.

    The root returned by the parser is also an OrgTextNode: its `content`
    stays None and the parsed top-level nodes live in `children`.
    """
    content: Optional[str] = None
    children: list[OrgTextChildNode] = field(default_factory=list)
    type: str = field(default=TEXT, init=False)


@dataclass
class OrgEmphasisNode:
    """A delimited span; `sign` is the opening character."""
    sign: str
    children: list[OrgTextChildNode] = field(default_factory=list)
    type: str = field(default=EMPHASIS, init=False)


@dataclass
class OrgTimestampNode:
    timestamp: OrgTimestamp
    type: str = field(default=TIMESTAMP, init=False)


@dataclass
class OrgLinkNode:
    """
    External ([[url][description]]) or inner (<<meta-id>>) link.

    link_type:
      - "external"
      - "inner"
    """
    link_type: str
    url: str
    description: Optional[str] = None
    abbrev: Optional[str] = None
    type: str = field(default=LINK, init=False)


@dataclass
class OrgColorfulTextNode:
    """
    Colored text like <red:some *text*>.

    `content` is kept verbatim, `children` is a separate parse of it.
    """
    color: str
    content: str
    children: list[OrgTextChildNode] = field(default_factory=list)
    indent: int = 0
    type: str = field(default=COLORFUL_TEXT, init=False)


@dataclass
class OrgStateNode:
    state: OrgStates
    type: str = field(default=STATE, init=False)


OrgTextChildNode = Union[
    OrgTextNode,
    OrgEmphasisNode,
    OrgTimestampNode,
    OrgLinkNode,
    OrgColorfulTextNode,
    OrgStateNode,
]


def is_start_tag(ch: str) -> bool:
    return ch in TAG_MAP


def is_end_tag(ch: str) -> bool:
    return ch != "" and ch in TAG_MAP.values()


def _dict_factory(items: list[tuple[str, Any]]) -> dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in items}


def node_to_dict(node: OrgTextChildNode) -> dict[str, Any]:
    """
    Convert a node (and its subtree) into plain JSON-compatible dicts.

    Example:
        OrgEmphasisNode(sign="_", children=[OrgTextNode(content="hi")])
    ->  {'sign': '_', 'children': [{'content': 'hi', 'children': [], 'type': 'text'}],
         'type': 'emphasis'}
    """
    return asdict(node, dict_factory=_dict_factory)
