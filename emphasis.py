#!/usr/bin/env python3
"""
emphasis.py

Inline Org markup parser for a single paragraph / text run.

Paired delimiters become nested emphasis nodes:

  _underline_, +line through+, /italic/, [bracket], <angle>

and a few literal constructs are recognized as a whole before the generic
delimiter grammar gets a chance:

  TODO / DONE / ...         -> state keyword
  [[url:abbrev][desc]]      -> external link
  <<meta-id>>               -> inner link
  <2022-12-22 Thu 11:00>    -> timestamp
  <red:some _text_>         -> colored text (content parsed separately)

There is no tokenizer pass: a single cursor (OrgNestContext.source) is
consumed by recursive descent. A closing delimiter ends a span if ANY open
ancestor span started with the matching opener, not only the innermost one.

Malformed input never raises:
  - an unterminated opener still yields an emphasis node
  - a stray closer is dropped
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import re

from config_loader import DEFAULT_CONFIG, InlineParserConfig
from org_ast import (
    END_TOKENS,
    TAG_MAP,
    OrgColorfulTextNode,
    OrgEmphasisNode,
    OrgLinkNode,
    OrgStateNode,
    OrgStates,
    OrgTextChildNode,
    OrgTextNode,
    OrgTimestampNode,
    is_end_tag,
    is_start_tag,
)
from timestamp import match_timestamp

# Deeper openers are read as plain text (keeps recursion inside Python's limit)
MAX_NESTING_DEPTH = 100

_STATE_VALUES = {s.value for s in OrgStates}


@dataclass
class OrgNestContext:
    """Parse cursor: the not yet consumed input plus the matchers to use."""
    source: str
    cfg: InlineParserConfig = DEFAULT_CONFIG


# entry function
def parse_emphasis_node(
    content: str,
    pad_spaces: bool = True,
    cfg: InlineParserConfig = DEFAULT_CONFIG,
) -> OrgTextNode:
    """
    Parse one text run into a root OrgTextNode.

    With pad_spaces, three spaces are appended so unterminated constructs at
    the very end still meet whitespace. Whitespace-only top-level text
    children are dropped from the result.
    """
    content = f"{content}   " if pad_spaces else content
    context = OrgNestContext(source=content, cfg=cfg)
    root = OrgTextNode()
    root.children = [
        child
        for child in parse_children(context, [])
        if not (isinstance(child, OrgTextNode) and (child.content or "").strip() == "")
    ]
    return root


def _literal_match(
    pattern: re.Pattern,
    s: str,
    required: tuple[int, ...] = (1,),
) -> Optional[re.Match]:
    """
    Match a literal construct at position 0.

    A match counts only if it consumes input and every group in `required`
    exists and took part in the match.
    """
    if any(g > pattern.groups for g in required):
        return None
    match = pattern.match(s)
    # an empty match would never advance the cursor
    if not match or match.end() == 0:
        return None
    if any(match.group(g) is None for g in required):
        return None
    return match


def _state_match(s: str, cfg: InlineParserConfig) -> Optional[re.Match]:
    match = _literal_match(cfg.state_re, s)
    if match and match.group(1) in _STATE_VALUES:
        return match
    return None


# <2022-12-22 11:00>
def parse_timestamp(context: OrgNestContext) -> OrgTimestampNode:
    s = context.source
    match = context.cfg.timestamp_re.match(s)
    context.source = s[match.end():]
    return OrgTimestampNode(timestamp=match_timestamp(match.group(1)))


def parse_color_text(context: OrgNestContext) -> OrgColorfulTextNode:
    s = context.source
    match = context.cfg.colorful_text_re.match(s)
    color, value = match.group(1), match.group(2)
    context.source = s[match.end():]
    return OrgColorfulTextNode(
        color=color,
        content=value,
        # isolated sub-parse: no padding, no ancestors
        children=parse_children(OrgNestContext(source=value, cfg=context.cfg), []),
    )


# [[url:abbrev][description]]
def parse_ext_link(context: OrgNestContext) -> OrgLinkNode:
    s = context.source
    match = context.cfg.ext_link_re.match(s)
    url = match.group(1)
    description = match.group(2) if match.re.groups >= 2 else None
    context.source = s[match.end():]

    trim_url = url.strip()
    abbrev_match = context.cfg.link_abbrev_re.search(trim_url)
    abbrev = ""
    if abbrev_match and abbrev_match.re.groups:
        abbrev = abbrev_match.group(1) or ""

    return OrgLinkNode(
        link_type="external",
        url=trim_url,
        description=description,
        abbrev=abbrev,
    )


# <<meta-id>>, usually the meta id of a heading
def parse_inner_link(context: OrgNestContext) -> OrgLinkNode:
    s = context.source
    match = context.cfg.inner_link_re.match(s)
    context.source = s[match.end():]
    return OrgLinkNode(link_type="inner", url=match.group(1))


def parse_state_keyword(context: OrgNestContext) -> OrgStateNode:
    s = context.source
    match = _state_match(s, context.cfg)
    context.source = s[match.end():]
    return OrgStateNode(state=OrgStates(match.group(1)))


def parse_children(
    context: OrgNestContext,
    ancestors: list[OrgEmphasisNode],
) -> list[OrgTextChildNode]:
    """
    Main loop: parse nodes until the input ends or an ancestor closes.

    Order of attempts for each position:
      1. state keyword
      2. opener not followed by a space: literal constructs sharing the
         opener ('[[', '<<', '<timestamp>', '<color:...>'), else a span
      3. closer with no open span: dropped
      4. plain text
    """
    nodes: list[OrgTextChildNode] = []
    cfg = context.cfg

    while not is_end(context, ancestors):
        advance_by(context)  # trim start spaces
        s = context.source
        node: Optional[OrgTextChildNode] = None

        if _state_match(s, cfg):
            node = parse_state_keyword(context)
        elif is_start_tag(s[:1]) and s[1:2] != " ":
            if s[0] == "[":
                if s[1:2] == "[" and _literal_match(cfg.ext_link_re, s):
                    node = parse_ext_link(context)
            elif s[0] == "<":
                if s[1:2] == "<" and _literal_match(cfg.inner_link_re, s):
                    node = parse_inner_link(context)
                elif _literal_match(cfg.timestamp_re, s):
                    node = parse_timestamp(context)
                elif _literal_match(cfg.colorful_text_re, s, (1, 2)):
                    node = parse_color_text(context)

            if node is None and len(ancestors) < MAX_NESTING_DEPTH:
                node = parse_element(context, ancestors)
        elif is_end_tag(s[:1]):
            if is_end(context, ancestors):
                # closer of an open span, reached after skipped whitespace
                break
            context.source = s[1:]
            continue

        if node is None:
            node = parse_nest_text(context)

        nodes.append(node)

    return nodes


def advance_by(context: OrgNestContext, n: int = 0) -> None:
    """Consume n characters, or the leading whitespace when n is 0."""
    s = context.source
    if n <= 0:
        n = len(s) - len(s.lstrip())
    if n > 0:
        context.source = s[n:]


def parse_element(
    context: OrgNestContext,
    ancestors: list[OrgEmphasisNode],
) -> OrgEmphasisNode:
    s = context.source.lstrip()
    element = OrgEmphasisNode(sign=s[0])
    context.source = s[1:]

    ancestors.append(element)
    children = parse_children(context, ancestors)
    ancestors.pop()

    element.children = children

    end_tag = TAG_MAP[element.sign]
    if context.source.startswith(end_tag):
        advance_by(context, 1)

    return element


def parse_nest_text(context: OrgNestContext) -> OrgTextNode:
    """
    Consume text up to the next delimiter character.

    The search starts at index 1, so at least one character is consumed
    whenever there is input left.
    """
    s = context.source
    end_index = len(s)

    for token in END_TOKENS:
        index = s.find(token, 1)
        if index != -1 and index < end_index:
            end_index = index

    context.source = s[end_index:]
    return OrgTextNode(content=s[:end_index])


def is_end(context: OrgNestContext, ancestors: list[OrgEmphasisNode]) -> bool:
    s = context.source
    for start, end in TAG_MAP.items():
        if check_is_end(s, ancestors, start, end):
            return True
    return not s


def check_is_end(
    s: str,
    ancestors: list[OrgEmphasisNode],
    start_tag: str,
    end_tag: str,
) -> bool:
    if s.startswith(end_tag):
        for ancestor in reversed(ancestors):
            if ancestor.sign == start_tag:
                return True
    return False
