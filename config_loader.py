# config_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable
import re

try:
    import yaml  # PyYAML
except ImportError as e:
    raise SystemExit(
        "Missing dependency: PyYAML\n"
        "Install with: python -m pip install pyyaml"
    ) from e

from org_ast import OrgStates


class InlineParserConfig:
    """
    Immutable-ish container for the inline parser's literal matchers.

    Every pattern is applied with re.match() against the remaining input,
    i.e. it has to match at the cursor position.
    """

    def __init__(
        self,
        *,
        state_keywords: tuple[str, ...],
        timestamp_re: re.Pattern,
        colorful_text_re: re.Pattern,
        ext_link_re: re.Pattern,
        inner_link_re: re.Pattern,
        state_re: re.Pattern,
        link_abbrev_re: re.Pattern,
    ):
        self.state_keywords = state_keywords
        self.timestamp_re = timestamp_re
        self.colorful_text_re = colorful_text_re
        self.ext_link_re = ext_link_re
        self.inner_link_re = inner_link_re
        self.state_re = state_re
        self.link_abbrev_re = link_abbrev_re


def build_state_re(keywords: Iterable[str]) -> re.Pattern:
    """
    Build the state keyword matcher for a list of keywords.

    Example: ['TODO', 'DONE'] -> (TODO|DONE)(?=\\s|$)
    """
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"({alternatives})(?=\s|$)")


# ---------------- Defaults ---------------------------------------------------

DEFAULT_STATE_KEYWORDS: tuple[str, ...] = tuple(s.value for s in OrgStates)

DEFAULT_CONFIG = InlineParserConfig(
    state_keywords=DEFAULT_STATE_KEYWORDS,
    timestamp_re=re.compile(r"<(\d{4}-\d{1,2}-\d{1,2}[^<>\n]*)>"),
    colorful_text_re=re.compile(r"<([A-Za-z]+|#[0-9A-Fa-f]{3,8}):(?!//)([^<>\n]+)>"),
    ext_link_re=re.compile(r"\[\[([^\[\]\n]+)\](?:\[([^\[\]\n]*)\])?\]"),
    inner_link_re=re.compile(r"<<([^<>\n]+)>>"),
    state_re=build_state_re(DEFAULT_STATE_KEYWORDS),
    link_abbrev_re=re.compile(r":([\w-]+)$"),
)

# ---------------- Loader -----------------------------------------------------


def _as_keyword_tuple(value: Any, name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise TypeError(f"{name} must be a list of strings")
    keywords = tuple(str(v).strip() for v in value)
    known = {s.value for s in OrgStates}
    unknown = [k for k in keywords if k not in known]
    if unknown:
        raise ValueError(f"{name}: unknown state keyword(s): {', '.join(unknown)}")
    if not keywords:
        raise ValueError(f"{name} must not be empty")
    return keywords


# Minimum number of capture groups each matcher must define
REQUIRED_GROUPS: dict[str, int] = {
    "timestamp_re": 1,
    "colorful_text_re": 2,
    "ext_link_re": 2,
    "inner_link_re": 1,
    "state_re": 1,
    "link_abbrev_re": 1,
}


def _check_groups(pattern: re.Pattern, key: str) -> re.Pattern:
    required = REQUIRED_GROUPS[key]
    if pattern.groups < required:
        raise ValueError(
            f"regex.{key} needs at least {required} capture group(s), has {pattern.groups}"
        )
    return pattern


def _pattern(regex: dict[str, Any], key: str, default: re.Pattern) -> re.Pattern:
    return _check_groups(re.compile(regex.get(key, default.pattern)), key)


def load_config(path: Path) -> InlineParserConfig:
    """
    Load YAML config and return an InlineParserConfig instance.

    Layout:
        state_keywords: [TODO, DONE]
        regex:
          timestamp_re: '<(\\d{4}-\\d{2}-\\d{2}[^>]*)>'
    """
    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise TypeError("Config root must be a mapping")

    regex = raw.get("regex") or {}
    if not isinstance(regex, dict):
        raise TypeError("regex must be a mapping")

    state_keywords = _as_keyword_tuple(
        raw.get("state_keywords", list(DEFAULT_CONFIG.state_keywords)),
        "state_keywords",
    )

    if "state_re" in regex:
        state_re = _check_groups(re.compile(regex["state_re"]), "state_re")
    else:
        state_re = build_state_re(state_keywords)

    return InlineParserConfig(
        state_keywords=state_keywords,
        timestamp_re=_pattern(regex, "timestamp_re", DEFAULT_CONFIG.timestamp_re),
        colorful_text_re=_pattern(regex, "colorful_text_re", DEFAULT_CONFIG.colorful_text_re),
        ext_link_re=_pattern(regex, "ext_link_re", DEFAULT_CONFIG.ext_link_re),
        inner_link_re=_pattern(regex, "inner_link_re", DEFAULT_CONFIG.inner_link_re),
        state_re=state_re,
        link_abbrev_re=_pattern(regex, "link_abbrev_re", DEFAULT_CONFIG.link_abbrev_re),
    )
