# test_config_loader.py
#
# Run:
#   python -m unittest -v

import re
import tempfile
import unittest
from pathlib import Path

from config_loader import DEFAULT_CONFIG, InlineParserConfig, build_state_re, load_config
from emphasis import parse_emphasis_node
from org_ast import OrgLinkNode, OrgStateNode, OrgStates, OrgTextNode, OrgTimestampNode

REPO_DIR = Path(__file__).resolve().parent


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def write(self, content: str) -> Path:
        p = self.root / "config.yml"
        p.write_text(content, encoding="utf-8")
        return p

    def test_empty_file_gives_defaults(self):
        cfg = load_config(self.write(""))
        self.assertEqual(cfg.state_keywords, DEFAULT_CONFIG.state_keywords)
        self.assertEqual(cfg.timestamp_re.pattern, DEFAULT_CONFIG.timestamp_re.pattern)
        self.assertEqual(cfg.ext_link_re.pattern, DEFAULT_CONFIG.ext_link_re.pattern)

    def test_shipped_config_matches_defaults(self):
        cfg = load_config(REPO_DIR / "config.yml")
        for name in (
            "timestamp_re",
            "colorful_text_re",
            "ext_link_re",
            "inner_link_re",
            "state_re",
            "link_abbrev_re",
        ):
            with self.subTest(name=name):
                self.assertEqual(
                    getattr(cfg, name).pattern,
                    getattr(DEFAULT_CONFIG, name).pattern,
                )

    def test_root_must_be_mapping(self):
        with self.assertRaises(TypeError):
            load_config(self.write("- a\n- b\n"))

    def test_regex_must_be_mapping(self):
        with self.assertRaises(TypeError):
            load_config(self.write("regex: [a]\n"))

    def test_state_keywords_must_be_list(self):
        with self.assertRaises(TypeError):
            load_config(self.write("state_keywords: TODO\n"))

    def test_unknown_state_keyword_rejected(self):
        with self.assertRaises(ValueError):
            load_config(self.write("state_keywords: [TODO, LATER]\n"))

    def test_invalid_regex_propagates(self):
        with self.assertRaises(re.error):
            load_config(self.write("regex:\n  inner_link_re: '<<('\n"))

    def test_state_keywords_subset_limits_matching(self):
        cfg = load_config(self.write("state_keywords: [TODO]\n"))
        children = parse_emphasis_node("DONE here", cfg=cfg).children
        self.assertEqual(children, [OrgTextNode(content="DONE here   ")])

        children = parse_emphasis_node("TODO here", cfg=cfg).children
        self.assertEqual(children[0], OrgStateNode(state=OrgStates.TODO))

    def test_regex_override_is_used(self):
        cfg = load_config(self.write("regex:\n  inner_link_re: '<<<([a-z]+)>>>'\n"))
        (link,) = parse_emphasis_node("<<<abc>>>", cfg=cfg).children
        self.assertEqual(link.url, "abc")

    def test_state_re_override_with_unknown_keyword_is_text(self):
        cfg = load_config(self.write("regex:\n  state_re: '(LATER)'\n"))
        children = parse_emphasis_node("LATER", cfg=cfg).children
        self.assertEqual(children, [OrgTextNode(content="LATER   ")])

    def test_groupless_override_rejected_at_load_time(self):
        overrides = {
            "inner_link_re": "<<[a-z]+>>",
            "timestamp_re": "<\\d{4}-\\d{2}-\\d{2}>",
            "ext_link_re": "\\[\\[([a-z]+)\\]\\]",
            "colorful_text_re": "<([a-z]+):[^>]+>",
            "state_re": "TODO",
            "link_abbrev_re": ":[a-z]+$",
        }
        for key, pattern in overrides.items():
            with self.subTest(key=key):
                path = self.write(f"regex:\n  {key}: '{pattern}'\n")
                with self.assertRaises(ValueError):
                    load_config(path)

    def test_unmatched_optional_group_is_no_match(self):
        cfg = load_config(self.write("regex:\n  inner_link_re: '<<(?:([a-z]+)|[0-9]+)>>'\n"))
        children = parse_emphasis_node("<<123>>", cfg=cfg).children
        self.assertFalse(any(isinstance(c, OrgLinkNode) for c in children))

        (link,) = parse_emphasis_node("<<abc>>", cfg=cfg).children
        self.assertEqual(link.url, "abc")

    def test_unmatched_timestamp_group_is_no_match(self):
        cfg = load_config(
            self.write("regex:\n  timestamp_re: '<(?:(\\d{4}-\\d{2}-\\d{2})|x)>'\n")
        )
        children = parse_emphasis_node("<x>", cfg=cfg).children
        self.assertFalse(any(isinstance(c, OrgTimestampNode) for c in children))

        (node,) = parse_emphasis_node("<2020-01-02>", cfg=cfg).children
        self.assertEqual(node.timestamp.date, "2020-01-02")


def config_with(**patterns) -> InlineParserConfig:
    fields = {
        name: getattr(DEFAULT_CONFIG, name)
        for name in (
            "state_keywords",
            "timestamp_re",
            "colorful_text_re",
            "ext_link_re",
            "inner_link_re",
            "state_re",
            "link_abbrev_re",
        )
    }
    fields.update(patterns)
    return InlineParserConfig(**fields)


class TestHandBuiltConfig(unittest.TestCase):
    def test_groupless_patterns_never_raise(self):
        cfg = config_with(
            ext_link_re=re.compile(r"\[\[[a-z]+\]\]"),
            inner_link_re=re.compile(r"<<[a-z]+>>"),
            timestamp_re=re.compile(r"<\d{4}-\d{2}-\d{2}>"),
            colorful_text_re=re.compile(r"<([a-z]+):[^>]+>"),
            state_re=re.compile(r"TODO"),
        )
        for text in ("[[abc]]", "<<abc>>", "<2020-01-02>", "<red:x>", "TODO x"):
            with self.subTest(text=text):
                children = parse_emphasis_node(text, cfg=cfg).children
                self.assertFalse(
                    any(isinstance(c, (OrgLinkNode, OrgTimestampNode, OrgStateNode)) for c in children)
                )

    def test_link_without_description_group(self):
        cfg = config_with(
            ext_link_re=re.compile(r"\[\[([a-z:]+)\]\]"),
            link_abbrev_re=re.compile(r":[a-z]+$"),
        )
        (link,) = parse_emphasis_node("[[abc:de]]", cfg=cfg).children
        self.assertEqual(link.url, "abc:de")
        self.assertIsNone(link.description)
        self.assertEqual(link.abbrev, "")


class TestBuildStateRe(unittest.TestCase):
    def test_whole_word_at_start(self):
        pattern = build_state_re(["TODO", "DONE"])
        self.assertEqual(pattern.match("DONE x").group(1), "DONE")
        self.assertIsNone(pattern.match("DONEx"))
        self.assertIsNone(pattern.match("x DONE"))
        self.assertEqual(pattern.match("TODO").group(1), "TODO")


if __name__ == "__main__":
    unittest.main(verbosity=2)
