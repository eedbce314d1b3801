#!/usr/bin/env python3
from __future__ import annotations

import json
from pathlib import Path

from flask import Flask, abort, jsonify, render_template_string, request

from config_loader import DEFAULT_CONFIG, load_config
from emphasis import parse_emphasis_node
from helper import format_node_tree
from org_ast import node_to_dict

BASE_DIR = Path.cwd()
CONFIG_PATH = BASE_DIR / "config.yml"

app = Flask(__name__)
cfg = load_config(CONFIG_PATH) if CONFIG_PATH.is_file() else DEFAULT_CONFIG


LAYOUT_TEMPLATE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ page_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
  <main class="content">
    <h1>Org Inline Parser</h1>
    <form method="get" action="/">
      <textarea name="text" rows="4" cols="80">{{ text }}</textarea>
      <div><button type="submit">Parse</button></div>
    </form>
    {% if tree %}
    <h2>Tree</h2>
    <pre class="tree">{{ tree }}</pre>
    <h2>JSON</h2>
    <pre class="json">{{ tree_json }}</pre>
    {% endif %}
  </main>
</body>
</html>
"""


@app.route("/")
def index():
    text = request.args.get("text", "")
    tree = ""
    tree_json = ""
    if text.strip():
        root = parse_emphasis_node(text, cfg=cfg)
        tree = "\n".join(format_node_tree(root))
        tree_json = json.dumps(node_to_dict(root), indent=2, ensure_ascii=False)

    # autoescaping of render_template_string covers the user text
    return render_template_string(
        LAYOUT_TEMPLATE,
        page_title="Org Inline Parser",
        text=text,
        tree=tree,
        tree_json=tree_json,
    )


@app.route("/api/parse", methods=["POST"])
def api_parse():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400)

    content = payload.get("content")
    if not isinstance(content, str):
        abort(400)

    pad_spaces = payload.get("pad_spaces", True)
    if not isinstance(pad_spaces, bool):
        abort(400)

    root = parse_emphasis_node(content, pad_spaces=pad_spaces, cfg=cfg)
    return jsonify(node_to_dict(root))


if __name__ == "__main__":
    # Run in dev mode
    app.run(debug=False)
