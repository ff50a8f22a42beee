"""Standalone HTML viewer for rendered flowcharts."""

from __future__ import annotations

import html
import json
from pathlib import Path

from . import config

MERMAID_CDN = "https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.min.js"


def render_html(
    mermaid_text: str,
    title: str = "Code Flowchart",
    max_text_size: int = config.DEFAULT_MAX_TEXT_SIZE,
) -> str:
    init = {
        "startOnLoad": True,
        "theme": "default",
        "maxTextSize": max_text_size,
        "flowchart": {"useMaxWidth": True, "htmlLabels": True, "curve": "basis"},
    }
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{html.escape(title)}</title>
  <style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif; margin: 20px; }}
    .container {{ overflow: auto; }}
  </style>
  <script src="{MERMAID_CDN}"></script>
</head>
<body>
  <div class="container">
    <h1>{html.escape(title)}</h1>
    <pre class="mermaid">
{html.escape(mermaid_text)}
    </pre>
  </div>
  <script>
    mermaid.initialize({json.dumps(init)});
  </script>
</body>
</html>
"""


def write_html(mermaid_text: str, output_file: Path, **kwargs) -> Path:
    output_file.write_text(render_html(mermaid_text, **kwargs), encoding="utf-8")
    return output_file
