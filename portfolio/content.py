"""Rendering for stored article and experience text.

Case-study bodies are block documents saved by the admin editor::

    {"time": 1700000000000, "blocks": [{"type": "header", "data": {"text": "...", "level": 2}}, ...]}

The JSON is stored verbatim and only interpreted here, at read time. Nothing in
this module raises on bad input: a broken document renders as empty, a broken
block is skipped and the rest of the article still renders.

Inline text from the editor (paragraphs, headers, list items, quotes) may carry
the editor's own inline markup (links, bold) and is emitted as-is; code blocks,
URLs and captions used in attributes are escaped.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from django.utils.html import escape, format_html

logger = logging.getLogger(__name__)

BLOCK_TYPES = ("paragraph", "header", "list", "quote", "code", "delimiter", "image")


def parse_document(content: Optional[str]) -> List[Dict[str, Any]]:
    if not content:
        return []
    try:
        data = json.loads(content)
    except (TypeError, ValueError, RecursionError):
        logger.warning("Case study content is not valid JSON; rendering it empty")
        return []
    if not isinstance(data, dict):
        return []
    blocks = data.get("blocks")
    if not isinstance(blocks, list):
        return []
    return [b for b in blocks if isinstance(b, dict) and isinstance(b.get("type"), str)]


def block_types(content: Optional[str]) -> List[str]:
    return [block["type"] for block in parse_document(content)]


def _text(data: Dict[str, Any], key: str = "text") -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _render_header(data):
    try:
        level = int(data.get("level") or 2)
    except (TypeError, ValueError):
        level = 2
    level = min(max(level, 1), 6)
    return f"<h{level}>{_text(data)}</h{level}>"


def _render_paragraph(data):
    return f"<p>{_text(data)}</p>"


MAX_LIST_DEPTH = 10


def _list_item(item, depth=0) -> str:
    # Nested-list editor output: {"content": "...", "items": [...]}
    if isinstance(item, dict):
        inner = item.get("items") or []
        nested = ""
        if isinstance(inner, list) and inner and depth < MAX_LIST_DEPTH:
            nested = _render_items(inner, "ul", depth + 1)
        return f"<li>{_text(item, 'content')}{nested}</li>"
    return f"<li>{item}</li>"


def _render_items(items, tag, depth=0):
    return f"<{tag}>" + "".join(_list_item(i, depth) for i in items) + f"</{tag}>"


def _render_list(data):
    items = data.get("items")
    if not isinstance(items, list):
        raise ValueError("list block without items")
    tag = "ol" if data.get("style") == "ordered" else "ul"
    return _render_items(items, tag)


def _render_quote(data):
    caption = _text(data, "caption")
    cite = format_html("<cite>{}</cite>", caption) if caption else ""
    return f"<blockquote><p>{_text(data)}</p>{cite}</blockquote>"


def _render_code(data):
    return format_html("<pre><code>{}</code></pre>", _text(data, "code"))


def _render_delimiter(data):
    return '<div class="delimiter">* * *</div>'


def _render_image(data):
    file_info = data.get("file") if isinstance(data.get("file"), dict) else {}
    url = file_info.get("url") or data.get("url")
    if not url:
        raise ValueError("image block without url")
    caption = _text(data, "caption")
    figcaption = format_html("<figcaption>{}</figcaption>", caption) if caption else ""
    return format_html('<figure><img src="{}" alt="{}" />{}</figure>', url, caption, figcaption)


RENDERERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "header": _render_header,
    "paragraph": _render_paragraph,
    "list": _render_list,
    "quote": _render_quote,
    "code": _render_code,
    "delimiter": _render_delimiter,
    "image": _render_image,
}


def render_block(block: Dict[str, Any]) -> str:
    data = block.get("data")
    if not isinstance(data, dict):
        data = {}
    renderer = RENDERERS.get(block.get("type"), _render_paragraph)
    return str(renderer(data))


def render_document(content: Optional[str]) -> str:
    fragments = []
    for block in parse_document(content):
        try:
            fragments.append(render_block(block))
        except (TypeError, ValueError, AttributeError, RecursionError):
            logger.warning("Skipping malformed %s block", block.get("type"))
    return "\n".join(fragments)


# Experience descriptions use a small markdown subset: "- " bullets with two
# spaces per nesting level, blank-line separated paragraphs, **bold**, *italic*
# and `code`.
INLINE_RE = re.compile(r"\*\*(.*?)\*\*|\*(.*?)\*|`(.*?)`")


def render_inline(text: str) -> str:
    out = []
    pos = 0
    for match in INLINE_RE.finditer(text):
        out.append(escape(text[pos:match.start()]))
        bold, italic, code = match.groups()
        if bold is not None:
            out.append(f"<strong>{escape(bold)}</strong>")
        elif italic is not None:
            out.append(f"<em>{escape(italic)}</em>")
        else:
            out.append(f"<code>{escape(code)}</code>")
        pos = match.end()
    out.append(escape(text[pos:]))
    return "".join(out)


def render_formatted_text(text: Optional[str]) -> str:
    if not text:
        return ""
    parts = []
    bullets = []

    def flush():
        if bullets:
            parts.append("<ul>" + "".join(bullets) + "</ul>")
            bullets.clear()

    for line in text.split("\n"):
        stripped = line.strip()
        if stripped.startswith("- "):
            level = (len(line) - len(line.lstrip())) // 2
            bullets.append(f'<li class="level-{level}">{render_inline(stripped[2:].strip())}</li>')
            continue
        flush()
        if stripped:
            parts.append(f"<p>{render_inline(stripped)}</p>")
    flush()
    return "\n".join(parts)
