"""Markdown helpers used when a model answers in prose instead of JSON.

``to_document`` turns loosely formatted markdown into a small tree of
``section`` / ``subsection`` / ``paragraph`` nodes, ``to_markdown`` walks the
tree back out, and ``markdown_to_html`` renders paragraph text into HTML
fragments for the generated site.
"""

import html
import json
import re
from typing import Any, Dict, List, Optional

Node = Dict[str, Any]


def to_document(markdown: Any) -> Dict[str, Any]:
    if not markdown or not isinstance(markdown, str):
        return {"metadata": {}, "content": []}

    lines = markdown.split("\n")
    metadata: Dict[str, Any] = {}
    content: List[Node] = []

    start = 0
    if lines[0].strip() == "---":
        start = 1
        for index in range(1, len(lines)):
            start = index + 1
            line = lines[index]
            if line.strip() == "---":
                break
            key, sep, value = line.partition(":")
            if not sep:
                continue
            metadata[key.strip()] = _parse_meta_value(value.strip())

    section: Optional[Node] = None
    cursor: Optional[Node] = None
    for line in lines[start:]:
        if line.startswith("# "):
            section = {"type": "section", "title": line[2:].strip(), "content": []}
            content.append(section)
            cursor = section
        elif line.startswith("## "):
            # Subsections always hang off the enclosing top-level section
            if section is None:
                continue
            cursor = {"type": "subsection", "title": line[3:].strip(), "content": []}
            section["content"].append(cursor)
        elif line.strip():
            paragraph = {"type": "paragraph", "text": line.strip()}
            if cursor is not None:
                cursor["content"].append(paragraph)
            else:
                content.append(paragraph)

    return {"metadata": metadata, "content": content}


def _parse_meta_value(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError:
        return value


def _is_plain_meta(value: Any) -> bool:
    # Strings that would read back as another type, or lose whitespace, get quoted
    return (
        isinstance(value, str)
        and value == value.strip()
        and "\n" not in value
        and _parse_meta_value(value) == value
    )


def to_markdown(document: Any) -> str:
    if not isinstance(document, dict):
        return ""

    parts: List[str] = []
    metadata = document.get("metadata") or {}
    if metadata:
        parts.append("---\n")
        for key, value in metadata.items():
            text = value if _is_plain_meta(value) else json.dumps(value)
            parts.append(f"{key}: {text}\n")
        parts.append("---\n\n")

    for node in document.get("content") or []:
        kind = node.get("type")
        if kind == "section":
            parts.append(f"# {node.get('title', '')}\n\n")
            for child in node.get("content") or []:
                if child.get("type") == "subsection":
                    parts.append(f"## {child.get('title', '')}\n\n")
                    for paragraph in child.get("content") or []:
                        if paragraph.get("type") == "paragraph":
                            parts.append(f"{paragraph.get('text', '')}\n\n")
                elif child.get("type") == "paragraph":
                    parts.append(f"{child.get('text', '')}\n\n")
        elif kind == "paragraph":
            parts.append(f"{node.get('text', '')}\n\n")

    # rstrip keeps the space of a trailing empty "# " heading
    return "".join(parts).rstrip("\n")


_FENCE_RE = re.compile(r"```[\w+-]*[ \t]*\n?([\s\S]*?)```")
_LIST_ITEM_RE = re.compile(r"^[ \t]*[-*][ \t]+(.+)$", re.MULTILINE)
_LIST_RUN_RE = re.compile(r"(?:^<li>.*</li>$\n?)+", re.MULTILINE)
_BOLD_RES = (re.compile(r"\*\*(.+?)\*\*"), re.compile(r"__(.+?)__"))
_ITALIC_RES = (re.compile(r"\*([^*\n]+)\*"), re.compile(r"(?<!\w)_([^_\n]+)_(?!\w)"))
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
_INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")
_BLOCK_PREFIXES = ("<ul", "<li", "<h", "<pre", "<code")
_CODE_TOKEN = "@@BRIXCODE{}@@"


def markdown_to_html(text: Optional[str]) -> str:
    """Render the small markdown subset models tend to emit.

    Rules run in a fixed order; fenced code is parked behind placeholder
    tokens first so that later substitutions never touch its body.
    """
    if not text:
        return ""

    blocks: List[str] = []

    def _park(match: "re.Match[str]") -> str:
        blocks.append(match.group(1))
        return "\n\n" + _CODE_TOKEN.format(len(blocks) - 1) + "\n\n"

    out = _FENCE_RE.sub(_park, text.replace("\r\n", "\n"))

    out = _LIST_ITEM_RE.sub(r"<li>\1</li>", out)
    out = _LIST_RUN_RE.sub(_wrap_list, out)
    for pattern in _BOLD_RES:
        out = pattern.sub(r"<strong>\1</strong>", out)
    for pattern in _ITALIC_RES:
        out = pattern.sub(r"<em>\1</em>", out)
    for level in (5, 4, 3):
        out = re.sub(
            r"^#{%d}[ \t]+(.+)$" % level, r"<h%d>\1</h%d>" % (level, level), out, flags=re.MULTILINE
        )
    out = _LINK_RE.sub(r'<a href="\2">\1</a>', out)
    out = _INLINE_CODE_RE.sub(r"<code>\1</code>", out)

    paragraphs = []
    for chunk in re.split(r"\n\s*\n", out):
        chunk = chunk.strip()
        if not chunk:
            continue
        if chunk.startswith(_BLOCK_PREFIXES) or chunk.startswith("@@BRIXCODE"):
            paragraphs.append(chunk)
        else:
            paragraphs.append(f"<p>{chunk}</p>")
    out = "\n".join(paragraphs)

    for index, body in enumerate(blocks):
        code = html.escape(body.strip("\n"), quote=False)
        out = out.replace(_CODE_TOKEN.format(index), f"<pre><code>{code}</code></pre>")
    return out


def _wrap_list(match: "re.Match[str]") -> str:
    run = match.group(0)
    items = "".join(line for line in run.split("\n") if line)
    return f"<ul>{items}</ul>" + ("\n" if run.endswith("\n") else "")
