"""Coerce free-form model output into structured site content.

Models are asked for bare JSON but routinely wrap it in code fences, prefix it
with chatter, leave trailing commas behind, or answer in markdown instead.
``normalize`` runs an ordered cascade of stages over the raw text and returns
the first value any stage produces. The last stages always succeed, so
``normalize`` never raises.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .markdown import markdown_to_html, to_document

log = logging.getLogger(__name__)

DEFAULT_SITE_TITLE = "Generated Website"
DEFAULT_SITE_DESCRIPTION = "A website created with Brix.AI"
DEFAULT_SECTION_TITLE = "Section"
LAST_RESORT_TITLE = "Generated Content"


class ParseFailure(ValueError):
    """Raised by a cascade stage that could not produce a value."""


Stage = Callable[[str], Dict[str, Any]]


def _loads_object(candidate: str) -> Dict[str, Any]:
    try:
        value = json.loads(candidate)
    except ValueError as exc:
        raise ParseFailure(f"invalid JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise ParseFailure(f"expected a JSON object, got {type(value).__name__}")
    return value


_DOUBLED_QUOTE_RE = re.compile(r'""(?=[^\s,:}\]])|(?<=[^\s,:{\[])""')
_QUOTED_STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_SMART_QUOTES = {"\u201c": '"', "\u201d": '"', "\u2018": "'", "\u2019": "'"}


def repair_json(candidate: str) -> str:
    """Apply the fixed sequence of textual repairs to a JSON candidate."""
    text = candidate
    for smart, plain in _SMART_QUOTES.items():
        text = text.replace(smart, plain)
    text = _DOUBLED_QUOTE_RE.sub('"', text)
    text = _QUOTED_STRING_RE.sub(_escape_line_breaks, text)
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    return text


def _escape_line_breaks(match: "re.Match[str]") -> str:
    return match.group(0).replace("\r\n", "\\n").replace("\n", "\\n").replace("\r", "\\n")


def _parse_candidate(candidate: str) -> Dict[str, Any]:
    candidate = candidate.strip()
    if not candidate:
        raise ParseFailure("empty candidate")
    try:
        return _loads_object(candidate)
    except ParseFailure:
        return _loads_object(repair_json(candidate))


_FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
_FENCED_ANY_RE = re.compile(r"```[\w+-]*[ \t]*\n?([\s\S]*?)```")


def parse_direct(text: str) -> Dict[str, Any]:
    return _loads_object(text.strip())


def parse_fenced_json(text: str) -> Dict[str, Any]:
    match = _FENCED_JSON_RE.search(text)
    if not match:
        raise ParseFailure("no ```json fence")
    return _parse_candidate(match.group(1))


def parse_fenced_any(text: str) -> Dict[str, Any]:
    match = _FENCED_ANY_RE.search(text)
    if not match:
        raise ParseFailure("no fenced block")
    return _parse_candidate(match.group(1))


def parse_brace_span(text: str) -> Dict[str, Any]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ParseFailure("no brace span")
    return _parse_candidate(text[start : end + 1])


def parse_markdown(text: str) -> Dict[str, Any]:
    document = to_document(text.replace("\r\n", "\n").replace("\r", "\n"))
    nodes = document["content"]
    if not nodes:
        raise ParseFailure("markdown produced no content")

    sections: List[Dict[str, Any]] = []
    intro: List[str] = []
    for node in nodes:
        if node["type"] == "paragraph":
            intro.append(node["text"])
            continue
        if intro:
            sections.append(_section("Introduction", intro))
            intro = []
        sections.append(_section(node["title"] or DEFAULT_SECTION_TITLE, *_section_blocks(node)))
    if intro:
        sections.append(_section("Introduction", intro))

    meta = document["metadata"]
    return _with_meta(sections, title=meta.get("title"), description=meta.get("description"))


def _section_blocks(node: Dict[str, Any]) -> Tuple[List[str], ...]:
    # Paragraph runs become separate render blocks, subsections become h3 headings
    blocks: List[List[str]] = [[]]
    for child in node["content"]:
        if child["type"] == "paragraph":
            blocks[-1].append(child["text"])
        else:
            blocks.append([f"### {child['title']}"] + [p["text"] for p in child["content"]])
    return tuple(b for b in blocks if b)


def _section(title: str, *blocks: Iterable[str]) -> Dict[str, Any]:
    html = "\n".join(markdown_to_html(_join_paragraphs(block)) for block in blocks)
    return {"title": title, "content": html}


_LIST_LINE_RE = re.compile(r"^[-*]\s+")


def _join_paragraphs(lines: Iterable[str]) -> str:
    # Adjacent list items stay on consecutive lines so they render as one list
    out = ""
    previous = None
    for line in lines:
        if previous is not None:
            both_items = _LIST_LINE_RE.match(previous) and _LIST_LINE_RE.match(line)
            out += "\n" if both_items else "\n\n"
        out += line
        previous = line
    return out


_HEADING_RE = re.compile(r"^#+\s*")


def parse_paragraphs(text: str) -> Dict[str, Any]:
    sections = []
    for chunk in re.split(r"\n\s*\n", text.replace("\r\n", "\n")):
        chunk = chunk.strip()
        if not chunk:
            continue
        first, _, rest = chunk.partition("\n")
        title = _HEADING_RE.sub("", first.strip()).strip() or DEFAULT_SECTION_TITLE
        sections.append({"title": title, "content": markdown_to_html(rest.strip())})
    if not sections:
        sections.append({"title": DEFAULT_SECTION_TITLE, "content": ""})
    return _with_meta(sections)


def _with_meta(
    sections: List[Dict[str, Any]], *, title: Optional[Any] = None, description: Optional[Any] = None
) -> Dict[str, Any]:
    if not title:
        first = sections[0]["title"] if sections else ""
        title = first if first not in ("", DEFAULT_SECTION_TITLE, "Introduction") else DEFAULT_SITE_TITLE
    return {
        "sections": sections,
        "globalMeta": {
            "title": str(title),
            "description": str(description) if description else DEFAULT_SITE_DESCRIPTION,
        },
    }


STAGES: Tuple[Tuple[str, Stage], ...] = (
    ("direct", parse_direct),
    ("fenced_json", parse_fenced_json),
    ("fenced_any", parse_fenced_any),
    ("brace_span", parse_brace_span),
    ("markdown", parse_markdown),
    ("paragraphs", parse_paragraphs),
)


def run_cascade(text: str, stages: Sequence[Tuple[str, Stage]] = STAGES) -> Tuple[str, Dict[str, Any]]:
    """Return ``(stage_name, value)`` from the first stage that succeeds."""
    for name, stage in stages:
        try:
            value = stage(text)
        except ParseFailure as exc:
            log.debug("normalize: stage %s failed: %s", name, exc)
            continue
        log.debug("normalize: stage %s succeeded", name)
        return name, value
    raise ParseFailure("no stage produced a value")


_STRIP_FENCES_RE = re.compile(r"```|\bjson\b", re.IGNORECASE)


def last_resort(text: str) -> Dict[str, Any]:
    body = _STRIP_FENCES_RE.sub("", text or "").strip()
    return {
        "sections": [{"title": LAST_RESORT_TITLE, "content": body}],
        "globalMeta": {"title": DEFAULT_SITE_TITLE, "description": DEFAULT_SITE_DESCRIPTION},
    }


def normalize(raw: Optional[str]) -> Dict[str, Any]:
    text = raw if isinstance(raw, str) else ("" if raw is None else str(raw))
    try:
        name, value = run_cascade(text)
    except Exception:
        log.exception("normalize: cascade failed, using last-resort wrapper")
        return last_resort(text)
    if name not in ("direct", "fenced_json"):
        log.info("normalize: recovered model output via %s stage", name)
    return value
