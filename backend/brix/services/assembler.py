import html
import json
import re
from typing import Any, Dict, Optional

from ..config import load_settings
from ..schemas import GenerateRequest


def _template(key: str, default: str) -> str:
    prompts = load_settings().prompts or {}
    return prompts.get("user", {}).get(key) or default


DEFAULT_CONTENT_TEMPLATE = (
    'Plan the content of a {website_type} website for this request:\n"{prompt}"\n\n'
    "Design direction:\n- Theme: {theme}\n- Color scheme: {color_scheme}\n"
    "- Style: {style}\n- Brand tone: {brand_tone}\n\n"
    "Return ONLY a JSON object (no code fences, no commentary) with the keys "
    '"sections" (a list of objects with "title", "content" as an HTML fragment, '
    'optional "design" and "meta") and "globalMeta" (an object with "title" and "description").'
)

DEFAULT_SITE_TEMPLATE = (
    'Build a complete single-page website titled "{title}" from this content plan:\n{content_json}\n\n'
    "Return ONLY the HTML document starting with <!DOCTYPE html>, with no code fences or explanations. "
    "Use Tailwind classes and the semantic classes bg-primary, text-primary, bg-accent, bg-surface, "
    'text-muted and bg-gradient-theme. The "{theme}" palette is injected at build time: {palette_json}'
)


def build_content_prompt(request: GenerateRequest, theme: str) -> str:
    template = _template("content_generation", DEFAULT_CONTENT_TEMPLATE)
    return template.format(
        prompt=request.prompt.strip(),
        website_type=request.website_type.value,
        theme=theme,
        color_scheme=request.color_scheme or "derived from the theme",
        style=request.style or "modern",
        brand_tone=request.brand_tone or "professional",
    )


def build_site_prompt(content: Dict[str, Any], theme: str, palette: Dict[str, str]) -> str:
    template = _template("site_generation", DEFAULT_SITE_TEMPLATE)
    return template.format(
        title=site_meta(content)["title"],
        content_json=json.dumps(content, indent=2, ensure_ascii=False),
        theme=theme,
        palette_json=json.dumps(palette),
    )


def site_meta(content: Any) -> Dict[str, str]:
    """Title and description from ``globalMeta``, tolerating any shape."""
    meta = content.get("globalMeta") if isinstance(content, dict) else None
    if not isinstance(meta, dict):
        meta = {}
    return {
        "title": str(meta.get("title") or "Generated Website"),
        "description": str(meta.get("description") or "A website created with Brix.AI"),
    }


_HTML_FENCE_RE = re.compile(r"```[\w+-]*[ \t]*\n?([\s\S]*?)```", re.IGNORECASE)
_DOC_START_RE = re.compile(r"<!doctype\b|<html\b", re.IGNORECASE)
_DOCTYPE_RE = re.compile(r"<!doctype[^>]*>", re.IGNORECASE)
_HTML_END_RE = re.compile(r"(</html\s*>)[\s\S]*\Z", re.IGNORECASE)


def extract_html(raw: Optional[str]) -> str:
    text = raw or ""
    fence = _HTML_FENCE_RE.search(text)
    fenced = fence.group(1).strip() if fence else ""

    for candidate in (fenced, text):
        start = _DOC_START_RE.search(candidate) if candidate else None
        if start:
            return _DOCTYPE_RE.sub("<!DOCTYPE html>", candidate[start.start() :], count=1)
    return fenced or text


def clean_html(document: str) -> str:
    """Drop any trailing commentary the model appended after ``</html>``."""
    return _HTML_END_RE.sub(r"\1", document).strip()


PLACEHOLDER_IMAGE_HOST = "via.placeholder.com"
ALTERNATE_IMAGE_HOST = "placehold.co"

_HEAD_RE = re.compile(r"<head(\s[^>]*)?>", re.IGNORECASE)
_HTML_OPEN_RE = re.compile(r"<html(\s[^>]*)?>", re.IGNORECASE)

HEAD_TEMPLATE = """
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <script src="https://cdn.tailwindcss.com"></script>
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.5.1/css/all.min.css">
    <script>
      tailwind.config = {{ theme: {{ extend: {{ colors: {tailwind_colors} }} }} }};
    </script>
    <style>
      :root {{
{css_vars}
      }}
      body {{ background-color: var(--color-background); color: var(--color-text); }}
      .bg-primary {{ background-color: var(--color-primary); }}
      .text-primary {{ color: var(--color-primary); }}
      .border-primary {{ border-color: var(--color-primary); }}
      .bg-secondary {{ background-color: var(--color-secondary); }}
      .text-secondary {{ color: var(--color-secondary); }}
      .bg-accent {{ background-color: var(--color-accent); }}
      .text-accent {{ color: var(--color-accent); }}
      .bg-surface {{ background-color: var(--color-surface); }}
      .text-muted {{ color: var(--color-muted); }}
      .bg-gradient-theme {{ background-image: var(--color-gradient); }}
    </style>
"""


def theme_head(palette: Dict[str, str]) -> str:
    colors = {k: v for k, v in palette.items() if k != "gradient"}
    css_vars = "\n".join(f"        --color-{name}: {value};" for name, value in palette.items())
    return HEAD_TEMPLATE.format(tailwind_colors=json.dumps(colors), css_vars=css_vars)


def post_process(document: str, palette: Dict[str, str]) -> str:
    document = document.replace(PLACEHOLDER_IMAGE_HOST, ALTERNATE_IMAGE_HOST)
    block = theme_head(palette)

    head = _HEAD_RE.search(document)
    if head:
        return document[: head.end()] + block + document[head.end() :]
    opening = _HTML_OPEN_RE.search(document)
    if opening:
        return document[: opening.end()] + "\n<head>" + block + "</head>" + document[opening.end() :]
    return "<head>" + block + "</head>\n" + document


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <title>{title}</title>
    {meta}
    <script>window.BRIX_THEME = {colors};</script>
</head>
<body>
{bodyContent}
</body>
</html>"""

_SLOT_RE = re.compile(r"\{(colors|title|meta|bodyContent)\}")


def assemble_document(body: str, meta: Dict[str, str], palette: Dict[str, str]) -> str:
    description = html.escape(meta.get("description", ""), quote=True)
    values = {
        "colors": json.dumps(palette),
        "title": html.escape(meta.get("title", "")),
        "meta": f'<meta name="description" content="{description}">',
        "bodyContent": body,
    }
    page = _SLOT_RE.sub(lambda m: values[m.group(1)], PAGE_TEMPLATE)
    return post_process(page, palette)


def finalize_site(raw: Optional[str], meta: Dict[str, str], palette: Dict[str, str]) -> str:
    document = clean_html(extract_html(raw))
    if _DOC_START_RE.match(document):
        return post_process(document, palette)
    return assemble_document(document, meta, palette)
