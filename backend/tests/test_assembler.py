from brix.schemas import GenerateRequest
from brix.services.assembler import (
    assemble_document,
    build_content_prompt,
    build_site_prompt,
    clean_html,
    extract_html,
    finalize_site,
    post_process,
    site_meta,
)
from brix.services.themes import get_palette

COFFEE = get_palette("coffee")


def test_extract_html_drops_leading_prose():
    page = "<!DOCTYPE html><html><body>Hi</body></html>"
    assert extract_html("Sure! Here is your page:\n" + page) == page


def test_extract_html_from_fence_normalizes_doctype():
    raw = "```html\n<!doctype HTML PUBLIC \"-//W3C//DTD HTML 4.01//EN\">\n<html><head></head><body></body></html>\n```"
    assert extract_html(raw) == "<!DOCTYPE html>\n<html><head></head><body></body></html>"


def test_extract_html_finds_bare_html_tag():
    assert extract_html("intro <html lang='en'><body></body></html>").startswith("<html lang='en'>")


def test_extract_html_looks_outside_a_fence_without_markup():
    raw = "```css\nbody { color: red; }\n```\n<!DOCTYPE html><html></html>"
    assert extract_html(raw) == "<!DOCTYPE html><html></html>"


def test_extract_html_skips_any_fence_label():
    assert extract_html("```css\nbody{}\n```") == "body{}"
    assert extract_html("```HTML\n<html></html>\n```") == "<html></html>"


def test_extract_html_without_markup_returns_input():
    assert extract_html("no markup here") == "no markup here"
    assert extract_html(None) == ""


def test_clean_html_drops_trailing_commentary():
    assert clean_html("<html><body></body></html>\n\nHope this helps!") == "<html><body></body></html>"
    assert clean_html("<section>fragment</section>") == "<section>fragment</section>"


def test_post_process_injects_head_block_and_rewrites_images():
    html = (
        "<!DOCTYPE html><html><head><title>Cafe</title></head>"
        "<body><img src=\"https://via.placeholder.com/600x400\"></body></html>"
    )
    out = post_process(html, COFFEE)
    assert "https://placehold.co/600x400" in out
    assert "via.placeholder.com" not in out
    assert out.index("<head>") < out.index('name="viewport"') < out.index("<title>Cafe</title>")
    assert "tailwind.config" in out
    assert '"primary": "#92400e"' in out
    assert "--color-primary: #92400e;" in out
    assert ".bg-gradient-theme" in out
    assert out.count("<head>") == 1


def test_post_process_creates_missing_head():
    out = post_process('<html lang="en"><body>x</body></html>', COFFEE)
    assert out.startswith('<html lang="en">\n<head>')
    assert "</head><body>x</body>" in out


def test_post_process_on_fragment_prepends_head():
    out = post_process("<main>x</main>", COFFEE)
    assert out.startswith("<head>")
    assert out.endswith("<main>x</main>")


def test_assemble_document_fills_slots():
    out = assemble_document(
        "<main>{title} stays literal</main>",
        {"title": "Bob & Co", "description": 'A "quoted" site'},
        COFFEE,
    )
    assert out.startswith("<!DOCTYPE html>")
    assert "<title>Bob &amp; Co</title>" in out
    assert 'content="A &quot;quoted&quot; site"' in out
    assert "<main>{title} stays literal</main>" in out
    assert "window.BRIX_THEME = {" in out
    assert "{bodyContent}" not in out


def test_finalize_site_wraps_fragments():
    out = finalize_site("Here you go:\n<section>Only a fragment</section>", {"title": "T", "description": "D"}, COFFEE)
    assert out.startswith("<!DOCTYPE html>")
    assert "<section>Only a fragment</section>" in out


def test_finalize_site_keeps_full_documents():
    raw = "```html\n<!DOCTYPE html><html><head></head><body>Real</body></html>\n```\nEnjoy!"
    out = finalize_site(raw, {"title": "T", "description": "D"}, COFFEE)
    assert out.startswith("<!DOCTYPE html><html><head>")
    assert out.endswith("</html>")
    assert "Enjoy" not in out


def test_build_content_prompt_interpolates_request():
    request = GenerateRequest(prompt="  a cozy coffee shop website ", style="rustic")
    prompt = build_content_prompt(request, "coffee")
    assert '"a cozy coffee shop website"' in prompt
    assert "business website" in prompt
    assert "Theme: coffee" in prompt
    assert "Style: rustic" in prompt
    assert '"globalMeta"' in prompt


def test_build_site_prompt_serializes_content():
    content = {"sections": [{"title": "Hero", "content": "Welcome"}], "globalMeta": {"title": "Cafe"}}
    prompt = build_site_prompt(content, "coffee", COFFEE)
    assert 'titled "Cafe"' in prompt
    assert '"title": "Hero"' in prompt
    assert "#92400e" in prompt
    assert build_site_prompt(content, "coffee", COFFEE) == prompt


def test_site_meta_tolerates_odd_shapes():
    assert site_meta({"globalMeta": "nope"})["title"] == "Generated Website"
    assert site_meta([])["description"]
    assert site_meta({"globalMeta": {"title": "Cafe"}})["title"] == "Cafe"
