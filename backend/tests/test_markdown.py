from brix.services.markdown import markdown_to_html, to_document, to_markdown

SOURCE = """---
title: Bean There
tags: ["coffee", "bakery"]
year: 2024
---
A neighbourhood cafe.
# Hero

Fresh coffee every morning.
## Hours
Open daily from 7am.

Closed on holidays.
## Location
Main Street 12
# Contact
Call us any time.
"""


def test_to_document_parses_frontmatter_values():
    doc = to_document(SOURCE)
    assert doc["metadata"] == {"title": "Bean There", "tags": ["coffee", "bakery"], "year": 2024}


def test_to_document_builds_tree():
    doc = to_document(SOURCE)
    assert doc["content"][0] == {"type": "paragraph", "text": "A neighbourhood cafe."}
    hero = doc["content"][1]
    assert hero["type"] == "section" and hero["title"] == "Hero"
    assert hero["content"][0] == {"type": "paragraph", "text": "Fresh coffee every morning."}
    hours, location = hero["content"][1], hero["content"][2]
    assert hours == {
        "type": "subsection",
        "title": "Hours",
        "content": [
            {"type": "paragraph", "text": "Open daily from 7am."},
            {"type": "paragraph", "text": "Closed on holidays."},
        ],
    }
    # a second subsection is a sibling, not a child of the first
    assert location["title"] == "Location"
    assert doc["content"][2]["title"] == "Contact"


def test_blank_lines_never_create_paragraphs():
    doc = to_document("\n\n# Only\n\n\n   \n")
    assert doc["content"] == [{"type": "section", "title": "Only", "content": []}]


def test_subsection_without_section_is_ignored():
    doc = to_document("## Orphan\ntext")
    assert doc["content"] == [{"type": "paragraph", "text": "text"}]


def test_deeper_headings_stay_paragraphs():
    doc = to_document("# A\n### Deep")
    assert doc["content"][0]["content"] == [{"type": "paragraph", "text": "### Deep"}]


def test_non_string_input():
    assert to_document(None) == {"metadata": {}, "content": []}
    assert to_document("") == {"metadata": {}, "content": []}
    assert to_markdown(None) == ""


def test_round_trip():
    doc = to_document(SOURCE)
    assert to_document(to_markdown(doc)) == doc


def test_round_trip_without_frontmatter():
    doc = to_document("# One\nfirst\n# Two\n## Sub\nsecond")
    text = to_markdown(doc)
    assert text == "# One\n\nfirst\n\n# Two\n\n## Sub\n\nsecond"
    assert to_document(text) == doc


def test_round_trip_keeps_string_metadata_that_looks_like_json():
    doc = to_document('---\nflag: "true"\ncount: "42"\nlive: true\nname: Bean\n---\n# A\ntext')
    assert doc["metadata"] == {"flag": "true", "count": "42", "live": True, "name": "Bean"}
    text = to_markdown(doc)
    assert 'flag: "true"' in text and "name: Bean" in text
    assert to_document(text) == doc


def test_round_trip_keeps_trailing_empty_section():
    doc = to_document("# A\ntext\n# ")
    assert doc["content"][-1] == {"type": "section", "title": "", "content": []}
    assert to_document(to_markdown(doc)) == doc


def test_render_lists_and_emphasis():
    html = markdown_to_html("- one\n* two\n\nSome **bold**, __strong__, *it* and _em_ text")
    assert html == (
        "<ul><li>one</li><li>two</li></ul>\n"
        "<p>Some <strong>bold</strong>, <strong>strong</strong>, <em>it</em> and <em>em</em> text</p>"
    )


def test_render_headings_links_and_inline_code():
    html = markdown_to_html("### Menu\n\n##### Small\n\nSee [our menu](https://example.com/menu) or run `brew`")
    assert html == (
        "<h3>Menu</h3>\n"
        "<h5>Small</h5>\n"
        '<p>See <a href="https://example.com/menu">our menu</a> or run <code>brew</code></p>'
    )


def test_render_fenced_code_is_left_alone():
    html = markdown_to_html("Example:\n\n```python\nprint('**not bold**')\n\nx = 1 < 2\n```")
    assert html == "<p>Example:</p>\n<pre><code>print('**not bold**')\n\nx = 1 &lt; 2</code></pre>"


def test_render_keeps_snake_case_words():
    assert markdown_to_html("use snake_case_names") == "<p>use snake_case_names</p>"


def test_render_empty():
    assert markdown_to_html("") == ""
