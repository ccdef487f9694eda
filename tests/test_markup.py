"""Tests for wikitext <-> HTML conversion."""

import pytest

from wikiedit.core.utils import is_external
from wikiedit.markup import html_to_wikitext, to_rich_text, to_wikitext, wikitext_to_html


@pytest.mark.parametrize(
    "wikitext",
    [
        "'''Bold Text'''",
        "''Italic Text''",
        "'''''Bold Italic'''''",
        "<u>Underlined</u>",
        "<s>Struck</s>",
        "<code>x = 1</code>",
        "[https://example.com Example]",
        "[https://example.com]",
        "[[Half-Life 2|the sequel]]",
        "== Header ==",
        "====== Header 6 ======",
        "* Item 1\n* Item 2",
        "# First\n# Second",
    ],
)
def test_canonical_constructs_round_trip(wikitext):
    assert to_wikitext(to_rich_text(wikitext)) == wikitext


def test_bold_to_html():
    assert wikitext_to_html("'''Bold Text'''") == "<p><strong>Bold Text</strong></p>"


def test_unordered_list_to_html():
    html = wikitext_to_html("* Item 1\n* Item 2\n* Item 3")
    assert html == "<ul><li>Item 1</li><li>Item 2</li><li>Item 3</li></ul>"


def test_paragraphs_to_html():
    assert wikitext_to_html("Paragraph 1\n\nParagraph 2") == "<p>Paragraph 1</p><p>Paragraph 2</p>"


def test_single_line_break_is_br():
    assert wikitext_to_html("Line 1\nLine 2") == "<p>Line 1<br>Line 2</p>"
    assert html_to_wikitext("<p>Line 1<br>Line 2</p>") == "Line 1\nLine 2"


def test_mixed_markers_make_sibling_lists():
    assert wikitext_to_html("* a\n# b") == "<ul><li>a</li></ul><ol><li>b</li></ol>"


def test_bare_list_marker_is_empty_item():
    assert wikitext_to_html("* a\n*") == "<ul><li>a</li><li></li></ul>"


def test_headers_all_levels():
    for level in range(2, 7):
        marks = "=" * level
        assert wikitext_to_html(f"{marks} Title {marks}") == f"<h{level}>Title</h{level}>"


def test_six_equals_not_read_as_two():
    doc = to_rich_text("====== Deep ======")
    assert doc.blocks[0].kind == "heading"
    assert doc.blocks[0].level == 6
    assert doc.blocks[0].inlines[0].text == "Deep"


def test_external_link_attributes():
    html = wikitext_to_html("[https://example.com Example]")
    assert html == (
        '<p><a href="https://example.com" rel="noopener noreferrer" '
        'target="_blank">Example</a></p>'
    )


def test_external_link_without_target():
    html = wikitext_to_html("[https://example.com Example]", link_target=False)
    assert html == '<p><a href="https://example.com">Example</a></p>'


def test_bare_external_link_uses_url_as_label():
    html = wikitext_to_html("[https://example.com]", link_target=False)
    assert html == '<p><a href="https://example.com">https://example.com</a></p>'


def test_internal_link_to_html():
    assert wikitext_to_html("[[Page|Label]]") == '<p><a href="Page">Label</a></p>'
    assert wikitext_to_html("[[Page]]") == '<p><a href="Page">Page</a></p>'


def test_internal_link_without_label_gets_explicit_label():
    assert to_wikitext(to_rich_text("[[Page]]")) == "[[Page|Page]]"


def test_bold_italic_nesting():
    assert wikitext_to_html("'''''both'''''") == "<p><strong><em>both</em></strong></p>"


def test_code_content_is_literal():
    doc = to_rich_text("<code>'''not bold'''</code>")
    span = doc.blocks[0].inlines[0]
    assert span.kind == "code"
    assert span.text == "'''not bold'''"


def test_text_is_escaped():
    assert wikitext_to_html("a < b & c") == "<p>a &lt; b &amp; c</p>"


def test_preformatted_is_verbatim():
    wikitext = "<pre>a ''b''\n\nc</pre>"
    assert wikitext_to_html(wikitext) == "<pre>a ''b''\n\nc</pre>"
    assert to_wikitext(to_rich_text(wikitext)) == wikitext


def test_blockquote_is_verbatim():
    html = wikitext_to_html("Before\n\n<blockquote>Quoted '''text'''</blockquote>")
    assert html == "<p>Before</p><blockquote>Quoted '''text'''</blockquote>"


def test_mixed_content():
    wikitext = "== Title ==\n* one\n* two\n\nOutro"
    html = wikitext_to_html(wikitext)
    assert html == "<h2>Title</h2><ul><li>one</li><li>two</li></ul><p>Outro</p>"
    # A list is followed by a single line break.
    assert html_to_wikitext(html) == "== Title ==\n\n* one\n* two\nOutro"


def test_empty_input():
    assert wikitext_to_html("") == ""
    assert html_to_wikitext("") == ""
    assert not to_rich_text("  \n\n  ")


def test_crlf_input():
    assert wikitext_to_html("Paragraph 1\r\n\r\nParagraph 2") == "<p>Paragraph 1</p><p>Paragraph 2</p>"


def test_empty_paragraph_collapses():
    assert html_to_wikitext("<p><br></p>") == ""


def test_html_internal_link():
    assert html_to_wikitext('<a href="Page">Page</a>') == "[[Page|Page]]"


def test_html_external_link():
    html = '<p><a href="https://example.com" target="_blank">Example</a></p>'
    assert html_to_wikitext(html) == "[https://example.com Example]"


def test_html_strike_variants_normalize():
    assert html_to_wikitext("<del>Strike</del>") == "<s>Strike</s>"
    assert html_to_wikitext("<strike>Strike</strike>") == "<s>Strike</s>"


def test_html_tag_aliases():
    assert html_to_wikitext("<p><b>B</b> <i>I</i> <ins>U</ins></p>") == "'''B''' ''I'' <u>U</u>"


def test_html_heading():
    assert html_to_wikitext("<h6>Header 6</h6>") == "====== Header 6 ======"
    assert html_to_wikitext("<h2>Header 2</h2>") == "== Header 2 =="


def test_html_ordered_list():
    assert html_to_wikitext("<ol><li>One</li><li>Two</li></ol>") == "# One\n# Two"


def test_html_unknown_tags_stripped():
    assert html_to_wikitext('<p><span style="color: red">Hi</span> there</p>') == "Hi there"


def test_html_entities_decoded():
    assert html_to_wikitext("<p>a&nbsp;b &amp; c &lt;d&gt;</p>") == "a b & c <d>"


def test_html_paragraphs():
    assert html_to_wikitext("<p>One</p><p>Two</p>") == "One\n\nTwo"


def test_is_external():
    assert is_external("https://example.com")
    assert is_external("ftp://files.example.com/x")
    assert not is_external("Half-Life 2")
    assert not is_external("Talk:Page")


def test_italic_containing_bold():
    assert wikitext_to_html("''a '''b''' c''") == "<p><em>a <strong>b</strong> c</em></p>"
    assert to_wikitext(to_rich_text("''a '''b''' c''")) == "''a '''b''' c''"


def test_bold_containing_italic():
    assert wikitext_to_html("'''a ''b'' c'''") == "<p><strong>a <em>b</em> c</strong></p>"


def test_html_italic_containing_bold_round_trip():
    html = "<p><em>a <strong>b</strong> c</em></p>"
    wikitext = html_to_wikitext(html)

    assert wikitext == "''a '''b''' c''"
    assert wikitext_to_html(wikitext) == html


def test_italic_ending_in_bold():
    assert wikitext_to_html("''a '''b'''''") == "<p><em>a <strong>b</strong></em></p>"


def test_excess_line_breaks_collapse():
    assert html_to_wikitext("<p>a</p><p><br></p><p>b</p>") == "a\n\nb"


def test_indented_header_is_not_heading():
    doc = to_rich_text(" == A ==")
    assert doc.blocks[0].kind == "paragraph"
    assert to_rich_text("== A ==  ").blocks[0].kind == "heading"
