"""Unit tests for rfcview.html."""

from __future__ import annotations

from rfcview.html import html_to_text


def test_drops_markup_and_scripts() -> None:
    html = (
        "<html><head><title>RFC 9000</title><style>p{}</style></head>"
        "<body><script>track()</script><h1>QUIC</h1><p>Abstract text.</p></body></html>"
    )
    text = html_to_text(html)
    assert text == "QUIC\nAbstract text.\n"


def test_preformatted_blocks_keep_layout() -> None:
    html = "<pre>   +------+\n   | QUIC |\n   +------+   </pre>"
    assert html_to_text(html) == "   +------+\n   | QUIC |\n   +------+\n"


def test_line_breaks() -> None:
    assert html_to_text("<p>one<br>two<br/>three</p>") == "one\ntwo\nthree\n"


def test_blank_runs_collapse() -> None:
    text = html_to_text("<p>a</p>\n\n\n\n<p>b</p>")
    assert "\n\n\n" not in text
    assert text.startswith("a\n")
    assert text.endswith("b\n")


def test_entities_decoded() -> None:
    assert html_to_text("<p>A &amp; B &lt;C&gt;</p>") == "A & B <C>\n"


def test_empty_document() -> None:
    assert html_to_text("") == "\n"
