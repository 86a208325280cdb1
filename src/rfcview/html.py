"""HTML to plain-text conversion for documents without a text rendition."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

_BLANK_RUNS = re.compile(r"\n{3,}")
_BLOCK_TAGS = [
    "p", "div", "section", "pre", "table", "tr", "li", "dt", "dd",
    "h1", "h2", "h3", "h4", "h5", "h6",
]  # fmt: skip


def html_to_text(html: str) -> str:
    """Extract readable text from an HTML document.

    RFC HTML keeps its ASCII art and tables in ``<pre>`` blocks, so line
    breaks and indentation are preserved; only trailing whitespace and runs of
    blank lines are tidied.
    """
    soup = BeautifulSoup(html, "html.parser")

    for element in soup(["script", "style", "noscript", "head"]):
        element.decompose()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.insert_after("\n")

    text = soup.get_text()
    lines = (line.rstrip() for line in text.splitlines())
    text = "\n".join(lines).strip("\n")
    return _BLANK_RUNS.sub("\n\n", text) + "\n"
