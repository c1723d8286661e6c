# themesmith/editor/page.py
"""
The host page being styled.

The editor reads the page's body markup at request time and writes the
generated CSS into a single `<style id="css">` element in the head, created
on first use and overwritten in place afterwards.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Stylesheet

STYLESHEET_ID = "css"

_SKELETON = "<!DOCTYPE html><html><head></head><body></body></html>"


class PreviewPage:
    def __init__(self, markup: str = ""):
        soup = BeautifulSoup(markup, "html.parser")
        if soup.body is None:
            # A bare fragment: move its nodes into a full document skeleton.
            fragment = soup
            soup = BeautifulSoup(_SKELETON, "html.parser")
            for node in list(fragment.contents):
                soup.body.append(node.extract())
        if soup.head is None:
            head = soup.new_tag("head")
            (soup.html or soup).insert(0, head)
        self._soup = soup

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PreviewPage":
        return cls(Path(path).read_text(encoding="utf-8"))

    def body_markup(self) -> str:
        """The body's inner HTML, as sent to the rendering service."""
        return self._soup.body.decode_contents()

    def apply_stylesheet(self, css: str) -> None:
        """Replaces the live stylesheet's text, creating the element only if absent."""
        element = self._soup.find("style", id=STYLESHEET_ID)
        if element is None:
            element = self._soup.new_tag("style", attrs={"id": STYLESHEET_ID})
            self._soup.head.append(element)
        # Stylesheet strings are emitted verbatim, so selectors like `a > b` survive.
        element.string = Stylesheet(css)

    def stylesheet(self) -> Optional[str]:
        element = self._soup.find("style", id=STYLESHEET_ID)
        if element is None:
            return None
        return "" if element.string is None else str(element.string)

    def stylesheet_count(self) -> int:
        return len(self._soup.find_all("style", id=STYLESHEET_ID))

    def html(self) -> str:
        return str(self._soup)

    def write(self, path: Union[str, Path]) -> Path:
        target = Path(path)
        target.write_text(self.html(), encoding="utf-8")
        return target
