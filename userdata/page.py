# userdata/page.py

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString

FORM_INPUT_TAGS = {"input"}
RAW_TEXT_TAGS = {"script", "style"}


def escape_raw_text(text):
    """Keep inserted text from closing a <script>/<style> element early."""
    return text.replace("</", "<\\/").replace("<!--", "<\\!--")


class Page:
    """
    The document being rendered for one request.

    A page is fed its HTML (all at once or chunk by chunk) and becomes
    ready once closed. Work scheduled with when_ready() runs right away
    on a ready page, otherwise exactly once when close() is called.

    `environment` plays the role of page globals: callables registered
    there (e.g. "updateUserVariables") are visible to the propagation engine.
    """

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser
        self.environment = {}
        self.soup = None
        self._chunks = []
        self._listeners = []

    @classmethod
    def from_html(cls, html, parser: str = "html.parser") -> "Page":
        page = cls(parser=parser)
        page.feed(html)
        page.close()
        return page

    # -------------------------------------------------
    # Readiness
    # -------------------------------------------------

    @property
    def ready(self) -> bool:
        return self.soup is not None

    def feed(self, chunk):
        if self.ready:
            raise RuntimeError("Page is already parsed")
        if isinstance(chunk, bytes):
            chunk = chunk.decode("utf-8")
        self._chunks.append(chunk)

    def close(self):
        if self.ready:
            return
        self.soup = BeautifulSoup("".join(self._chunks), self.parser)
        self._chunks = []
        listeners, self._listeners = self._listeners, []
        for fn in listeners:
            fn(self)

    def when_ready(self, fn):
        if self.ready:
            fn(self)
        else:
            self._listeners.append(fn)

    def snapshot(self) -> str:
        return self.render()

    def restore(self, html):
        self.soup = BeautifulSoup(html, self.parser)

    def render(self) -> str:
        if not self.ready:
            raise RuntimeError("Page has not been closed yet")
        return str(self.soup)

    # -------------------------------------------------
    # DOM helpers
    # -------------------------------------------------

    def select(self, selector):
        return self.soup.select(selector)

    def get_element_by_id(self, element_id):
        return self.soup.find(id=element_id)

    def set_content(self, element, value):
        """Form inputs get their value attribute, anything else its text."""
        value = str(value)
        if element.name in FORM_INPUT_TAGS:
            element["value"] = value
        elif element.name in RAW_TEXT_TAGS:
            element.string = escape_raw_text(value)
        else:
            element.string = value

    def text_nodes(self):
        """Depth-first text nodes under <body> (whole document if no body)."""
        root = self.soup.body or self.soup
        return [
            node for node in root.descendants
            if isinstance(node, NavigableString)
            and not isinstance(node, PreformattedString)
        ]

    def replace_text(self, old, new) -> int:
        """
        Replace the first occurrence of `old` inside every text node
        containing it. Returns the number of nodes rewritten.
        """
        new = str(new)
        changed = 0
        for node in self.text_nodes():
            text = str(node)
            if old in text:
                value = escape_raw_text(new) if node.parent.name in RAW_TEXT_TAGS else new
                node.replace_with(type(node)(text.replace(old, value, 1)))
                changed += 1
        return changed
