# sitescripts/meta_reader.py
from bs4 import BeautifulSoup

DOC_PREFIX = "doc-"

class MetaReader:
    """Read <meta name="..."> tags out of one HTML document."""

    def __init__(self, html_text: str):
        self.soup = BeautifulSoup(html_text or "", "html.parser")

    def doc_tags(self):
        """All <meta name="doc-*"> tags in document order, as attribute dicts."""
        out = []
        for tag in self.soup.find_all("meta"):
            name = tag.get("name")
            if isinstance(name, str) and name.startswith(DOC_PREFIX) and len(name) > len(DOC_PREFIX):
                out.append({k: _attr_text(v) for k, v in tag.attrs.items()})
        return out

    def content(self, name: str):
        """Stripped `content` of the first meta named exactly `name`; None if absent or blank."""
        tag = self.soup.find("meta", attrs={"name": name})
        if tag is None:
            return None
        value = _attr_text(tag.get("content")).strip()
        return value or None

def _attr_text(value) -> str:
    # html.parser hands multi-valued attributes (class, rel) back as lists
    if isinstance(value, list):
        return " ".join(value)
    return value or ""
