# dust/modules/search.py
"""
search.py - look up packages by name.

 - remote: name search against the remote repository
 - local:  the packages tracked in the local repository directory
"""

from __future__ import annotations
from typing import List

from rich.text import Text

from dust.modules import logger as _logger


class PackageSearch:
    def __init__(self, client, store):
        self.client = client
        self.store = store
        self.log = _logger.Logger("search")

    def search(self, term: str) -> List[str]:
        """Remote names containing term, in the order the server returns them."""
        term = term.strip()
        if not term:
            return []
        names = self.client.search(term)
        self.log.debug(f"search '{term}': {len(names)} result(s)")
        return names

    def local(self) -> List[str]:
        return self.store.list_packages()

    @staticmethod
    def highlight(name: str, term: str, style: str = "cyan") -> Text:
        text = Text(name)
        if term:
            text.highlight_words([term], style=style, case_sensitive=False)
        return text
