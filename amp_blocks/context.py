"""
Per-render state shared by the block rules and widget processors.

A ``RenderSession`` owns the counters used to generate unique DOM ids across
the blocks of one page render, plus the collaborators the rules call out to.
Create a new session for every render; sessions are never shared between
requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .config import get_amp_config


def add_paired_endpoint(url: str, query_var: str = "amp") -> str:
    """
    Return the paired AMP URL for ``url`` by adding the AMP query var.

    Example:
        >>> add_paired_endpoint("https://example.com/2021/05/?foo=bar")
        'https://example.com/2021/05/?foo=bar&amp=1'
    """
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != query_var]
    query.append((query_var, "1"))
    return urlunsplit(parts._replace(query=urlencode(query)))


@dataclass
class RenderSession:
    home_url: str = "/"
    amp_to_amp_linking_enabled: bool = False
    paired_query_var: str = "amp"

    # Collaborators
    to_paired_amp_url: Optional[Callable[[str], str]] = None
    get_media_dimensions: Callable[[object], Optional[dict]] = lambda attachment_id: None
    suppress_script: Optional[Callable[[str], None]] = None

    # Counters, scoped to this render
    category_widget_count: int = 0
    archives_block_count: int = 0
    navigation_block_count: int = 0

    suppressed_scripts: list = field(default_factory=list)

    @classmethod
    def from_config(cls, **overrides) -> "RenderSession":
        """Build a session from ``get_amp_config()``; keyword args win."""
        config = get_amp_config()
        options = {
            "home_url": config["home_url"],
            "amp_to_amp_linking_enabled": bool(config["amp_to_amp_linking_enabled"]),
            "paired_query_var": config["paired_query_var"],
        }
        options.update(overrides)
        return cls(**options)

    def next_category_id(self) -> int:
        self.category_widget_count += 1
        return self.category_widget_count

    def next_archives_id(self) -> int:
        self.archives_block_count += 1
        return self.archives_block_count

    def next_navigation_id(self) -> int:
        self.navigation_block_count += 1
        return self.navigation_block_count

    def paired_url(self, url: str) -> str:
        if self.to_paired_amp_url is not None:
            return self.to_paired_amp_url(url)
        return add_paired_endpoint(url, self.paired_query_var)

    def dequeue_script(self, handle: str) -> None:
        """Signal that the script ``handle`` must not be printed on the page."""
        if handle not in self.suppressed_scripts:
            self.suppressed_scripts.append(handle)
        if self.suppress_script is not None:
            self.suppress_script(handle)
