"""Result type returned by every block rewrite rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RewriteResult:
    """
    Outcome of a rewrite rule.

    ``html`` holds the rewritten markup, or ``None`` when the rule decided to
    leave the block alone, in which case ``reason`` says why.
    """

    html: Optional[str] = None
    reason: str = ""

    @property
    def changed(self) -> bool:
        return self.html is not None

    @classmethod
    def rewritten(cls, html: str) -> "RewriteResult":
        return cls(html=html)

    @classmethod
    def unchanged(cls, reason: str) -> "RewriteResult":
        return cls(reason=reason)
