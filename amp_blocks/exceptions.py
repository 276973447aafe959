"""
Exceptions raised while rewriting block and widget markup.

Every rewrite error is recovered inside the dispatcher (``transform``) or the
widget entry points, which fall back to the original markup.
"""


class BlockRewriteError(Exception):
    """Base class for errors raised by rewrite rules."""


class ParseFailure(BlockRewriteError):
    """The markup fragment could not be parsed."""


class StructuralMismatch(BlockRewriteError):
    """An element the rule depends on is missing from the fragment."""


class AttributeCoercionFailure(BlockRewriteError):
    """A block attribute or collaborator value has an unexpected type."""
