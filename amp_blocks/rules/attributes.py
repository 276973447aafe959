# amp_blocks/rules/attributes.py
"""
Generic block attribute injection.

Editor-level AMP toggles stored on a block (carousel, layout, lightbox,
no-loading) are copied onto the block's first element as ``data-amp-*``
attributes. The splice is textual so that blocks needing no structural
rewrite are never parsed.
"""

import re

from django.utils.html import escape

from ..exceptions import AttributeCoercionFailure

PROP_ATTRIBUTE_MAPPING = {
    "ampCarousel": "data-amp-carousel",
    "ampLayout": "data-amp-layout",
    "ampLightbox": "data-amp-lightbox",
    "ampNoLoading": "data-amp-noloading",
}

_FIRST_TAG_RE = re.compile(r"(<\w+)")


def _attribute_value(prop, value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise AttributeCoercionFailure(
        f"Block attribute {prop} has unsupported type {type(value).__name__}"
    )


def build_injected_attributes(attrs: dict) -> str:
    """Serialize the supported AMP props in ``attrs`` to an attribute string."""
    injected = ""
    for prop, attribute in PROP_ATTRIBUTE_MAPPING.items():
        if prop not in attrs or attrs[prop] is None:
            continue
        value = _attribute_value(prop, attrs[prop])
        injected += f' {attribute}="{escape(value)}"'
    return injected


def inject_block_attributes(html: str, attrs: dict) -> str:
    """
    Splice the block's AMP props into the first opening tag of ``html``.

    Example:
        >>> inject_block_attributes('<figure><img src="a.jpg"></figure>', {"ampLightbox": True})
        '<figure data-amp-lightbox="true"><img src="a.jpg"></figure>'
    """
    injected = build_injected_attributes(attrs or {})
    if not injected:
        return html
    return _FIRST_TAG_RE.sub(lambda m: m.group(1) + injected, html, count=1)
