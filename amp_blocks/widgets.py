# amp_blocks/widgets.py
"""
Ampification of classic (non-block) widgets.

Two stages are involved:

1. ``preserve_widget_text_element_dimensions`` runs on the raw Text widget
   content. The host strips ``width``/``height`` from embedded media to keep
   them inside the sidebar, which is not needed in AMP where media is
   responsive, so each dimension is copied to a shadow attribute first.
2. ``sanitize_raw_embeds`` runs on the parsed page. It restores the shadow
   dimensions inside Text widgets and swaps the scripts of the Categories and
   Archives dropdown widgets for AMP actions.
"""

import logging
import re

from bs4 import BeautifulSoup

from .exceptions import BlockRewriteError
from .rules.archives import bind_archives_select, remove_change_handler
from .rules.categories import bind_select_to_form
from .rules.utils import find_script_containing, parse_fragment, serialize

logger = logging.getLogger(__name__)

PRESERVED_WIDTH_ATTRIBUTE = "data-preserved-width"
PRESERVED_HEIGHT_ATTRIBUTE = "data-preserved-height"

PRESERVED_ATTRIBUTES = {
    PRESERVED_WIDTH_ATTRIBUTE: "width",
    PRESERVED_HEIGHT_ATTRIBUTE: "height",
}

_MEDIA_TAG_RE = re.compile(r"<(video|iframe|object|embed)\s[^>]*>", re.IGNORECASE | re.DOTALL)


def _preserve_dimensions_in_tag(match):
    tag = match.group(0)
    for shadow, dimension in PRESERVED_ATTRIBUTES.items():
        if f"{shadow}=" in tag:
            continue
        tag = re.sub(
            rf'(?=\s{dimension}="(\d+)")',
            lambda m, shadow=shadow: f' {shadow}="{m.group(1)}"',
            tag,
        )
    return tag


def preserve_widget_text_element_dimensions(content: str) -> str:
    """
    Copy the dimensions of media elements into shadow attributes.

    Example:
        >>> preserve_widget_text_element_dimensions('<iframe src="x" width="560" height="315"></iframe>')
        '<iframe src="x" data-preserved-width="560" width="560" data-preserved-height="315" height="315"></iframe>'
    """
    if not content:
        return content
    return _MEDIA_TAG_RE.sub(_preserve_dimensions_in_tag, content)


def restore_widget_dimensions(root) -> int:
    """
    Move shadow dimensions back onto ``width``/``height`` under ``root``.

    Shadow attributes are always removed, whether or not the real attribute
    survived. Inline styles on legacy ``div.wp-video`` wrappers are dropped
    as well, since AMP video is responsive. Returns the number of elements
    whose dimensions were restored.
    """
    restored = 0
    for element in root.find_all(
        lambda tag: any(tag.has_attr(shadow) for shadow in PRESERVED_ATTRIBUTES)
    ):
        for shadow, dimension in PRESERVED_ATTRIBUTES.items():
            if element.has_attr(shadow):
                element[dimension] = element[shadow]
                del element[shadow]
        restored += 1

    for element in root.find_all("div", attrs={"style": True}):
        if element.get("class") == ["wp-video"]:
            del element["style"]

    return restored


def restore_preserved_dimensions(html: str) -> str:
    """String form of ``restore_widget_dimensions`` for a whole fragment."""
    try:
        soup = parse_fragment(html)
    except BlockRewriteError as e:
        logger.warning(f"Unable to restore preserved dimensions: {e}")
        return html
    restore_widget_dimensions(soup)
    return serialize(soup)


def process_text_widgets(soup: BeautifulSoup) -> None:
    """Restore preserved dimensions inside every Text widget."""
    for text_widget in soup.find_all("div", attrs={"class": True}):
        if text_widget.get("class") != ["textwidget"]:
            continue
        restore_widget_dimensions(text_widget)


def process_categories_widgets(soup: BeautifulSoup, session) -> None:
    """Replace the ``onCatChange`` script of Categories widgets with a form submit action."""
    for select in soup.find_all("select", attrs={"name": "cat"}):
        form = select.parent
        if form is None or form.name != "form" or form.parent is None:
            continue

        script = find_script_containing(form.parent, "onCatChange")
        if script is None:
            continue

        form_id = f"amp-wp-widget-categories-{session.next_category_id()}"
        form["id"] = form_id
        bind_select_to_form(select, form_id)
        script.decompose()


def process_archives_widgets(soup: BeautifulSoup, session) -> None:
    """Replace the change handler of Archives widgets with ``AMP.navigateTo``."""
    selects = soup.find_all(
        "select",
        attrs={
            "name": "archive-dropdown",
            "id": lambda value: bool(value) and value.startswith("archives-dropdown-"),
        },
    )
    for select in selects:
        if not remove_change_handler(select, select.parent):
            continue
        bind_archives_select(select, session)


def sanitize_raw_embeds(soup: BeautifulSoup, session) -> None:
    """
    Sanitize widgets that are not added via blocks.

    Args:
        soup: Parsed page; mutated in place
        session: RenderSession for the current page render
    """
    process_categories_widgets(soup, session)
    process_archives_widgets(soup, session)
    process_text_widgets(soup)


def sanitize_widgets_html(html: str, session) -> str:
    """Run ``sanitize_raw_embeds`` over an HTML string, failing open."""
    try:
        soup = parse_fragment(html)
        sanitize_raw_embeds(soup, session)
    except BlockRewriteError as e:
        logger.warning(f"Unable to sanitize widgets: {e}")
        return html
    return serialize(soup)
