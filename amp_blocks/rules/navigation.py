# amp_blocks/rules/navigation.py
"""
Navigation block contained by a <nav> element.

Core drives the responsive menu and click-to-open submenus with the
``wp-block-navigation-view`` script (MicroModal). In AMP the same behaviour is
expressed declaratively:

- the responsive container is cloned into an ``<amp-lightbox>`` and "faked"
  into its open state with ``is-menu-open has-modal-open``,
- the open/close buttons get ``on="tap:{id}.open"`` / ``on="tap:{id}.close"``,
- with overlay mode "always" only the modal copy is kept; otherwise the
  original container stays in place, unwrapped from its modal wrappers,
- MicroModal and modal ARIA attributes are stripped,
- every click-to-open submenu gets an ``<amp-state>`` boolean toggled by its
  button, with ``aria-expanded`` bound to that state,
- the ``wp-block-navigation-view`` script is dequeued.

Only the ``<nav>`` subtree is returned.
"""

import copy
import json
import logging

from .result import RewriteResult
from .utils import (
    add_class,
    find_all_by_class,
    find_all_with_attribute,
    find_first_by_class,
    parse_fragment,
    serialize,
)

logger = logging.getLogger(__name__)

NAVIGATION_SCRIPT_HANDLE = "wp-block-navigation-view"

RESPONSIVE_CONTAINER_CLASS = "wp-block-navigation__responsive-container"
CONTAINER_CONTENT_CLASS = "wp-block-navigation__responsive-container-content"
RESPONSIVE_CLOSE_CLASS = "wp-block-navigation__responsive-close"
OPEN_BUTTON_CLASS = "wp-block-navigation__responsive-container-open"
CLOSE_BUTTON_CLASS = "wp-block-navigation__responsive-container-close"
SUBMENU_CLASSES = ("open-on-click", "wp-block-navigation-submenu")
SUBMENU_TOGGLE_CLASS = "wp-block-navigation-submenu__toggle"

MODAL_OPEN_CLASSES = ("is-menu-open", "has-modal-open")

LIGHTBOX_TAG = "amp-lightbox"
STATE_TAG = "amp-state"
BIND_ATTRIBUTE_PREFIX = "data-amp-bind-"

UNWANTED_ATTRIBUTES = [
    "aria-expanded",
    "aria-modal",
    "data-micromodal-trigger",
    "data-micromodal-close",
]

OVERLAY_NEVER = "never"
OVERLAY_ALWAYS = "always"


def _wrap_in_lightbox(soup, nav, container, overlay_menu, navigation_id):
    """Move the responsive container into an amp-lightbox; returns the lightbox id."""
    lightbox_id = container.get("id") or f"wp-block-navigation-modal-{navigation_id}"
    if container.has_attr("id"):
        del container["id"]

    modal_container = copy.copy(container)
    add_class(modal_container, *MODAL_OPEN_CLASSES)

    lightbox = soup.new_tag(
        LIGHTBOX_TAG, attrs={"id": lightbox_id, "layout": "nodisplay"}
    )
    lightbox.append(modal_container)
    nav.append(lightbox)

    if overlay_menu == OVERLAY_ALWAYS:
        # Only the modal version is shown.
        container.decompose()
    else:
        # Unwrap the content out of the close/dialog wrappers of the original.
        content = find_first_by_class(container, "div", CONTAINER_CONTENT_CLASS)
        close = find_first_by_class(container, "div", RESPONSIVE_CLOSE_CLASS)
        if content is not None and close is not None:
            if content.has_attr("id"):
                del content["id"]
            container.append(content.extract())
            close.decompose()
        else:
            logger.debug("Responsive container has no content/close wrappers to unwrap")

    return lightbox_id


def _bind_modal_buttons(nav, lightbox_id):
    open_button = find_first_by_class(nav, "button", OPEN_BUTTON_CLASS)
    if open_button is not None:
        open_button["on"] = f"tap:{lightbox_id}.open"

    close_button = find_first_by_class(nav, "button", CLOSE_BUTTON_CLASS)
    if close_button is not None:
        close_button["on"] = f"tap:{lightbox_id}.close"


def _strip_unwanted_attributes(nav):
    for attribute in UNWANTED_ATTRIBUTES:
        for element in find_all_with_attribute(nav, attribute):
            del element[attribute]


def _bind_submenus(soup, nav, navigation_id):
    submenus = find_all_by_class(nav, "li", *SUBMENU_CLASSES)
    for submenu_index, submenu in enumerate(submenus):
        # The modal copy shares state with the inline menu.
        if submenu.find_parent(LIGHTBOX_TAG) is not None:
            continue

        toggle = find_first_by_class(submenu, "button", SUBMENU_TOGGLE_CLASS)
        if toggle is None:
            continue

        state_id = f"toggle_{navigation_id}_{submenu_index}"

        script = soup.new_tag("script", attrs={"type": "application/json"})
        script.string = json.dumps(False)
        state = soup.new_tag(STATE_TAG, attrs={"id": state_id})
        state.append(script)
        toggle.append(state)

        toggle["on"] = f"tap:AMP.setState({{ {state_id}: ! {state_id} }})"
        toggle["aria-expanded"] = "false"
        toggle[f"{BIND_ATTRIBUTE_PREFIX}aria-expanded"] = f"{state_id} ? 'true' : 'false'"


def ampify_navigation_block(html, attrs, session):
    """
    Ampify the navigation block.

    Args:
        html: Rendered block markup
        attrs: Block attributes; ``overlayMenu`` is "never", "always" or unset
        session: Current RenderSession; supplies the navigation counter

    Returns:
        RewriteResult holding the serialized ``<nav>`` element
    """
    soup = parse_fragment(html)

    nav = soup.find("nav")
    if nav is None:
        return RewriteResult.unchanged("no <nav> element")

    session.dequeue_script(NAVIGATION_SCRIPT_HANDLE)
    navigation_id = session.next_navigation_id()

    overlay_menu = attrs.get("overlayMenu") or ""
    container = find_first_by_class(nav, "div", RESPONSIVE_CONTAINER_CLASS)

    if container is not None and overlay_menu != OVERLAY_NEVER:
        lightbox_id = _wrap_in_lightbox(soup, nav, container, overlay_menu, navigation_id)
        _bind_modal_buttons(nav, lightbox_id)
        _strip_unwanted_attributes(nav)

    _bind_submenus(soup, nav, navigation_id)

    return RewriteResult.rewritten(serialize(nav))
