"""Parsing, querying and serialization helpers shared by the rewrite rules."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from ..exceptions import ParseFailure


def parse_fragment(html: str) -> BeautifulSoup:
    """
    Parse an HTML fragment into a tree.

    No ``<html>``/``<body>`` wrapper is added, so the fragment may have any
    number of top-level nodes and serializes back without extra markup.
    """
    if not isinstance(html, str):
        raise ParseFailure(f"Expected markup string, got {type(html).__name__}")
    try:
        return BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise ParseFailure(f"Unable to parse fragment: {e}") from e


def serialize(node) -> str:
    """Render a soup, tag or subtree back to HTML."""
    return str(node) if node is not None else ""


def class_list(tag: Tag) -> list:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def has_classes(tag: Tag, *class_names: str) -> bool:
    """Return True if ``tag`` carries every one of ``class_names``."""
    classes = class_list(tag)
    return all(name in classes for name in class_names)


def find_all_by_class(root, tag_name: str, *class_names: str) -> list:
    """All descendants of ``root`` named ``tag_name`` carrying the classes, in document order."""
    return root.find_all(
        lambda tag: tag.name == tag_name and has_classes(tag, *class_names)
    )


def find_first_by_class(root, tag_name: str, *class_names: str):
    return root.find(
        lambda tag: tag.name == tag_name and has_classes(tag, *class_names)
    )


def find_all_with_attribute(root, attribute: str) -> list:
    return root.find_all(attrs={attribute: True})


def find_script_containing(root, needle: str):
    """First ``<script>`` under ``root`` whose text mentions ``needle``."""
    for script in root.find_all("script"):
        if needle in script.get_text():
            return script
    return None


def add_class(tag: Tag, *class_names: str) -> None:
    classes = class_list(tag)
    for name in class_names:
        if name not in classes:
            classes.append(name)
    tag["class"] = classes


def split_amp_actions(actions: str) -> list:
    """
    Split an event's action list on top-level commas.

    Commas nested in parentheses or braces belong to the action, so
    ``AMP.setState({a: 1, b: 2})`` stays a single action.
    """
    parts = []
    depth = 0
    current = ""
    for char in actions:
        if char in "({[":
            depth += 1
        elif char in ")}]" and depth:
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        current += char
    parts.append(current.strip())
    return [part for part in parts if part]


def parse_amp_actions(value: str) -> dict:
    """
    Parse an AMP ``on`` attribute into an ordered ``{event: [actions]}`` dict.

    Example:
        >>> parse_amp_actions("tap:menu.open,menu.focus;change:form.submit")
        {'tap': ['menu.open', 'menu.focus'], 'change': ['form.submit']}
    """
    events = {}
    for segment in (value or "").split(";"):
        event, sep, actions = segment.partition(":")
        event = event.strip()
        if not sep or not event:
            continue
        bound = events.setdefault(event, [])
        for action in split_amp_actions(actions):
            if action not in bound:
                bound.append(action)
    return {event: bound for event, bound in events.items() if bound}


def add_amp_action(element: Tag, event: str, action: str) -> None:
    """
    Add ``event:action`` to the element's ``on`` attribute.

    Actions for an event that is already bound are comma-appended; other
    events keep their existing bindings.
    """
    events = parse_amp_actions(element.get("on", ""))
    actions = events.setdefault(event, [])
    if action not in actions:
        actions.append(action)
    element["on"] = ";".join(
        f"{name}:{','.join(bound)}" for name, bound in events.items()
    )
