"""
Sanitize satori-html element trees before rendering with satori.

satori validates dimension types strictly and expects numbers for
width/height (e.g. <img width={78} />). satori-html emits attributes as
strings ("78" or "78px"), which fails with: Invalid value "78" for "width".
"""
import re

IMAGE_LIKE_TYPES = {
    "img",
    "svg",
    "image",
}

DIMENSION_KEYS = ("width", "height")

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_INT_RE = re.compile(r"^[+-]?\d+$")


def _parse_number(text: str):
    text = text.strip()
    # blank and bare "px" read as zero
    if not text:
        return 0
    if not _NUMBER_RE.match(text):
        return None
    if _INT_RE.match(text):
        return int(text)
    parsed = float(text)
    # "1e999" overflows to inf
    if parsed in (float("inf"), float("-inf")):
        return None
    return parsed


def to_number_if_possible(value):
    """
    Convert a CSS-like dimension to a number when safe.

    "78" -> 78, "78px" -> 78, "50%" -> "50%", "auto" -> "auto".
    A blank value reads as 0; anything else that does not parse comes
    back unchanged.
    """
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str):
        return value

    trimmed = value.strip()
    if trimmed.endswith("%") or trimmed == "auto":
        return value

    without_px = trimmed[:-2] if trimmed.endswith("px") else trimmed
    parsed = _parse_number(without_px)
    return value if parsed is None else parsed


def fix_dimensions_on_props(props: dict, node_type: str | None = None) -> None:
    """
    Coerce width/height in place.

    Top-level attributes only for img/svg/image, style.width/style.height
    for every element.
    """
    if not props or not isinstance(props, dict):
        return

    if node_type in IMAGE_LIKE_TYPES:
        for key in DIMENSION_KEYS:
            if key in props:
                props[key] = to_number_if_possible(props[key])

    style = props.get("style")
    if isinstance(style, dict):
        for key in DIMENSION_KEYS:
            if key in style:
                style[key] = to_number_if_possible(style[key])


def _walk(node):
    if not isinstance(node, dict):
        return node

    props = node.get("props")
    fix_dimensions_on_props(props, node.get("type"))

    if not isinstance(props, dict):
        return node

    children = props.get("children")
    if isinstance(children, (list, tuple)):
        props["children"] = [
            _walk(child) if isinstance(child, dict) else child
            for child in children
        ]
    elif isinstance(children, dict):
        props["children"] = _walk(children)

    return node


def normalize_dimensions_for_satori(node):
    """
    Recursively normalize width/height values in a satori-html tree.

    Accepts a single node, a list of nodes or None. Nodes are mutated in
    place; a list root comes back as a new list of the same nodes.
    """
    if isinstance(node, (list, tuple)):
        return [_walk(n) for n in node]
    if node is None:
        return node
    return _walk(node)
