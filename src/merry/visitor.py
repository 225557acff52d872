"""Tree walking and immutable transforms for merry documents.

Example: drop every directive line from the output:

    def drop_directives(node: Node) -> Node | None:
        if isinstance(node, Directive):
            return None
        return node

    new_doc = transform(doc, drop_directives)

Thread Safety:
    Both functions are pure. The original tree is never modified.

"""

import dataclasses
from collections.abc import Callable, Iterator

from merry.nodes import (
    Document,
    Emphasis,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    QualifiedSpan,
    Section,
)


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in source (pre-)order.

    Section titles are visited before section children.
    """
    yield node
    match node:
        case Section(title=title, children=children):
            for child in title:
                yield from iter_nodes(child)
            for child in children:
                yield from iter_nodes(child)
        case List(items=items):
            for item in items:
                yield from iter_nodes(item)
        case (
            Paragraph(children=children)
            | ListItem(children=children)
            | Emphasis(children=children)
            | QualifiedSpan(children=children)
            | Link(children=children)
        ):
            for child in children:
                yield from iter_nodes(child)
        case _:
            pass  # Leaf nodes


def transform(doc: Document, fn: Callable[[Node], Node | None]) -> Document:
    """Apply a function to every node in the tree, returning a new Document.

    ``fn`` is called bottom-up: children are transformed first, then the
    parent is transformed with its new children. Sibling order is source
    order, so side effects in ``fn`` happen in source order.

    Return ``None`` from ``fn`` to remove a node. The root section cannot be
    removed; returning None (or a non-Section) for it raises TypeError.

    Args:
        doc: The document to transform.
        fn: Function that receives a node and returns a (possibly new) node,
            or None to remove the node from the tree.

    Returns:
        A new Document with the transformation applied. Outline and
        declarations are carried over unchanged.

    """
    root = _transform_node(doc.root, fn)
    if not isinstance(root, Section):
        msg = "transform fn must return a Section for the root (cannot remove root)"
        raise TypeError(msg)
    if root is doc.root:
        return doc
    return dataclasses.replace(doc, root=root)


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    """Transform a single node bottom-up: children first, then self."""
    transformed = _transform_children(node, fn)
    return fn(transformed)


def _transform_children(node: Node, fn: Callable[[Node], Node | None]) -> Node:
    """Produce a new node with children transformed; filter out None (removed) nodes."""

    def _filtered(children: tuple[Node, ...]) -> tuple[Node, ...]:
        return tuple(result for c in children if (result := _transform_node(c, fn)) is not None)

    def _changed(old: tuple[Node, ...], new: tuple[Node, ...]) -> bool:
        return len(old) != len(new) or any(a is not b for a, b in zip(old, new, strict=True))

    match node:
        case Section(title=title, children=children):
            new_title = _filtered(title)
            new_children = _filtered(children)
            if _changed(title, new_title) or _changed(children, new_children):
                return dataclasses.replace(node, title=new_title, children=new_children)
        case List(items=items):
            new_items = _filtered(items)
            if _changed(items, new_items):
                return dataclasses.replace(node, items=new_items)
        case (
            Paragraph(children=children)
            | ListItem(children=children)
            | Emphasis(children=children)
            | QualifiedSpan(children=children)
            | Link(children=children)
        ):
            new_children = _filtered(children)
            if _changed(children, new_children):
                return dataclasses.replace(node, children=new_children)
        case _:
            pass  # Leaf nodes: return as-is

    return node
