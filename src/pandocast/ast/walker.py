#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/walker.py
"""Depth-first traversal of pandoc documents.

This module provides three traversals over a document, an element, or any
list or mapping of elements:

- :func:`walk` calls an action on every element for its side effects
- :func:`query` collects the results of an action
- :func:`transform` replaces elements by the results of an action

The tree passed in is the container being traversed; it is not itself given
to the action. Every nested element is visited, whichever payload slot holds
it: block and inline lists, metadata mappings, ``MetaMap`` payloads, table
cells, citation prefixes and suffixes.

An action is either a callable ``action(element, *args)`` or a selector map
``{selector: handler}``. For a selector map, the handler of the first
selector (in insertion order) that matches the element is called; elements
matching no selector yield ``None``.

Examples
--------
Extract the text of a paragraph:

    >>> from pandocast.ast.nodes import element
    >>> from pandocast.ast.walker import query
    >>> para = element("Para", [element("Str", "a"), element("Space"), element("Str", "b")])
    >>> query(para, {"Str": lambda e: e.content, "Space": lambda e: " "})
    ['a', ' ', 'b']

Remove all emphasis:

    >>> from pandocast.ast.walker import transform
    >>> para = element("Para", [element("Str", "x"), element("Emph", [element("Str", "y")]), element("Str", "z")])
    >>> transform(para, {"Emph": lambda e: []})
    Para([Str('x'), Str('z')])

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, TypeVar, Union

from pandocast.ast.nodes import Citation, Document, Element
from pandocast.ast.selectors import Selector
from pandocast.exceptions import TransformError

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]
Action = Union[Handler, Mapping[Any, Handler]]
Tree = TypeVar("Tree")


def compile_action(action: Action) -> Handler:
    """Turn a callable or a selector map into a single handler.

    Parameters
    ----------
    action : callable or mapping
        Either ``action(element, *args)`` or ``{selector: handler}``

    Returns
    -------
    callable
        A handler returning the matching handler's result, or None when no
        selector matches

    Raises
    ------
    SelectorSyntaxError
        If a selector of the map cannot be parsed
    TypeError
        If the action is neither callable nor a mapping

    """
    if isinstance(action, Mapping):
        rules = [(Selector.parse(selector), handler) for selector, handler in action.items()]

        def dispatch(node: Any, *args: Any) -> Any:
            for selector, handler in rules:
                if selector.match(node):
                    return handler(node, *args)
            return None

        return dispatch
    if callable(action):
        return action
    raise TypeError(f"action must be callable or a selector map, got {type(action).__name__}")


def _child_containers(node: Any) -> list[Any]:
    """Return the values directly below ``node`` that may hold elements."""
    if isinstance(node, Document):
        return [node.meta, node.blocks]
    if isinstance(node, Element):
        if node.spec.arity == 0:
            return []
        if node.spec.arity == 1:
            return [node.payload]
        return list(node.payload)
    if isinstance(node, Citation):
        return [node.prefix, node.suffix, node.mode]
    if isinstance(node, Mapping):
        return list(node.values())
    if isinstance(node, (list, tuple)):
        return list(node)
    return []


# ----------------------------------------------------------------------
# walk and query
# ----------------------------------------------------------------------


def _walk_children(node: Any, handler: Handler, args: tuple[Any, ...]) -> None:
    if isinstance(node, list):
        index = 0
        while index < len(node):
            _walk_value(node[index], handler, args)
            index += 1
        return
    for child in _child_containers(node):
        _walk_value(child, handler, args)


def _walk_value(value: Any, handler: Handler, args: tuple[Any, ...]) -> None:
    if isinstance(value, Element):
        handler(value, *args)
    _walk_children(value, handler, args)


def walk(tree: Any, action: Action, *args: Any) -> None:
    """Call an action on every element below ``tree`` in pre-order.

    Parameters
    ----------
    tree : Document, Element, list or dict
        The container to traverse; it is not passed to the action itself
    action : callable or mapping
        Callable or selector map, called with ``(element, *args)``
    *args : Any
        Extra arguments for the action

    Notes
    -----
    Changes an action makes to an element are seen when its children are
    visited afterwards.

    """
    _walk_children(tree, compile_action(action), args)


def query(tree: Any, action: Action, *args: Any) -> list[Any]:
    """Collect the results of an action on every element below ``tree``.

    Elements are visited in document order (pre-order). ``None`` results are
    skipped and list or tuple results are spliced into the output. The
    children of an element are visited whether or not it produced a result.

    Parameters
    ----------
    tree : Document, Element, list or dict
        The container to traverse; it is not passed to the action itself
    action : callable or mapping
        Callable or selector map, called with ``(element, *args)``
    *args : Any
        Extra arguments for the action

    Returns
    -------
    list
        Collected results

    """
    handler = compile_action(action)
    results: list[Any] = []

    def collect(node: Any, *extra: Any) -> None:
        result = handler(node, *extra)
        if result is None:
            return
        if isinstance(result, (list, tuple)):
            results.extend(result)
        else:
            results.append(result)

    _walk_children(tree, collect, args)
    return results


# ----------------------------------------------------------------------
# transform
# ----------------------------------------------------------------------


def _single_replacement(original: Element, result: Any, where: str) -> Any:
    if result is None:
        return original
    if isinstance(result, Element):
        return result
    if isinstance(result, (list, tuple)) and len(result) == 1:
        return result[0]
    raise TransformError(f"{where} holds exactly one element, but the handler for {original.tag} returned {result!r}")


def _transform_element(node: Element, handler: Handler, args: tuple[Any, ...]) -> Any:
    _transform_children(node, handler, args)
    return handler(node, *args)


def _transform_value(value: Any, handler: Handler, args: tuple[Any, ...], where: str) -> Any:
    """Transform a value held in a single position and return the replacement."""
    if isinstance(value, Element):
        return _single_replacement(value, _transform_element(value, handler, args), where)
    _transform_children(value, handler, args)
    return value


def _transform_sequence(items: list[Any], handler: Handler, args: tuple[Any, ...]) -> None:
    result: list[Any] = []
    for item in items:
        if not isinstance(item, Element):
            _transform_children(item, handler, args)
            result.append(item)
            continue
        replacement = _transform_element(item, handler, args)
        if replacement is None:
            result.append(item)
        elif isinstance(replacement, (list, tuple)):
            result.extend(replacement)
        else:
            result.append(replacement)
    items[:] = result


def _transform_mapping(mapping: dict[Any, Any], handler: Handler, args: tuple[Any, ...]) -> None:
    for key in list(mapping):
        value = mapping[key]
        if not isinstance(value, Element):
            _transform_children(value, handler, args)
            continue
        replacement = _transform_element(value, handler, args)
        if isinstance(replacement, (list, tuple)) and len(replacement) == 0:
            del mapping[key]
        else:
            mapping[key] = _single_replacement(value, replacement, f"mapping value {key!r}")


def _transform_children(node: Any, handler: Handler, args: tuple[Any, ...]) -> None:
    if isinstance(node, list):
        _transform_sequence(node, handler, args)
    elif isinstance(node, dict):
        _transform_mapping(node, handler, args)
    elif isinstance(node, Document):
        _transform_mapping(node.meta, handler, args)
        _transform_sequence(node.blocks, handler, args)
    elif isinstance(node, Citation):
        _transform_sequence(node.prefix, handler, args)
        _transform_sequence(node.suffix, handler, args)
        node.mode = _transform_value(node.mode, handler, args, "citation mode")
    elif isinstance(node, Element):
        spec = node.spec
        if spec.arity == 1:
            replacement = _transform_value(node.payload, handler, args, f"{spec.tag} payload")
            if replacement is not node.payload:
                node.payload = replacement
        elif spec.arity > 1:
            slots = node.payload
            for index, field_spec in enumerate(spec.fields):
                slots[index] = _transform_value(slots[index], handler, args, f"{spec.tag}.{field_spec.name}")


def transform(tree: Tree, action: Action, *args: Any) -> Tree:
    """Rewrite the elements below ``tree`` in post-order, in place.

    The children of an element are transformed before the action is called
    on the element itself, so handlers see already transformed children.
    The result of the action decides what happens to the element:

    - ``None`` keeps it
    - an :class:`Element` replaces it
    - a list replaces it by zero or more elements (an empty list deletes
      it); in a position that holds a single element, such as a payload
      slot or a mapping value, only a list of one element is accepted, and
      an empty list deletes a mapping entry

    Parameters
    ----------
    tree : Document, Element, list or dict
        The container to rewrite; it is not passed to the action itself
    action : callable or mapping
        Callable or selector map, called with ``(element, *args)``
    *args : Any
        Extra arguments for the action

    Returns
    -------
    Document, Element, list or dict
        ``tree`` itself

    Raises
    ------
    TransformError
        If a result cannot be placed where the element was

    """
    handler = compile_action(action)
    logger.debug("Transforming %s", type(tree).__name__)
    _transform_children(tree, handler, args)
    return tree


__all__ = ["Action", "Handler", "compile_action", "walk", "query", "transform"]
