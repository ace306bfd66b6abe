"""
Import of indented text plans

Many engines print their plans as one operator per line, nesting expressed
by indentation:

    Projection: test.id
      Filter: test.id > 5
        TableScan: test

The column of the first letter (or ``*`` marker) of a line is its indent
level. A deeper line is a child of the line above it, a line at the same
level is a sibling, and a shallower line closes as many levels as needed.
"""

import re

from qpml.errors import InputUnreadableError, MalformedStructureError
from qpml.model import Document, Node

# first character that starts an operator description
SIGNIFICANT_CHAR = re.compile(r"[A-Za-z*]")


def indent_of(line):
    """Return ``(indent, title)`` for *line* or ``None`` if it has no title"""
    line = line.rstrip("\r\n")
    match = SIGNIFICANT_CHAR.search(line)
    if match is None:
        return None
    return match.start(), line[match.start() :]


class _Entry:
    """Scratch node used while the tree is still growing"""

    __slots__ = ("indent", "title", "children")

    def __init__(self, indent, title):
        self.indent = indent
        self.title = title
        self.children = []


def parse_text_plan(lines):
    """Build a ``Document`` from an iterable of indented lines.

    Raises MalformedStructureError when there is no line with a title or
    when a line would start a second root. Errors raised by *lines* itself
    are not caught.
    """
    arena = []
    # indices into ``arena``, root first
    path = []

    for line_number, line in enumerate(lines, start=1):
        parsed = indent_of(line)
        if parsed is None:
            continue

        indent, title = parsed
        index = len(arena)
        arena.append(_Entry(indent, title))

        if not path:
            path.append(index)
            continue

        while path and indent <= arena[path[-1]].indent:
            path.pop()

        if not path:
            raise MalformedStructureError(
                f"'{title}' (indent {indent}) is not nested below the root "
                f"'{arena[0].title}' (indent {arena[0].indent})",
                line_number,
            )

        arena[path[-1]].children.append(index)
        path.append(index)

    if not arena:
        raise MalformedStructureError("no plan line found")

    return Document(_build_tree(arena))


def _build_tree(arena):
    """Turn the arena into immutable nodes and return the root.

    Children always live at higher indices than their parent, so walking
    the arena backwards finishes every child before its parent.
    """
    nodes = [None] * len(arena)
    for index in range(len(arena) - 1, -1, -1):
        entry = arena[index]
        nodes[index] = Node(entry.title, tuple(nodes[i] for i in entry.children))
    return nodes[0]


def from_text_plan(filename):
    """Read *filename* and parse it as an indented text plan"""
    try:
        with open(filename, "r", encoding="utf-8") as f:
            return parse_text_plan(f)
    except (OSError, UnicodeDecodeError) as error:
        raise InputUnreadableError(
            f"Unable to read text plan {filename}: {error}"
        ) from error
