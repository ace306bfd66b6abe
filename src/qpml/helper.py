"""
Helper classes for qpml
"""

from typing import NamedTuple, Optional


class ResolvedStyle(NamedTuple):
    """Concrete visual attributes of a styled node"""

    color: str
    fill_color: str
    shape: str
    mode: str = "filled"


class StyleResolver:
    """Resolve the style names used by nodes against a style table.

    Later definitions of the same name replace earlier ones.
    """

    def __init__(self, styles=()):
        self.styles = {}
        for style in styles:
            self.styles[style.name] = style

    def resolve(self, node) -> Optional[ResolvedStyle]:
        """Return the attributes for *node* or ``None`` if it is unstyled.

        Nodes without a style name and nodes naming an undefined style are
        both unstyled.
        """
        if node.style is None:
            return None
        style = self.styles.get(node.style)
        if style is None:
            return None
        return ResolvedStyle(style.color, style.color, style.shape)


class DotHelper:
    """Formatting rules of the DOT output"""

    # characters per label line
    line_len = 30

    @staticmethod
    def escape(text: str) -> str:
        """Escape backslashes and double quotes for a quoted DOT string"""
        return text.replace("\\", "\\\\").replace('"', '\\"')

    @staticmethod
    def wrap(text: str, line_len: int = 30) -> str:
        """
        Insert a DOT line break after every *line_len* characters

        *text* must already be escaped. An escape sequence is never split
        from its backslash; such a line grows by one character instead.
        """
        lines = []
        i = 0
        while i < len(text):
            end = i
            while end < len(text) and end - i < line_len:
                end += 2 if text[end] == "\\" else 1
            end = min(end, len(text))
            lines.append(text[i:end])
            i = end
        return "\\n".join(lines)

    @classmethod
    def label(cls, title: str) -> str:
        """Escape *title* and wrap it to the DOT label width"""
        return cls.wrap(cls.escape(title), cls.line_len)

    @classmethod
    def node_statement(cls, node_id: str, title: str, style=None) -> str:
        """Return the statement declaring one DOT node"""
        attrs = ["shape=box", f'label="{cls.label(title)}"']
        if style is not None:
            attrs.append(f'color="{cls.escape(style.color)}"')
            attrs.append(f'fillcolor="{cls.escape(style.fill_color)}"')
            attrs.append(f'style="{style.mode}"')
        return f"\t{node_id} [{'; '.join(attrs)}];"

    @staticmethod
    def edge_statement(parent_id: str, child_id: str, inverted: bool) -> str:
        """Return the edge between *parent_id* and *child_id*.

        Normally arrows point from the inputs towards the parent while the
        edge is declared parent first, so the root is drawn on top. Inverted
        edges are declared child first and point forward.
        """
        if inverted:
            return (
                f"\t{child_id} -> {parent_id} "
                "[arrowhead=normal, arrowtail=none, dir=forward];"
            )
        return (
            f"\t{parent_id} -> {child_id} "
            "[arrowhead=none, arrowtail=normal, dir=back];"
        )


class MermaidHelper:
    """Formatting rules of the Mermaid output"""

    @staticmethod
    def escape(text: str) -> str:
        """Make *text* safe inside a quoted Mermaid label"""
        return text.replace('"', "#quot;")

    @classmethod
    def node_ref(cls, node_id: str, title: str) -> str:
        """Return a node reference carrying its label inline"""
        return f'{node_id}["{cls.escape(title)}"]'
