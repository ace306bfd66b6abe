"""
Renderers turning a Document into text, DOT or Mermaid

Each ``iter_*`` function yields the output one line at a time; the matching
``generate_*`` function joins those lines into a single string. Node ids
follow the position in the tree: the root is ``node0`` and child ``i`` of
``X`` is ``X_i``.
"""

from qpml.helper import DotHelper, MermaidHelper, StyleResolver

ROOT_ID = "node0"


def walk(node):
    """Yield ``(node_id, depth, node)`` for every node in pre-order"""
    stack = [(ROOT_ID, 0, node)]
    while stack:
        node_id, depth, current = stack.pop()
        yield node_id, depth, current
        for i in range(len(current.inputs) - 1, -1, -1):
            stack.append((f"{node_id}_{i}", depth + 1, current.inputs[i]))


def child_ids(node_id, node):
    """Yield ``(child_id, child)`` for the inputs of *node*"""
    for i, child in enumerate(node.inputs):
        yield f"{node_id}_{i}", child


def iter_text(doc):
    """Show a text representation of the plan"""
    for _node_id, depth, node in walk(doc.diagram):
        yield "  " * depth + node.title


def iter_dot(doc, inverted=False):
    """Yield a Graphviz digraph of the plan"""
    styles = StyleResolver(doc.styles)

    yield "digraph G {"
    yield ""
    for node_id, _depth, node in walk(doc.diagram):
        yield DotHelper.node_statement(node_id, node.title, styles.resolve(node))
        for child_id, _child in child_ids(node_id, node):
            yield DotHelper.edge_statement(node_id, child_id, inverted)
    yield "}"


def iter_mermaid(doc, inverted=False):
    """Yield a Mermaid flowchart of the plan inside a markdown code fence"""
    yield "```mermaid"
    yield "flowchart TD"

    root = doc.diagram
    if root.is_leaf:
        # without edges the chart would be empty
        yield MermaidHelper.node_ref(ROOT_ID, root.title)

    for node_id, _depth, node in walk(root):
        parent = MermaidHelper.node_ref(node_id, node.title)
        for child_id, child in child_ids(node_id, node):
            child_ref = MermaidHelper.node_ref(child_id, child.title)
            if inverted:
                yield f"{child_ref} --> {parent}"
            else:
                yield f"{parent} --> {child_ref}"
    yield "```"


def _join(lines):
    return "".join(f"{line}\n" for line in lines)


def generate_text(doc):
    return _join(iter_text(doc))


def generate_dot(doc, inverted=False):
    return _join(iter_dot(doc, inverted))


def generate_mermaid(doc, inverted=False):
    return _join(iter_mermaid(doc, inverted))
