"""
Reading and writing QPML documents

A QPML document is YAML:

    diagram:
      title: 'Projection: test.id, test.name'
      style: projection
      inputs:
      - title: 'TableScan: test'
        style: tablescan
    styles:
    - name: tablescan
      color: blue
      shape: rectangle

Empty inputs, a missing style and an empty style list are left out.
"""

import yaml

from qpml.errors import InputUnreadableError, SerializationMismatchError
from qpml.model import Document, Node, Style


def node_to_dict(node):
    """Convert *node* and its inputs to plain dicts"""
    data = {"title": node.title}
    if node.style is not None:
        data["style"] = node.style
    if node.inputs:
        data["inputs"] = [node_to_dict(child) for child in node.inputs]
    return data


def document_to_dict(doc):
    data = {"diagram": node_to_dict(doc.diagram)}
    if doc.styles:
        data["styles"] = [
            {"name": style.name, "color": style.color, "shape": style.shape}
            for style in doc.styles
        ]
    return data


def dump_document(doc) -> str:
    """Serialize *doc* to QPML YAML"""
    return yaml.safe_dump(
        document_to_dict(doc),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def _expect(value, expected_type, field):
    if not isinstance(value, expected_type):
        raise SerializationMismatchError(
            f"expected {expected_type.__name__}, got {type(value).__name__}",
            field,
        )
    return value


def node_from_dict(data, field="diagram"):
    """Build a Node from its dict form, checking the shape on the way"""
    _expect(data, dict, field)
    if "title" not in data:
        raise SerializationMismatchError("missing field 'title'", field)

    title = _expect(data["title"], str, f"{field}.title")
    style = data.get("style")
    if style is not None:
        _expect(style, str, f"{field}.style")

    inputs = data.get("inputs")
    if inputs is None:
        inputs = []
    _expect(inputs, list, f"{field}.inputs")

    children = [
        node_from_dict(child, f"{field}.inputs[{i}]") for i, child in enumerate(inputs)
    ]
    return Node(title, tuple(children), style)


def style_from_dict(data, field):
    _expect(data, dict, field)
    values = []
    for key in ("name", "color", "shape"):
        if key not in data:
            raise SerializationMismatchError(f"missing field '{key}'", field)
        values.append(_expect(data[key], str, f"{field}.{key}"))
    return Style(*values)


def document_from_dict(data):
    """Build a Document from the dict form produced by ``document_to_dict``"""
    _expect(data, dict, "document")
    if "diagram" not in data:
        raise SerializationMismatchError("missing field 'diagram'", "document")

    diagram = node_from_dict(data["diagram"])

    styles = data.get("styles")
    if styles is None:
        styles = []
    _expect(styles, list, "styles")

    return Document(
        diagram,
        tuple(style_from_dict(style, f"styles[{i}]") for i, style in enumerate(styles)),
    )


def load_document(text) -> Document:
    """Parse QPML YAML text into a Document"""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise SerializationMismatchError(f"invalid YAML: {error}") from error
    return document_from_dict(data)


def read_document(filename) -> Document:
    """Load the QPML document stored in *filename*"""
    try:
        with open(filename, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as error:
        raise InputUnreadableError(
            f"Unable to read document {filename}: {error}"
        ) from error
    return load_document(text)
