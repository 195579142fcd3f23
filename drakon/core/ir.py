from typing import Container, Dict, List, Optional, Any

from drakon.core.syntax import BlockStatement


def base_anchor(value: Any) -> str:
    """Strip an ``@anchor`` suffix from a node reference."""
    if not isinstance(value, str):
        return ""
    return value.split("@", 1)[0]


def resolve_base(reference: str, known_ids: Container[str]) -> str:
    """
    Find the node a reference points at.

    Synthesized ids such as ``main@start`` contain ``@`` themselves, so anchor
    suffixes are peeled from the right until a known id remains. Falls back to
    :func:`base_anchor` when nothing matches.
    """
    candidate = reference
    while candidate:
        if candidate in known_ids:
            return candidate
        if "@" not in candidate:
            break
        candidate = candidate.rsplit("@", 1)[0]
    return base_anchor(reference)


class NodeGeometry:
    """Size and text metrics computed for a node by the layout engine."""
    def __init__(
        self,
        width: float,
        height: float,
        lines: int,
        line_height: float,
        spec: Any,
        padding_top: float,
        padding_bottom: float,
        padding_left: float,
        padding_right: float,
        wrapped_lines: List[str],
        text_y_offset: float = 0,
    ):
        self.width = width
        self.height = height
        self.lines = lines
        self.line_height = line_height
        self.spec = spec
        self.padding_top = padding_top
        self.padding_bottom = padding_bottom
        self.padding_left = padding_left
        self.padding_right = padding_right
        self.wrapped_lines = wrapped_lines
        self.text_y_offset = text_y_offset

    def __repr__(self):
        return f"<NodeGeometry {self.width}x{self.height} lines={self.lines}>"


class DiagramNode:
    """A visible node of a DRAKON diagram."""
    def __init__(
        self,
        node_id: str,
        node_type: str,
        label: str = "",
        column: int = 0,
        attributes: Optional[Dict[str, Any]] = None,
        block: Optional[BlockStatement] = None,
    ):
        self.id = node_id
        self.type = node_type
        self.label = label
        self.column = column
        self.attributes = attributes if attributes is not None else {}
        # Synthesized nodes get a stand-in block so every node has a source.
        self.block = block or BlockStatement(name=node_type, labels=[node_id], body=[])
        self.geometry: Optional[NodeGeometry] = None

    @property
    def implicit(self) -> bool:
        return bool(self.attributes.get("implicit"))

    def __repr__(self):
        return f"<DiagramNode {self.type} id={self.id} column={self.column} label='{self.label}'>"


class DiagramEdge:
    """A connection between two nodes, declared by a ``line`` block or synthesized."""
    def __init__(
        self,
        source: str,
        target: str,
        kind: str = "main",
        label: str = "",
        note: str = "",
        handle: str = "",
        attributes: Optional[Dict[str, Any]] = None,
        from_base: Optional[str] = None,
        to_base: Optional[str] = None,
    ):
        self.source = source
        self.target = target
        self.kind = kind
        self.label = label
        self.note = note
        self.handle = handle
        self.attributes = attributes if attributes is not None else {}
        self.from_base = from_base if from_base is not None else base_anchor(source)
        self.to_base = to_base if to_base is not None else base_anchor(target)

    @property
    def key(self) -> str:
        """Endpoint-pair key used for duplicate suppression."""
        return f"{self.from_base}>{self.to_base}"

    @property
    def implicit(self) -> bool:
        return bool(self.attributes.get("implicit"))

    def __repr__(self):
        return f"<DiagramEdge {self.source} -> {self.target} kind={self.kind} label='{self.label}'>"


class DiagramAttachment:
    """An ``attach`` block resolved against a node."""
    def __init__(self, attachment_type: str, attachment_id: str, target: str, attributes: Optional[Dict[str, Any]] = None):
        self.type = attachment_type
        self.id = attachment_id
        self.target = target
        self.attributes = attributes or {}

    def __repr__(self):
        return f"<DiagramAttachment {self.type} id={self.id} target={self.target}>"


class DiagramNote:
    """A free-standing ``note`` block, optionally attached to a node."""
    def __init__(self, text: str, placement: str = "right", attaches_to: Optional[str] = None):
        self.text = text
        self.placement = placement
        self.attaches_to = attaches_to

    def __repr__(self):
        return f"<DiagramNote placement={self.placement} attaches_to={self.attaches_to}>"


class Diagram:
    """Represents a built DRAKON diagram."""
    def __init__(self, title: str = "Diagram", metadata: Optional[Dict[str, Any]] = None):
        self.title = title
        self.metadata = metadata or {}
        self.nodes: List[DiagramNode] = []
        self.edges: List[DiagramEdge] = []
        self.attachments: List[DiagramAttachment] = []
        self.notes: List[DiagramNote] = []

    def get_node(self, node_id: str) -> Optional[DiagramNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def nodes_of_type(self, node_type: str) -> List[DiagramNode]:
        return [node for node in self.nodes if node.type == node_type]

    def edges_from(self, node_id: str) -> List[DiagramEdge]:
        return [edge for edge in self.edges if edge.from_base == node_id]

    def edges_to(self, node_id: str) -> List[DiagramEdge]:
        return [edge for edge in self.edges if edge.to_base == node_id]

    def __repr__(self):
        return f"<Diagram '{self.title}' nodes={len(self.nodes)} edges={len(self.edges)}>"
