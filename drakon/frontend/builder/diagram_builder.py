"""
Diagram builder: turns the parsed statement tree into a :class:`Diagram`.

All state (alias map, node registry, column tables, branch records) lives on a
single ``DiagramBuilder`` instance, so each build is independent.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from drakon.core.ir import Diagram, DiagramEdge, DiagramNode
from drakon.core.syntax import BlockStatement, Statement, StrValue
from drakon.frontend.builder import branches, edges, nodes, parameters, references
from drakon.frontend.builder.helpers import (
    derive_label, located, split_statements, string_value,
)
from drakon.frontend.builder.records import (
    ChoiceCaseRecord, QuestionBranchInfo, ResolvedReference,
)

logger = logging.getLogger(__name__)

DEFERRED_BLOCKS = ("line", "attach", "note")

_RESERVED_MESSAGES = {
    "parameters": (
        "Define parameters inside the `drakon` block using `parameters = { ... }` "
        "instead of a standalone block."
    ),
    "silhouette_loop": "The silhouette loop icon is managed by the renderer and cannot appear directly inside a lane.",
    "loop_silhouette": "The silhouette loop icon is managed by the renderer and cannot appear directly inside a lane.",
}
RESERVED_TYPES = ("start", "end", "parameters", "loop_end", "silhouette_loop", "loop_silhouette")


class DiagramBuilder:
    """
    Builds one diagram from a list of statements.

    Usage:
        errors = []
        diagram = DiagramBuilder(errors).build(statements)
    """

    def __init__(self, errors: Optional[List[str]] = None):
        self.errors = errors if errors is not None else []
        self.diagram = Diagram()
        self.alias_map: Dict[str, str] = {}
        self.node_by_id: Dict[str, DiagramNode] = {}
        self.column_nodes: Dict[int, List[DiagramNode]] = {}
        self.lane_column: Dict[str, int] = {}
        self.question_branch_info: Dict[str, QuestionBranchInfo] = {}
        self.choice_case_records: List[ChoiceCaseRecord] = []
        self.choice_next_raw: Dict[str, str] = {}
        self.edge_keys = set()

        self._next_column = 0
        self.main_column = 0
        self.primary_column = 0
        self.primary_column_initialized = False
        self.has_explicit_lane = False
        self.anchor_base = "diagram"
        self.start_node: Optional[DiagramNode] = None

    # Orchestration

    def build(self, statements: List[Statement]) -> Optional[Diagram]:
        root = self._find_root(statements)
        if root is None:
            self.errors.append("No `drakon` block found. Define the diagram first.")
            return None

        diagram_label = root.labels[0] if root.labels else "diagram"
        self.anchor_base = re.sub(r"\s+", "_", diagram_label)
        self.main_column = self.allocate_column()
        self.primary_column = self.main_column

        root_parts = split_statements(root.body)
        parameters_value = root_parts.values.pop("parameters", None)
        self.diagram.metadata = root_parts.plain_attributes()
        title = string_value(root_parts.values, "title")
        if not title:
            title = root.labels[0].strip() if root.labels else "Diagram"
        self.diagram.title = title or "Diagram"

        pending: Dict[str, List[BlockStatement]] = {name: [] for name in DEFERRED_BLOCKS}
        for block in root_parts.blocks:
            if block.name == "lane":
                self._build_lane(block)
            elif block.name in pending:
                pending[block.name].append(block)
            else:
                self.primary_column_initialized = True
                self.create_column_node(self.primary_column, block)

        nodes.ensure_start_node(self, self.diagram.title)
        parameters_edge = None
        if parameters_value is not None and self.start_node is not None:
            parameters_edge = parameters.add_parameters_node(self, parameters_value)
        nodes.ensure_end_nodes(self)

        for block in pending["attach"]:
            references.handle_attachment(self, block)
        for block in pending["note"]:
            references.handle_note(self, block)
        if parameters_edge is not None:
            self.add_edge(parameters_edge)
        for block in pending["line"]:
            references.handle_line(self, block)

        edges.resolve_question_next_targets(self)
        choice_targets = edges.resolve_choice_next_targets(self)
        edges.connect_implicit_column_edges(self)
        default_end = self.default_end_id()
        edges.build_question_edges(self, default_end)
        edges.build_choice_edges(self, choice_targets, default_end)
        edges.finalize_edge_anchors(self)

        logger.debug(
            "Built diagram %r: %d nodes, %d edges, %d columns, %d errors",
            self.diagram.title, len(self.diagram.nodes), len(self.diagram.edges),
            len(self.column_nodes), len(self.errors),
        )
        return self.diagram

    def _build_lane(self, block: BlockStatement) -> None:
        lane_id = block.labels[0] if block.labels else f"lane_{len(self.lane_column) + 1}"
        column = self.ensure_column_for_lane(lane_id)
        if not self.primary_column_initialized:
            self.primary_column = column
            self.primary_column_initialized = True
        for child in split_statements(block.body).blocks:
            if child.name in DEFERRED_BLOCKS:
                self.error(
                    f'Block "{child.name}" is not supported within lane "{lane_id}". Move it to the diagram root.',
                    child,
                )
                continue
            self.create_column_node(column, child)

    @staticmethod
    def _find_root(statements: List[Statement]) -> Optional[BlockStatement]:
        for statement in statements:
            if isinstance(statement, BlockStatement) and statement.name == "drakon":
                return statement
        return None

    # Columns

    def ensure_column(self, column: int) -> None:
        self.column_nodes.setdefault(column, [])
        # Explicitly requested columns must not be handed out again.
        self._next_column = max(self._next_column, column + 1)

    def allocate_column(self) -> int:
        column = self._next_column
        self.ensure_column(column)
        return column

    def ensure_column_for_lane(self, lane_id: str) -> int:
        if lane_id in self.lane_column:
            return self.lane_column[lane_id]
        column = self.allocate_column() if self.has_explicit_lane else self.primary_column
        self.has_explicit_lane = True
        self.lane_column[lane_id] = column
        return column

    # Registration

    def error(self, message: str, block: Optional[BlockStatement] = None) -> None:
        text = located(message, block)
        logger.debug("Build error: %s", text)
        self.errors.append(text)

    def register_alias(self, raw_alias: Optional[str], node_id: str) -> None:
        """First registration wins; later conflicting aliases are ignored."""
        if not raw_alias:
            return
        alias = raw_alias.strip()
        if not alias:
            return
        existing = self.alias_map.get(alias)
        if existing is not None and existing != node_id:
            return
        self.alias_map[alias] = node_id

    def register_node(self, column: int, node: DiagramNode, prepend: bool = False) -> bool:
        if node.id in self.node_by_id:
            self.error(f'Duplicate node id "{node.id}".', node.block)
            return False
        self.ensure_column(column)
        node.column = column
        if prepend:
            self.column_nodes[column].insert(0, node)
            self.diagram.nodes.insert(0, node)
        else:
            self.column_nodes[column].append(node)
            self.diagram.nodes.append(node)
        self.node_by_id[node.id] = node
        self.register_alias(node.id, node.id)
        for label in node.block.labels:
            self.register_alias(label, node.id)
        anchor = node.attributes.get("anchor")
        if isinstance(anchor, str) and anchor.strip():
            self.register_alias(anchor, node.id)
        return True

    def create_column_node(self, column: int, block: BlockStatement) -> Optional[DiagramNode]:

        if block.name in RESERVED_TYPES:
            message = _RESERVED_MESSAGES.get(
                block.name, f'Block "{block.name}" is implicit. Remove the explicit definition.'
            )
            self.error(message, block)
            return None

        parts = split_statements(block.body)
        if block.labels:
            node_id = block.labels[0]
        else:
            node_id = f"{block.name}_{len(self.column_nodes.get(column, [])) + 1}"
        if not node_id:
            self.error(f'Unable to derive id for block "{block.name}" in column {column}.', block)
            return None
        if node_id in self.node_by_id:
            self.error(f'Duplicate node id "{node_id}".', block)
            return None

        node = DiagramNode(
            node_id=node_id,
            node_type=block.name,
            label=derive_label(parts.values, node_id),
            column=column,
            attributes=parts.plain_attributes(),
            block=block,
        )
        if not self.register_node(column, node):
            return None

        if block.name == "question":
            branches.process_question_branches(self, column, node, parts.values)
        elif block.name == "choice":
            branches.process_choice_cases(self, column, node, parts.values, parts.blocks)
        elif block.name == "for_each":
            nodes.process_for_each_body(self, column, node, parts.blocks)
        return node

    def build_chain(self, column: int, blocks: List[BlockStatement], context: str) -> List[DiagramNode]:
        """Append ``blocks`` to ``column`` and return every node that landed there."""
        self.ensure_column(column)
        start_index = len(self.column_nodes[column])
        for child in blocks:
            if child.name in DEFERRED_BLOCKS:
                self.error(f'Block "{child.name}" is not supported inside {context}.', child)
                continue
            self.create_column_node(column, child)
        return self.column_nodes[column][start_index:]

    # Edges and references

    def add_edge(self, edge: DiagramEdge) -> DiagramEdge:
        self.diagram.edges.append(edge)
        self.edge_keys.add(edge.key)
        return edge

    def default_end_id(self) -> Optional[str]:
        end_id = self.alias_map.get("end")
        if end_id is not None:
            return end_id
        for node in self.diagram.nodes:
            if node.type == "end":
                return node.id
        return None

    def resolve_reference(
        self, value: Any, description: str, block: Optional[BlockStatement] = None
    ) -> Optional[ResolvedReference]:
        if isinstance(value, StrValue):
            value = value.value
        if not isinstance(value, str) or not value.strip():
            self.error(f"{description} must be a non-empty string.", block)
            return None
        raw = value.strip()
        direct = self.alias_map.get(raw)
        if direct is not None:
            if direct not in self.node_by_id:
                self.error(f'{description} refers to unknown node "{raw}".', block)
                return None
            return ResolvedReference(direct, direct)
        if "@" not in raw:
            if raw not in self.node_by_id:
                self.error(f'{description} refers to unknown node "{raw}".', block)
                return None
            self.register_alias(raw, raw)
            return ResolvedReference(raw, raw)
        head, suffix = raw.split("@", 1)
        resolved_head = self.alias_map.get(head, head)
        if resolved_head not in self.node_by_id:
            self.error(f'{description} refers to unknown node "{head}".', block)
            return None
        return ResolvedReference(f"{resolved_head}@{suffix}", resolved_head)


def build_diagram(statements: List[Statement], errors: Optional[List[str]] = None) -> Optional[Diagram]:
    """Build a diagram from parsed statements; ``None`` only without a ``drakon`` block."""
    return DiagramBuilder(errors).build(statements)
