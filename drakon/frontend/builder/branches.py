"""
Branch synthesis for ``question`` and ``choice`` blocks.

A question owns at most one explicit branch (``yes`` or ``no``); the opposite
answer is implicit and becomes the default edge later on. A choice turns each
``case``/``else`` child into its own node heading a chain in a dedicated column.
"""

from typing import Dict, List, Optional

from drakon.core.ir import DiagramEdge, DiagramNode
from drakon.core.syntax import (
    AttrValue, AttributeStatement, BlockStatement, NestedValue, NumValue, ObjectValue, Statement,
)
from drakon.frontend.builder.helpers import derive_label, split_statements, string_value
from drakon.frontend.builder.records import (
    ChoiceCaseRecord, QuestionBranchInfo, answer_label, opposite,
)

BRANCH_KINDS = ("yes", "no")


def _branch_statements(builder, node: DiagramNode, kind: str, value: Optional[AttrValue]) -> Optional[List[Statement]]:
    """Statements of a branch attribute, or ``None`` when it is absent or unusable."""
    if value is None:
        return None
    if isinstance(value, NestedValue):
        return list(value.statements)
    if isinstance(value, ObjectValue):
        return [AttributeStatement(key=key, value=entry) for key, entry in value.entries.items()]
    builder.error(f'Question "{node.id}" branch "{kind}" must be a block body.', node.block)
    return None


def _requested_column(values: Dict[str, AttrValue]) -> Optional[int]:
    value = values.get("column")
    if isinstance(value, NumValue):
        return int(value.value)
    return None


def _mark_direct(builder, node: DiagramNode, kind: str, next_raw: Optional[str]) -> None:
    builder.question_branch_info[node.id] = QuestionBranchInfo(
        branch_kind=kind,
        default_kind=opposite(kind),
        direct=True,
        next_raw=next_raw,
    )
    node.attributes[kind] = {"direct": True, "label": answer_label(kind)}


def process_question_branches(builder, column: int, node: DiagramNode, values: Dict[str, AttrValue]) -> None:
    next_raw = string_value(values, "next") or None
    statements = {kind: _branch_statements(builder, node, kind, values.get(kind)) for kind in BRANCH_KINDS}

    if statements["yes"] is None and statements["no"] is None:
        _mark_direct(builder, node, "no", next_raw)
        return

    branches = []
    for kind in BRANCH_KINDS:
        body = statements[kind]
        if body is None:
            continue
        if body:
            branches.append((kind, body))
        else:
            builder.error(f'Question "{node.id}" branch "{kind}" must include at least one block.', node.block)

    if not branches:
        return
    if len(branches) > 1:
        builder.error(
            f'Question "{node.id}" cannot define both "yes" and "no" branch blocks. Choose one explicit branch.',
            node.block,
        )
        return

    kind, body = branches[0]
    parts = split_statements(body)
    if not parts.blocks:
        _mark_direct(builder, node, kind, next_raw)
        return

    requested = _requested_column(parts.values)
    branch_column = requested if requested is not None else builder.allocate_column()
    created = builder.build_chain(branch_column, parts.blocks, f'question branch "{kind}" of "{node.id}"')
    if not created:
        builder.error(f'Question "{node.id}" branch "{kind}" did not create any nodes.', node.block)
        return

    branch_start, branch_end = created[0], created[-1]
    already_linked = any(
        edge.from_base == node.id and edge.to_base == branch_start.id for edge in builder.diagram.edges
    )
    if not already_linked:
        # Layout keeps lane edges on the same row, so they stay out of the key set.
        builder.diagram.edges.append(DiagramEdge(
            source=node.id,
            target=branch_start.id,
            kind=kind,
            label=answer_label(kind),
            attributes={"implicit": True, "branch": kind, "branch_lane": True},
            from_base=node.id,
            to_base=branch_start.id,
        ))

    builder.question_branch_info[node.id] = QuestionBranchInfo(
        branch_kind=kind,
        default_kind=opposite(kind),
        direct=False,
        branch_start_id=branch_start.id,
        branch_end_id=branch_end.id,
        next_raw=next_raw,
    )
    node.attributes[kind] = {"column": branch_column, "start": branch_start.id, "end": branch_end.id}


def process_choice_cases(
    builder,
    column: int,
    node: DiagramNode,
    values: Dict[str, AttrValue],
    blocks: List[BlockStatement],
) -> None:
    next_raw = string_value(values, "next")
    if next_raw:
        builder.choice_next_raw[node.id] = next_raw

    case_count = 0
    for block in blocks:
        if block.name not in ("case", "else"):
            builder.build_chain(column, [block], f'choice "{node.id}"')
            continue

        parts = split_statements(block.body)
        case_id = block.labels[0] if block.labels else f"{node.id}_{block.name}_{case_count + 1}"
        label = derive_label(parts.values, case_id)
        branch_column = column if case_count == 0 else builder.allocate_column()
        case_node = DiagramNode(
            node_id=case_id,
            node_type="choice_case" if block.name == "case" else "choice_else",
            label=label,
            column=branch_column,
            attributes=parts.plain_attributes(),
            block=block,
        )
        if not builder.register_node(branch_column, case_node):
            continue
        case_count += 1

        chain = builder.build_chain(branch_column, parts.blocks, f'case "{case_id}"')
        builder.choice_case_records.append(ChoiceCaseRecord(
            choice_id=node.id,
            id=case_id,
            label=label,
            kind="case" if block.name == "case" else "else",
            direct=not chain,
            branch_start_id=chain[0].id if chain else None,
            branch_end_id=chain[-1].id if chain else case_id,
            next_raw=string_value(parts.values, "next") or None,
        ))
