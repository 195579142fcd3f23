"""Implicit sequencing and branch edges, built once every node is registered."""

from typing import Dict, Optional

from drakon.core.ir import DiagramEdge
from drakon.frontend.builder.records import ResolvedReference, answer_label


def resolve_question_next_targets(builder) -> None:
    for question_id, info in builder.question_branch_info.items():
        if info.next_raw:
            info.next_resolved = builder.resolve_reference(
                info.next_raw, f'Question "{question_id}" next', builder.node_by_id[question_id].block
            )


def resolve_choice_next_targets(builder) -> Dict[str, ResolvedReference]:
    resolved: Dict[str, ResolvedReference] = {}
    for choice_id, next_raw in builder.choice_next_raw.items():
        target = builder.resolve_reference(next_raw, f'Choice "{choice_id}" next', builder.node_by_id[choice_id].block)
        if target is not None:
            resolved[choice_id] = target
    for record in builder.choice_case_records:
        if record.next_raw:
            record.next_resolved = builder.resolve_reference(
                record.next_raw, f'Case "{record.id}" next', builder.node_by_id[record.id].block
            )
    return resolved


def _branches_itself(builder, node) -> bool:
    if node.type == "question":
        return node.id in builder.question_branch_info
    if node.type == "choice":
        return any(record.choice_id == node.id for record in builder.choice_case_records)
    return False


def connect_implicit_column_edges(builder) -> None:
    for column in sorted(builder.column_nodes):
        nodes = builder.column_nodes[column]
        for current, following in zip(nodes, nodes[1:]):
            if _branches_itself(builder, current):
                continue
            edge = DiagramEdge(
                current.id, following.id, attributes={"implicit": True}, from_base=current.id, to_base=following.id
            )
            if edge.key in builder.edge_keys:
                continue
            builder.add_edge(edge)


def _end_target(default_end: Optional[str]) -> Optional[ResolvedReference]:
    if default_end is not None:
        return ResolvedReference(default_end, default_end)
    return None


def _add_keyed(builder, edge: DiagramEdge) -> None:
    if edge.key not in builder.edge_keys:
        builder.add_edge(edge)


def build_question_edges(builder, default_end: Optional[str]) -> None:
    for question_id, info in builder.question_branch_info.items():
        target = info.next_resolved or _end_target(default_end)
        if target is None:
            continue

        _add_keyed(builder, DiagramEdge(
            question_id, target.full,
            kind=info.default_kind,
            label=answer_label(info.default_kind),
            attributes={"implicit": True, "branch": info.default_kind, "branch_main": True},
            from_base=question_id,
            to_base=target.base,
        ))

        if info.direct:
            # Shares its endpoints with the default edge, so no key check here.
            builder.add_edge(DiagramEdge(
                question_id, target.full,
                kind=info.branch_kind,
                label=answer_label(info.branch_kind),
                attributes={"implicit": True, "branch": info.branch_kind, "branch_direct": True},
                from_base=question_id,
                to_base=target.base,
            ))
            continue

        if not info.branch_end_id or info.branch_end_id == target.base:
            continue
        _add_keyed(builder, DiagramEdge(
            info.branch_end_id, target.full,
            attributes={"implicit": True, "branch": info.branch_kind, "rejoin": True},
            from_base=info.branch_end_id,
            to_base=target.base,
        ))


def build_choice_edges(builder, choice_targets: Dict[str, ResolvedReference], default_end: Optional[str]) -> None:
    for record in builder.choice_case_records:
        choice_id = record.choice_id
        _add_keyed(builder, DiagramEdge(
            choice_id, record.id,
            kind=record.kind,
            attributes={"implicit": True, "branch": record.kind, "branch_case": True},
            from_base=choice_id,
            to_base=record.id,
        ))

        target = (
            record.next_resolved
            or choice_targets.get(choice_id)
            or _end_target(default_end)
        )
        if target is None:
            continue

        if record.direct:
            _add_keyed(builder, DiagramEdge(
                record.id, target.full,
                kind=record.kind,
                attributes={"implicit": True, "branch": record.kind, "branch_direct": True},
                from_base=record.id,
                to_base=target.base,
            ))
            continue

        if not record.branch_end_id or record.branch_end_id == target.base:
            continue
        _add_keyed(builder, DiagramEdge(
            record.branch_end_id, target.full,
            attributes={"implicit": True, "branch": record.kind, "rejoin": True},
            from_base=record.branch_end_id,
            to_base=target.base,
        ))


def finalize_edge_anchors(builder) -> None:
    """Report edges whose endpoints do not name a registered node."""
    for edge in builder.diagram.edges:
        if edge.from_base not in builder.node_by_id:
            builder.error(f'Line references unknown source "{edge.source}".')
        if edge.to_base not in builder.node_by_id:
            builder.error(f'Line references unknown target "{edge.target}".')
