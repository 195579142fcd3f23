"""Tests for question and choice branch synthesis."""

from diagram_helpers import build_source, edge_pairs


def edges_from(diagram, node_id):
    return [(edge.to_base, edge.kind, edge.label) for edge in diagram.edges if edge.from_base == node_id]


class TestQuestionWithoutBranch:

    SOURCE = '''
drakon "d" {
  action "a" {}
  question "q" { text = "Ok?" }
  action "b" {}
}'''

    def test_both_answers_lead_to_end(self):
        diagram, errors = build_source(self.SOURCE)
        assert errors == []
        assert edges_from(diagram, "q") == [("d@end", "yes", "Yes"), ("d@end", "no", "No")]

    def test_branch_attributes(self):
        diagram, _ = build_source(self.SOURCE)
        question = diagram.get_node("q")
        assert question.attributes["no"] == {"direct": True, "label": "No"}
        assert edge_pairs(diagram, branch_main=True) == [("q", "d@end")]
        assert edge_pairs(diagram, branch_direct=True) == [("q", "d@end")]
        assert ("q", "b") not in edge_pairs(diagram)

    def test_question_at_end_of_column_targets_end(self):
        diagram, errors = build_source('drakon "d" { question "q" {} }')
        assert errors == []
        assert edges_from(diagram, "q") == [("d@end", "yes", "Yes"), ("d@end", "no", "No")]


class TestQuestionWithBranch:

    def test_no_branch_in_side_column(self, order_source):
        diagram, errors = build_source(order_source)
        assert errors == []

        columns = {node.id: node.column for node in diagram.nodes}
        assert columns["in_stock"] == 0
        assert columns["backorder"] == 1
        assert columns["ship"] == 0

        question = diagram.get_node("in_stock")
        assert question.attributes["no"] == {"column": 1, "start": "backorder", "end": "backorder"}

        assert edges_from(diagram, "in_stock") == [("backorder", "no", "No"), ("order@end", "yes", "Yes")]
        assert edge_pairs(diagram, branch_lane=True) == [("in_stock", "backorder")]
        assert edge_pairs(diagram, rejoin=True) == [("backorder", "order@end")]

    def test_question_is_not_sequenced_implicitly(self, order_source):
        diagram, _ = build_source(order_source)
        implicit_main = [
            (edge.from_base, edge.to_base) for edge in diagram.edges
            if edge.kind == "main" and list(edge.attributes) == ["implicit"]
        ]
        assert implicit_main == [
            ("order@start", "validate"), ("validate", "in_stock"), ("ship", "order@end"),
        ]

    def test_yes_branch_with_multiple_nodes(self):
        diagram, errors = build_source('''
drakon "d" {
  question "q" {
    yes = {
      action "y1" {}
      action "y2" {}
    }
  }
  action "b" {}
}''')
        assert errors == []
        assert diagram.get_node("q").attributes["yes"] == {"column": 1, "start": "y1", "end": "y2"}
        assert ("y1", "y2") in edge_pairs(diagram)
        assert edge_pairs(diagram, rejoin=True) == [("y2", "d@end")]
        assert edges_from(diagram, "q") == [("y1", "yes", "Yes"), ("d@end", "no", "No")]

    def test_following_node_is_not_the_rejoin_target(self):
        diagram, errors = build_source('''
drakon "d" {
  question "q" { yes = { action "y" {} } }
  action "b" {}
}''')
        assert errors == []
        assert edge_pairs(diagram, branch_main=True) == [("q", "d@end")]
        assert edge_pairs(diagram, rejoin=True) == [("y", "d@end")]
        assert diagram.edges_to("b") == []

    def test_declared_next(self):
        diagram, errors = build_source('''
drakon "d" {
  question "q" {
    next = "c"
    no = { action "x" {} }
  }
  action "b" {}
  action "c" {}
}''')
        assert errors == []
        assert edge_pairs(diagram, branch_main=True) == [("q", "c")]
        assert edge_pairs(diagram, rejoin=True) == [("x", "c")]

    def test_unknown_next(self):
        _, errors = build_source('drakon "d" {\n  question "q" { next = "nowhere" }\n}')
        assert errors == ['Line 2: Question "q" next refers to unknown node "nowhere".']

    def test_rejoin_is_not_duplicated(self):
        diagram, errors = build_source('''
drakon "d" {
  question "q" { no = { action "x" {} } }
  action "b" {}
  line { from = "x" to = "end" label = "back" }
}''')
        assert errors == []
        edges = [edge for edge in diagram.edges if (edge.from_base, edge.to_base) == ("x", "d@end")]
        assert len(edges) == 1
        assert edges[0].label == "back"

    def test_requested_branch_column(self):
        diagram, _ = build_source('''
drakon "d" {
  question "q" { no = { column = 5 action "x" {} } }
  parameters = "p"
}''')
        assert diagram.get_node("x").column == 5
        assert diagram.get_node("parameters").column == 6

    def test_attribute_only_branch_is_direct(self):
        diagram, errors = build_source('''
drakon "d" {
  question "q" { yes = { label = "fine" } }
  action "b" {}
}''')
        assert errors == []
        assert diagram.get_node("q").attributes["yes"] == {"direct": True, "label": "Yes"}
        assert edges_from(diagram, "q") == [("d@end", "no", "No"), ("d@end", "yes", "Yes")]


class TestQuestionErrors:

    def test_both_branches(self):
        diagram, errors = build_source('''
drakon "d" {
  question "q" {
    yes = { action "y" {} }
    no = { action "n" {} }
  }
  action "b" {}
}''')
        assert errors == [
            'Line 3: Question "q" cannot define both "yes" and "no" branch blocks. Choose one explicit branch.'
        ]
        assert diagram.get_node("y") is None
        assert diagram.get_node("n") is None
        assert edges_from(diagram, "q") == [("b", "main", "")]
        assert edge_pairs(diagram, branch_lane=True) == []

    def test_empty_branch(self):
        diagram, errors = build_source('drakon "d" { question "q" { yes = {} } action "b" {} }')
        assert errors == ['Line 1: Question "q" branch "yes" must include at least one block.']
        assert edges_from(diagram, "q") == [("b", "main", "")]

    def test_branch_must_be_a_body(self):
        diagram, errors = build_source('drakon "d" { question "q" { yes = "maybe" } action "b" {} }')
        assert errors == ['Line 1: Question "q" branch "yes" must be a block body.']
        assert edges_from(diagram, "q") == [("d@end", "yes", "Yes"), ("d@end", "no", "No")]

    def test_deferred_block_inside_branch(self):
        diagram, errors = build_source('''
drakon "d" {
  question "q" {
    no = {
      action "x" {}
      note { text = "here" }
    }
  }
}''')
        assert errors == ['Line 6: Block "note" is not supported inside question branch "no" of "q".']
        assert diagram.notes == []

    def test_branch_without_nodes(self):
        _, errors = build_source('''
drakon "d" {
  question "q" {
    no = { start {} }
  }
}''')
        assert errors == [
            'Line 4: Block "start" is implicit. Remove the explicit definition.',
            'Line 3: Question "q" branch "no" did not create any nodes.',
        ]


class TestChoice:

    SOURCE = '''
drakon "d" {
  choice "c" {
    text = "Color?"
    case "red" { action "r1" {} }
    case "blue" {}
    else "other" { action "o1" {} }
  }
  action "after" {}
}'''

    def test_case_nodes_and_columns(self):
        diagram, errors = build_source(self.SOURCE)
        assert errors == []
        nodes = {node.id: (node.type, node.column) for node in diagram.nodes}
        assert nodes["c"] == ("choice", 0)
        assert nodes["red"] == ("choice_case", 0)
        assert nodes["r1"] == ("action", 0)
        assert nodes["blue"] == ("choice_case", 1)
        assert nodes["other"] == ("choice_else", 2)
        assert nodes["o1"] == ("action", 2)

    def test_case_edges(self):
        diagram, _ = build_source(self.SOURCE)
        assert [
            (edge.from_base, edge.to_base, edge.kind)
            for edge in diagram.edges if edge.attributes.get("branch_case")
        ] == [("c", "red", "case"), ("c", "blue", "case"), ("c", "other", "else")]
        assert edge_pairs(diagram, branch_direct=True) == [("blue", "d@end")]
        assert edge_pairs(diagram, rejoin=True) == [("r1", "d@end"), ("o1", "d@end")]
        assert ("r1", "after") in edge_pairs(diagram, implicit=True)
        assert all(edge.kind != "main" for edge in diagram.edges if edge.from_base == "c")

    def test_generated_case_ids(self):
        diagram, _ = build_source('drakon "d" { choice "c" { case {} else {} } }')
        assert diagram.get_node("c_case_1").type == "choice_case"
        assert diagram.get_node("c_else_2").type == "choice_else"

    def test_case_label_from_text(self):
        diagram, _ = build_source('drakon "d" { choice "c" { case "k" { text = "Kilo" } } }')
        assert diagram.get_node("k").label == "Kilo"

    def test_next_precedence(self):
        diagram, errors = build_source('''
drakon "d" {
  choice "c" {
    next = "z"
    case "a1" { next = "end" }
    case "a2" {}
  }
  action "after" {}
  action "z" {}
}''')
        assert errors == []
        assert edge_pairs(diagram, branch_direct=True) == [("a1", "d@end"), ("a2", "z")]

    def test_non_case_children_stay_in_choice_column(self):
        diagram, _ = build_source('drakon "d" { choice "c" { action "pre" {} case "x" {} } }')
        assert diagram.get_node("pre").column == diagram.get_node("c").column

    def test_deferred_block_inside_case(self):
        _, errors = build_source('drakon "d" {\n  choice "c" {\n    case "x" { note {} }\n  }\n}')
        assert errors == ['Line 3: Block "note" is not supported inside case "x".']

    def test_unknown_case_next(self):
        _, errors = build_source('drakon "d" {\n  choice "c" {\n    case "x" { next = "q" }\n  }\n}')
        assert errors == ['Line 3: Case "x" next refers to unknown node "q".']
