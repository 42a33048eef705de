from __future__ import annotations

import unittest

from jira_query_assistant.use_cases.query_pipeline.clause_parser import QueryClause
from jira_query_assistant.use_cases.query_pipeline.clause_parser import parse_query
from jira_query_assistant.use_cases.query_pipeline.clause_parser import unwrap_group


class TestQueryClause(unittest.TestCase):
    def test_from_text_splits_field_operator_operand(self):
        clause = QueryClause.from_text('assignee in ("alice","bob")')
        self.assertEqual(clause.field, "assignee")
        self.assertEqual(clause.operator, "in")
        self.assertEqual(clause.operand, '("alice","bob")')

    def test_from_text_normalizes_multiword_operator(self):
        clause = QueryClause.from_text("status NOT   IN (Done)")
        self.assertEqual(clause.operator, "not in")

    def test_opaque_group(self):
        clause = QueryClause.from_text("(a = 1 OR b = 2)")
        self.assertIsNone(clause.field)
        self.assertFalse(clause.is_field("a"))


class TestParseQuery(unittest.TestCase):
    def test_top_level_split(self):
        parsed = parse_query("project = CE and status = Open OR assignee = currentUser()")
        self.assertEqual([c.text for c in parsed.clauses], [
            "project = CE",
            "status = Open",
            "assignee = currentUser()",
        ])
        self.assertEqual([c.connector for c in parsed.clauses[1:]], ["AND", "OR"])

    def test_quotes_and_parentheses_are_opaque(self):
        parsed = parse_query('summary ~ "bread and butter" AND (a = 1 OR b = 2)')
        self.assertEqual(len(parsed.clauses), 2)
        self.assertEqual(parsed.clauses[0].text, 'summary ~ "bread and butter"')
        self.assertEqual(parsed.clauses[1].text, "(a = 1 OR b = 2)")

    def test_escaped_quote_inside_value(self):
        parsed = parse_query('summary ~ "\\"Миграция and базы\\"" AND project = CE')
        self.assertEqual(len(parsed.clauses), 2)
        self.assertTrue(parsed.clauses[1].is_field("project"))

    def test_words_containing_connectors_are_not_split(self):
        parsed = parse_query("labels = android AND component = orders")
        self.assertEqual(len(parsed.clauses), 2)

    def test_order_by_is_kept_as_suffix(self):
        parsed = parse_query("project = CE ORDER BY created DESC")
        self.assertEqual(parsed.order_by, "ORDER BY created DESC")
        self.assertEqual(parsed.render(), "project = CE ORDER BY created DESC")

    def test_doubled_connectors_render_once(self):
        parsed = parse_query("a = 1 AND AND b = 2")
        self.assertEqual(parsed.render(), "a = 1 AND b = 2")

    def test_remove_and_append(self):
        parsed = parse_query("project = CE AND assignee = bob")
        parsed = parsed.remove(lambda clause: clause.is_field("assignee"))
        parsed = parsed.append("status = Open")
        self.assertEqual(parsed.render(), "project = CE AND status = Open")

    def test_removing_first_clause_leaves_no_leading_connector(self):
        parsed = parse_query("assignee = bob OR status = Open")
        parsed = parsed.remove(lambda clause: clause.is_field("assignee"))
        self.assertEqual(parsed.render(), "status = Open")


class TestUnwrapGroup(unittest.TestCase):
    def test_returns_group_body(self):
        self.assertEqual(unwrap_group(" (a = 1 OR b = 2) "), "a = 1 OR b = 2")
        self.assertEqual(unwrap_group("((a = 1))"), "(a = 1)")

    def test_sibling_groups_are_not_one_group(self):
        self.assertIsNone(unwrap_group("(a = 1) OR (b = 2)"))

    def test_parentheses_inside_quotes_are_ignored(self):
        self.assertEqual(unwrap_group('(summary ~ "x)" AND a = 1)'), 'summary ~ "x)" AND a = 1')

    def test_plain_clause(self):
        self.assertIsNone(unwrap_group("status in (Open)"))
        self.assertIsNone(unwrap_group(""))
