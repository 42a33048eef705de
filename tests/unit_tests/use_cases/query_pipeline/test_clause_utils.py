from __future__ import annotations

import unittest

from jira_query_assistant.use_cases.query_pipeline.clause_utils import clean_query
from jira_query_assistant.use_cases.query_pipeline.clause_utils import contains_field
from jira_query_assistant.use_cases.query_pipeline.clause_utils import ensure_valid_fields
from jira_query_assistant.use_cases.query_pipeline.clause_utils import escape_quotes
from jira_query_assistant.use_cases.query_pipeline.clause_utils import normalize_clause
from jira_query_assistant.use_cases.query_pipeline.clause_utils import quote_list
from jira_query_assistant.use_cases.query_pipeline.clause_utils import truncate_before_keywords


class TestClauseUtils(unittest.TestCase):
    def test_escape_quotes(self):
        self.assertEqual(escape_quotes('say "hi"'), 'say \\"hi\\"')
        self.assertEqual(escape_quotes("a\\b"), "a\\\\b")

    def test_ensure_valid_fields_drops_blanks(self):
        self.assertEqual(ensure_valid_fields([" key ", "", "  ", "summary"]), ["key", "summary"])
        self.assertEqual(ensure_valid_fields(None), [])

    def test_quote_list(self):
        self.assertEqual(quote_list(["alice", "bob"]), '"alice","bob"')

    def test_contains_field_is_case_insensitive(self):
        self.assertTrue(contains_field(["summary", "Worklog"], "worklog"))
        self.assertFalse(contains_field(["summary"], "worklog"))

    def test_normalize_clause_trims_dangling_connectors(self):
        self.assertEqual(normalize_clause("AND project = CE OR"), "project = CE")
        self.assertEqual(normalize_clause("and or status = Done"), "status = Done")
        self.assertEqual(normalize_clause("AND"), "")

    def test_clean_query_collapses_connectors_and_whitespace(self):
        cleaned = clean_query("  project = CE   AND  AND   status = Open OR  ")
        self.assertEqual(cleaned, "project = CE AND status = Open")

    def test_clean_query_keeps_later_connector(self):
        self.assertEqual(clean_query("a = 1 AND OR b = 2"), "a = 1 OR b = 2")

    def test_clean_query_leaves_quoted_values_alone(self):
        self.assertEqual(
            clean_query('text ~ "rock  and or roll" AND AND status = Open'),
            'text ~ "rock  and or roll" AND status = Open',
        )

    def test_clean_query_is_idempotent(self):
        samples = [
            "AND project = CE AND AND AND status = Open OR",
            "  text ~ \"and or\"  ",
            "OR",
            "",
            "assignee in (\"alice\",\"bob\") AND   reporter = currentUser()",
        ]
        for sample in samples:
            with self.subTest(sample=sample):
                once = clean_query(sample)
                self.assertEqual(clean_query(once), once)

    def test_truncate_before_keywords_matches_word_start(self):
        text = "Миграция базы проанализируй результаты"
        self.assertEqual(truncate_before_keywords(text, ["проанализ"]), "Миграция базы")
        self.assertEqual(truncate_before_keywords("latest release", ["test"]), "latest release")
