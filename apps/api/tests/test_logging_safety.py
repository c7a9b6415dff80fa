from __future__ import annotations

import unittest

from cliprelay.core.logging_safety import safe_log_identifier, summarize_ids


class LoggingSafetyTests(unittest.TestCase):
    def test_identifier_is_hashed_and_stable(self) -> None:
        token = safe_log_identifier("job\nforged=1", prefix="jid")

        self.assertTrue(token.startswith("jid-"))
        self.assertNotIn("forged", token)
        self.assertEqual(token, safe_log_identifier(" job\nforged=1 ", prefix="jid"))
        self.assertEqual(safe_log_identifier("   ", prefix="jid"), "jid-missing")

    def test_summarize_ids_hashes_each_id_and_bounds_the_list(self) -> None:
        job_ids = [f"job-{index}\nx" for index in range(7)]

        summary = summarize_ids(job_ids, limit=3)

        tokens = summary.split(",")
        self.assertEqual(tokens[:3], [safe_log_identifier(job_id, prefix="jid") for job_id in job_ids[:3]])
        self.assertEqual(tokens[3], "+4")
        self.assertNotIn("\n", summary)
        self.assertNotIn("job-", summary)
