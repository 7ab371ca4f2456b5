"""
Tests for batch processing of inbound bank messages.

Validates outcome routing (no candidate, unparseable amount, exact
duplicate, recurring match, pending), per-message error handling and
DataFrame export.
"""

import unittest

import pandas as pd

from bank_text_engine import run_bank_text_pipeline
from bank_text_engine.extraction.extractor import SourceKind
from bank_text_engine.matching.duplicate_matcher import LedgerExpense
from bank_text_engine.pipeline.batch_processor import (
    BankTextBatchProcessor,
    InboundMessage,
    InvalidMessageError,
    OutcomeStatus,
)

# 2024-03-05 12:00:00 UTC
T = 1709640000000


def netflix_message(**overrides):
    message = {
        "source_id": "revolut",
        "title": "Revolut",
        "body": "You spent €9,99 at Netflix",
        "timestamp_millis": T,
        "source_kind": "notification",
    }
    message.update(overrides)
    return message


class TestInboundMessage(unittest.TestCase):
    """Test cases for listener payload parsing."""

    def test_from_dict_snake_case(self):
        message = InboundMessage.from_dict(netflix_message())

        self.assertEqual(message.source_id, "revolut")
        self.assertEqual(message.timestamp_millis, T)
        self.assertEqual(message.source_kind, SourceKind.NOTIFICATION)

    def test_from_dict_camel_case_and_enum(self):
        message = InboundMessage.from_dict({
            "sourceId": "INFO-REVOLUT",
            "text": "Hai speso 12,50 € presso Bar Roma",
            "timestamp": str(T),
            "sourceKind": SourceKind.SMS,
        })
        self.assertEqual(message.source_kind, SourceKind.SMS)
        self.assertEqual(message.body, "Hai speso 12,50 € presso Bar Roma")
        self.assertEqual(message.title, "")
        self.assertEqual(message.timestamp_millis, T)

    def test_source_kind_is_case_insensitive(self):
        self.assertEqual(InboundMessage.from_dict(netflix_message(source_kind=" SMS ")).source_kind, SourceKind.SMS)

    def test_unknown_source_kind(self):
        with self.assertRaises(InvalidMessageError):
            InboundMessage.from_dict(netflix_message(source_kind="fax"))

    def test_missing_source_id(self):
        payload = netflix_message()
        del payload["source_id"]
        with self.assertRaises(KeyError):
            InboundMessage.from_dict(payload)


class TestBatchProcessor(unittest.TestCase):
    """Test cases for BankTextBatchProcessor."""

    def setUp(self):
        """Set up test fixtures."""
        self.processor = BankTextBatchProcessor()
        self.pool = [
            LedgerExpense(
                amount=9.99,
                date="2024-03-05",
                description="Netflix",
                recurring_expense_id="r1",
                id="e1",
            ),
            LedgerExpense(amount=50.0, date="2024-03-05", description="Mario Rossi", id="manual-1"),
        ]
        self.messages = [
            netflix_message(),
            netflix_message(source_id="unknown_app"),
            {
                "source_id": "POSTEPAY",
                "body": "Pagamento. Dettagli presso la app",
                "timestamp_millis": T,
                "source_kind": "sms",
            },
            netflix_message(source_id="paypal", title="PayPal", body="Hai inviato 50,00 EUR a Mario Rossi"),
        ]

    def test_outcome_routing(self):
        """Test that each message lands in the expected outcome."""
        result = self.processor.process_batch(self.messages, self.pool)
        statuses = [o.status for o in result.outcomes]

        self.assertEqual(statuses, [
            OutcomeStatus.RECURRING_MATCH,
            OutcomeStatus.NO_CANDIDATE,
            OutcomeStatus.UNPARSEABLE_AMOUNT,
            OutcomeStatus.PENDING,
        ])
        self.assertEqual(result.matched[0].match.target.id, "e1")
        self.assertEqual([c.description for c in result.pending_candidates], ["Mario Rossi"])

    def test_stats(self):
        result = self.processor.process_batch(self.messages, self.pool)

        self.assertEqual(result.stats.total_messages, 4)
        self.assertEqual(result.stats.processed, 4)
        self.assertEqual(result.stats.failed, 0)
        self.assertEqual(result.stats.recurring_matches, 1)
        self.assertEqual(result.stats.no_candidate, 1)
        self.assertEqual(result.stats.unparseable_amount, 1)
        self.assertEqual(result.stats.pending, 1)
        self.assertAlmostEqual(result.stats.detection_rate, 75.0)
        self.assertGreaterEqual(result.stats.processing_time, 0.0)

    def test_exact_duplicate_predicate(self):
        """Test that the hash-store predicate suppresses a candidate before matching."""
        processor = BankTextBatchProcessor(is_exact_duplicate=lambda c: c.description == "Mario Rossi")
        result = processor.process_batch(self.messages, self.pool)

        self.assertEqual(result.outcomes[3].status, OutcomeStatus.EXACT_DUPLICATE)
        self.assertEqual(result.stats.exact_duplicates, 1)
        self.assertEqual(result.pending_candidates, [])

    def test_predicate_not_called_for_zero_amount(self):
        seen = []
        processor = BankTextBatchProcessor(is_exact_duplicate=lambda c: seen.append(c) or False)
        processor.process_batch(self.messages[2:3])

        self.assertEqual(seen, [])

    def test_error_handling(self):
        """Test that bad messages are recorded as errors without stopping the batch."""
        missing_id = netflix_message()
        del missing_id["source_id"]
        messages = [
            missing_id,
            netflix_message(source_kind="fax"),
            netflix_message(timestamp_millis="yesterday"),
            netflix_message(),
        ]

        result = self.processor.process_batch(messages, self.pool)

        self.assertEqual([e.error_type for e in result.errors], [
            "MISSING_DATA",
            "INVALID_MESSAGE",
            "DATA_VALIDATION_ERROR",
        ])
        self.assertEqual([e.message_index for e in result.errors], [0, 1, 2])
        self.assertEqual(result.stats.failed, 3)
        self.assertEqual(result.stats.recurring_matches, 1)
        self.assertEqual(result.error_summary["INVALID_MESSAGE"], 1)

    def test_unexpected_errors_are_processing_errors(self):
        def broken_predicate(candidate):
            raise RuntimeError("hash store unavailable")

        processor = BankTextBatchProcessor(is_exact_duplicate=broken_predicate)
        result = processor.process_batch([netflix_message()], self.pool)

        self.assertEqual(result.errors[0].error_type, "PROCESSING_ERROR")
        self.assertIn("RuntimeError", result.errors[0].error_message)

    def test_progress_callback(self):
        calls = []
        self.processor.process_batch(self.messages, self.pool, progress_callback=lambda i, n, msg: calls.append((i, n)))
        self.assertEqual(calls, [(1, 4), (2, 4), (3, 4), (4, 4)])

    def test_to_dataframe(self):
        df = self.processor.process_batch(self.messages, self.pool).to_dataframe()

        self.assertEqual(len(df), 4)
        self.assertEqual(list(df["status"]), ["recurring_match", "no_candidate", "unparseable_amount", "pending"])
        self.assertEqual(df.loc[0, "matched_expense_id"], "e1")
        self.assertEqual(df.loc[0, "match_score"], 1.0)

    def test_errors_to_dataframe(self):
        result = self.processor.process_batch([netflix_message(source_kind="fax")])
        df = result.errors_to_dataframe()

        self.assertEqual(list(df.columns), ["message_index", "error_type", "error_message", "timestamp"])
        self.assertEqual(df.loc[0, "error_type"], "INVALID_MESSAGE")

    def test_process_frame(self):
        frame = pd.DataFrame([
            netflix_message(),
            netflix_message(source_id="paypal", title=None, body="Hai inviato 50,00 EUR a Mario Rossi"),
        ])
        df = self.processor.process_frame(frame, self.pool)

        self.assertEqual(list(df["status"]), ["recurring_match", "pending"])

    def test_process_frame_missing_columns(self):
        frame = pd.DataFrame([{"source_id": "revolut", "body": "You spent €9,99 at Netflix"}])
        with self.assertRaises(ValueError):
            self.processor.process_frame(frame)


class TestRunPipeline(unittest.TestCase):
    """Test cases for the run_bank_text_pipeline entry point."""

    def test_end_to_end(self):
        result = run_bank_text_pipeline(
            messages=[
                netflix_message(),
                netflix_message(source_id="paypal", title="PayPal", body="Hai inviato 50,00 EUR a Mario Rossi"),
            ],
            recurring_expenses=[{
                "id": "e1",
                "amount": 9.99,
                "date": "2024-03-05",
                "description": "Netflix",
                "recurring_expense_id": "r1",
            }],
        )

        self.assertEqual(result["stats"]["recurring_matches"], 1)
        self.assertEqual(result["stats"]["pending"], 1)
        self.assertEqual(result["matched"][0]["expense_id"], "e1")
        self.assertEqual(result["matched"][0]["recurring_expense_id"], "r1")
        self.assertEqual(result["pending"][0]["kind"], "expense")
        self.assertEqual(result["pending"][0]["amount"], 50.0)
        self.assertEqual(result["errors"], [])


if __name__ == "__main__":
    unittest.main()
