import threading
import time

from django.db import OperationalError, connections
from django.test import TestCase, TransactionTestCase, override_settings

from core.models import SystemSetting
from core.services.exceptions import LedgerConflictError
from core.services.numbering import attach_note, next_invoice_number, next_voucher


class VoucherSequenceTests(TestCase):
    """
    GUARANTEES:
    - First voucher is 000001 when no counter exists
    - Consecutive calls are contiguous
    - Prefix comes from SystemSetting, else from settings
    """

    def test_first_voucher_starts_at_one(self):
        self.assertEqual(next_voucher(), "VCH-000001")
        counter = SystemSetting.objects.get(key=SystemSetting.VOUCHER_COUNTER)
        self.assertEqual(counter.value, "2")

    def test_vouchers_are_contiguous(self):
        issued = [next_voucher() for _ in range(50)]
        numbers = [int(v.split("-")[1]) for v in issued]

        self.assertEqual(numbers, list(range(1, 51)))
        self.assertEqual(len(set(issued)), 50)

    def test_existing_counter_is_continued(self):
        SystemSetting.objects.create(key=SystemSetting.VOUCHER_COUNTER, value="41")
        self.assertEqual(next_voucher(), "VCH-000041")
        self.assertEqual(next_voucher(), "VCH-000042")

    def test_blank_counter_starts_at_one(self):
        SystemSetting.objects.create(key=SystemSetting.VOUCHER_COUNTER, value="")

        self.assertEqual(next_voucher(), "VCH-000001")
        self.assertEqual(next_voucher(), "VCH-000002")
        counter = SystemSetting.objects.get(key=SystemSetting.VOUCHER_COUNTER)
        self.assertEqual(counter.value, "3")

    def test_non_numeric_counter_is_rejected(self):
        SystemSetting.objects.create(key=SystemSetting.INVOICE_COUNTER, value="abc")

        with self.assertRaises(LedgerConflictError):
            next_invoice_number()

        counter = SystemSetting.objects.get(key=SystemSetting.INVOICE_COUNTER)
        self.assertEqual(counter.value, "abc")

    def test_prefix_override_from_system_setting(self):
        SystemSetting.objects.create(key=SystemSetting.VOUCHER_PREFIX, value="PV")
        self.assertEqual(next_voucher(), "PV-000001")

    @override_settings(LEDGER_VOUCHER_PREFIX="JV")
    def test_prefix_default_from_settings(self):
        self.assertEqual(next_voucher(), "JV-000001")

    def test_invoice_numbers_use_separate_counter(self):
        next_voucher()
        next_voucher()
        self.assertEqual(next_invoice_number(), "INV-000001")
        self.assertEqual(next_voucher(), "VCH-000003")


class AttachNoteTests(TestCase):
    def test_blank_text_becomes_voucher(self):
        self.assertEqual(attach_note("", "VCH-000007"), "VCH-000007")
        self.assertEqual(attach_note(None, "VCH-000007"), "VCH-000007")
        self.assertEqual(attach_note("   ", "VCH-000007"), "VCH-000007")

    def test_text_is_prefixed(self):
        self.assertEqual(
            attach_note("  March rent ", "VCH-000007"), "VCH-000007 - March rent"
        )

    def test_is_idempotent(self):
        once = attach_note("March rent", "VCH-000007")
        self.assertEqual(attach_note(once, "VCH-000007"), once)


class VoucherConcurrencyTests(TransactionTestCase):
    """
    Parallel callers each get a distinct number and, together, the numbers
    form one gap-free run starting at 1.
    """

    THREADS = 5
    PER_THREAD = 10

    def _issue_with_retry(self):
        # SQLite reports writer contention instead of waiting on a row lock.
        for _ in range(500):
            try:
                return next_voucher()
            except OperationalError as exc:
                if "locked" not in str(exc):
                    raise
                time.sleep(0.01)
        raise AssertionError("database stayed locked")

    def test_parallel_callers_get_contiguous_numbers(self):
        issued = []
        errors = []
        lock = threading.Lock()

        def worker():
            try:
                for _ in range(self.PER_THREAD):
                    voucher = self._issue_with_retry()
                    with lock:
                        issued.append(voucher)
            except Exception as exc:  # surfaced by the assertion below
                errors.append(exc)
            finally:
                connections.close_all()

        threads = [threading.Thread(target=worker) for _ in range(self.THREADS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        total = self.THREADS * self.PER_THREAD
        self.assertEqual(errors, [])
        self.assertEqual(len(issued), total)
        numbers = sorted(int(v.split("-")[1]) for v in issued)
        self.assertEqual(numbers, list(range(1, total + 1)))
