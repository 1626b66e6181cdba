"""Tests for the bill numbering service."""
from datetime import date

import pytest

from apps.billing.models import BillNumberScheme
from apps.billing.numbering import BillNumberService


@pytest.fixture
def numbering_service():
    return BillNumberService()


class TestBillNumberFormatting:
    """Test pattern placeholder resolution."""

    def test_default_pattern(self):
        result = BillNumberService._format_number(
            "BILL-{YYYY}{MM}{DD}-{NNNNN}", date(2026, 3, 5), 7
        )
        assert result == "BILL-20260305-00007"

    def test_yy_placeholder(self):
        result = BillNumberService._format_number("INV/{YY}/{MM}/{NNN}", date(2026, 2, 1), 42)
        assert result == "INV/26/02/042"

    def test_counter_padding_nnnnnn(self):
        result = BillNumberService._format_number("{NNNNNN}", date(2026, 1, 1), 123)
        assert result == "000123"

    def test_counter_overflows_padding(self):
        result = BillNumberService._format_number("{NNN}", date(2026, 1, 1), 12345)
        assert result == "12345"


class TestBillNumberSequence:
    """Test sequential number generation."""

    def test_first_number_uses_seeded_scheme(self, db, numbering_service):
        number = numbering_service.next_number(date(2026, 1, 15))
        assert number == "BILL-20260115-00001"

    def test_sequential_numbers(self, scheme, numbering_service):
        numbers = [numbering_service.next_number(date(2026, 1, 15)) for _ in range(3)]
        assert numbers == ["B-00001", "B-00002", "B-00003"]

    def test_thousand_numbers_are_distinct(self, scheme, numbering_service):
        numbers = [numbering_service.next_number(date(2026, 1, 15)) for _ in range(1000)]
        assert len(set(numbers)) == 1000

    def test_counter_persisted(self, scheme, numbering_service):
        numbering_service.next_number(date(2026, 1, 15))
        scheme.refresh_from_db()
        assert scheme.next_counter == 2
        assert scheme.last_reset_date == date(2026, 1, 15)

    def test_preview_does_not_increment(self, scheme, numbering_service):
        assert numbering_service.preview_next_number(date(2026, 1, 15)) == "B-00001"
        assert numbering_service.preview_next_number(date(2026, 1, 15)) == "B-00001"
        assert numbering_service.next_number(date(2026, 1, 15)) == "B-00001"

    def test_scheme_created_when_missing(self, db, numbering_service):
        BillNumberScheme.objects.all().delete()
        number = numbering_service.next_number(date(2026, 4, 1))
        assert number == "BILL-20260401-00001"
        assert BillNumberScheme.objects.count() == 1


class TestBillNumberReset:
    """Test counter reset at period boundaries."""

    def test_daily_reset(self, db, numbering_service):
        assert numbering_service.next_number(date(2026, 1, 15)) == "BILL-20260115-00001"
        assert numbering_service.next_number(date(2026, 1, 15)) == "BILL-20260115-00002"
        assert numbering_service.next_number(date(2026, 1, 16)) == "BILL-20260116-00001"

    def test_monthly_reset(self, scheme, numbering_service):
        scheme.pattern = "{YYYY}-{MM}-{NNNN}"
        scheme.reset_period = BillNumberScheme.ResetPeriod.MONTHLY
        scheme.save()

        assert numbering_service.next_number(date(2026, 1, 30)) == "2026-01-0001"
        assert numbering_service.next_number(date(2026, 1, 31)) == "2026-01-0002"
        assert numbering_service.next_number(date(2026, 2, 1)) == "2026-02-0001"

    def test_yearly_reset(self, scheme, numbering_service):
        scheme.pattern = "{YYYY}-{NNNN}"
        scheme.reset_period = BillNumberScheme.ResetPeriod.YEARLY
        scheme.save()

        assert numbering_service.next_number(date(2026, 12, 31)) == "2026-0001"
        assert numbering_service.next_number(date(2027, 1, 1)) == "2027-0001"

    def test_never_reset(self, scheme, numbering_service):
        assert numbering_service.next_number(date(2026, 12, 31)) == "B-00001"
        assert numbering_service.next_number(date(2027, 1, 1)) == "B-00002"


class TestPatternValidation:
    """Test pattern validation."""

    def test_valid_pattern(self):
        assert BillNumberService.validate_pattern("BILL-{YYYY}{MM}{DD}-{NNNNN}", "daily") == []

    def test_empty_pattern(self):
        assert BillNumberService.validate_pattern("") == ["Pattern cannot be empty."]

    def test_missing_counter(self):
        errors = BillNumberService.validate_pattern("BILL-{YYYY}")
        assert any("counter placeholder" in e for e in errors)

    def test_unknown_placeholder(self):
        errors = BillNumberService.validate_pattern("{FOO}-{NNNN}")
        assert "Unknown placeholder: {FOO}" in errors

    def test_daily_reset_needs_full_date(self):
        errors = BillNumberService.validate_pattern("{YYYY}-{NNNN}", "daily")
        assert any("daily reset" in e for e in errors)

    def test_unknown_reset_period(self):
        errors = BillNumberService.validate_pattern("{NNNN}", "hourly")
        assert "Unknown reset period: hourly" in errors
