"""Bill numbering service for sequential, pattern-based bill numbers."""
import re
from datetime import date

from django.db import transaction
from django.utils import timezone

from apps.billing.models import BillNumberScheme

COUNTER_WIDTHS = {
    "{NNNNNN}": 6,
    "{NNNNN}": 5,
    "{NNNN}": 4,
    "{NNN}": 3,
}
DATE_PLACEHOLDERS = {"{YYYY}", "{YY}", "{MM}", "{DD}"}
VALID_PLACEHOLDERS = DATE_PLACEHOLDERS | set(COUNTER_WIDTHS)


class BillNumberService:
    """Generates unique bill numbers from the configured scheme."""

    def next_number(self, on_date: date | None = None) -> str:
        """
        Atomically increment the counter and return the formatted bill number.

        The scheme row is locked with select_for_update() so concurrent callers
        each receive a distinct counter value. The block commits on its own
        (or releases its savepoint when nested), so a bill that later rolls
        back does not hand its number to the next bill.
        """
        if on_date is None:
            on_date = timezone.localdate()

        with transaction.atomic():
            scheme = self.get_scheme()
            scheme = BillNumberScheme.objects.select_for_update().get(pk=scheme.pk)

            if self._should_reset(scheme, on_date):
                scheme.next_counter = 1
            scheme.last_reset_date = on_date

            # The row lock makes read-then-write safe here
            current_counter = scheme.next_counter
            scheme.next_counter = current_counter + 1
            scheme.save(update_fields=["next_counter", "last_reset_date", "updated_at"])

            return self._format_number(scheme.pattern, on_date, current_counter)

    def preview_next_number(self, on_date: date | None = None) -> str:
        """Preview what the next bill number would look like without incrementing."""
        if on_date is None:
            on_date = timezone.localdate()

        scheme = self.get_scheme()
        counter = 1 if self._should_reset(scheme, on_date) else scheme.next_counter
        return self._format_number(scheme.pattern, on_date, counter)

    def get_scheme(self) -> BillNumberScheme:
        """Get the existing scheme or create the default one."""
        scheme = BillNumberScheme.objects.order_by("id").first()
        if scheme is None:
            scheme = BillNumberScheme.objects.create()
        return scheme

    @staticmethod
    def _should_reset(scheme: BillNumberScheme, on_date: date) -> bool:
        """Check if the counter should restart because a period boundary was crossed."""
        last = scheme.last_reset_date
        if last is None or scheme.reset_period == BillNumberScheme.ResetPeriod.NEVER:
            return False

        if scheme.reset_period == BillNumberScheme.ResetPeriod.DAILY:
            return on_date != last
        if scheme.reset_period == BillNumberScheme.ResetPeriod.MONTHLY:
            return (on_date.year, on_date.month) != (last.year, last.month)
        if scheme.reset_period == BillNumberScheme.ResetPeriod.YEARLY:
            return on_date.year != last.year
        return False

    @staticmethod
    def _format_number(pattern: str, on_date: date, counter: int) -> str:
        """
        Replace placeholders in the pattern with actual values.

        Supported placeholders:
        - {YYYY}: 4-digit year
        - {YY}: 2-digit year
        - {MM}: 2-digit month
        - {DD}: 2-digit day
        - {NNN} .. {NNNNNN}: zero-padded counter, 3 to 6 digits
        """
        result = pattern
        result = result.replace("{YYYY}", f"{on_date.year:04d}")
        result = result.replace("{YY}", f"{on_date.year % 100:02d}")
        result = result.replace("{MM}", f"{on_date.month:02d}")
        result = result.replace("{DD}", f"{on_date.day:02d}")

        # Longest first to avoid partial replacement
        for placeholder, width in COUNTER_WIDTHS.items():
            result = result.replace(placeholder, f"{counter:0{width}d}")

        return result

    @staticmethod
    def validate_pattern(pattern: str, reset_period: str = BillNumberScheme.ResetPeriod.NEVER) -> list[str]:
        """Validate a number pattern and return a list of errors (empty = valid)."""
        errors = []
        if not pattern:
            errors.append("Pattern cannot be empty.")
            return errors

        if not any(p in pattern for p in COUNTER_WIDTHS):
            errors.append(
                "Pattern must contain at least one counter placeholder "
                "({NNN}, {NNNN}, {NNNNN} or {NNNNNN})."
            )

        found = re.findall(r"\{[^}]+\}", pattern)
        for placeholder in found:
            if placeholder not in VALID_PLACEHOLDERS:
                errors.append(f"Unknown placeholder: {placeholder}")

        # A counter that restarts needs the period in the number to stay unique
        has_year = "{YYYY}" in pattern or "{YY}" in pattern
        required = {
            BillNumberScheme.ResetPeriod.DAILY: (has_year and "{MM}" in pattern and "{DD}" in pattern, "year, month and day"),
            BillNumberScheme.ResetPeriod.MONTHLY: (has_year and "{MM}" in pattern, "year and month"),
            BillNumberScheme.ResetPeriod.YEARLY: (has_year, "year"),
        }
        if reset_period in required:
            ok, parts = required[reset_period]
            if not ok:
                errors.append(
                    f"A {reset_period} reset requires {parts} placeholders in the pattern."
                )
        elif reset_period != BillNumberScheme.ResetPeriod.NEVER:
            errors.append(f"Unknown reset period: {reset_period}")

        return errors
