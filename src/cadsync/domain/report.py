"""Plain-text audit narrative for reconciliation runs."""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from cadsync.domain.entities import Classification, ClassifiedRecord

_RULE = "=" * 80
_ITEM_RULE = "  " + "-" * 76

_SECTIONS = (
    (Classification.TO_INSERT, "1. {inserted}"),
    (Classification.SKIPPED_ALREADY_SYNCED, "2. ALREADY SYNCED (SKIPPED)"),
    (Classification.SKIPPED_UNMATCHED_ACCOUNT, "3. ACCOUNT NOT IN CADASTRAL REGISTRY"),
    (Classification.SKIPPED_NO_PERIOD, "4. NO VALID PERIOD"),
)


def format_amount(amount: Decimal) -> str:
    """Format an amount as currency with thousands separators."""
    return f"${amount:,.2f}"


def render_reconciliation_report(
    entries: Sequence[ClassifiedRecord], committed: bool, generated_at: datetime
) -> str:
    """Render the audit text block of a reconciliation run.

    The block starts with the count of every category followed by one
    section per non-empty category, listing folio, account, fee, amount and
    the skip reason of each record.
    """
    counts = {c: 0 for c, _ in _SECTIONS}
    for entry in entries:
        counts[entry.classification] += 1

    title = "PAYMENT SYNCHRONIZATION REPORT" if committed else "PAYMENT SYNCHRONIZATION PREVIEW"
    inserted_label = "Records inserted" if committed else "Records to insert"
    inserted_heading = "INSERTED RECORDS" if committed else "RECORDS TO INSERT"

    lines = [
        _RULE,
        title,
        f"Date: {generated_at:%d/%m/%Y %H:%M:%S}",
        _RULE,
        "",
        "SUMMARY:",
        f"  - {inserted_label}: {counts[Classification.TO_INSERT]}",
        f"  - Records already synced: {counts[Classification.SKIPPED_ALREADY_SYNCED]}",
        f"  - Records without cadastral account: {counts[Classification.SKIPPED_UNMATCHED_ACCOUNT]}",
        f"  - Records without valid period: {counts[Classification.SKIPPED_NO_PERIOD]}",
        f"  - Total processed: {len(entries)}",
        "",
    ]

    for classification, heading in _SECTIONS:
        section = [e for e in entries if e.classification == classification]
        if not section:
            continue
        lines.extend([_RULE, heading.format(inserted=inserted_heading), _RULE, ""])
        for entry in section:
            lines.extend(_detail_lines(entry))
            lines.append(_ITEM_RULE)
        lines.append("")

    lines.extend([_RULE, "END OF REPORT", _RULE])
    return "\n".join(lines) + "\n"


def _detail_lines(entry: ClassifiedRecord) -> list[str]:
    record = entry.record
    lines = [f"  Folio: {record.folio}", f"  Account: {record.raw_account}"]
    if entry.account_id != record.raw_account:
        lines.append(f"  Normalized account: {entry.account_id}")
    lines.append(f"  Fee: {record.fee_name}")
    lines.append(f"  Amount: {format_amount(record.net_amount)}")
    if entry.reason:
        lines.append(f"  Reason: {entry.reason}")
    return lines
