"""Quote item validation.

Generator output is untrusted: it arrives as an arbitrary JSON value and
must pass validate_quote_response() before anything treats it as typed
QuoteItem data. Items posted to the save endpoint go through
validate_saved_items(), which applies the stricter non-negative rules.

Validation is all-or-nothing. The first failing check aborts and is
reported with its kind, item index and field so the cause can be logged.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional

import structlog

from models.quote import QuoteItem, VALID_UNITS

logger = structlog.get_logger(__name__)

MIN_ITEMS = 3
MAX_ITEMS = 6


class IssueKind(str, Enum):
    """Distinct reasons a candidate item list is rejected."""

    MISSING_ITEMS = "missing_items"
    ITEMS_NOT_A_LIST = "items_not_a_list"
    INVALID_ITEM_COUNT = "invalid_item_count"
    INVALID_ITEM = "invalid_item"
    INVALID_LABEL = "invalid_label"
    INVALID_QTY = "invalid_qty"
    INVALID_UNIT = "invalid_unit"
    INVALID_UNIT_PRICE = "invalid_unit_price"


@dataclass
class ValidationIssue:
    """The first problem found in a candidate."""
    kind: IssueKind
    message: str
    index: Optional[int] = None
    field: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "index": self.index,
            "field": self.field,
        }


@dataclass
class ValidationResult:
    """Result of quote item validation."""
    is_valid: bool = True
    items: List[QuoteItem] = field(default_factory=list)
    issue: Optional[ValidationIssue] = None

    @property
    def errors(self) -> List[str]:
        return [self.issue.message] if self.issue else []


def _fail(kind: IssueKind, message: str, index: Optional[int] = None, field_name: Optional[str] = None) -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        items=[],
        issue=ValidationIssue(kind=kind, message=message, index=index, field=field_name)
    )


def is_finite_number(value: Any) -> bool:
    """True for int/float values that are not bool, NaN or infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def _check_item(item: Any, index: int, non_negative: bool, strip_label: bool) -> Optional[ValidationIssue]:
    """Check one item's fields in order: label, qty, unit, unitPrice."""
    if not isinstance(item, Mapping):
        return ValidationIssue(IssueKind.INVALID_ITEM, f"item {index} is not an object", index)

    label = item.get("label")
    if not isinstance(label, str) or not (label.strip() if strip_label else label):
        return ValidationIssue(IssueKind.INVALID_LABEL, f"item {index} missing label", index, "label")

    qty = item.get("qty")
    if not is_finite_number(qty) or (non_negative and qty < 0):
        return ValidationIssue(IssueKind.INVALID_QTY, f"item {index} invalid quantity", index, "qty")

    unit = item.get("unit")
    if not isinstance(unit, str) or unit not in VALID_UNITS:
        return ValidationIssue(IssueKind.INVALID_UNIT, f"item {index} invalid unit", index, "unit")

    unit_price = item.get("unitPrice")
    if not is_finite_number(unit_price) or (non_negative and unit_price < 0):
        return ValidationIssue(IssueKind.INVALID_UNIT_PRICE, f"item {index} invalid unit price", index, "unitPrice")

    return None


def _to_items(raw_items: List[Mapping]) -> List[QuoteItem]:
    return [
        QuoteItem(
            label=raw["label"],
            qty=raw["qty"],
            unit=raw["unit"],
            unit_price=raw["unitPrice"],
        )
        for raw in raw_items
    ]


def validate_quote_response(candidate: Any) -> ValidationResult:
    """Validate a generator response of the shape {"items": [...], "notes"?}.

    Checks, in order: items present, items is a list, 3-6 items, then each
    item's label, qty, unit and unitPrice. Values are not modified; default
    pricing is applied later by the quote generator.

    Args:
        candidate: Parsed JSON from the generator, of any type.

    Returns:
        ValidationResult with the typed items, or the first issue found.
    """
    if not isinstance(candidate, Mapping) or "items" not in candidate:
        return _fail(IssueKind.MISSING_ITEMS, "Invalid items array - missing items", field_name="items")

    raw_items = candidate["items"]
    if not isinstance(raw_items, list):
        return _fail(
            IssueKind.ITEMS_NOT_A_LIST,
            f"Invalid items array - not an array (got {type(raw_items).__name__})",
            field_name="items"
        )

    if not MIN_ITEMS <= len(raw_items) <= MAX_ITEMS:
        return _fail(
            IssueKind.INVALID_ITEM_COUNT,
            f"Invalid items array - got {len(raw_items)} items, expected {MIN_ITEMS}-{MAX_ITEMS}",
            field_name="items"
        )

    for index, item in enumerate(raw_items):
        issue = _check_item(item, index, non_negative=False, strip_label=False)
        if issue:
            issue.message = f"Invalid item structure - {issue.message}"
            return ValidationResult(is_valid=False, items=[], issue=issue)

    return ValidationResult(is_valid=True, items=_to_items(raw_items))


# Messages returned to API clients by the save endpoint
SAVE_ISSUE_MESSAGES = {
    IssueKind.MISSING_ITEMS: "Invalid quote data",
    IssueKind.ITEMS_NOT_A_LIST: "Invalid quote data",
    IssueKind.INVALID_ITEM_COUNT: "Invalid quote data",
    IssueKind.INVALID_ITEM: "Each item must be an object",
    IssueKind.INVALID_LABEL: "Each item must have a valid label",
    IssueKind.INVALID_QTY: "Each item must have a valid quantity (non-negative number)",
    IssueKind.INVALID_UNIT: "Each item must have a valid unit (hr, m2, or item)",
    IssueKind.INVALID_UNIT_PRICE: "Each item must have a valid unit price (non-negative number)",
}


def validate_saved_items(raw_items: Any) -> ValidationResult:
    """Validate items posted by a client for saving.

    Any non-empty list is accepted (clients may add or remove lines after
    generation). Labels must be non-blank; qty and unitPrice must be finite
    and non-negative.
    """
    if not isinstance(raw_items, list):
        return _fail(IssueKind.ITEMS_NOT_A_LIST, SAVE_ISSUE_MESSAGES[IssueKind.ITEMS_NOT_A_LIST], field_name="items")
    if not raw_items:
        return _fail(IssueKind.INVALID_ITEM_COUNT, SAVE_ISSUE_MESSAGES[IssueKind.INVALID_ITEM_COUNT], field_name="items")

    for index, item in enumerate(raw_items):
        issue = _check_item(item, index, non_negative=True, strip_label=True)
        if issue:
            issue.message = SAVE_ISSUE_MESSAGES[issue.kind]
            logger.info("saved_items_rejected", **issue.to_dict())
            return ValidationResult(is_valid=False, items=[], issue=issue)

    return ValidationResult(is_valid=True, items=_to_items(raw_items))
