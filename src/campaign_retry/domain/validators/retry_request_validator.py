"""Pre-flight validation of retry requests.

Loose input (parsed JSON, CLI arguments, dicts built by callers) is parsed
into a RetryRequest. Pydantic errors are translated into FieldIssue entries
so callers get stable reason codes and messages instead of pydantic's
wording. Nothing here touches the network.
"""

from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from campaign_retry.domain.errors import FieldIssue, ValidationError
from campaign_retry.domain.models.retry_request import RetryRequest

_TYPE_MESSAGES = {
    "campaignIds": "campaignIds must be a list of identifiers",
    "maxAttempts": "maxAttempts must be an integer",
    "delayMs": "delayMs must be an integer",
}


def validate_retry_request(raw: Any) -> RetryRequest:
    """Validate loose input into a RetryRequest

    Args:
        raw: Mapping with campaignIds, maxAttempts and delayMs (snake_case
            names are accepted too), or an already validated RetryRequest

    Returns:
        Validated RetryRequest; an existing RetryRequest is returned unchanged

    Raises:
        ValidationError: With one FieldIssue per violated rule
    """
    try:
        return RetryRequest.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError([_to_issue(error) for error in e.errors()]) from e


def _to_issue(error: Dict[str, Any]) -> FieldIssue:
    """Map a single pydantic error entry to a FieldIssue"""
    loc = error.get("loc", ())
    field = str(loc[0]) if loc else "request"
    index = loc[1] if len(loc) > 1 and isinstance(loc[1], int) else None
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}

    if not loc:
        return FieldIssue(field, "invalid_type", "request must be an object")

    if error_type == "missing":
        return FieldIssue(field, "missing", f"{field} is required")

    if error_type == "string_pattern_mismatch":
        return FieldIssue(
            field,
            "malformed_identifier",
            f"{field} contains a malformed identifier at index {index}",
            index=index,
        )

    if error_type == "string_type":
        return FieldIssue(field, "invalid_type", f"{field} must contain only strings", index=index)

    if error_type == "less_than_equal":
        return FieldIssue(field, "above_maximum", f"{field} exceeds maximum of {ctx.get('le')}")

    if error_type == "greater_than_equal":
        return FieldIssue(field, "below_minimum", f"{field} below minimum of {ctx.get('ge')}")

    if error_type.endswith("_type") or error_type in ("value_error", "int_from_float"):
        message = _TYPE_MESSAGES.get(field, f"{field} has an invalid type")
        return FieldIssue(field, "invalid_type", message, index=index)

    return FieldIssue(field, "invalid_value", f"{field}: {error.get('msg', 'invalid value')}", index=index)


def describe_issues(issues: List[FieldIssue]) -> str:
    """Format issues as a bulleted list for console output"""
    return "\n".join(f"  - {issue.field}: {issue.message}" for issue in issues)
