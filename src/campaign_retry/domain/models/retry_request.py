"""RetryRequest model - a validated request to resubmit failed campaign calls"""

from typing import Annotated, Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

# Canonical 8-4-4-4-12 hex form, either case
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

MIN_ATTEMPTS = 1
MAX_ATTEMPTS = 5
MIN_DELAY_MS = 1000

CampaignId = Annotated[str, StringConstraints(strict=True, pattern=UUID_PATTERN)]


class RetryRequest(BaseModel):
    """Retry request for failed calls in one or more campaigns.

    Attributes:
        campaign_ids: Campaign UUIDs, in caller order (wire name: campaignIds)
        max_attempts: Attempts per failed call, 1-5 (wire name: maxAttempts)
        delay_ms: Delay between attempts in milliseconds, >= 1000 (wire name: delayMs)
    """

    campaign_ids: Tuple[CampaignId, ...] = Field(alias="campaignIds")
    max_attempts: int = Field(alias="maxAttempts", strict=True, ge=MIN_ATTEMPTS, le=MAX_ATTEMPTS)
    delay_ms: int = Field(alias="delayMs", strict=True, ge=MIN_DELAY_MS)

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("campaign_ids", mode="before")
    @classmethod
    def _require_sequence(cls, value: Any) -> Any:
        # Sets are unordered and a bare string would be split into characters
        if not isinstance(value, (list, tuple)):
            raise ValueError("campaignIds must be a list of identifiers")
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body expected by the retry endpoint"""
        return {
            "campaignIds": list(self.campaign_ids),
            "maxAttempts": self.max_attempts,
            "delayMs": self.delay_ms,
        }
