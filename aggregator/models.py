"""Pydantic models for ledger records, stored metadata and derived views."""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CampaignStatus(str, Enum):
    """Campaign lifecycle status."""
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"
    SUCCESSFUL = "SUCCESSFUL"


class CampaignRecord(BaseModel):
    """Authoritative campaign state as read from the ledger.

    Attributes:
        id: Campaign id on the contract
        creator: Creator address
        title: Ledger-stored fallback title
        description: Ledger-stored fallback description
        goal: Funding goal in wei
        raised: Amount raised in wei
        deadline: Deadline as a unix timestamp
    """
    id: int = Field(ge=0)
    creator: str
    title: str = ""
    description: str = ""
    goal: int = 0
    raised: int = 0
    deadline: int = 0

    @classmethod
    def from_contract(
        cls,
        campaign_id: int,
        raw: Any,
        field_names: Sequence[str] = (),
    ) -> "CampaignRecord":
        """Build a record from a raw ``getCampaign`` result.

        Args:
            campaign_id: The id that was queried
            raw: Mapping, named tuple or positional tuple from the contract call
            field_names: ABI output component names for positional results

        Returns:
            CampaignRecord instance
        """
        if isinstance(raw, Mapping):
            values = dict(raw)
        elif hasattr(raw, "_asdict"):
            values = raw._asdict()
        else:
            values = dict(zip(field_names, raw))

        # Older deployments name the field raisedAmount
        raised = values.get("raised")
        if raised is None:
            raised = values.get("raisedAmount", 0)

        return cls(
            id=campaign_id,
            creator=values.get("creator") or "",
            title=values.get("title") or "",
            description=values.get("description") or "",
            goal=int(values.get("goal") or 0),
            raised=int(raised or 0),
            deadline=int(values.get("deadline") or 0),
        )


class CampaignMetadata(BaseModel):
    """Descriptive campaign content held in the content-addressed store."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    campaign_id: str = Field(default="", alias="campaignId")
    title: str = ""
    description: str = ""
    image_url: str = Field(default="", alias="imageUrl")
    video_url: str = Field(default="", alias="videoUrl")
    goal: str = ""
    deadline: Optional[int] = None
    created_at: Optional[int] = Field(default=None, alias="createdAt")

    @field_validator("campaign_id", "goal", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        """Accept numeric ids and goals."""
        return "" if v is None else str(v)

    @field_validator("title", "description", "image_url", "video_url", mode="before")
    @classmethod
    def to_text(cls, v: Any) -> str:
        """Scalars become strings; missing or nested values become empty."""
        if v is None or isinstance(v, (dict, list)):
            return ""
        return str(v)

    @field_validator("deadline", "created_at", mode="before")
    @classmethod
    def lenient_timestamp(cls, v: Any) -> Optional[int]:
        """Informational timestamps; anything unreadable becomes None."""
        if isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        try:
            if isinstance(v, float):
                return int(v)
            if isinstance(v, str):
                try:
                    return int(v.strip())
                except ValueError:
                    return int(float(v))
        except (ValueError, OverflowError):
            return None
        return None

    @classmethod
    def from_raw(cls, raw_json: dict[str, Any]) -> "CampaignMetadata":
        """Parse raw store JSON into metadata.

        Args:
            raw_json: Raw JSON data from the store

        Returns:
            CampaignMetadata instance
        """
        # Extract fields with fallbacks for different JSON structures
        return cls(
            campaign_id=raw_json.get("campaignId") or raw_json.get("campaign_id"),
            title=raw_json.get("title") or raw_json.get("name"),
            description=raw_json.get("description"),
            image_url=(
                raw_json.get("imageUrl") or
                raw_json.get("image_url") or
                raw_json.get("image")
            ),
            video_url=(
                raw_json.get("videoUrl") or
                raw_json.get("video_url") or
                raw_json.get("video") or
                raw_json.get("animation_url")
            ),
            goal=raw_json.get("goal"),
            deadline=raw_json.get("deadline"),
            created_at=raw_json.get("createdAt") or raw_json.get("created_at"),
        )


class MetadataUpload(BaseModel):
    """Metadata payload submitted for upload; the store stamps createdAt."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    campaign_id: str = Field(alias="campaignId")
    title: str
    description: str = ""
    image_url: str = Field(default="", alias="imageUrl")
    video_url: str = Field(default="", alias="videoUrl")
    goal: str = ""
    deadline: Optional[int] = None

    @field_validator("campaign_id", "goal", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return "" if v is None else str(v)

    def to_content(self, created_at: int) -> dict[str, Any]:
        """Build the JSON document that gets pinned.

        Args:
            created_at: Server-side timestamp in milliseconds

        Returns:
            Metadata document with createdAt
        """
        content = self.model_dump(by_alias=True)
        content["createdAt"] = created_at
        return content


class StoredMetadata(BaseModel):
    """Raw metadata document together with its content hash."""
    ipfs_hash: str
    raw: dict[str, Any]

    @property
    def metadata(self) -> CampaignMetadata:
        return CampaignMetadata.from_raw(self.raw)


class CampaignView(BaseModel):
    """Normalized campaign view combining ledger and store data.

    Recomputed on every read; never persisted.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    creator: str
    title: str
    description: str
    image_url: str = Field(alias="imageUrl")
    video_url: str = Field(alias="videoUrl")
    goal: str
    raised: str
    deadline: int
    donor_count: int = Field(alias="donorCount")
    progress: float = Field(ge=0, le=100)
    is_active: bool = Field(alias="isActive")
    status: CampaignStatus

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with wire (camelCase) field names."""
        return self.model_dump(by_alias=True, mode="json")
