"""
HotTakes API: Sauce Request/Response Schemas
=============================================

What:  Pydantic models defining the sauce API contract.
How:   Request models are looked up by SchemaName in the validation
       registry (services/validation.py); response models are used as
       FastAPI response_model and serialize with the camelCase names the
       front-end expects (_id, userId, mainPepper, imageUrl, ...).

Request model conventions:
    - extra="ignore": unknown properties are dropped, never rejected
    - strict=True: no type coercion ("5" is not a heat value)
    - field_messages: one message per field, replacing pydantic's own
    - required_messages: message for a missing required field
"""

from typing import Any, ClassVar, Dict, List, Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from hottakes.schemas.formats import ObjectId


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════

SAUCE_FIELD_MESSAGES = {
    "name": "The name property must be a string with at most 255 characters",
    "manufacturer": "The manufacturer property must be a string with at most 255 characters",
    "description": "The description property must be a string",
    "mainPepper": "The mainPepper property must be a string with at most 255 characters",
    "heat": "The heat property must be an integer between 1 and 10",
}


class SauceRequired(BaseModel):
    """Body of a sauce creation (every field required)."""

    name: str = Field(max_length=255)
    manufacturer: str = Field(max_length=255)
    description: str
    main_pepper: str = Field(alias="mainPepper", max_length=255)
    heat: int = Field(ge=1, le=10)

    model_config = ConfigDict(extra="ignore", strict=True)

    field_messages: ClassVar[Dict[str, str]] = SAUCE_FIELD_MESSAGES
    required_messages: ClassVar[Dict[str, str]] = {
        "name": "The payload must contain the sauce's name",
        "manufacturer": "The payload must contain the sauce's manufacturer",
        "description": "The payload must contain the sauce's description",
        "mainPepper": "The payload must contain the sauce's main pepper",
        "heat": "The payload must contain the sauce's intensity",
    }


class SauceUpdate(BaseModel):
    """Body of a sauce update. Every field optional, but never null."""

    name: Optional[str] = Field(default=None, max_length=255)
    manufacturer: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    main_pepper: Optional[str] = Field(default=None, alias="mainPepper", max_length=255)
    heat: Optional[int] = Field(default=None, ge=1, le=10)

    model_config = ConfigDict(extra="ignore", strict=True)

    field_messages: ClassVar[Dict[str, str]] = SAUCE_FIELD_MESSAGES
    required_messages: ClassVar[Dict[str, str]] = {}

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("null is not an accepted value")
        return value

    def changes(self) -> Dict[str, Any]:
        """Fields sent by the client, keyed by model attribute name."""
        return self.model_dump(exclude_unset=True)


class VoteRequest(BaseModel):
    """Body of a vote: like = 1 (like), -1 (dislike) or 0 (reset)."""

    like: int = Field(ge=-1, le=1)
    # Sent by the front-end for compatibility; the voter is always the
    # authenticated identity.
    user_id: Optional[ObjectId] = Field(default=None, alias="userId")

    model_config = ConfigDict(extra="ignore", strict=True)

    field_messages: ClassVar[Dict[str, str]] = {
        "like": (
            "The like property must be an integer between -1 and 1. "
            "1 likes the sauce, -1 dislikes it and 0 resets your previous choice"
        ),
        "userId": "The userId must be a string containing a valid identifier.",
    }
    required_messages: ClassVar[Dict[str, str]] = {
        "like": "The payload must contain the like value",
    }


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SauceResponse(BaseModel):
    """A sauce as returned by the read routes (internal columns omitted)."""

    id: str = Field(serialization_alias="_id")
    user_id: str
    name: str
    manufacturer: str
    description: str
    main_pepper: str
    image_url: str
    heat: int
    likes: int
    dislikes: int
    users_liked: List[str]
    users_disliked: List[str]

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


class MessageResponse(BaseModel):
    message: str


class VoteResponse(BaseModel):
    """Result of a vote, with the counts after the transition."""

    message: str
    outcome: str
    previous_action: int
    new_action: int
    likes: int
    dislikes: int

    model_config = ConfigDict(alias_generator=AliasGenerator(serialization_alias=to_camel))
