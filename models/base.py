"""
Base schemas for API request and response models.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for API wrapper schemas.

    Features:
        - Validate on attribute assignment
        - Allow ORM-style objects (from_attributes)

    Whitespace is not stripped: keyword text is deduplicated exactly as typed.
    """
    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True
    )
