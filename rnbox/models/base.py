"""Base model for all rnbox Pydantic models.

This module provides a base model class that enforces consistent serialization
behavior across all rnbox models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class RnboxBaseModel(BaseModel):
    """Base model class for all rnbox Pydantic models.

    CI API payloads carry many more fields than the harness reads, so extra
    fields are kept rather than rejected.
    """

    model_config = ConfigDict(
        extra="allow",
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_assignment=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary with consistent serialization parameters.

        Returns:
            Dictionary representation using JSON-compatible serialization
        """
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")
