"""
Category Models

DESIGN DECISION: System categories and custom categories share one model
but never one ID namespace. System IDs look like `sys_<n>`, custom IDs
like `custom_<token>`, so a lookup can never hit the wrong set.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from money_notes.models.bill import BillType

SYSTEM_ID_PREFIX = "sys_"
CUSTOM_ID_PREFIX = "custom_"


class Category(BaseModel):
    """A bill category, either system-provided or user-owned."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Category ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=30,
        description="Display name"
    )
    icon: str = Field(
        ...,
        min_length=1,
        description="Icon key, resolved to a glyph by the registry"
    )
    type: BillType
    is_custom: bool = False
    sort_order: int = Field(
        default=0,
        description="Sort weight, ascending"
    )

    @model_validator(mode='after')
    def validate_namespace(self) -> 'Category':
        """Custom and system IDs must stay in their own namespace."""
        prefix = CUSTOM_ID_PREFIX if self.is_custom else SYSTEM_ID_PREFIX
        if not self.id.startswith(prefix):
            raise ValueError(f"Category ID {self.id!r} must start with {prefix!r}")
        return self


class CategoryCreate(BaseModel):
    """Payload for adding a custom category."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=30)
    icon: str = Field(..., min_length=1)
    type: BillType
    sort_order: int = 50


class CategoryUpdate(BaseModel):
    """Partial update for a custom category. Unset fields are kept."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=30)
    icon: Optional[str] = Field(default=None, min_length=1)
    type: Optional[BillType] = None
    sort_order: Optional[int] = None
