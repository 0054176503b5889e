from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class MasterDataValueCreate(BaseModel):
    """Register one option value in a category."""
    value: str = Field(..., min_length=1, description="Option value, matched exactly")


class MasterDataCategory(BaseModel):
    """Values of one category in first-insertion order."""
    category: str = Field(..., description="Category name, e.g. specs")
    values: List[str] = Field(default_factory=list)


class MasterDataRead(BaseModel):
    """All categories with their values."""
    specs: List[str] = Field(default_factory=list)
    levels: List[str] = Field(default_factory=list)
    interfaces: List[str] = Field(default_factory=list)
    linings: List[str] = Field(default_factory=list)
    lengths: List[str] = Field(default_factory=list)
    coatings: List[str] = Field(default_factory=list)
    warehouses: List[str] = Field(default_factory=list)
    workshops: List[str] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Dict[str, List[str]]) -> "MasterDataRead":
        return cls(**data)
