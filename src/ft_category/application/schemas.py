"""Pydantic schemas for ft_category API."""

from pydantic import BaseModel, Field, field_validator

from src.ft_category.domain.models import Category, normalize_name

_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., pattern=_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def lowercase_name(cls, v: str) -> str:
        v = normalize_name(v)
        if not v:
            raise ValueError("Name must not be blank")
        return v


class CategoryUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, max_length=255)
    color: str | None = Field(None, pattern=_COLOR_PATTERN)
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def lowercase_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = normalize_name(v)
        if not v:
            raise ValueError("Name must not be blank")
        return v


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str | None
    color: str | None
    is_active: bool
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, c: Category) -> "CategoryResponse":
        return cls(
            id=c.id,
            name=c.name,
            description=c.description,
            color=c.color,
            is_active=c.is_active,
            created_at=c.created_at.isoformat() if c.created_at else None,
            updated_at=c.updated_at.isoformat() if c.updated_at else None,
        )


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]
    count: int
