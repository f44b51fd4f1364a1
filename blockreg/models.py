from __future__ import annotations

import re
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .blocks import BlockDescriptor, is_missing
from .states import BoolAxis, EnumAxis, IntAxis, StateAxis

_NAME_RE = re.compile(r"^(?:[a-z0-9_.-]+:)?[a-z0-9_./-]+$")
_KEY_RE = re.compile(r"^[a-z0-9_]+$")

StateValueModel = Union[bool, int, str]


class AxisDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    key: str = Field(min_length=1)
    type: Literal["bool", "int", "enum"]
    values: Optional[list[str]] = None
    start: Optional[int] = None
    stop: Optional[int] = None

    @field_validator("key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        if not _KEY_RE.match(value):
            raise ValueError("State keys must contain only lowercase letters, digits, or underscores")
        return value

    @model_validator(mode="after")
    def check_domain(self) -> "AxisDeclaration":
        if self.type == "enum":
            if not self.values:
                raise ValueError(f"enum axis '{self.key}' needs a non-empty 'values' list")
            if len(set(self.values)) != len(self.values):
                raise ValueError(f"enum axis '{self.key}' has duplicate values")
        elif self.values is not None:
            raise ValueError(f"'values' only applies to enum axes (axis '{self.key}')")
        if self.type == "int":
            if self.start is None or self.stop is None:
                raise ValueError(f"int axis '{self.key}' needs 'start' and 'stop'")
            if self.stop < self.start:
                raise ValueError(f"int axis '{self.key}': stop < start")
        elif self.start is not None or self.stop is not None:
            raise ValueError(f"'start'/'stop' only apply to int axes (axis '{self.key}')")
        return self

    def to_axis(self) -> StateAxis:
        if self.type == "bool":
            return BoolAxis(self.key)
        if self.type == "int":
            return IntAxis(self.key, start=self.start, stop=self.stop)
        return EnumAxis(self.key, tuple(self.values or ()))


class BlockDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    kind: str = "plain"
    cull_against: bool = True
    supports_data: Optional[bool] = None
    variants: Optional[list[str]] = None
    params: dict[str, Union[int, str]] = Field(default_factory=dict)
    axes: list[AxisDeclaration] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not _NAME_RE.match(value):
            raise ValueError("Block names must look like 'plugin:name' or 'name' (lowercase)")
        return value

    @field_validator("variants")
    @classmethod
    def validate_variants(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is not None and len(set(value)) != len(value):
            raise ValueError("variants must not repeat")
        return value


class DeclarationFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    blocks: list[BlockDeclaration]


class BlockResponse(BaseModel):
    combined_id: Optional[int]
    family_id: Optional[int]
    data_offset: Optional[int]
    plugin: str
    name: str
    display_name: str
    state_string: str
    model_name: str
    model_variant: str
    cull_against: bool
    missing: bool
    state: dict[str, StateValueModel]

    @classmethod
    def from_block(cls, block: BlockDescriptor, combined_id: Optional[int]) -> "BlockResponse":
        family = block.family
        return cls(
            combined_id=combined_id,
            family_id=family.id if family is not None else None,
            data_offset=(combined_id & 0xF) if combined_id is not None else None,
            plugin=block.plugin,
            name=block.name,
            display_name=block.display_name(),
            state_string=block.state_string(),
            model_name=block.model_name(),
            model_variant=block.model_variant(),
            cull_against=block.cull_against,
            missing=is_missing(block),
            state=dict(block.state),
        )


class FamilyResponse(BaseModel):
    id: int
    display_name: str
    kind: str
    supports_data: bool
    variant_count: int
    placed: list[BlockResponse]


class FamilyListResponse(BaseModel):
    families: list[FamilyResponse]
