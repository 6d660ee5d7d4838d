"""Descriptor document schemas."""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


TagValue = Union[str, bool, None, List[str]]


def _normalize_tag_values(value: TagValue) -> List[str]:
    # `hidden: true` and `hidden:` both mean an empty-bodied tag
    if value is None or isinstance(value, bool):
        return [""]
    if isinstance(value, (list, tuple)):
        return ["" if v is None else str(v) for v in value]
    return [str(value)]


class MethodSchema(BaseModel):
    """Declared method."""
    name: str = Field(..., description="Method name", min_length=1)
    static: bool = Field(False, description="Whether the method is static")
    constructor: bool = Field(False, description="Whether the method is a constructor")


class PackageSchema(BaseModel):
    """Package descriptor."""
    name: str = Field(..., description="Fully-qualified package name")
    included: bool = Field(True, description="Whether the package is documented")
    tags: Dict[str, List[str]] = Field(default_factory=dict, description="Tag name -> bodies")

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        return {str(k): _normalize_tag_values(v) for k, v in (value or {}).items()}


class TypeSchema(BaseModel):
    """Type descriptor."""
    name: str = Field(..., description="Fully-qualified type name", min_length=1)
    package: Optional[str] = Field(None, description="Containing package (default: dotted prefix)")
    kind: str = Field("class", description="class | interface | enum | annotation")
    abstract: bool = Field(False, description="Abstract class")
    exception: bool = Field(False, description="Exception or error type")
    deprecated: bool = Field(False, description="Deprecated type")
    included: bool = Field(True, description="False for referenced-only types")
    superclass: Optional[str] = Field(None, description="Direct supertype")
    interfaces: List[str] = Field(default_factory=list, description="Directly implemented interfaces")
    methods: List[MethodSchema] = Field(default_factory=list, description="Declared methods")
    tags: Dict[str, List[str]] = Field(default_factory=dict, description="Tag name -> bodies")
    see: List[str] = Field(default_factory=list, description="Cross-referenced type names")

    @field_validator("kind")
    @classmethod
    def check_kind(cls, value: str) -> str:
        value = value.lower()
        if value not in ("class", "interface", "enum", "annotation"):
            raise ValueError(f"unknown type kind '{value}'")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        return {str(k): _normalize_tag_values(v) for k, v in (value or {}).items()}


class CouplingSchema(BaseModel):
    """Efferent-coupling analyzer output."""
    classes: Dict[str, List[str]] = Field(default_factory=dict, description="Package -> analyzed classes")
    efferents: Dict[str, List[str]] = Field(default_factory=dict, description="Package -> depended-upon packages")


class DescriptorDocument(BaseModel):
    """Top-level descriptor document."""
    packages: List[PackageSchema] = Field(default_factory=list, description="Package descriptors")
    types: List[TypeSchema] = Field(default_factory=list, description="Type descriptors")
    couplings: Optional[CouplingSchema] = Field(None, description="Package coupling analysis")
