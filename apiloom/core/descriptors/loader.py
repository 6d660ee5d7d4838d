"""Descriptor document loading.

Reads the YAML (or JSON) document produced by the upstream extractor,
validates it against the pydantic schemas and converts it into an
immutable DescriptorSet.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError

from ..constants import TAG_DEPRECATED, TAG_PREFIXES
from .models import (
    CouplingData,
    DescriptorSet,
    MethodDescriptor,
    PackageDescriptor,
    Tags,
    TypeDescriptor,
)
from .schemas import DescriptorDocument, PackageSchema, TypeSchema

logger = logging.getLogger(__name__)


class DescriptorError(ValueError):
    """The descriptor document could not be read or is invalid."""


def normalize_tag_name(name: str) -> str:
    """Strip the ``@`` marker and the tool prefix: ``@apiviz.uses`` -> ``uses``."""
    name = name.strip().lstrip("@")
    for prefix in TAG_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix):]
    return name


def _convert_tags(raw: Dict[str, List[str]]) -> Tags:
    tags: Dict[str, tuple] = {}
    for name, bodies in raw.items():
        key = normalize_tag_name(name)
        tags[key] = tags.get(key, ()) + tuple(b.strip() for b in bodies)
    return tags


def _convert_package(schema: PackageSchema) -> PackageDescriptor:
    return PackageDescriptor(
        name=schema.name,
        included=schema.included,
        tags=_convert_tags(schema.tags),
    )


def _convert_type(schema: TypeSchema) -> TypeDescriptor:
    package = schema.package
    if package is None:
        package = schema.name.rsplit(".", 1)[0] if "." in schema.name else ""

    tags = _convert_tags(schema.tags)

    return TypeDescriptor(
        qualified_name=schema.name,
        package=package,
        is_interface=schema.kind in ("interface", "annotation"),
        is_abstract=schema.abstract or schema.kind in ("interface", "annotation"),
        is_enum=schema.kind == "enum",
        is_annotation=schema.kind == "annotation",
        is_exception=schema.exception,
        is_deprecated=schema.deprecated or TAG_DEPRECATED in tags,
        included=schema.included,
        superclass=schema.superclass,
        interfaces=tuple(schema.interfaces),
        methods=tuple(
            MethodDescriptor(name=m.name, is_static=m.static, is_constructor=m.constructor)
            for m in schema.methods
        ),
        tags=tags,
        see_also=tuple(schema.see),
    )


def parse_descriptors(data: Dict[str, Any]) -> DescriptorSet:
    """Validate a decoded descriptor document and build a DescriptorSet.

    Raises:
        DescriptorError: If the document does not match the schema.
    """
    try:
        document = DescriptorDocument.model_validate(data or {})
    except ValidationError as e:
        raise DescriptorError(f"Invalid descriptor document: {e}") from e

    couplings = None
    if document.couplings is not None:
        couplings = CouplingData(
            classes={k: list(v) for k, v in document.couplings.classes.items()},
            efferents={k: list(v) for k, v in document.couplings.efferents.items()},
        )

    descriptors = DescriptorSet(
        types=[_convert_type(t) for t in document.types],
        packages=[_convert_package(p) for p in document.packages],
        couplings=couplings,
    )
    logger.info(
        f"Loaded {len(descriptors)} type descriptors "
        f"({len(descriptors.included_types())} included)"
    )
    return descriptors


def load_descriptors(path: Union[str, Path]) -> DescriptorSet:
    """Load a YAML or JSON descriptor document from disk."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise DescriptorError(f"Cannot read descriptor document {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DescriptorError(f"Cannot parse descriptor document {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise DescriptorError(f"Descriptor document {path} must be a mapping")

    return parse_descriptors(data or {})
