# apiloom descriptors - immutable Type/Package descriptors from the doc-model extractor

from .loader import DescriptorError, load_descriptors, normalize_tag_name, parse_descriptors
from .models import (
    CouplingData,
    DescriptorSet,
    MethodDescriptor,
    PackageDescriptor,
    TypeDescriptor,
)

__all__ = [
    "CouplingData",
    "DescriptorError",
    "DescriptorSet",
    "MethodDescriptor",
    "PackageDescriptor",
    "TypeDescriptor",
    "load_descriptors",
    "normalize_tag_name",
    "parse_descriptors",
]
