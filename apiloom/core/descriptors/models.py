"""Descriptor data models.

Immutable Type and Package descriptors handed to the graph builder by the
upstream doc-model extractor. These are pure data containers: tags are
already normalized, cross-references are plain qualified names.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from ..constants import TAG_DEPRECATED

Tags = Dict[str, Tuple[str, ...]]


@dataclass(frozen=True)
class MethodDescriptor:
    """A declared method, reduced to what kind detection needs."""

    name: str
    is_static: bool = False
    is_constructor: bool = False


@dataclass(frozen=True)
class PackageDescriptor:
    """A package and its declared tags."""

    name: str
    included: bool = True
    tags: Tags = field(default_factory=dict)

    def tag_texts(self, tag: str) -> Tuple[str, ...]:
        return self.tags.get(tag, ())

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    @property
    def is_deprecated(self) -> bool:
        return self.has_tag(TAG_DEPRECATED)


@dataclass(frozen=True)
class TypeDescriptor:
    """A class, interface, enum or annotation type.

    ``superclass`` and ``interfaces`` hold direct supertypes only;
    ``see_also`` holds cross-references exactly as declared, resolution
    against the descriptor set happens in the graph builder.
    """

    qualified_name: str
    package: str  # "" for the unnamed package
    is_interface: bool = False
    is_abstract: bool = False
    is_enum: bool = False
    is_annotation: bool = False
    is_exception: bool = False
    is_deprecated: bool = False
    included: bool = True
    superclass: Optional[str] = None
    interfaces: Tuple[str, ...] = ()
    methods: Tuple[MethodDescriptor, ...] = ()
    tags: Tags = field(default_factory=dict)
    see_also: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        """Simple name; nested types keep their ``Outer.Inner`` form."""
        if self.package and self.qualified_name.startswith(self.package + "."):
            return self.qualified_name[len(self.package) + 1:]
        return self.qualified_name

    @property
    def binary_name(self) -> str:
        """Qualified name as a compiled-class analyzer reports it."""
        if not self.package:
            return self.name.replace(".", "$")
        return f"{self.package}.{self.name.replace('.', '$')}"

    def tag_texts(self, tag: str) -> Tuple[str, ...]:
        return self.tags.get(tag, ())

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


@dataclass
class CouplingData:
    """Efferent-coupling analyzer output carried alongside the descriptors."""

    classes: Dict[str, List[str]] = field(default_factory=dict)
    efferents: Dict[str, List[str]] = field(default_factory=dict)


class DescriptorSet:
    """All descriptors of one generation run, indexed by qualified name."""

    def __init__(
        self,
        types: List[TypeDescriptor],
        packages: Optional[List[PackageDescriptor]] = None,
        couplings: Optional[CouplingData] = None,
    ):
        self._types: Dict[str, TypeDescriptor] = {}
        for t in types:
            self._types[t.qualified_name] = t

        self._packages: Dict[str, PackageDescriptor] = {}
        for p in packages or []:
            self._packages[p.name] = p

        self.couplings = couplings

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types[name] for name in sorted(self._types))

    def __len__(self) -> int:
        return len(self._types)

    def type_named(self, name: str) -> Optional[TypeDescriptor]:
        return self._types.get(name)

    def package_named(self, name: str) -> PackageDescriptor:
        """Return the declared package, or an untagged stand-in."""
        pkg = self._packages.get(name)
        if pkg is None:
            pkg = PackageDescriptor(name=name)
            self._packages[name] = pkg
        return pkg

    def included_types(self) -> List[TypeDescriptor]:
        return [t for t in self if t.included]

    def packages(self) -> List[PackageDescriptor]:
        """Packages containing at least one included type, sorted by name."""
        names = {t.package for t in self.included_types()}
        return [self.package_named(n) for n in sorted(names)]
