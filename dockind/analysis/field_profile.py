# ==============================================
# FieldProfile / InferredSchema
# ==============================================
#
# PURPOSE:
#   Immutable data classes that hold what was observed about each
#   top-level field of a collection sample. This is the "evidence"
#   the DocumentKindDetector works from.
#
# CLASS: FieldProfile (frozen dataclass)
# --------------------------------------
#   Attributes:
#   -----------
#   - name: str            → Top-level field name
#   - doc_count: int       → How many sampled documents contain this field
#   - doc_percent: int     → round(doc_count / total_docs * 100), half-up
#   - samples: tuple       → Distinct values in first-seen order (capped)
#   - type: TypeTag        → Type of the LAST value seen for the field
#
#   Computed Properties:
#   --------------------
#   - cardinality -> int
#       Number of distinct sampled values (len(samples)).
#
#   - first_sample_is_scalar -> bool
#       True if the first sample is a boolean, number or string.
#
# CLASS: InferredSchema (frozen dataclass)
# ----------------------------------------
#   - total_docs: int
#   - properties: Mapping[str, FieldProfile]  (read-only, insertion ordered)
#
# FUNCTION:
# ---------
# - round_half_up(value: float) -> int
#
# ==============================================

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from dockind.normalization import TypeDetector, TypeTag

SCHEMA_URI = "http://json-schema.org/schema#"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class FieldProfile:
    """
    Observed statistics for a single top-level field across a sample.
    """

    name: str
    doc_count: int
    doc_percent: int
    samples: Tuple[Any, ...]
    type: TypeTag

    @property
    def cardinality(self) -> int:
        return len(self.samples)

    @property
    def first_sample_is_scalar(self) -> bool:
        if not self.samples:
            return False
        return TypeDetector.detect(self.samples[0]).is_scalar

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the profile to a plain dictionary.

        Sample values are passed through unchanged, so BSON values
        need a BSON-aware encoder (see MetadataStore).
        """
        return {
            "doc_count": self.doc_count,
            "doc_percent": self.doc_percent,
            "samples": list(self.samples),
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "FieldProfile":
        return cls(
            name=name,
            doc_count=data.get("doc_count", 0),
            doc_percent=data.get("doc_percent", 0),
            samples=tuple(data.get("samples", [])),
            type=TypeTag(data.get("type", TypeTag.UNDEFINED.value)),
        )


@dataclass(frozen=True)
class InferredSchema:
    """
    Per-field profile of one collection sample.

    Built once by SchemaInferrer and never changed afterwards.
    """

    total_docs: int = 0
    properties: Mapping[str, FieldProfile] = field(default_factory=dict)
    collection_name: Optional[str] = None

    def __post_init__(self):
        # Freeze the mapping so consumers can't edit profiles in place
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(self.properties)

    def get(self, field_name: str) -> Optional[FieldProfile]:
        return self.properties.get(field_name)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize in a JSON-schema-like shape.

        Returns:
            {"$schema": ..., "total_docs": N, "properties": {name: {...}}}
        """
        return {
            "$schema": SCHEMA_URI,
            "collection_name": self.collection_name,
            "total_docs": self.total_docs,
            "properties": {
                name: profile.to_dict() for name, profile in self.properties.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InferredSchema":
        properties = {
            name: FieldProfile.from_dict(name, profile)
            for name, profile in data.get("properties", {}).items()
        }
        return cls(
            total_docs=data.get("total_docs", 0),
            properties=properties,
            collection_name=data.get("collection_name"),
        )
