# ==============================================
# Decision (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that represent the INPUT modes and the OUTPUT of
#   document-kind detection, plus the thresholds that control it.
#
# WHY THIS FILE EXISTS:
#   Separating data classes from logic keeps the detector clean.
#   DocumentKindResult is also used by the orchestrator to partition
#   documents, and by Topic 4 (Persistence) to save/load results.
#
# INPUT MODES (tagged union: DetectionSource):
# --------------------------------------------
# - CustomInference (dataclass)
#     collection_name + an InferredSchema computed by SchemaInferrer.
#
# - FlavorInference (dataclass)
#     collection_name + an external "flavor" string of comma separated
#     `key = value` assignments + the external property names.
#
# CLASSES:
# --------
# - DetectionThresholds (dataclass)
#     probability: int            → Minimum doc_percent for a candidate (default 90)
#     excluded_fields: frozenset  → Fields never chosen as discriminator
#
# - DocumentKindResult (dataclass)
#     collection_name, candidate_fields, chosen_field, other_fields,
#     preselected_field
#
#     Methods:
#     --------
#     - to_dict() -> dict
#     - from_dict(data: dict) -> DocumentKindResult  (classmethod)
#
# ==============================================

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Sequence, Tuple, Union

from .field_profile import InferredSchema


@dataclass(frozen=True)
class CustomInference:
    """Detection input computed in-process by SchemaInferrer."""

    collection_name: str
    schema: InferredSchema
    preselected_field: Optional[str] = None


@dataclass(frozen=True)
class FlavorInference:
    """
    Detection input from an external inference description.

    The flavor string looks like 'type = "user"' or, for several
    assignments, 'type = "user",region = "eu"'.
    """

    collection_name: str
    flavor: str
    properties: Sequence[str] = ()
    preselected_field: Optional[str] = None


DetectionSource = Union[CustomInference, FlavorInference]


@dataclass(frozen=True)
class DetectionThresholds:
    """
    Configurable thresholds for document-kind detection.
    """

    probability: int = 90
    """
    Minimum doc_percent a field needs to be a discriminator candidate.
    Default 90 = the field must appear in at least 90% of sampled documents.
    """

    excluded_fields: FrozenSet[str] = frozenset()
    """
    Fields that may be candidates but are never chosen.
    """

    def __post_init__(self):
        if isinstance(self.probability, bool) or not isinstance(self.probability, int):
            raise ValueError(f"probability must be an integer, got {self.probability!r}")
        if not 0 <= self.probability <= 100:
            raise ValueError(f"probability must be between 0 and 100, got {self.probability}")
        excluded = self.excluded_fields
        # A bare string names one field, not a set of characters
        if isinstance(excluded, str):
            excluded = (excluded,)
        object.__setattr__(self, "excluded_fields", frozenset(excluded))


@dataclass(frozen=True)
class DocumentKindResult:
    """
    Outcome of document-kind detection for one collection.

    candidate_fields and other_fields together hold every top-level
    field name exactly once.
    """

    collection_name: str
    candidate_fields: Tuple[str, ...] = ()
    chosen_field: str = ""  # "" when no discriminator was chosen
    other_fields: Tuple[str, ...] = field(default_factory=tuple)
    preselected_field: Optional[str] = None

    @property
    def has_kind(self) -> bool:
        return bool(self.chosen_field)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collection_name": self.collection_name,
            "candidate_fields": list(self.candidate_fields),
            "chosen_field": self.chosen_field,
            "other_fields": list(self.other_fields),
            "preselected_field": self.preselected_field,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentKindResult":
        return cls(
            collection_name=data["collection_name"],
            candidate_fields=tuple(data.get("candidate_fields", [])),
            chosen_field=data.get("chosen_field", ""),
            other_fields=tuple(data.get("other_fields", [])),
            preselected_field=data.get("preselected_field"),
        )
