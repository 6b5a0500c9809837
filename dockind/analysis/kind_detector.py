# ==============================================
# DocumentKindDetector
# ==============================================
#
# PURPOSE:
#   Takes an InferredSchema (or an external flavor description) and
#   picks the field most likely to discriminate entity subtypes inside
#   one physical collection. This is the "brain" of discovery.
#
# CLASS: DocumentKindDetector
# ---------------------------
#   Stateless. Thresholds in, results out.
#
#   Constructor:
#   ------------
#   - __init__(thresholds: DetectionThresholds)
#
#   Methods:
#   --------
#   - detect(source: CustomInference | FlavorInference) -> DocumentKindResult
#       Dispatch on the input mode.
#
#   - detect_custom(source: CustomInference) -> DocumentKindResult
#       RULE 1: ELIGIBILITY
#         doc_percent >= probability AND at least one sample AND the
#         first sample is a scalar (boolean / number / string)
#           → candidate, otherwise → other field
#
#       RULE 2: SELECTION (greedy, low cardinality wins)
#         Scan candidates in schema order, skipping excluded fields.
#         Replace the running best when
#           doc_percent >= best doc_percent AND cardinality < best cardinality
#         (best starts at doc_percent 0, cardinality infinity).
#
#   - detect_flavor(source: FlavorInference) -> DocumentKindResult
#       All external properties are candidates. With exactly one
#       `key = value` assignment the key is chosen; with several,
#       nothing is chosen.
#
#   - parse_flavor_key(assignment: str) -> str  (staticmethod)
#
# FUNCTION:
# ---------
# - detect_document_kind(schema_or_source, probability=90, excluded_fields=()) -> DocumentKindResult
#
# ==============================================

import logging
import math
import re
from typing import Iterable, List, Optional, Union

from dockind.errors import FlavorParseError
from .decision import (
    CustomInference,
    DetectionSource,
    DetectionThresholds,
    DocumentKindResult,
    FlavorInference,
)
from .field_profile import InferredSchema

logger = logging.getLogger(__name__)


class DocumentKindDetector:
    """
    Chooses a discriminator ("document kind") field for a collection.

    A real discriminator such as `type` or `kind` holds a handful of
    values across thousands of documents, while identifiers and free
    text hold many, so the lowest-cardinality eligible field wins.
    """

    FLAVOR_SEPARATOR = ","
    FLAVOR_ASSIGNMENT_PATTERN = re.compile(r'([\s\S]*?) = "?([\s\S]*?)"?\Z')

    def __init__(self, thresholds: Optional[DetectionThresholds] = None):
        """
        Initialize the detector.

        Args:
            thresholds: Optional DetectionThresholds. Defaults to probability 90
                        and no excluded fields.
        """
        self.thresholds = thresholds or DetectionThresholds()

    def detect(self, source: DetectionSource) -> DocumentKindResult:
        if isinstance(source, CustomInference):
            return self.detect_custom(source)
        if isinstance(source, FlavorInference):
            return self.detect_flavor(source)
        raise TypeError(f"Unsupported detection source: {type(source).__name__}")

    def detect_custom(self, source: CustomInference) -> DocumentKindResult:
        """
        Detect the document kind from an internally inferred schema.

        Args:
            source: CustomInference holding the collection's InferredSchema

        Returns:
            DocumentKindResult with candidates, the chosen field and the rest
        """
        probability = self.thresholds.probability
        excluded = self.thresholds.excluded_fields

        candidates: List[str] = []
        others: List[str] = []

        best_field = ""
        best_probability = 0
        min_count = math.inf

        for field_name, profile in source.schema.properties.items():
            is_candidate = (
                profile.doc_percent >= probability
                and profile.cardinality >= 1
                and profile.first_sample_is_scalar
            )
            if not is_candidate:
                others.append(field_name)
                continue

            candidates.append(field_name)

            if field_name in excluded:
                continue

            if profile.doc_percent >= best_probability and profile.cardinality < min_count:
                min_count = profile.cardinality
                best_probability = profile.doc_percent
                best_field = field_name

        if best_field:
            logger.debug(
                "Document kind for '%s': '%s' (%d distinct values, %d%% of docs)",
                source.collection_name, best_field, min_count, best_probability,
            )

        return DocumentKindResult(
            collection_name=source.collection_name,
            candidate_fields=tuple(candidates),
            chosen_field=best_field,
            other_fields=tuple(others),
            preselected_field=source.preselected_field,
        )

    def detect_flavor(self, source: FlavorInference) -> DocumentKindResult:
        """
        Detect the document kind from an external flavor string.

        Raises:
            FlavorParseError: If the only assignment can't be parsed
        """
        assignments = (source.flavor or "").split(self.FLAVOR_SEPARATOR)
        candidates = tuple(source.properties)

        chosen = ""
        if len(assignments) == 1:
            key = self.parse_flavor_key(assignments[0])
            if key not in self.thresholds.excluded_fields:
                chosen = key
        else:
            logger.debug(
                "Flavor for '%s' has %d assignments, no document kind chosen",
                source.collection_name, len(assignments),
            )

        return DocumentKindResult(
            collection_name=source.collection_name,
            candidate_fields=candidates,
            chosen_field=chosen,
            other_fields=(),
            preselected_field=source.preselected_field,
        )

    @classmethod
    def parse_flavor_key(cls, assignment: str) -> str:
        """
        Pull the key out of one `key = value` assignment.

        Examples:
            'type = "user"' → 'type'
            'kind = 3'      → 'kind'
        """
        match = cls.FLAVOR_ASSIGNMENT_PATTERN.match(assignment)
        if match is None or not match.group(1).strip():
            raise FlavorParseError(f"No 'key = value' assignment in flavor {assignment!r}")
        return match.group(1).strip()


def detect_document_kind(
    schema: Union[InferredSchema, DetectionSource],
    probability: int = 90,
    excluded_fields: Optional[Iterable[str]] = None,
    collection_name: Optional[str] = None
) -> DocumentKindResult:
    """
    Convenience entry point.

    Args:
        schema: An InferredSchema, or an explicit CustomInference / FlavorInference
        probability: Minimum doc_percent (0-100) for a candidate
        excluded_fields: Field names never chosen
        collection_name: Label for a bare InferredSchema (defaults to its own name)

    Returns:
        DocumentKindResult
    """
    if isinstance(schema, InferredSchema):
        name = collection_name or schema.collection_name or ""
        source: DetectionSource = CustomInference(collection_name=name, schema=schema)
    else:
        source = schema

    thresholds = DetectionThresholds(
        probability=probability,
        excluded_fields=excluded_fields or (),
    )
    return DocumentKindDetector(thresholds).detect(source)
