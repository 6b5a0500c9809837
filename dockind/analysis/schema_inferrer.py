# ==============================================
# SchemaInferrer
# ==============================================
#
# PURPOSE:
#   Scan a sanitized document sample once and fold it into an
#   InferredSchema: one FieldProfile per top-level field. This is
#   the "observation engine": it watches documents and builds evidence.
#
# CLASS: SchemaInferrer
# ---------------------
#   Constructor:
#   ------------
#   - __init__(sample_size: int = 30)
#       sample_size caps the distinct values kept per field
#       (20 when discovering document kinds).
#
#   Methods:
#   --------
#   - infer(documents: Sequence[Mapping], collection_name=None) -> InferredSchema
#       For each document, for each top-level field:
#         1. Count the occurrence
#         2. Keep the value as a sample if it is new and there is room
#         3. Overwrite the field type with the type of this value
#       Then compute doc_percent for every field.
#       Nested objects and arrays are NOT expanded into sub-fields.
#
#   Internal helpers:
#   -----------------
#   - _FieldAccumulator: mutable per-field counters, private to one
#     infer() call and frozen into a FieldProfile at the end.
#
# FUNCTION:
# ---------
# - infer_schema(documents, sample_size=30) -> InferredSchema
#
# ==============================================

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Dict, Hashable, List, Optional, Set

from dockind.errors import InferenceInputError
from dockind.normalization import TypeDetector, TypeTag
from .field_profile import FieldProfile, InferredSchema, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 30


class _FieldAccumulator:
    """Running counters for one field during a single scan."""

    def __init__(self, name: str, sample_size: int):
        self.name = name
        self.sample_size = sample_size
        self.doc_count = 0
        self.samples: List[Any] = []
        self._sample_keys: Set[Hashable] = set()
        self.type: TypeTag = TypeTag.UNDEFINED

    def observe(self, value: Any, detected_type: TypeTag) -> None:
        self.doc_count += 1

        if len(self.samples) < self.sample_size:
            key = TypeDetector.value_key(value)
            if key not in self._sample_keys:
                self._sample_keys.add(key)
                self.samples.append(value)

        # Last write wins, not a union of observed types
        self.type = detected_type

    def freeze(self, total_docs: int) -> FieldProfile:
        return FieldProfile(
            name=self.name,
            doc_count=self.doc_count,
            doc_percent=round_half_up(self.doc_count / total_docs * 100),
            samples=tuple(self.samples),
            type=self.type,
        )


class SchemaInferrer:
    """
    Builds an InferredSchema from a sanitized document sample.

    Stateless between calls: every infer() starts from scratch and the
    result shares no mutable state with the inferrer.
    """

    def __init__(self, sample_size: int = DEFAULT_SAMPLE_SIZE):
        if isinstance(sample_size, bool) or not isinstance(sample_size, int) or sample_size < 1:
            raise InferenceInputError(f"sample_size must be a positive integer, got {sample_size!r}")
        self.sample_size = sample_size

    def infer(self, documents: Iterable, collection_name: Optional[str] = None) -> InferredSchema:
        """
        Infer a per-field profile from a document sample.

        Args:
            documents: Sanitized documents (each a mapping of field → value)
            collection_name: Optional label carried on the result

        Returns:
            An immutable InferredSchema

        Raises:
            InferenceInputError: If documents is not a sequence of mappings
        """
        self._validate_sequence(documents)

        accumulators: Dict[str, _FieldAccumulator] = {}
        total_docs = 0

        for position, document in enumerate(documents):
            if not isinstance(document, Mapping):
                raise InferenceInputError(
                    f"Document at position {position} is {type(document).__name__}, expected a mapping"
                )
            total_docs += 1

            for field_name, value in document.items():
                accumulator = accumulators.get(field_name)
                if accumulator is None:
                    accumulator = _FieldAccumulator(field_name, self.sample_size)
                    accumulators[field_name] = accumulator
                accumulator.observe(value, TypeDetector.detect(value))

        properties = {
            name: accumulator.freeze(total_docs)
            for name, accumulator in accumulators.items()
        }

        logger.debug(
            "Inferred %d fields from %d documents%s",
            len(properties),
            total_docs,
            f" in '{collection_name}'" if collection_name else "",
        )
        return InferredSchema(
            total_docs=total_docs,
            properties=properties,
            collection_name=collection_name,
        )

    @staticmethod
    def _validate_sequence(documents: Any) -> None:
        # A single document or a string is iterable too, but never a sample
        if isinstance(documents, (str, bytes, bytearray, Mapping)):
            raise InferenceInputError(
                f"Expected a sequence of documents, got {type(documents).__name__}"
            )
        if not isinstance(documents, Iterable):
            raise InferenceInputError(
                f"Expected a sequence of documents, got {type(documents).__name__}"
            )


def infer_schema(
    documents: Iterable,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    collection_name: Optional[str] = None
) -> InferredSchema:
    """Convenience wrapper around SchemaInferrer(sample_size).infer(documents)."""
    return SchemaInferrer(sample_size).infer(documents, collection_name=collection_name)
