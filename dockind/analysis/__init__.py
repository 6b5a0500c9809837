# ==============================================
# TOPIC 2: ANALYSIS & DETECTION
# ==============================================
#
# This package infers a flat per-field profile from a document
# sample and guesses which field discriminates document kinds.
#
# Two-step process:
#   Step 1 (Inference): Observe documents → build a FieldProfile per field
#   Step 2 (Detection): Apply heuristics on profiles → choose a discriminator
#
# Modules:
# --------
# - field_profile.py   → FieldProfile / InferredSchema data classes
# - schema_inferrer.py → Fold documents into an InferredSchema
# - kind_detector.py   → Pick the document-kind field
# - decision.py        → Input modes, thresholds and DocumentKindResult
#
# ==============================================

from .field_profile import FieldProfile, InferredSchema, round_half_up
from .schema_inferrer import SchemaInferrer, infer_schema
from .decision import (
    CustomInference,
    DetectionSource,
    DetectionThresholds,
    DocumentKindResult,
    FlavorInference,
)
from .kind_detector import DocumentKindDetector, detect_document_kind

__all__ = [
    "FieldProfile",
    "InferredSchema",
    "round_half_up",
    "SchemaInferrer",
    "infer_schema",
    "CustomInference",
    "DetectionSource",
    "DetectionThresholds",
    "DocumentKindResult",
    "FlavorInference",
    "DocumentKindDetector",
    "detect_document_kind",
]
