# ==============================================
# TOPIC 1: NORMALIZATION
# ==============================================
#
# This package prepares sampled documents BEFORE they enter
# the analysis pipeline.
#
# Modules:
# --------
# - type_detector.py   → Classify values into TypeTag, deep value keys
# - document_filter.py → Strip reserved ("_"-prefixed) fields
#
# ==============================================

from .type_detector import MISSING, TypeDetector, TypeTag
from .document_filter import DocumentFilter

__all__ = ["MISSING", "TypeDetector", "TypeTag", "DocumentFilter"]
