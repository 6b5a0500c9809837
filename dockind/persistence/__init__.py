# ==============================================
# TOPIC 4: PERSISTENCE (Discovery output across runs)
# ==============================================
#
# This package handles saving and loading discovery output
# so document kinds survive between runs.
#
# Modules:
# --------
# - metadata_store.py  → Save/load document kinds, schemas and state
#
# ==============================================

from .metadata_store import MetadataStore

__all__ = ["MetadataStore"]
