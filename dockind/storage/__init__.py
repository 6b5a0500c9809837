# ==============================================
# TOPIC 3: STORAGE
# ==============================================
#
# This package handles everything that touches the document
# database, plus splitting a sample into logical sub-collections.
#
# Modules:
# --------
# - mongo_client.py → Connection, database / collection listing
# - sampler.py      → Bounded, paged document sampling
# - partitioner.py  → Group sampled documents by document kind
#
# ==============================================

from .mongo_client import MongoClient, filter_system_collections
from .sampler import DocumentSampler, SamplingPolicy
from .partitioner import DocumentPartition, distinct_kind_values, partition_documents

__all__ = [
    "MongoClient",
    "filter_system_collections",
    "DocumentSampler",
    "SamplingPolicy",
    "DocumentPartition",
    "distinct_kind_values",
    "partition_documents",
]
