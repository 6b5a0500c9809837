# ==============================================
# dockind: Document-Kind Discovery
# ==============================================
#
# Package Structure (4 Topics + Orchestrator):
#
# dockind/
# ├── normalization/    # Topic 1: Classify value types, strip reserved fields
# ├── analysis/         # Topic 2: Infer field profiles & detect document kinds
# ├── storage/          # Topic 3: Sample from MongoDB, partition by kind
# ├── persistence/      # Topic 4: Save discovery output across runs
# ├── config.py         # Configuration management
# ├── errors.py         # Typed error taxonomy
# ├── reverse_engineer.py  # Final orchestrator class
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
