"""Data management package for the identity evaluation system.

Provides the statement-graph data layer:
- Identifiers - content-addressed identity derivation and parsing
- Statements (Statement, StatementWire) - immutable graph units
- StatementBatch - one loaded batch with its order-independent root

Loaders and accessors:
- load_statement_batch: JSONL / JSON snapshot loading with fail-fast validation
- StatementGraph: indexed read-only view over one batch
- reference_keys / refers_to: statement self-reference matching
"""

from identity_system.data_management.statement_graph import (
    StatementGraph,
    reference_keys,
    refers_to,
)
from identity_system.data_management.statement_loader import (
    calculate_batch_root,
    load_statement_batch,
    parse_statement_batch_jsonl,
    parse_statement_batch_snapshot,
)

__all__ = [
    "StatementGraph",
    "reference_keys",
    "refers_to",
    "calculate_batch_root",
    "load_statement_batch",
    "parse_statement_batch_jsonl",
    "parse_statement_batch_snapshot",
]
