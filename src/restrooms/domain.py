"""Restrooms bounded context: crowd-sourced restroom reviews and ratings.

Handles review submission, per-location rating aggregation and up/down
voting on reviews. State lives in a flat key-value store (see
``restrooms.store``); the Protean domain provides the aggregates, commands
and command handlers around it.
"""

import structlog
from protean.domain import Domain

restrooms = Domain(name="restrooms")

logger = structlog.get_logger(__name__)
