"""
Port interfaces (Protocols) for the FitLife workout API.

Part of FL-3: Persistence layer
Updated in FL-6: Added exercise catalog port

This package defines the interface contracts that the infrastructure
layer must implement. Using Protocols enables:
- Clean separation of concerns
- Easy testing with fake implementations
- Dependency inversion (depend on abstractions, not concretions)
"""

from application.ports.exercise_catalog import ExerciseCatalog
from application.ports.key_value_store import KeyValueStore

__all__ = [
    "ExerciseCatalog",
    "KeyValueStore",
]
