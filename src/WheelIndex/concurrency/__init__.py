# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.concurrency.__init__",
#   "purpose": "Concurrency helpers shared across WheelIndex components.",
#   "sections": []
# }
# === /NAVMAP ===

"""
Concurrency helpers shared across WheelIndex components.

Exposes :func:`create_executor` for thread pools sized to IO-bound work and
:func:`map_in_batches`, which bounds in-flight calls by resolving one batch
before submitting the next.
"""

from .executors import chunked, create_executor, map_in_batches

__all__ = ["chunked", "create_executor", "map_in_batches"]
