"""Core finalization logic.

The finalizer is framework-agnostic and can be wrapped by adapters for
different web frameworks (Starlette, FastAPI, ...).
"""

from response_finalizer.core.finalizer import ResponseFinalizer, finalize

__all__ = ["ResponseFinalizer", "finalize"]
