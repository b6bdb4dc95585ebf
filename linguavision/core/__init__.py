"""
Core translation modules

Import from the submodules directly, e.g.:

    from linguavision.core.orchestrator import BatchOrchestrator
"""

__all__ = []
