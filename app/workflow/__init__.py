from .runner import JobOrchestrator

__all__ = ['JobOrchestrator']
