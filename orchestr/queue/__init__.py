"""
Orchestr Queue - events fired by queue workers.
"""

from .events import JobProcessed, JobProcessing

__all__ = ["JobProcessed", "JobProcessing"]
