"""
Domain models — Pydantic types for restartmonkey.

All models are re-exported here for convenient access:

    from restartmonkey.core.models import ProcessRecord, PolicyConfig, JobTable, Receipt
"""

from restartmonkey.core.models.action import Receipt
from restartmonkey.core.models.jobs import JobTable
from restartmonkey.core.models.policy import DEFAULT_LEVEL, PolicyConfig
from restartmonkey.core.models.process import AffectedExecutable, ProcessRecord, ScanResult

__all__ = [
    "DEFAULT_LEVEL",
    "AffectedExecutable",
    "JobTable",
    "PolicyConfig",
    "ProcessRecord",
    "Receipt",
    "ScanResult",
]
