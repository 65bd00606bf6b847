"""Core module - Deployment options and shared types."""

from revdeploy.core.config import DEFAULT_REVISION, DEFAULT_REVISION_FILE, DeployOptions
from revdeploy.core.types import DeployResult, PlanKind, RevisionStatus

__all__ = [
    # Config
    "DEFAULT_REVISION",
    "DEFAULT_REVISION_FILE",
    "DeployOptions",
    # Types
    "DeployResult",
    "PlanKind",
    "RevisionStatus",
]
