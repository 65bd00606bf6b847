"""Deploy module - Plan selection and execution.

Architecture:
    plans.py holds the strategy decision and the two plans.
    engine.py runs a plan against a backend and records the revision.
"""

from revdeploy.deploy.engine import PRODUCTION_CONFIGS, DeploymentEngine
from revdeploy.deploy.errors import DeployError, FastForwardError
from revdeploy.deploy.exclude import ExcludeFilter
from revdeploy.deploy.plans import (
    JUNK_FILES,
    DeploymentPlan,
    FullPlan,
    IncrementalPlan,
    read_remote_revision,
    select_plan,
)

__all__ = [
    # engine
    "DeploymentEngine",
    "PRODUCTION_CONFIGS",
    # plans
    "DeploymentPlan",
    "FullPlan",
    "IncrementalPlan",
    "JUNK_FILES",
    "read_remote_revision",
    "select_plan",
    # exclusion
    "ExcludeFilter",
    # errors
    "DeployError",
    "FastForwardError",
]
