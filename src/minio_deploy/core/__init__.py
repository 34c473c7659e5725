"""Core subpackage.

This package contains the Deployment and Verification facades, the
project directory state they share, and the pipeline driver that runs
their stages in order.
"""

from minio_deploy.core.deployment import Deployment, certificate_steps, deployment_steps
from minio_deploy.core.pipeline import Step, run_pipeline
from minio_deploy.core.project import Project
from minio_deploy.core.verification import Verification, verification_steps

__all__ = [
    "Deployment",
    "Project",
    "Step",
    "Verification",
    "certificate_steps",
    "deployment_steps",
    "run_pipeline",
    "verification_steps",
]
