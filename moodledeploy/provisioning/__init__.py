"""Provisioning procedure for moodledeploy."""

from .procedure import MoodleProvisioner
from .steps import Step, StepExecutor, StepResult

__all__ = ["MoodleProvisioner", "Step", "StepExecutor", "StepResult"]
