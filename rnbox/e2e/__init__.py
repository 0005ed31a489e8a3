"""Local end-to-end test flows for RNTester and a freshly created project."""

from .options import E2EOptions, Platform, Target
from .runner import run_e2e_local


__all__ = ["E2EOptions", "Platform", "Target", "run_e2e_local"]
