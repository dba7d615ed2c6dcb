"""Vertretungs-Workflow (Zustandsautomat über SubstitutionRequest)."""

from .substitution import SubstitutionWorkflow

__all__ = ["SubstitutionWorkflow"]
