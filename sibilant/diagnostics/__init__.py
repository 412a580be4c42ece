"""Environment diagnostics."""

from sibilant.diagnostics.requirements import RequirementIssue, check_requirements

__all__ = ["RequirementIssue", "check_requirements"]
