"""
Structural validation of resource records.
"""

from typing import Sequence

from kubedraw.resources import ResourceRecord


class ValidationError(ValueError):
    """Raised when a resource is missing required fields."""


class Validator:
    """Checks that every resource has a name and a kind."""

    def validate(self, records: Sequence[ResourceRecord]) -> None:
        """
        Validate all records.

        Raises:
            ValidationError: On the first invalid record
        """
        for record in records:
            problem = self.validate_resource(record)
            if problem:
                raise ValidationError(
                    f"validation failed for {record.kind}/{record.name}: {problem}"
                )

    def validate_resource(self, record: ResourceRecord) -> str:
        """Return a description of the problem, or an empty string."""
        if not record.name:
            return "resource name is required"
        if not record.kind:
            return "resource kind is required"
        return ""
