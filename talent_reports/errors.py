"""Error taxonomy for report computation.

Data absence is never an error here: no scores, no eligible feedback and no
raters all produce empty results. Only a missing schema and lookups of
records that must exist are raised; any other store failure propagates
unchanged from the data-access layer.
"""
from typing import Optional


class ReportCoreError(Exception):
    """Base class for report-core errors surfaced to API callers."""

    status_code: int = 500
    error_code: str = "report_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingSchemaError(ReportCoreError):
    """The report storage table has not been provisioned.

    Recoverable only by an operator applying the migration.
    """

    status_code = 503
    error_code = "missing_schema"

    def __init__(self, relation: str, migration: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Reports table not found ({relation}). "
            f"Please apply migration {migration} (alembic upgrade head)."
        )
        self.relation = relation
        self.migration = migration
        self.cause = cause


class AssignmentNotFoundError(ReportCoreError):
    status_code = 404
    error_code = "assignment_not_found"

    def __init__(self, assignment_id: str):
        super().__init__(f"Assignment {assignment_id} not found")
        self.assignment_id = assignment_id


class AssignmentNotCompletedError(ReportCoreError):
    status_code = 400
    error_code = "assignment_not_completed"

    def __init__(self, assignment_id: str):
        super().__init__(
            f"Assignment {assignment_id} must be completed before generating a report"
        )
        self.assignment_id = assignment_id


class ReportNotFoundError(ReportCoreError):
    status_code = 404
    error_code = "report_not_found"

    def __init__(self, assignment_id: str):
        super().__init__(f"No report has been generated for assignment {assignment_id}")
        self.assignment_id = assignment_id


class Invalid360AssignmentError(ReportCoreError):
    """A 360 assignment with no subject to aggregate feedback for."""

    status_code = 400
    error_code = "invalid_360_assignment"

    def __init__(self, assignment_id: str):
        super().__init__(f"Assignment {assignment_id} is invalid for a 360 report: it has no target")
        self.assignment_id = assignment_id
