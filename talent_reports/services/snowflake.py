"""Snowflake database service."""
import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional

import snowflake.connector
from snowflake.connector import SnowflakeConnection
from snowflake.connector.cursor import SnowflakeCursor
from snowflake.connector.errors import ProgrammingError

from talent_reports.config import get_settings
from talent_reports.errors import MissingSchemaError
from talent_reports.models import (
    Assignment,
    DimensionResult,
    DimensionScore,
    FeedbackLibraryEntry,
    FeedbackType,
    FieldType,
    ReportFeedbackAssignment,
    ReportRecord,
    TextAnswer,
)

logger = logging.getLogger(__name__)

REPORT_TABLE = "report_data"

# Snowflake: errno 2003 / SQLSTATE 42S02 ("Object does not exist or not authorized")
# Postgres-compatible stores: SQLSTATE 42P01 ("undefined_table")
_UNDEFINED_RELATION_ERRNOS = {2003}
_UNDEFINED_RELATION_SQLSTATES = {"42S02", "42P01"}

_ASSIGNMENT_COLUMNS = """
    a.id, a.user_id, a.assessment_id, a.survey_id, a.target_id,
    a.completed, a.completed_at, a.created_at,
    s.title AS assessment_title, s.is_360
"""


def is_undefined_relation(exc: BaseException) -> bool:
    """True when a database error means the queried table does not exist."""
    if getattr(exc, "errno", None) in _UNDEFINED_RELATION_ERRNOS:
        return True
    if getattr(exc, "sqlstate", None) in _UNDEFINED_RELATION_SQLSTATES:
        return True
    return "does not exist" in str(exc).lower()


def _row_to_assignment(row: dict[str, Any]) -> Assignment:
    return Assignment(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        assessment_id=str(row["assessment_id"]),
        survey_id=str(row["survey_id"]) if row.get("survey_id") else None,
        target_id=str(row["target_id"]) if row.get("target_id") else None,
        completed=bool(row.get("completed")),
        completed_at=row.get("completed_at"),
        created_at=row["created_at"],
        assessment_title=row.get("assessment_title"),
        is_360=bool(row.get("is_360")),
    )


def _variant(value: Any) -> list:
    """VARIANT columns come back as JSON text; NULL reads as an empty list."""
    if not value:
        return []
    if isinstance(value, str):
        return json.loads(value)
    return value


def _row_to_feedback_entry(row: dict[str, Any]) -> FeedbackLibraryEntry:
    return FeedbackLibraryEntry(
        id=str(row["id"]),
        assessment_id=str(row["assessment_id"]),
        dimension_id=str(row["dimension_id"]),
        type=FeedbackType(row["type"]),
        feedback=row["feedback"],
        min_score=float(row["min_score"]) if row.get("min_score") is not None else None,
        max_score=float(row["max_score"]) if row.get("max_score") is not None else None,
    )


class SnowflakeService:
    """Service for Snowflake database operations."""

    def __init__(self):
        self.settings = get_settings()
        self._connection: Optional[SnowflakeConnection] = None

    def _get_connection_params(self) -> dict[str, Any]:
        """Get connection parameters."""
        return {
            "account": self.settings.snowflake_account,
            "user": self.settings.snowflake_user,
            "password": self.settings.snowflake_password,
            "database": self.settings.snowflake_database,
            "schema": self.settings.snowflake_schema,
            "warehouse": self.settings.snowflake_warehouse,
        }

    def connect(self) -> SnowflakeConnection:
        """Establish connection to Snowflake."""
        if self._connection is None or self._connection.is_closed():
            self._connection = snowflake.connector.connect(
                **self._get_connection_params()
            )
        return self._connection

    def disconnect(self) -> None:
        """Close the Snowflake connection."""
        if self._connection and not self._connection.is_closed():
            self._connection.close()
            self._connection = None

    @contextmanager
    def cursor(self) -> Generator[SnowflakeCursor, None, None]:
        """Context manager for database cursor."""
        conn = self.connect()
        cur = conn.cursor()
        try:
            yield cur
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            cur.close()

    async def health_check(self) -> tuple[bool, Optional[str]]:
        """Check if Snowflake connection is healthy."""
        try:
            with self.cursor() as cur:
                cur.execute("SELECT 1")
                result = cur.fetchone()
                return result is not None, None
        except Exception as e:
            return False, str(e)

    def execute_query(
        self,
        query: str,
        params: Optional[tuple] = None
    ) -> list[dict[str, Any]]:
        """Execute a query and return results as list of dicts."""
        with self.cursor() as cur:
            cur.execute(query, params)
            columns = [desc[0].lower() for desc in cur.description] if cur.description else []
            rows = cur.fetchall()
            return [dict(zip(columns, row)) for row in rows]

    def execute_one(
        self,
        query: str,
        params: Optional[tuple] = None
    ) -> Optional[dict[str, Any]]:
        """Execute a query and return single result."""
        results = self.execute_query(query, params)
        return results[0] if results else None

    def execute_write(
        self,
        query: str,
        params: Optional[tuple] = None
    ) -> int:
        """Execute an INSERT/UPDATE/DELETE and return affected rows."""
        with self.cursor() as cur:
            cur.execute(query, params)
            return cur.rowcount

    # ================================================================
    # Assignment store
    # ================================================================

    def get_assignment(self, assignment_id: str) -> Optional[Assignment]:
        """Get one assignment with its assessment's title and 360 flag."""
        row = self.execute_one(
            f"""
            SELECT {_ASSIGNMENT_COLUMNS}
            FROM assignments a
            LEFT JOIN assessments s ON s.id = a.assessment_id
            WHERE a.id = %s
            """,
            (assignment_id,),
        )
        return _row_to_assignment(row) if row else None

    def get_client_survey_assignments(
        self,
        client_id: str,
        assessment_id: Optional[str] = None,
    ) -> List[Assignment]:
        """Assignments carrying a survey id for every user of a client."""
        query = f"""
            SELECT {_ASSIGNMENT_COLUMNS}
            FROM assignments a
            JOIN profiles p ON p.id = a.user_id
            LEFT JOIN assessments s ON s.id = a.assessment_id
            WHERE p.client_id = %s AND a.survey_id IS NOT NULL
        """
        params: list[Any] = [client_id]
        if assessment_id:
            query += " AND a.assessment_id = %s"
            params.append(assessment_id)
        query += " ORDER BY a.created_at"

        rows = self.execute_query(query, tuple(params))
        return [_row_to_assignment(r) for r in rows]

    def get_survey_assignments(self, client_id: str, survey_id: str) -> List[Assignment]:
        """All of a client's assignments in one survey, oldest first."""
        rows = self.execute_query(
            f"""
            SELECT {_ASSIGNMENT_COLUMNS}
            FROM assignments a
            JOIN profiles p ON p.id = a.user_id
            LEFT JOIN assessments s ON s.id = a.assessment_id
            WHERE p.client_id = %s AND a.survey_id = %s
            ORDER BY a.created_at
            """,
            (client_id, survey_id),
        )
        return [_row_to_assignment(r) for r in rows]

    def get_completed_assignments_for_target(self, target_id: str) -> List[Assignment]:
        """Completed rater assignments whose subject is ``target_id``."""
        rows = self.execute_query(
            f"""
            SELECT {_ASSIGNMENT_COLUMNS}
            FROM assignments a
            LEFT JOIN assessments s ON s.id = a.assessment_id
            WHERE a.target_id = %s AND a.completed = TRUE
            ORDER BY a.completed_at, a.id
            """,
            (target_id,),
        )
        return [_row_to_assignment(r) for r in rows]

    # ================================================================
    # Score store
    # ================================================================

    def get_dimension_scores(self, assignment_id: str) -> List[DimensionScore]:
        """Per-dimension average scores for an assignment (empty if none)."""
        rows = self.execute_query(
            """
            SELECT assignment_id, dimension_id, avg_score
            FROM assignment_dimension_scores
            WHERE assignment_id = %s
            """,
            (assignment_id,),
        )
        return [
            DimensionScore(
                assignment_id=str(r["assignment_id"]),
                dimension_id=str(r["dimension_id"]) if r.get("dimension_id") else None,
                score=float(r["avg_score"]),
            )
            for r in rows
            if r.get("avg_score") is not None
        ]

    def get_scores_for_assignments(
        self, assignment_ids: List[str]
    ) -> Dict[str, List[DimensionScore]]:
        """Dimension scores for several assignments, keyed by assignment id."""
        if not assignment_ids:
            return {}
        placeholders = ", ".join(["%s"] * len(assignment_ids))
        rows = self.execute_query(
            f"""
            SELECT assignment_id, dimension_id, avg_score
            FROM assignment_dimension_scores
            WHERE assignment_id IN ({placeholders}) AND avg_score IS NOT NULL
            """,
            tuple(assignment_ids),
        )
        by_assignment: Dict[str, List[DimensionScore]] = {}
        for r in rows:
            assignment_id = str(r["assignment_id"])
            by_assignment.setdefault(assignment_id, []).append(DimensionScore(
                assignment_id=assignment_id,
                dimension_id=str(r["dimension_id"]) if r.get("dimension_id") else None,
                score=float(r["avg_score"]),
            ))
        return by_assignment

    def get_group_scores(self, assignment: Assignment) -> Dict[str, List[DimensionScore]]:
        """Scores of the assignment's norm group for the same assessment.

        The norm group is the group rated in a 360 (``groups.target_id``),
        otherwise the respondent's first group. No group means no norms.
        """
        if assignment.is_360 and assignment.target_id:
            group = self.execute_one(
                "SELECT id FROM groups WHERE target_id = %s LIMIT 1",
                (assignment.target_id,),
            )
        else:
            group = self.execute_one(
                """
                SELECT group_id AS id FROM group_members
                WHERE profile_id = %s ORDER BY created_at LIMIT 1
                """,
                (assignment.user_id,),
            )
        if not group:
            return {}

        rows = self.execute_query(
            """
            SELECT a.id
            FROM assignments a
            JOIN group_members gm ON gm.profile_id = a.user_id
            WHERE gm.group_id = %s AND a.assessment_id = %s AND a.completed = TRUE
            """,
            (group["id"], assignment.assessment_id),
        )
        return self.get_scores_for_assignments([str(r["id"]) for r in rows])

    def get_benchmarks(self, dimension_ids: List[str]) -> Dict[str, float]:
        """Industry benchmark per dimension, where one is configured."""
        if not dimension_ids:
            return {}
        placeholders = ", ".join(["%s"] * len(dimension_ids))
        rows = self.execute_query(
            f"SELECT dimension_id, value FROM benchmarks WHERE dimension_id IN ({placeholders})",
            tuple(dimension_ids),
        )
        return {
            str(r["dimension_id"]): float(r["value"])
            for r in rows
            if r.get("value") is not None
        }

    # ================================================================
    # Feedback library store
    # ================================================================

    def get_feedback_entries(
        self,
        assessment_id: str,
        dimension_id: str,
        feedback_type: FeedbackType,
    ) -> List[FeedbackLibraryEntry]:
        """Library entries for (assessment, dimension, type), oldest first."""
        rows = self.execute_query(
            """
            SELECT id, assessment_id, dimension_id, type, feedback, min_score, max_score
            FROM feedback_library
            WHERE assessment_id = %s AND dimension_id = %s AND type = %s
            ORDER BY created_at, id
            """,
            (assessment_id, dimension_id, feedback_type.value),
        )
        return [_row_to_feedback_entry(r) for r in rows]

    def get_overall_feedback(
        self, assessment_id: str, dimension_id: str
    ) -> Optional[FeedbackLibraryEntry]:
        """The overall entry for a dimension; the oldest wins if several exist."""
        entries = self.get_feedback_entries(assessment_id, dimension_id, FeedbackType.OVERALL)
        if len(entries) > 1:
            logger.warning(
                f"{len(entries)} overall feedback entries for assessment {assessment_id} "
                f"dimension {dimension_id}; using {entries[0].id}"
            )
        return entries[0] if entries else None

    def get_specific_feedback(
        self, assessment_id: str, dimension_id: str
    ) -> List[FeedbackLibraryEntry]:
        """All specific entries for a dimension."""
        return self.get_feedback_entries(assessment_id, dimension_id, FeedbackType.SPECIFIC)

    # ================================================================
    # Answer store
    # ================================================================

    def get_text_answers(self, assignment_ids: List[str]) -> List[TextAnswer]:
        """Text-input answers for a set of assignments, in answer order."""
        if not assignment_ids:
            return []
        placeholders = ", ".join(["%s"] * len(assignment_ids))
        rows = self.execute_query(
            f"""
            SELECT ans.assignment_id, ans.value, f.type AS field_type, f.dimension_id
            FROM answers ans
            JOIN fields f ON f.id = ans.field_id
            WHERE ans.assignment_id IN ({placeholders}) AND f.type = %s
            ORDER BY ans.created_at, ans.id
            """,
            (*assignment_ids, FieldType.TEXT_INPUT.value),
        )
        return [
            TextAnswer(
                assignment_id=str(r["assignment_id"]),
                value=r["value"] or "",
                field_type=FieldType(r["field_type"]),
                dimension_id=str(r["dimension_id"]) if r.get("dimension_id") else None,
            )
            for r in rows
        ]

    # ================================================================
    # Report store
    # ================================================================

    def _missing_schema(self, exc: BaseException) -> MissingSchemaError:
        return MissingSchemaError(
            relation=REPORT_TABLE,
            migration=self.settings.report_migration_name,
            cause=exc,
        )

    def ensure_report_table(self) -> None:
        """Probe the report table; raise MissingSchemaError if it is not provisioned."""
        try:
            self.execute_query(f"SELECT id FROM {REPORT_TABLE} LIMIT 1")
        except ProgrammingError as e:
            if is_undefined_relation(e):
                logger.error(f"Report table missing: {e}")
                raise self._missing_schema(e) from e
            raise

    def get_report(self, assignment_id: str) -> Optional[ReportRecord]:
        """Persisted report for an assignment, if any."""
        try:
            row = self.execute_one(
                f"""
                SELECT assignment_id, overall_score, dimension_scores, feedback_assigned,
                       calculated_at, updated_at
                FROM {REPORT_TABLE} WHERE assignment_id = %s
                """,
                (assignment_id,),
            )
        except ProgrammingError as e:
            if is_undefined_relation(e):
                raise self._missing_schema(e) from e
            raise
        if not row:
            return None

        return ReportRecord(
            assignment_id=str(row["assignment_id"]),
            overall_score=row.get("overall_score"),
            dimension_scores=[
                DimensionResult.model_validate(p) for p in _variant(row.get("dimension_scores"))
            ],
            feedback_assigned=[
                ReportFeedbackAssignment.model_validate(p)
                for p in _variant(row.get("feedback_assigned"))
            ],
            calculated_at=row.get("calculated_at"),
            updated_at=row.get("updated_at"),
        )

    def save_report(self, record: ReportRecord) -> ReportRecord:
        """Upsert a report row in one MERGE, keyed on assignment_id."""
        now = datetime.now(timezone.utc)
        feedback_json = json.dumps([f.model_dump(mode="json") for f in record.feedback_assigned])
        scores_json = json.dumps([d.model_dump(mode="json") for d in record.dimension_scores])
        try:
            self.execute_write(
                f"""
                MERGE INTO {REPORT_TABLE} AS target
                USING (
                    SELECT %s AS assignment_id,
                           %s::FLOAT AS overall_score,
                           PARSE_JSON(%s) AS dimension_scores,
                           PARSE_JSON(%s) AS feedback_assigned,
                           %s::TIMESTAMP_NTZ AS stamped_at
                ) AS source
                ON target.assignment_id = source.assignment_id
                WHEN MATCHED THEN UPDATE SET
                    overall_score = source.overall_score,
                    dimension_scores = source.dimension_scores,
                    feedback_assigned = source.feedback_assigned,
                    calculated_at = source.stamped_at,
                    updated_at = source.stamped_at
                WHEN NOT MATCHED THEN
                    INSERT (id, assignment_id, overall_score, dimension_scores,
                            feedback_assigned, calculated_at, updated_at)
                    VALUES (uuid_string(), source.assignment_id, source.overall_score,
                            source.dimension_scores, source.feedback_assigned,
                            source.stamped_at, source.stamped_at)
                """,
                (record.assignment_id, record.overall_score, scores_json, feedback_json, now),
            )
        except ProgrammingError as e:
            if is_undefined_relation(e):
                raise self._missing_schema(e) from e
            raise

        logger.info(
            f"Saved report for assignment {record.assignment_id}: "
            f"{len(record.dimension_scores)} dimensions, {len(record.feedback_assigned)} feedback entries"
        )
        return record.model_copy(update={"calculated_at": now, "updated_at": now})


# Singleton instance
_snowflake_service: Optional[SnowflakeService] = None


def get_snowflake_service() -> SnowflakeService:
    """Get or create Snowflake service singleton."""
    global _snowflake_service
    if _snowflake_service is None:
        _snowflake_service = SnowflakeService()
    return _snowflake_service
