"""scripts/generate_reports.py

Batch report generation for one survey – reads assignments from Snowflake
and writes scored reports to the report_data table.

Steps per completed assignment
------------------------------
1. Library-based assessment → FeedbackAssignmentEngine over dimension scores
   360 assessment           → aggregate_360_feedback over raters' text
2. Scores vs benchmark and group norm → group_norms
3. Upsert report_data, drop the cached report → ReportService

Existing library feedback is kept unless --force is given. A failure on
one assignment is logged and the batch moves on; a missing report table
stops the run.

Usage
-----
    python scripts/generate_reports.py --client <client_id> --survey <survey_id> [--force]
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from typing import Optional

import structlog

from talent_reports.errors import MissingSchemaError
from talent_reports.reporting.report_service import ReportService
from talent_reports.reporting.survey_aggregator import aggregate_surveys
from talent_reports.services.redis_cache import RedisCache, get_redis_cache
from talent_reports.services.snowflake import SnowflakeService

# ── logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)
log = structlog.get_logger("generate_reports")


def run_batch(
    client_id: str,
    survey_id: str,
    force: bool = False,
    db: Optional[SnowflakeService] = None,
    cache: Optional[RedisCache] = None,
) -> list[dict]:
    """Generate reports for every completed assignment of a survey.

    Args:
        client_id: Client whose users' assignments are processed.
        survey_id: Survey to process.
        force: Redraw library feedback even when already assigned.
        db: Store to use (a new SnowflakeService by default).
        cache: Report cache to invalidate (the shared Redis cache by default).

    Returns:
        One result dict per completed assignment.
    """
    own_db = db is None
    db = db or SnowflakeService()
    service = ReportService(db, cache=cache or get_redis_cache())

    assignments = db.get_survey_assignments(client_id, survey_id)
    for summary in aggregate_surveys(assignments):
        log.info(
            "survey_loaded",
            survey_id=summary.survey_id,
            assessment=summary.assessment_title or summary.assessment_id,
            completed=summary.completed_assignments,
            total=summary.total_assignments,
        )

    results = []
    try:
        for assignment in assignments:
            if not assignment.completed:
                continue
            try:
                outcome = service.generate(assignment.id, force=force)
            except MissingSchemaError:
                raise
            except Exception as exc:
                log.warning("report_failed", assignment_id=assignment.id, error=str(exc))
                results.append({
                    "assignment_id": assignment.id,
                    "status":        "failed",
                    "error":         str(exc),
                })
                continue

            results.append({
                "assignment_id": assignment.id,
                "status":        "generated" if outcome.regenerated else "reused",
                "feedback":      outcome.count,
                "overall_score": outcome.report.overall_score,
            })
    finally:
        if own_db:
            db.disconnect()
    return results


def _print_table(results: list[dict]) -> None:
    """Pretty-print the batch results."""
    header = f"{'Assignment':<36}  {'Status':<9}  {'Feedback':>8}  {'Overall':>7}"
    print("\n" + "=" * len(header))
    print(header)
    print("=" * len(header))
    for r in results:
        overall = r.get("overall_score")
        overall_str = f"{overall:7.1f}" if overall is not None else f"{'-':>7}"
        print(f"{r['assignment_id']:<36}  {r['status']:<9}  {r.get('feedback', 0):>8}  {overall_str}")
    print("=" * len(header))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate report feedback for a survey")
    parser.add_argument("--client", required=True, help="Client id")
    parser.add_argument("--survey", required=True, help="Survey id")
    parser.add_argument("--force", action="store_true", help="Redraw existing library feedback")
    args = parser.parse_args()

    log.info("batch_started", client_id=args.client, survey_id=args.survey, force=args.force)
    try:
        results = run_batch(args.client, args.survey, force=args.force)
    except MissingSchemaError as exc:
        log.error("batch_aborted", reason=exc.message)
        sys.exit(2)
    _print_table(results)

    out_path = pathlib.Path("data") / f"reports_{args.survey}.json"
    out_path.parent.mkdir(exist_ok=True)
    with open(out_path, "w") as f:
        json.dump(results, f, indent=2, default=str)
    log.info("results_written", path=str(out_path))
