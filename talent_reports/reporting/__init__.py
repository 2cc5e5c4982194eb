"""Report computation for the talent assessment platform.

  assignment scores ─→ Feedback Assignment Engine ─┐
  360 rater answers ─→ Qualitative Aggregator ─────┴→ ReportService → report record
  client assignments ─→ Survey Aggregator → survey summaries
"""
