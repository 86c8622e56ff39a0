"""Prometheus metrics endpoint.

Prometheus (the monitoring server) calls this endpoint every N seconds
and records the current value of every metric declared in
app/core/metrics.py.  The response is plain text in the Prometheus
exposition format, NOT JSON.

Example output:
  # HELP submissions_total Assessment submissions handled by the API
  # TYPE submissions_total counter
  submissions_total{outcome="created"} 12.0
  submissions_total{outcome="replayed"} 3.0
  # HELP assessment_sets_generated_total Question sets drawn from the question bank
  # TYPE assessment_sets_generated_total counter
  assessment_sets_generated_total{result="short"} 1.0

Prometheus stores each line as one time-series sample and makes it
queryable with PromQL.  Two queries worth a dashboard panel:

  rate(submissions_total{outcome="replayed"}[5m])
      client retries after a lost response; a spike points at network
      trouble between candidates and the API.

  increase(assessment_sets_generated_total{result="short"}[1h])
      sessions that got fewer questions than the definition asked for;
      the question bank needs more questions in those categories.

SECURITY NOTE: In production, restrict access to /metrics (only the
Prometheus server's address, or a separate internal port).  The
counters reveal request rates and error patterns.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose all Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
