# parking_telemetry/services/occupancy_aggregator.py
"""
Occupancy analytics engine.

  AnalysisRequest (already validated)
      → AnalysisQuery (permission join + temporal/spatial predicates)
      → strategy statement, executed once on a session taken from the injected factory
      → GroupResult lines → rollup → AnalysisResponse

The session is opened per call and closed in a finally block on every exit path.
Queries are read-only; no explicit transaction or lock is taken.
"""

import time
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from parking_telemetry.config import settings
from parking_telemetry.database import SessionLocal
from parking_telemetry.errors import QueryTimeoutError, StoreExecutionError
from parking_telemetry.schemas.analysis import AnalysisResponse
from parking_telemetry.services.aggregation_strategies import AggregationStrategy, get_strategy
from parking_telemetry.services.analysis_request import AnalysisRequest
from parking_telemetry.services.query_builder import AnalysisQuery
from parking_telemetry.services.response_assembler import assemble_response
from parking_telemetry.services.rollup import compute_overall_statistics
from parking_telemetry.utils.logger import get_logger

logger = get_logger(__name__)

PG_QUERY_CANCELED = "57014"


class OccupancyAggregator:
    def __init__(self, session_factory, strategy: AggregationStrategy, query_timeout_ms: int = 0):
        self.session_factory = session_factory
        self.strategy = strategy
        self.query_timeout_ms = query_timeout_ms

    def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        query = AnalysisQuery(request.user_id, request.temporal, request.spatial)
        stmt = self.strategy.build_statement(query)

        started = time.perf_counter()
        rows = self._execute(stmt, request)
        execution_ms = round((time.perf_counter() - started) * 1000, 2)

        groups = [self.strategy.to_group(query, row) for row in rows]
        overall = compute_overall_statistics(groups, request.spatial.scope.value, execution_ms)
        logger.info(
            f"[ANALYSIS] user={request.user_id} location={request.spatial.scope.value} "
            f"time={request.temporal.scope.value} model={self.strategy.name} "
            f"lines={len(groups)} locations={overall['total_locations_analyzed']} ({execution_ms}ms)"
        )
        if request.spatial.row_cap is not None and len(groups) >= request.spatial.row_cap:
            logger.warning(
                f"[ANALYSIS] {request.spatial.scope.value} result capped at {request.spatial.row_cap} "
                f"lines — supply filters for the full set"
            )
        return assemble_response(request, self.strategy, groups, overall, execution_ms)

    def _execute(self, stmt, request: AnalysisRequest) -> list:
        session = self.session_factory()
        try:
            self._apply_timeout(session)
            return session.execute(stmt).mappings().all()
        except OperationalError as e:
            self._log_failure(e, stmt, request)
            if getattr(e.orig, "pgcode", None) == PG_QUERY_CANCELED:
                raise QueryTimeoutError("Analysis query timed out, retry with a narrower scope",
                                        detail=str(e.orig)) from e
            raise StoreExecutionError("Analysis operation failed", detail=str(e.orig)) from e
        except SQLAlchemyError as e:
            self._log_failure(e, stmt, request)
            raise StoreExecutionError("Analysis operation failed", detail=str(e)) from e
        finally:
            session.close()

    def _apply_timeout(self, session):
        if not self.query_timeout_ms or session.get_bind().dialect.name != "postgresql":
            return
        # Transaction-local; dropped when the session closes
        session.execute(select(func.set_config("statement_timeout", str(self.query_timeout_ms), True)))

    def _log_failure(self, exc: Exception, stmt, request: AnalysisRequest):
        try:
            param_count = len(stmt.compile().params)
        except SQLAlchemyError:
            param_count = -1
        logger.error(
            f"[ANALYSIS] store failure {type(exc).__name__} "
            f"code={getattr(getattr(exc, 'orig', None), 'pgcode', None)} "
            f"user={request.user_id} location={request.spatial.scope.value} "
            f"time={request.temporal.scope.value} params={param_count}"
        )


def get_aggregator() -> OccupancyAggregator:
    """FastAPI dependency — aggregator bound to the app's session factory and configured model."""
    return OccupancyAggregator(
        SessionLocal,
        get_strategy(settings.AGGREGATION_STRATEGY),
        settings.ANALYSIS_QUERY_TIMEOUT_MS,
    )
