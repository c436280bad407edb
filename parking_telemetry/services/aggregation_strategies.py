# parking_telemetry/services/aggregation_strategies.py
"""
Occupancy aggregation strategies. One is selected per deployment
(settings.AGGREGATION_STRATEGY); they give different numbers on the same data.

distribution — Model A, measurement-distribution proxy.
    occupancy % = occupied rows / all rows in the (bucket, location) group.
    "Hours" are that ratio scaled to a nominal 1-hour bucket, and the activity
    rate is rows per distinct sensor. No ordering or window function needed.

duration — Model B, duration reconstruction.
    Each sensor's stream is ordered by timestamp; the gap to the NEXT event is
    attributed to the state held during the gap (the earlier row's state) and to
    the earlier row's bucket. The last row of a stream has no next event: it
    counts toward membership but adds no duration.
"""

from dataclasses import dataclass
from sqlalchemy import Boolean, DateTime, and_, case, distinct, func, select
from parking_telemetry.models.measurement import Measurement
from parking_telemetry.services.query_builder import AnalysisQuery
from parking_telemetry.utils.numbers import percentage, ratio, round_half_up
from parking_telemetry.utils.sql import epoch_seconds


@dataclass
class GroupResult:
    """One (bucket, location) line plus the weights the rollup needs."""
    time_period: int
    location_key: str
    location: dict
    metrics: dict
    total_measurements: int
    occupied_measurements: int
    available_measurements: int
    unique_sensors: int
    occupied_weight: float
    total_weight: float


class AggregationStrategy:
    name = ""
    analysis_type = ""
    notes: list = []

    def build_statement(self, query: AnalysisQuery):
        raise NotImplementedError

    def to_group(self, query: AnalysisQuery, row) -> GroupResult:
        raise NotImplementedError


class DistributionStrategy(AggregationStrategy):
    name = "distribution"
    analysis_type = "measurement_distribution"
    notes = [
        "Occupancy percentage is the proportion of occupied vs available measurements",
        "Hours are estimated from the measurement ratio over a nominal 1-hour bucket",
        "Each selected location appears as separate analysis lines",
    ]

    def build_statement(self, query: AnalysisQuery):
        ts = Measurement.timestamp
        bucket = query.bucket
        stmt = (
            query.base()
            .add_columns(
                bucket.label("time_period"),
                *query.location_columns(),
                func.count().label("total_measurements"),
                func.count().filter(Measurement.state == True).label("occupied_measurements"),   # noqa: E712
                func.count().filter(Measurement.state == False).label("available_measurements"),  # noqa: E712
                func.count(distinct(Measurement.sensor_id)).label("unique_sensors"),
                func.min(ts).label("period_start"),
                func.max(ts).label("period_end"),
            )
            .group_by(*query.group_columns(), bucket)
            .having(func.count() > 0)
            .order_by(bucket, *query.order_columns())
        )
        return query.apply_cap(stmt)

    def to_group(self, query: AnalysisQuery, row) -> GroupResult:
        total = int(row["total_measurements"])
        occupied = int(row["occupied_measurements"] or 0)
        available = int(row["available_measurements"] or 0)
        sensors = int(row["unique_sensors"] or 0)
        metrics = {
            "occupancy_percentage": percentage(occupied, total, empty=0.0),
            "availability_percentage": percentage(available, total, empty=100.0),
            "occupied_hours": ratio(occupied, total),
            "available_hours": ratio(available, total),
            "total_hours": 1.0,
            "state_changes": total,
            "unique_sensors": sensors,
            "activity_rate": ratio(total, sensors),
            "total_measurements": total,
            "period_start": row["period_start"],
            "period_end": row["period_end"],
        }
        return GroupResult(
            time_period=int(row["time_period"]),
            location_key=query.spatial.location_key(row),
            location=query.spatial.describe(row),
            metrics=metrics,
            total_measurements=total,
            occupied_measurements=occupied,
            available_measurements=available,
            unique_sensors=sensors,
            occupied_weight=occupied,
            total_weight=total,
        )


class DurationReconstructionStrategy(AggregationStrategy):
    name = "duration"
    analysis_type = "duration_reconstruction"
    notes = [
        "Occupancy percentage is reconstructed from elapsed time between consecutive events",
        "Each gap is attributed to the state held during it and to the bucket where it starts",
        "The last event of each sensor stream has no following event and adds no duration",
    ]

    def build_statement(self, query: AnalysisQuery):
        window = {"partition_by": Measurement.sensor_id, "order_by": Measurement.timestamp}
        stream = (
            query.base()
            .add_columns(
                Measurement.sensor_id.label("stream_sensor_id"),
                Measurement.state.label("state"),
                Measurement.timestamp.label("ts"),
                func.lead(Measurement.timestamp, type_=DateTime).over(**window).label("next_ts"),
                func.lead(Measurement.state, type_=Boolean).over(**window).label("next_state"),
                query.bucket.label("time_period"),
                *query.location_columns(),
            )
            .subquery("sensor_state_durations")
        )

        gap = epoch_seconds(stream.c.next_ts, stream.c.ts)
        has_next = stream.c.next_ts.isnot(None)
        occupied = and_(stream.c.state == True, has_next)    # noqa: E712
        available = and_(stream.c.state == False, has_next)  # noqa: E712
        arrival = and_(stream.c.state == False, stream.c.next_state == True)  # noqa: E712

        location = [stream.c[name] for name, _ in query.spatial.columns]
        order = [stream.c[name] for name in query.spatial.order_names]
        stmt = (
            select(
                stream.c.time_period,
                *location,
                func.count().label("total_measurements"),
                func.count().filter(stream.c.state == True).label("occupied_measurements"),   # noqa: E712
                func.count().filter(stream.c.state == False).label("available_measurements"),  # noqa: E712
                func.count(distinct(stream.c.stream_sensor_id)).label("unique_sensors"),
                func.sum(case((occupied, gap), else_=0.0)).label("occupied_seconds"),
                func.sum(case((available, gap), else_=0.0)).label("available_seconds"),
                func.count(stream.c.next_ts).label("state_changes"),
                func.count().filter(arrival).label("arrivals"),
                func.min(stream.c.ts).label("period_start"),
                func.max(stream.c.ts).label("period_end"),
            )
            .select_from(stream)
            .group_by(stream.c.time_period, *location)
            .having(func.count() > 0)
            .order_by(stream.c.time_period, *order)
        )
        return query.apply_cap(stmt)

    def to_group(self, query: AnalysisQuery, row) -> GroupResult:
        total = int(row["total_measurements"])
        occupied = int(row["occupied_measurements"] or 0)
        available = int(row["available_measurements"] or 0)
        sensors = int(row["unique_sensors"] or 0)
        occupied_seconds = float(row["occupied_seconds"] or 0)
        available_seconds = float(row["available_seconds"] or 0)
        tracked_seconds = occupied_seconds + available_seconds
        total_hours = tracked_seconds / 3600
        state_changes = int(row["state_changes"] or 0)
        metrics = {
            "occupancy_percentage": percentage(occupied_seconds, tracked_seconds, empty=0.0),
            "availability_percentage": percentage(available_seconds, tracked_seconds, empty=100.0),
            "occupied_hours": round_half_up(occupied_seconds / 3600, 2),
            "available_hours": round_half_up(available_seconds / 3600, 2),
            "total_hours": round_half_up(total_hours, 2),
            "state_changes": state_changes,
            "unique_sensors": sensors,
            "activity_rate": ratio(state_changes, total_hours),
            "total_measurements": total,
            "occupied_seconds": round_half_up(occupied_seconds, 3),
            "available_seconds": round_half_up(available_seconds, 3),
            "normalized_rotation": ratio(int(row["arrivals"] or 0), tracked_seconds, places=4),
            "period_start": row["period_start"],
            "period_end": row["period_end"],
        }
        return GroupResult(
            time_period=int(row["time_period"]),
            location_key=query.spatial.location_key(row),
            location=query.spatial.describe(row),
            metrics=metrics,
            total_measurements=total,
            occupied_measurements=occupied,
            available_measurements=available,
            unique_sensors=sensors,
            occupied_weight=occupied_seconds,
            total_weight=tracked_seconds,
        )


STRATEGIES = {
    DistributionStrategy.name: DistributionStrategy,
    DurationReconstructionStrategy.name: DurationReconstructionStrategy,
}


def get_strategy(name: str) -> AggregationStrategy:
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown aggregation strategy '{name}' (expected one of {sorted(STRATEGIES)})")
