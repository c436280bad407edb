# parking_telemetry/utils/sql.py
"""
Dialect-specific SQL constructs shared by the analytics queries.
"""

from sqlalchemy import Float
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement


class epoch_seconds(FunctionElement):
    """Elapsed seconds between two timestamps: epoch_seconds(later, earlier)."""
    type = Float()
    name = "epoch_seconds"
    inherit_cache = True


@compiles(epoch_seconds)
def _epoch_seconds_default(element, compiler, **kw):
    later, earlier = list(element.clauses)
    return "EXTRACT(EPOCH FROM (%s - %s))" % (
        compiler.process(later, **kw), compiler.process(earlier, **kw))


@compiles(epoch_seconds, "sqlite")
def _epoch_seconds_sqlite(element, compiler, **kw):
    later, earlier = list(element.clauses)
    return "((julianday(%s) - julianday(%s)) * 86400.0)" % (
        compiler.process(later, **kw), compiler.process(earlier, **kw))
