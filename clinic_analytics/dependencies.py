import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import sessionmaker

from .config import get_settings
from .database import get_session_factory
from .errors import DataSourceError, InvalidParameterError
from .providers.base import AggregateSource
from .providers.local_time import LocalTimeSource
from .providers.sqlalchemy_source import SqlAlchemySource
from .services.clock import Clock, SystemClock
from .services.dashboard import DashboardService
from .services.reports import MonthlyReportService
from .services.result_cache import ResultCache

logger = logging.getLogger(__name__)

settings = get_settings()

dashboard_result_cache = ResultCache(
    ttl_seconds=settings.dashboard_cache_ttl_seconds,
    max_entries=settings.dashboard_cache_max_entries,
)


def get_result_cache() -> ResultCache:
    return dashboard_result_cache


def get_clock() -> Clock:
    return SystemClock(settings.reporting_timezone)


def get_aggregate_source(session_factory: sessionmaker = Depends(get_session_factory)) -> AggregateSource:
    return LocalTimeSource(SqlAlchemySource(session_factory), settings.reporting_timezone)


def get_dashboard_service(
    source: AggregateSource = Depends(get_aggregate_source),
    cache: ResultCache = Depends(get_result_cache),
    clock: Clock = Depends(get_clock),
) -> DashboardService:
    return DashboardService(source, cache=cache, clock=clock, max_workers=settings.aggregation_max_workers)


def get_report_service(source: AggregateSource = Depends(get_aggregate_source)) -> MonthlyReportService:
    return MonthlyReportService(source)


@contextmanager
def analytics_errors() -> Iterator[None]:
    """Translate engine errors into HTTP responses at the route boundary."""
    try:
        yield
    except InvalidParameterError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except DataSourceError as e:
        logger.error(f"Analytics data source failure: operation={e.operation}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analytics data source unavailable",
        )
