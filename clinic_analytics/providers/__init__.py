from .base import AggregateSource, Collection
from .in_memory import InMemorySource
from .local_time import LocalTimeSource
from .sqlalchemy_source import SqlAlchemySource

__all__ = [
    "AggregateSource",
    "Collection",
    "InMemorySource",
    "LocalTimeSource",
    "SqlAlchemySource",
]
