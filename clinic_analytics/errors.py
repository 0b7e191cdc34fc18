from typing import Optional


class AnalyticsError(Exception):
    pass


class InvalidParameterError(AnalyticsError):
    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        self.message = message
        super().__init__(message)


class DataSourceError(AnalyticsError):
    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        self.message = message
        super().__init__(message)


def parse_bounded_int(
    name: str,
    raw: Optional[str],
    minimum: int,
    maximum: Optional[int] = None,
    default: Optional[int] = None,
) -> int:
    """Parse a query-string integer and reject it when outside [minimum, maximum].

    Missing values fall back to ``default``; a missing value without a default
    is itself an error. Values are never clamped.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if default is None:
            raise InvalidParameterError(name, f"Parameter {name} is required")
        return default

    try:
        value = int(str(raw).strip())
    except ValueError:
        raise InvalidParameterError(name, _range_message(name, minimum, maximum))

    if value < minimum or (maximum is not None and value > maximum):
        raise InvalidParameterError(name, _range_message(name, minimum, maximum))
    return value


def ensure_in_range(name: str, value: int, minimum: int, maximum: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(name, _range_message(name, minimum, maximum))
    if value < minimum or (maximum is not None and value > maximum):
        raise InvalidParameterError(name, _range_message(name, minimum, maximum))
    return value


def _range_message(name: str, minimum: int, maximum: Optional[int]) -> str:
    if maximum is None:
        return f"Parameter {name} must be an integer greater than or equal to {minimum}"
    return f"Parameter {name} must be an integer between {minimum} and {maximum}"
