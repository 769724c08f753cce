from promcheck.providers.prometheus import (
    BackendUnreachableError,
    LikelyBadFilterExpressionError,
    MalformedResponseError,
    PrometheusClient,
    PrometheusClientError,
    UnexpectedStatusError,
)

__all__ = [
    "BackendUnreachableError",
    "LikelyBadFilterExpressionError",
    "MalformedResponseError",
    "PrometheusClient",
    "PrometheusClientError",
    "UnexpectedStatusError",
]
