"""Shared type aliases used across plover modules."""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeAlias

# Query-parameter map as supplied by callers and held in router state
QueryParamMap: TypeAlias = Mapping[str, Any]

# Model or identifier bound to a dynamic segment, opaque to the service
Model: TypeAlias = Any

# Route model hook: (path params, query params) -> model, sync or async
ModelHook: TypeAlias = Callable[[dict[str, Any], dict[str, Any]], Any | Awaitable[Any]]
