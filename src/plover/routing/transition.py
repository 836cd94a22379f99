"""Transition — handle for an in-flight or settled navigation.

A transition is created synchronously by the router and settles when
awaited::

    transition = service.transition_to("blog.post", 7)
    state = await transition

Settling runs the route model hooks, then commits the new state unless
the transition was aborted in the meantime (for example because a newer
transition superseded it). Awaiting a transition more than once, or from
several tasks, yields the same outcome.
"""

import itertools
import logging
from collections.abc import Awaitable, Callable, Generator
from typing import Any, Self

import anyio

from plover.errors import TransitionAborted
from plover.routing.protocol import RouterState

logger = logging.getLogger("plover.router")

# URL update strategies: push a new history entry, replace the current
# one, or leave the URL alone
URL_METHODS: frozenset[str | None] = frozenset({"push", "replace", None})

_sequence = itertools.count(1)


class Transition:
    """A navigation from the current state to a target route.

    Attributes:
        target_name: Leaf route the transition lands on (None for failures).
        params: Dynamic segment values, as strings, keyed by param name.
        query_params: Prepared query parameters for the target.
        supplied_query_params: Keys the caller passed explicitly.
        models: Model objects supplied by the caller, keyed by route name.
        url: The literal URL for URL-based transitions.
        url_method: ``"push"``, ``"replace"`` or None.
        keep_default_query_param_values: Keep explicitly supplied
            default-valued query params in the committed URL.
    """

    __slots__ = (
        "_aborted",
        "_done",
        "_error",
        "_result",
        "_settle",
        "_started",
        "id",
        "keep_default_query_param_values",
        "models",
        "params",
        "query_params",
        "supplied_query_params",
        "target_name",
        "url",
        "url_method",
    )

    def __init__(
        self,
        settle: Callable[["Transition"], Awaitable[RouterState]],
        *,
        target_name: str | None = None,
        params: dict[str, str] | None = None,
        query_params: dict[str, Any] | None = None,
        supplied_query_params: frozenset[str] = frozenset(),
        models: dict[str, Any] | None = None,
        url: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self.id = next(_sequence)
        self.target_name = target_name
        self.params = params or {}
        self.query_params = query_params or {}
        self.supplied_query_params = supplied_query_params
        self.models = models or {}
        self.url = url
        self.url_method: str | None = "push"
        self.keep_default_query_param_values = False
        self._settle = settle
        self._error = error
        self._aborted = False
        self._started = False
        self._done: anyio.Event | None = None
        self._result: RouterState | None = None

    def __repr__(self) -> str:
        target = self.target_name or self.url
        return f"<Transition #{self.id} to {target!r} {self.status}>"

    # -- Inspection --

    @property
    def status(self) -> str:
        """``"pending"``, ``"settled"``, ``"aborted"`` or ``"failed"``."""
        if self._aborted:
            return "aborted"
        if self._error is not None:
            return "failed"
        if self._result is not None:
            return "settled"
        return "pending"

    @property
    def is_aborted(self) -> bool:
        return self._aborted

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    @property
    def error(self) -> Exception | None:
        return self._error

    # -- Mutation --

    def method(self, kind: str | None) -> Self:
        """Set how the URL is updated on commit. Chainable."""
        if kind not in URL_METHODS:
            msg = f"Unknown URL method {kind!r}; expected 'push', 'replace' or None."
            raise ValueError(msg)
        self.url_method = kind
        return self

    def abort(self) -> Self:
        """Abort the transition if it has not settled yet. Chainable."""
        if self.is_pending:
            self._aborted = True
            self._error = TransitionAborted(f"Transition to {self.target_name or self.url!r} aborted")
            logger.debug("Aborted %r", self)
        return self

    # -- Settling --

    async def settle(self) -> RouterState:
        """Drive the transition to completion and return the committed state.

        Raises the transition's error if it failed or was aborted. Errors
        raised by model hooks propagate unchanged. Cancelling the task that
        drives settlement aborts the transition, so later awaits raise
        :class:`TransitionAborted`.
        """
        if self._started:
            assert self._done is not None
            await self._done.wait()
        elif self._error is None:
            self._started = True
            self._done = anyio.Event()
            try:
                self._result = await self._settle(self)
            except Exception as exc:
                self._error = exc
            except BaseException:
                self.abort()
                raise
            finally:
                self._done.set()

        if self._error is not None:
            raise self._error
        assert self._result is not None
        return self._result

    def __await__(self) -> Generator[Any, None, RouterState]:
        return self.settle().__await__()
