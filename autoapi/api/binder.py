"""Route binding for generated endpoints.

Every registry entry becomes a ``GET`` route whose handler closes over that
entry alone. Rebinding replaces the whole set of generated routes with one
assignment of the router's route list, so requests are matched against
either the old set or the new one.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from autoapi.constants import HTTPMethods, LogIcons
from autoapi.registry.models import EndpointEntry

from .dispatch import QueryDispatcher

logger = logging.getLogger(__name__)


class RouteBinder:
    """Registers generated routes on a FastAPI application.

    Args:
        dispatcher: Dispatcher performing the per-request query
        dependencies: Dependencies applied to every generated route
            (e.g. the API key policy)
        tags: OpenAPI tags for generated routes
    """

    def __init__(
        self,
        dispatcher: QueryDispatcher,
        dependencies: Optional[Sequence[Callable]] = None,
        tags: Optional[List[str]] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.dependencies = list(dependencies or [])
        self.tags = tags or ["generated"]
        self._bound: Tuple[APIRoute, ...] = ()

    @property
    def bound_paths(self) -> Tuple[str, ...]:
        return tuple(route.path for route in self._bound)

    def make_handler(self, entry: EndpointEntry) -> Callable:
        """Create the request handler serving one entry.

        The entry is bound as an argument of this call, never read from a
        loop variable or from the live registry.
        """
        dispatcher = self.dispatcher

        async def handler() -> JSONResponse:
            rows = await dispatcher.dispatch(entry)
            return JSONResponse(status_code=200, content=rows)

        handler.__name__ = f"list_{entry.short_name}"
        handler.__doc__ = (
            f"List every row of {entry.source.kind.value.replace('_', ' ')} "
            f"'{entry.source.raw_identifier}'."
        )
        return handler

    def build_route(self, entry: EndpointEntry) -> APIRoute:
        return APIRoute(
            entry.path,
            self.make_handler(entry),
            methods=[HTTPMethods.GET],
            name=f"autoapi:{entry.short_name}",
            summary=entry.display_name,
            tags=list(self.tags),
            dependencies=[Depends(dep) for dep in self.dependencies],
            response_class=JSONResponse,
        )

    def bind(self, app: FastAPI, entries: Iterable[EndpointEntry]) -> int:
        """Replace the generated routes of ``app`` with routes for ``entries``.

        Args:
            app: Application to bind onto
            entries: Registry entries, in registry order

        Returns:
            Number of generated routes now bound
        """
        new_routes = [self.build_route(entry) for entry in entries]
        previous = {id(route) for route in self._bound}
        kept = [route for route in app.router.routes if id(route) not in previous]
        app.router.routes = kept + new_routes
        self._bound = tuple(new_routes)
        # Regenerate the OpenAPI document on next request
        app.openapi_schema = None

        logger.info(f"{LogIcons.REGISTERED} Bound {len(new_routes)} generated routes")
        for route in new_routes:
            logger.debug(f"{LogIcons.REGISTERED} GET {route.path}")
        return len(new_routes)
