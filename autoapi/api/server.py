"""Server class for autoapi.

This module provides a high-level interface that wires a host environment
into a FastAPI application: discovery runs at startup, every discovered
source gets a read-only GET endpoint, and ``rediscover()`` brings the
endpoints in line with the host again.
"""

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Tuple, Union

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from autoapi.constants import APIRoutes, LogIcons
from autoapi.discovery.enumerator import SourceEnumerator
from autoapi.exceptions import AutoAPIException, HostError
from autoapi.host.base import HostEnvironment
from autoapi.host.factory import get_host
from autoapi.registry.builder import RegistryBuilder
from autoapi.registry.models import EndpointEntry
from autoapi.registry.store import EndpointRegistry

from .auth import build_auth_dependency
from .binder import RouteBinder
from .components.error_handler import APIErrorHandler
from .components.logging_config import LOG_FORMAT, LoggingConfigurator
from .config import ServerConfig
from .dispatch import QueryDispatcher


class Server:
    """FastAPI server exposing a host's data sources as read-only endpoints.

    Example:
        ```python
        from autoapi import SQLiteHost, Server

        host = SQLiteHost(db_path="./site.db", table_prefix="wp_")
        host.register_record_type("article")

        server = Server(host=host, title="Site API")

        if __name__ == "__main__":
            server.run()
        ```

        Host built from configuration:
        ```python
        server = Server(host_type="sqlite", sqlite_path="./site.db")
        ```
    """

    def __init__(
        self,
        config: Optional[Union[ServerConfig, Dict[str, Any]]] = None,
        host: Optional[HostEnvironment] = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the Server.

        Args:
            config: Server configuration as ServerConfig or dict
            host: Host environment; built from configuration when omitted
            **kwargs: Additional configuration parameters
        """
        if config is None:
            config_dict: Dict[str, Any] = {}
        elif isinstance(config, ServerConfig):
            config_dict = config.model_dump()
        else:
            config_dict = dict(config)
        config_dict.update(kwargs)
        self.config = ServerConfig(**config_dict)

        self._logger = logging.getLogger(__name__)
        self.app: Optional[FastAPI] = None

        self.host = host if host is not None else self._initialize_host()

        self.enumerator = SourceEnumerator(self.host)
        self.builder = RegistryBuilder(
            table_prefix=self.host.table_prefix,
            namespace=self.config.namespace,
            version=self.config.api_version,
        )
        self.registry = EndpointRegistry(self.enumerator, self.builder)
        self.dispatcher = QueryDispatcher(
            self.host, timeout=self.config.dispatch.query_timeout
        )

        self._auth_dependency = build_auth_dependency(self.config.auth)
        self.binder = RouteBinder(
            self.dispatcher,
            dependencies=[self._auth_dependency] if self._auth_dependency else None,
            tags=[self.config.namespace],
        )
        self.registry.add_listener(self._on_registry_published)

    def _initialize_host(self) -> HostEnvironment:
        """Create the host environment from configuration."""
        host_cfg = self.config.host_config
        kwargs: Dict[str, Any] = {}
        if host_cfg.table_prefix is not None:
            kwargs["table_prefix"] = host_cfg.table_prefix
        if host_cfg.sqlite_path:
            kwargs["db_path"] = host_cfg.sqlite_path

        host = get_host(host_cfg.host_type, **kwargs)
        self._logger.info(
            f"{LogIcons.CONTEXT} Host initialized: {type(host).__name__}"
        )
        return host

    @property
    def index_path(self) -> str:
        return f"/{self.config.namespace}/{self.config.api_version}"

    # Registry

    async def rediscover(self) -> bool:
        """Re-run discovery and rebind generated routes.

        Returns:
            True if a new registry was published; False if discovery failed
            and the previous endpoints were kept
        """
        return await self.registry.rebuild()

    def _on_registry_published(self, snapshot: Mapping[str, EndpointEntry]) -> None:
        if self.app is not None:
            self.binder.bind(self.app, snapshot.values())

    def current_registry(self) -> Tuple[Tuple[str, str], ...]:
        """Ordered ``(display_name, path)`` pairs of the live endpoints."""
        return self.registry.current_registry()

    def list_endpoints(self) -> List[Dict[str, str]]:
        """Serializable form of ``current_registry()``."""
        return [
            {"name": name, "endpoint": path} for name, path in self.current_registry()
        ]

    # Application

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        self._logger.info(f"{LogIcons.START} Starting {self.config.title}")
        if self.config.discover_on_startup:
            await self.rediscover()
        yield
        await self.host.close()
        self._logger.info(f"{LogIcons.STOP} Stopped {self.config.title}")

    def _create_app_instance(self) -> FastAPI:
        """Create the FastAPI instance by orchestrating the setup steps."""
        app = FastAPI(
            title=self.config.title,
            description=self.config.description,
            version=self.config.version,
            docs_url=self.config.docs_url,
            redoc_url=self.config.redoc_url,
            debug=self.config.debug,
            lifespan=self._lifespan,
        )
        self._configure_middleware(app)
        self._configure_exception_handlers(app)
        self._register_core_routes(app)
        self.binder.bind(app, self.registry.entries())
        return app

    def _configure_middleware(self, app: FastAPI) -> None:
        cors = self.config.cors
        if cors.cors_enabled:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=cors.cors_origins,
                allow_methods=cors.cors_methods,
                allow_headers=cors.cors_headers,
            )

    def _configure_exception_handlers(self, app: FastAPI) -> None:
        app.add_exception_handler(AutoAPIException, APIErrorHandler.handle_exception)
        app.add_exception_handler(
            StarletteHTTPException, APIErrorHandler.handle_exception
        )
        app.add_exception_handler(Exception, APIErrorHandler.handle_exception)

    def _register_core_routes(self, app: FastAPI) -> None:
        """Register health, root and endpoint index routes."""
        index_dependencies = (
            [Depends(self._auth_dependency)] if self._auth_dependency else []
        )

        @app.get(APIRoutes.HEALTH, response_model=None)
        async def health_check() -> Union[Dict[str, Any], JSONResponse]:
            """Health check endpoint."""
            body: Dict[str, Any] = {
                "service": self.config.title,
                "version": self.config.version,
                "endpoints": len(self.registry),
                "generation": self.registry.generation,
            }
            try:
                await self.host.ping()
            except (HostError, OSError, sqlite3.Error) as e:
                return JSONResponse(
                    status_code=503,
                    content={**body, "status": "unhealthy", "error": str(e)},
                )
            return {**body, "status": "healthy"}

        @app.get(APIRoutes.ROOT)
        async def root_info() -> Dict[str, Any]:
            """Root endpoint with API information."""
            return {
                "service": self.config.title,
                "description": self.config.description,
                "version": self.config.version,
                "docs": self.config.docs_url,
                "health": APIRoutes.HEALTH,
                "endpoints": self.index_path,
            }

        @app.get(
            self.index_path,
            dependencies=index_dependencies,
            tags=[self.config.namespace],
        )
        async def endpoint_index() -> List[Dict[str, str]]:
            """List generated endpoints as ``{name, endpoint}`` objects."""
            return self.list_endpoints()

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance.

        Returns:
            Configured FastAPI application
        """
        if self.app is None:
            self.app = self._create_app_instance()
        return self.app

    def run(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        reload: Optional[bool] = None,
        **uvicorn_kwargs: Any,
    ) -> None:
        """Run the server using uvicorn.

        Args:
            host: Override bind address
            port: Override port number
            reload: Enable auto-reload for development
            **uvicorn_kwargs: Additional uvicorn parameters
        """
        logging.basicConfig(
            level=getattr(logging, self.config.log_level.upper()),
            format=LOG_FORMAT,
        )
        LoggingConfigurator.configure_exception_logging()

        run_host = host or self.config.host
        run_port = port or self.config.port
        run_reload = reload if reload is not None else self.config.debug

        self._logger.info(
            f"{LogIcons.CONFIG} Server starting at http://{run_host}:{run_port}"
        )
        if self.config.docs_url:
            self._logger.info(
                f"{LogIcons.WORLD} API docs: "
                f"http://{run_host}:{run_port}{self.config.docs_url}"
            )

        uvicorn.run(
            self.get_app(),
            host=run_host,
            port=run_port,
            reload=run_reload,
            log_level=self.config.log_level,
            **uvicorn_kwargs,
        )

    async def run_async(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        **uvicorn_kwargs: Any,
    ) -> None:
        """Run the server asynchronously.

        Args:
            host: Override bind address
            port: Override port number
            **uvicorn_kwargs: Additional uvicorn parameters
        """
        config = uvicorn.Config(
            self.get_app(),
            host=host or self.config.host,
            port=port or self.config.port,
            log_level=self.config.log_level,
            **uvicorn_kwargs,
        )
        await uvicorn.Server(config).serve()


def create_server(
    title: str = "autoapi",
    description: str = "Read-only JSON endpoints generated from host data sources",
    version: str = "1.0.0",
    host: Optional[HostEnvironment] = None,
    **config_kwargs: Any,
) -> Server:
    """Create a Server instance with common configuration.

    Args:
        title: API title
        description: API description
        version: API version
        host: Optional host environment
        **config_kwargs: Additional server configuration

    Returns:
        Configured Server instance
    """
    return Server(
        host=host,
        title=title,
        description=description,
        version=version,
        **config_kwargs,
    )
