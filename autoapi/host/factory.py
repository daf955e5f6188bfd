"""Host factory with registry-based configuration."""

import os
from typing import Any, Callable, Dict, Optional, Type

from autoapi.constants import Defaults
from autoapi.exceptions import InvalidConfigurationError

from .base import HostEnvironment

# Registry for host implementations
_HOST_REGISTRY: Dict[str, Type[HostEnvironment]] = {}
# Registry for host configuration functions
_HOST_CONFIGURATORS: Dict[str, Callable[[Dict[str, Any]], HostEnvironment]] = {}
_DEFAULT_HOST: str = Defaults.HOST_TYPE


def register_host_type(
    name: str,
    host_class: Type[HostEnvironment],
    configurator: Optional[Callable[[Dict[str, Any]], HostEnvironment]] = None,
    set_as_default: bool = False,
) -> None:
    """Register a host implementation.

    Args:
        name: Host type name to register
        host_class: Class implementing HostEnvironment
        configurator: Optional function building the host from kwargs
        set_as_default: Whether to make this the default host type

    Raises:
        InvalidConfigurationError: If the class is not a HostEnvironment or
            the name is already registered
    """
    if not (isinstance(host_class, type) and issubclass(host_class, HostEnvironment)):
        raise InvalidConfigurationError(
            "host_class",
            getattr(host_class, "__name__", host_class),
            "Host class must inherit from HostEnvironment",
        )

    if name in _HOST_REGISTRY:
        raise InvalidConfigurationError(
            "host_type", name, "Host type is already registered"
        )

    _HOST_REGISTRY[name] = host_class
    _HOST_CONFIGURATORS[name] = configurator or (lambda kwargs: host_class(**kwargs))

    if set_as_default:
        global _DEFAULT_HOST
        _DEFAULT_HOST = name


def unregister_host_type(name: str) -> None:
    """Unregister a host implementation.

    Args:
        name: Host type name to unregister
    """
    _HOST_REGISTRY.pop(name, None)
    _HOST_CONFIGURATORS.pop(name, None)

    global _DEFAULT_HOST
    if _DEFAULT_HOST == name:
        _DEFAULT_HOST = Defaults.HOST_TYPE


def list_host_types() -> Dict[str, Type[HostEnvironment]]:
    """Get all registered host types.

    Returns:
        Dictionary mapping host type names to their classes
    """
    return _HOST_REGISTRY.copy()


def get_default_host_type() -> str:
    """Get the current default host type."""
    return _DEFAULT_HOST


def get_host(host_type: Optional[str] = None, **kwargs: Any) -> HostEnvironment:
    """Get a host instance.

    Args:
        host_type: Registered host type name. Defaults to the
            AUTOAPI_HOST_TYPE environment variable or the current default
        **kwargs: Host-specific configuration

    Returns:
        HostEnvironment instance

    Raises:
        InvalidConfigurationError: If the host type is unknown or the
            configurator fails
    """
    if host_type is None:
        host_type = os.getenv("AUTOAPI_HOST_TYPE", _DEFAULT_HOST)

    if host_type not in _HOST_REGISTRY:
        available = ", ".join(sorted(_HOST_REGISTRY))
        raise InvalidConfigurationError(
            "host_type",
            host_type,
            f"Host type is not registered. Available types: {available}",
        )

    configurator = _HOST_CONFIGURATORS[host_type]
    try:
        return configurator(kwargs)
    except Exception as e:
        raise InvalidConfigurationError(
            "host_configuration",
            host_type,
            f"Failed to configure host: {e}",
            details={"kwargs": {k: str(v) for k, v in kwargs.items()}},
        ) from e


def _register_builtin_hosts() -> None:
    """Register built-in host implementations."""
    from .memory import InMemoryHost
    from .sqlite import SQLiteHost

    def memory_configurator(kwargs: Dict[str, Any]) -> InMemoryHost:
        prefix = kwargs.get("table_prefix")
        if prefix is None:
            prefix = os.getenv("AUTOAPI_TABLE_PREFIX", Defaults.TABLE_PREFIX)
        return InMemoryHost(table_prefix=prefix)

    def sqlite_configurator(kwargs: Dict[str, Any]) -> SQLiteHost:
        db_path = kwargs.get("db_path") or os.getenv(
            "AUTOAPI_SQLITE_PATH", Defaults.SQLITE_PATH
        )
        prefix = kwargs.get("table_prefix")
        if prefix is None:
            prefix = os.getenv("AUTOAPI_TABLE_PREFIX", Defaults.TABLE_PREFIX)
        return SQLiteHost(
            db_path=db_path,
            table_prefix=prefix,
            register_builtins=kwargs.get("register_builtins", True),
        )

    register_host_type("memory", InMemoryHost, memory_configurator, set_as_default=True)
    register_host_type("sqlite", SQLiteHost, sqlite_configurator)


_register_builtin_hosts()
