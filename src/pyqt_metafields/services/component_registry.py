"""
Tenant-scoped component registry.

Maps (tenant, object, component name) to a component factory. A tenant
without its own variant falls back to the ``0_default`` tenant. The table is
filled explicitly at startup, so there is no path construction or module
discovery at lookup time.

Example:
    registry = ComponentRegistry()

    @registry.component("assets", "asset-detail")
    class AssetDetail(QWidget):
        ...

    @registry.component("assets", "asset-detail", tenant="b5d0bae9")
    class AcmeAssetDetail(QWidget):
        ...

    factory = registry.resolve("b5d0bae9", "assets", "asset-detail")
"""

import logging
from typing import Callable, Dict, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_TENANT = "0_default"

ComponentKey = Tuple[str, str, str]
F = TypeVar("F", bound=Callable)


class ComponentRegistry:
    """Lookup table of component factories keyed by (tenant, object, component)."""

    def __init__(self):
        self._factories: Dict[ComponentKey, Callable] = {}

    def register(self, object_name: str, component_name: str, factory: Callable,
                 tenant: str = DEFAULT_TENANT) -> None:
        """
        Register a component factory.

        Args:
            object_name: Business object (e.g., "assets")
            component_name: Component identifier (e.g., "asset-detail")
            factory: Callable producing the component
            tenant: Tenant id, or the default tenant
        """
        key = (tenant, object_name, component_name)
        if key in self._factories:
            existing = self._factories[key]
            logger.warning(
                f"Component {key} already registered to {getattr(existing, '__name__', existing)}. "
                f"Overwriting with {getattr(factory, '__name__', factory)}."
            )
        self._factories[key] = factory
        logger.debug(f"Registered component {key}")

    def component(self, object_name: str, component_name: str,
                  tenant: str = DEFAULT_TENANT) -> Callable[[F], F]:
        """Decorator form of register()."""
        def decorator(factory: F) -> F:
            self.register(object_name, component_name, factory, tenant=tenant)
            return factory
        return decorator

    def resolve(self, tenant: Optional[str], object_name: str, component_name: str) -> Callable:
        """
        Get the factory for a tenant, falling back to the default tenant.

        Raises:
            KeyError: If neither the tenant nor the default has the component
        """
        if tenant:
            factory = self._factories.get((tenant, object_name, component_name))
            if factory is not None:
                return factory

        factory = self._factories.get((DEFAULT_TENANT, object_name, component_name))
        if factory is None:
            raise KeyError(
                f"Component not found: {component_name} for object {object_name}. "
                f"Checked tenants: {tenant!r} and {DEFAULT_TENANT!r}. "
                f"Available components: {sorted(self._factories)}"
            )
        logger.debug(f"Tenant {tenant!r} has no {object_name}/{component_name}; using default")
        return factory

    def create(self, tenant: Optional[str], object_name: str, component_name: str, *args, **kwargs):
        """Resolve and invoke a factory."""
        return self.resolve(tenant, object_name, component_name)(*args, **kwargs)

    def __contains__(self, key: ComponentKey) -> bool:
        return key in self._factories
