"""Explicit name -> factory registries for routers and output backends."""

from __future__ import annotations

from typing import Generic, TypeVar

from quire.exceptions import ConfigurationError

_T = TypeVar("_T")


class NamedRegistry(Generic[_T]):
    """Ordered mapping from a strategy name to the factory that builds it.

    Registries are populated by explicit ``define`` calls at startup; nothing
    is registered as a side effect of importing a module.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._factories: dict[str, _T] = {}

    def define(self, name: str, factory: _T) -> None:
        """Register a factory under a new name.

        Raises:
            ConfigurationError: If the name is already taken
        """
        if name in self._factories:
            raise ConfigurationError(f'The {self.kind} "{name}" has already been defined.')
        self._factories[name] = factory

    def get(self, name: str) -> _T:
        """Look up a factory by name.

        Raises:
            ConfigurationError: If no factory is registered under ``name``; the
                message lists every valid name
        """
        try:
            return self._factories[name]
        except KeyError:
            available = ", ".join(self.names())
            raise ConfigurationError(
                f'The {self.kind} "{name}" is not defined. The available {self.kind}s are: {available}'
            ) from None

    def names(self) -> list[str]:
        return list(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories
