"""
Factory for the methods that simulate cascade data.
"""

from typing import Any, Dict, Type

from atomcascade.cascade.propagation import ProbabilityPropagator
from atomcascade.core.logging_config import get_logger

logger = get_logger("core.factory")


class SimulationMethodFactory:
    """Factory for creating cascade simulation method instances."""

    _methods: Dict[str, Type[Any]] = {}

    @classmethod
    def register(cls, name: str, method_class: Type[Any]) -> None:
        """
        Register a simulation method class.

        Parameters
        ----------
        name : str
            Method name
        method_class : type
            Class whose instances provide ``propagate(registry, data)``
        """
        cls._methods[name] = method_class
        logger.debug(f"Registered simulation method: {name}")

    @classmethod
    def create(cls, name: str, **kwargs) -> Any:
        """
        Create a simulation method instance.

        Parameters
        ----------
        name : str
            Method name
        **kwargs
            Arguments for the method constructor

        Returns
        -------
        object
            Method instance

        Raises
        ------
        ValueError
            If the method name is not registered
        """
        if name not in cls._methods:
            available = ", ".join(cls._methods.keys())
            raise ValueError(f"Unknown simulation method: {name}. Available: {available}")

        method_class = cls._methods[name]
        return method_class(**kwargs)

    @classmethod
    def list_methods(cls) -> list:
        """List available method names."""
        return list(cls._methods.keys())


# Register default implementations
SimulationMethodFactory.register("ProbPropagation", ProbabilityPropagator)
