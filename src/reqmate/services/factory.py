"""Base class for all services with factory pattern support."""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic
from pathlib import Path

T = TypeVar('T')


class ServiceFactoryABC(ABC, Generic[T]):
    """
    Abstract base class for service factories.

    Services receive their clients and settings through the constructor;
    factories are the one place where those are built from configuration.
    """

    @classmethod
    @abstractmethod
    def create_default(cls) -> T:
        """
        Create a default instance of the service with standard configuration.

        Returns:
            T: Configured instance of the service
        """
        raise NotImplementedError("Subclasses must implement create_default() factory method")

    @classmethod
    def from_env_file(cls, env_path: str | Path) -> T:
        """
        Create an instance of the service using settings from a specific environment file.

        Args:
            env_path (str): Path to the .env file to load settings from.

        Returns:
            T: Configured instance of the service
        """
        raise NotImplementedError("Subclasses must implement from_env_file() factory method")
