"""Protocol interfaces for database access."""

from abc import abstractmethod
from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class DatabaseRepository(Protocol):
    """Base protocol for database access used by feature repositories.

    Queries are formatted with the schema before they reach this layer.
    """

    @abstractmethod
    async def execute_query(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        """Execute a query and return all rows."""
        ...

    @abstractmethod
    async def execute_fetchrow(self, query: str, *args: Any) -> Optional[Dict[str, Any]]:
        """Execute a query and return a single row."""
        ...

    @abstractmethod
    async def execute_fetchval(self, query: str, *args: Any) -> Any:
        """Execute a query and return a single value."""
        ...

    @abstractmethod
    async def execute_command(self, command: str, *args: Any) -> str:
        """Execute a command and return its status string."""
        ...

    @abstractmethod
    def transaction(self) -> AsyncContextManager["DatabaseRepository"]:
        """Run the enclosed statements on one connection inside a transaction."""
        ...
