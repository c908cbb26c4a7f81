"""Interface for the external transaction-creation service."""

from abc import ABC, abstractmethod

from src.core.entities.notification import TransactionRequest


class ITransactionCreator(ABC):
    """Records a financial transaction on behalf of a completed reminder."""

    @abstractmethod
    async def create_transaction(self, request: TransactionRequest) -> str | None:
        """
        Record a transaction.

        Returns:
            Transaction ID if the service assigns one
        """
        pass
