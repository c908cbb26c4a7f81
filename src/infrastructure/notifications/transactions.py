"""Transaction creator that records requests instead of calling a wallet service."""

import uuid

from src.config import get_logger
from src.core.entities.notification import TransactionRequest
from src.core.interfaces.transactions import ITransactionCreator

logger = get_logger(__name__)


class LoggingTransactionCreator(ITransactionCreator):
    """Keeps every request in memory and logs it."""

    def __init__(self) -> None:
        self.requests: list[TransactionRequest] = []

    async def create_transaction(self, request: TransactionRequest) -> str | None:
        transaction_id = uuid.uuid4().hex
        self.requests.append(request)
        logger.info(
            "transaction_recorded",
            transaction_id=transaction_id,
            reminder_id=request.reminder_id,
            amount=request.amount,
            transaction_type=request.transaction_type.value,
            wallet_id=request.wallet_id,
        )
        return transaction_id
