"""
Sequential execution of transactions returned by createToken.

The whole batch is validated before anything is signed. Transactions are
then sent one at a time, in order, each waiting for its hash, so the
signing account's nonces stay monotonic.
"""
import logging
from typing import Dict, List, Mapping, Optional

from web3 import Web3

from .auth import WalletAuth
from .exceptions import (
    ChainMismatchError, MissingChainIdError, StaleOrMismatchedChainError,
    TransactionExecutionError, UnsupportedChainTypeError
)
from .models import CreateTokenResponse, CreateTokenTransaction, ExecutedTransaction
from .signer import Signer, ACCOUNT_TYPE_LOCAL
from .utils import to_int

SUPPORTED_CHAIN_TYPE = "evm"


def get_response_transactions(response: CreateTokenResponse) -> List[CreateTokenTransaction]:
    """
    Extract the transactions to execute from a createToken response.

    Prefers the ``transactions`` list; a legacy single ``transaction``
    inherits the response's top-level ``chainId``.
    """
    if response.transactions:
        return list(response.transactions)

    if response.transaction is not None:
        return [response.transaction.model_copy(update={"chain_id": response.chain_id})]

    return []


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_transaction_chain_metadata(
    transactions: List[CreateTokenTransaction],
    expected_chain_slug: str,
) -> None:
    """
    Check every transaction's chain metadata before any is signed.

    Raises:
        StaleOrMismatchedChainError: If chainSlug is missing, not a string or differs from the action's
        UnsupportedChainTypeError: If chainType is present and not "evm"
        MissingChainIdError: If chainId is missing or not an integer
    """
    for index, tx in enumerate(transactions):
        if not isinstance(tx.chain_slug, str) or not tx.chain_slug or tx.chain_slug != expected_chain_slug:
            raise StaleOrMismatchedChainError(index, expected_chain_slug, tx.chain_slug)
        if tx.chain_type is not None and (
            not isinstance(tx.chain_type, str) or tx.chain_type.lower() != SUPPORTED_CHAIN_TYPE
        ):
            raise UnsupportedChainTypeError(index, tx.chain_type)
        if not _is_integer(tx.chain_id):
            raise MissingChainIdError(index=index)


class TransactionExecutor:
    """
    Executes createToken transactions with a wallet credential.

    Args:
        rpc_by_chain_slug: RPC endpoints keyed by chain slug
        rpc_by_chain_id: RPC endpoints keyed by numeric chain id
        logger: Optional logger instance
    """

    def __init__(
        self,
        rpc_by_chain_slug: Optional[Mapping[str, str]] = None,
        rpc_by_chain_id: Optional[Mapping[int, str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.rpc_by_chain_slug = dict(rpc_by_chain_slug or {})
        self.rpc_by_chain_id = dict(rpc_by_chain_id or {})
        self.logger = logger or logging.getLogger(__name__)

    def execute(
        self,
        auth: WalletAuth,
        response: CreateTokenResponse,
        expected_chain_slug: str,
    ) -> List[ExecutedTransaction]:
        """
        Validate and execute the transactions of a createToken response.

        Args:
            auth: Wallet credential whose signer sends the transactions
            response: Parsed createToken response
            expected_chain_slug: chainSlug of the action that was requested

        Returns:
            One record per transaction, in submission order

        Raises:
            ChainValidationError: If any transaction fails validation (nothing is sent)
            TransactionExecutionError: If a submission fails; ``executed`` holds
                the transactions already broadcast
        """
        transactions = get_response_transactions(response)
        if not transactions:
            return []

        validate_transaction_chain_metadata(transactions, expected_chain_slug)

        base_signer = auth.signer
        # Scoped to this batch only
        signers_by_chain: Dict[int, Signer] = {}
        results: List[ExecutedTransaction] = []

        for index, tx in enumerate(transactions):
            chain_id = tx.chain_id
            try:
                signer = self._resolve_signer(base_signer, tx.chain_slug, chain_id, signers_by_chain)
            except Exception as e:
                self.logger.error(f"No signer for transaction #{index} on chain {chain_id}: {e}")
                raise TransactionExecutionError(
                    f"Failed to prepare a signer for transaction #{index} on chain {chain_id}: {str(e)}",
                    index=index,
                    executed=results,
                ) from e

            if signer is base_signer:
                self._ensure_chain(base_signer, index, chain_id, results)

            try:
                to_address = Web3.to_checksum_address(tx.to)
                request = {
                    "to": to_address,
                    "data": tx.data if tx.data is not None else "0x",
                    "value": to_int(tx.value),
                    "chainId": chain_id,
                }
                if tx.gas_limit is not None:
                    request["gas"] = to_int(tx.gas_limit)

                tx_hash = signer.send_transaction(request)
            except Exception as e:
                self.logger.error(f"Transaction #{index} on chain {chain_id} failed: {e}")
                raise TransactionExecutionError(
                    f"Failed to send transaction #{index} on chain {chain_id}: {str(e)}",
                    index=index,
                    executed=results,
                ) from e

            self.logger.info(f"Executed transaction #{index} on chain {chain_id}: {tx_hash}")
            results.append(ExecutedTransaction(index=index, chain_id=chain_id, hash=tx_hash, to=to_address))

        return results

    def _resolve_signer(
        self,
        base_signer: Signer,
        chain_slug: Optional[str],
        chain_id: int,
        signers_by_chain: Dict[int, Signer],
    ) -> Signer:
        """Pick a dedicated per-chain signer for raw-key accounts with a configured RPC"""
        if getattr(base_signer, "account_type", None) != ACCOUNT_TYPE_LOCAL:
            return base_signer
        if not callable(getattr(base_signer, "connect", None)):
            return base_signer

        rpc_url = (self.rpc_by_chain_slug.get(chain_slug) if chain_slug else None) \
            or self.rpc_by_chain_id.get(chain_id)
        if not rpc_url:
            return base_signer

        existing = signers_by_chain.get(chain_id)
        if existing is not None:
            return existing

        self.logger.debug(f"Using dedicated RPC for chain {chain_id}")
        signer = base_signer.connect(rpc_url, chain_id=chain_id)
        signers_by_chain[chain_id] = signer
        return signer

    def _ensure_chain(
        self,
        signer: Signer,
        index: int,
        chain_id: int,
        executed: List[ExecutedTransaction],
    ) -> None:
        """Switch the base signer to ``chain_id`` if possible, else fail on a mismatch"""
        bound = getattr(signer, "chain_id", None)
        if bound == chain_id:
            return

        switch_chain = getattr(signer, "switch_chain", None)
        if callable(switch_chain):
            try:
                switch_chain(chain_id)
            except Exception as e:
                raise TransactionExecutionError(
                    f"Failed to switch signer to chain {chain_id} for transaction #{index}: {str(e)}",
                    index=index,
                    executed=executed,
                ) from e
            return

        if bound is not None:
            raise ChainMismatchError(index, chain_id, bound, executed=executed)
