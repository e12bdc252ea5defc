"""web3 bindings for tokens, exchange-rate sources and delegated calls."""

import logging
from datetime import timedelta

from web3 import Web3

from app.reserve_assets.application.exceptions import ClaimDelegationFailure
from app.reserve_assets.application.interfaces.call_executor import DelegatedCallExecutor
from app.reserve_assets.application.interfaces.rate_source import ExchangeRateSource
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.value_objects.claim_calldata import ClaimCalldata
from app.reserve_assets.domain.value_objects.fix import Fix
from app.reserve_assets.infrastructure.external.abis import (
    CTOKEN_ABI,
    ERC20_ABI,
    ERC4626_ABI,
)

logger = logging.getLogger(__name__)

# cToken exchange rates carry 18 - 8 + underlying decimals of precision
CTOKEN_DECIMALS = 8


def create_web3(rpc_url: str, timeout: float) -> Web3:
    """Build an HTTP-backed web3 instance."""
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


class Web3TokenContract(TokenContract):
    """ERC20 token read through web3."""

    def __init__(self, web3: Web3, address: str) -> None:
        self._address = Web3.to_checksum_address(address)
        self._contract = web3.eth.contract(address=self._address, abi=ERC20_ABI)

    @property
    def address(self) -> str:
        return self._address

    def decimals(self) -> int:
        return int(self._contract.functions.decimals().call())

    def balance_of(self, account: str) -> int:
        return int(
            self._contract.functions.balanceOf(Web3.to_checksum_address(account)).call()
        )


class CTokenRateSource(ExchangeRateSource):
    """Compound cToken refPerTok from ``exchangeRateStored``.

    Attributes:
        _ref_decimals: Decimals of the underlying (reference) token.
    """

    def __init__(self, web3: Web3, address: str, ref_decimals: int) -> None:
        self._address = Web3.to_checksum_address(address)
        self._contract = web3.eth.contract(address=self._address, abi=CTOKEN_ABI)
        self._ref_decimals = ref_decimals

    def ref_per_tok(self) -> Fix:
        rate = int(self._contract.functions.exchangeRateStored().call())
        return Fix.shift(rate, CTOKEN_DECIMALS - self._ref_decimals - 18)


class ERC4626RateSource(ExchangeRateSource):
    """Vault share price from ``convertToAssets(one share)``."""

    def __init__(
        self, web3: Web3, address: str, share_decimals: int, asset_decimals: int
    ) -> None:
        self._address = Web3.to_checksum_address(address)
        self._contract = web3.eth.contract(address=self._address, abi=ERC4626_ABI)
        self._share_decimals = share_decimals
        self._asset_decimals = asset_decimals

    def ref_per_tok(self) -> Fix:
        assets = int(
            self._contract.functions.convertToAssets(10**self._share_decimals).call()
        )
        return Fix.shift(assets, -self._asset_decimals)


class Web3CallExecutor(DelegatedCallExecutor):
    """Sends claim calls as transactions from the holder's unlocked account.

    The node must be able to sign for the holder (e.g. a local dev node
    or a signer middleware installed on the web3 instance).
    """

    def __init__(self, web3: Web3, receipt_timeout: timedelta = timedelta(seconds=120)) -> None:
        self._web3 = web3
        self._receipt_timeout = receipt_timeout

    def execute(self, holder: str, calldata: ClaimCalldata) -> None:
        """Send the call and wait for it to be mined.

        Raises:
            ClaimDelegationFailure: If the transaction cannot be sent,
                is not mined in time, or reverts.
        """
        tx = {
            "from": Web3.to_checksum_address(holder),
            "to": calldata.target,
            "data": calldata.payload_hex,
        }
        try:
            tx_hash = self._web3.eth.send_transaction(tx)
            receipt = self._web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout.total_seconds()
            )
        except Exception as e:
            raise ClaimDelegationFailure(calldata.target, f"{type(e).__name__}: {e}") from e

        if receipt["status"] != 1:
            raise ClaimDelegationFailure(
                calldata.target, f"transaction {tx_hash.hex()} reverted"
            )
        logger.info(f"Claim transaction {tx_hash.hex()} mined in block {receipt['blockNumber']}")
