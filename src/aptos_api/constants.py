"""Constants for the Aptos node API client."""

from enum import Enum

from aptos_sdk.account_address import AccountAddress

ACCOUNT_ZERO = AccountAddress.from_str("0x0")
ACCOUNT_ONE = AccountAddress.from_str("0x1")

APTOS_COIN_TYPE = "0x1::aptos_coin::AptosCoin"

# Transaction defaults used when neither an explicit option nor an estimate applies
DEFAULT_MAX_GAS_AMOUNT = 100_000
DEFAULT_GAS_UNIT_PRICE = 100
DEFAULT_EXPIRATION_SECONDS = 300

# Confirmation polling
DEFAULT_POLL_PERIOD = 0.1
DEFAULT_POLL_TIMEOUT = 10.0

# Event pagination
EVENTS_PAGE_SIZE = 100
DEFAULT_MAX_CONCURRENT_PAGE_REQUESTS = 8

DEFAULT_REQUEST_TIMEOUT = 60.0

U8_MAX = 2**8 - 1
U64_MAX = 2**64 - 1


class ContentType(str, Enum):
    """Content types understood by the node REST API."""

    JSON = "application/json"
    BCS = "application/x-bcs"
    SIGNED_TRANSACTION_BCS = "application/x.aptos.signed_transaction+bcs"
    VIEW_FUNCTION_BCS = "application/x.aptos.view_function+bcs"


class TransactionType(str, Enum):
    """Transaction ``type`` values reported by the node."""

    PENDING = "pending_transaction"
    USER = "user_transaction"
    GENESIS = "genesis_transaction"
    BLOCK_METADATA = "block_metadata_transaction"
    STATE_CHECKPOINT = "state_checkpoint_transaction"
    VALIDATOR = "validator_transaction"
    BLOCK_EPILOGUE = "block_epilogue_transaction"
