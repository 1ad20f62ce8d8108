from .keys import (
    PubKeyHash,
    NULL_ACCOUNT,
    get_account,
    check_account,
    account_from_hex,
    account_to_hex,
)
