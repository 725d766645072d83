from .config import AppleConfig, read_config
from .exceptions import (
    AppleStatusException,
    ImproperlyConfigured,
    PossibleHackException,
    ReceiptValidationException,
    TransportFailureException,
    get_status_message,
)
from .purchases import PurchaseRecord, get_purchase_data
from .transport import RequestsTransport
from .validation import (
    AppleReceiptValidator,
    Endpoint,
    validate_receipt_with_apple,
)

__all__ = [
    "AppleConfig",
    "AppleReceiptValidator",
    "AppleStatusException",
    "Endpoint",
    "ImproperlyConfigured",
    "PossibleHackException",
    "PurchaseRecord",
    "ReceiptValidationException",
    "RequestsTransport",
    "TransportFailureException",
    "get_purchase_data",
    "get_status_message",
    "read_config",
    "validate_receipt_with_apple",
]
