from types import MappingProxyType

from django.core import exceptions as django_exceptions

APPSTORE_STATUS_SUCCESS = 0
# Not one of Apple's codes. Used when no status could be read at all.
APPSTORE_STATUS_UNKNOWN = 1
APPSTORE_STATUS_POSSIBLE_HACK = 2
APPSTORE_STATUS_INVALID_JSON = 21000
APPSTORE_STATUS_MALFORMED_RECEIPT_DATA = 21002
APPSTORE_STATUS_RECEIPT_AUTHENTICATION = 21003
APPSTORE_STATUS_SHARED_SECRET_MISMATCH = 21004
APPSTORE_STATUS_RECEIPT_SERVER_DOWN = 21005
APPSTORE_STATUS_EXPIRED_SUBSCRIPTION = 21006
APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT = 21007
APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT = 21008

UNKNOWN_STATUS_MESSAGE = "Unknown"

ERROR_MESSAGES = MappingProxyType(
    {
        APPSTORE_STATUS_INVALID_JSON: (
            "The App Store could not read the JSON object you provided."
        ),
        APPSTORE_STATUS_MALFORMED_RECEIPT_DATA: (
            "The data in the receipt-data property was malformed."
        ),
        APPSTORE_STATUS_RECEIPT_AUTHENTICATION: (
            "The receipt could not be authenticated."
        ),
        APPSTORE_STATUS_SHARED_SECRET_MISMATCH: (
            "The shared secret you provided does not match the shared secret "
            "on file for your account."
        ),
        APPSTORE_STATUS_RECEIPT_SERVER_DOWN: (
            "The receipt server is not currently available."
        ),
        APPSTORE_STATUS_EXPIRED_SUBSCRIPTION: (
            "This receipt is valid but the subscription has expired. When this "
            "status code is returned to your server, the receipt data is also "
            "decoded and returned as part of the response."
        ),
        APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT: (
            "This receipt is a sandbox receipt, but it was sent to the "
            "production service for verification."
        ),
        APPSTORE_STATUS_PROD_ENVIRONMENT_RECEIPT: (
            "This receipt is a production receipt, but it was sent to the "
            "sandbox service for verification."
        ),
        APPSTORE_STATUS_POSSIBLE_HACK: "The receipt is valid, but purchased nothing.",
    }
)


def get_status_message(status):
    return ERROR_MESSAGES.get(status, UNKNOWN_STATUS_MESSAGE)


class ImproperlyConfigured(django_exceptions.ImproperlyConfigured):
    pass


class ReceiptValidationException(Exception):
    """
    Base class for every validation failure.

    ``result`` holds the best available partial validation result (at least
    the status, message and service tag) so callers can log it.
    """

    def __init__(self, result, *args, **kwargs):
        self.result = result
        super(ReceiptValidationException, self).__init__(*args, **kwargs)

    @property
    def status(self):
        return self.result.get("status")


class TransportFailureException(ReceiptValidationException):
    pass


class AppleStatusException(ReceiptValidationException):
    pass


class PossibleHackException(ReceiptValidationException):
    pass
