import asyncio
import base64
import enum
import logging

from .config import EMPTY_CONFIG
from .exceptions import (
    APPSTORE_STATUS_MALFORMED_RECEIPT_DATA,
    APPSTORE_STATUS_POSSIBLE_HACK,
    APPSTORE_STATUS_SUCCESS,
    APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT,
    APPSTORE_STATUS_UNKNOWN,
    AppleStatusException,
    PossibleHackException,
    ReceiptValidationException,
    TransportFailureException,
    get_status_message,
)
from .settings import (
    PRODUCTION_VERIFICATION_URL,
    SANDBOX_VERIFICATION_URL,
    SERVICE_APPLE,
)
from .transport import RequestsTransport

log = logging.getLogger(__name__)


# Statuses that mean the receipt belongs to the other environment. Only
# honoured when returned by the production endpoint.
WRONG_ENVIRONMENT_STATUSES = frozenset(
    [APPSTORE_STATUS_TEST_ENVIRONMENT_RECEIPT, APPSTORE_STATUS_MALFORMED_RECEIPT_DATA]
)


class Endpoint(enum.Enum):
    PRODUCTION = PRODUCTION_VERIFICATION_URL
    SANDBOX = SANDBOX_VERIFICATION_URL

    @property
    def url(self):
        return self.value


class StatusKind(enum.Enum):
    SUCCESS = "success"
    WRONG_ENVIRONMENT = "wrong_environment"
    CLASSIFIED_ERROR = "classified_error"
    UNCLASSIFIED = "unclassified"


def classify_status(status, endpoint):
    # bool is an int subclass but never a valid status
    if not isinstance(status, int) or isinstance(status, bool):
        return StatusKind.UNCLASSIFIED
    if status == APPSTORE_STATUS_SUCCESS:
        return StatusKind.SUCCESS
    if endpoint is Endpoint.PRODUCTION and status in WRONG_ENVIRONMENT_STATUSES:
        return StatusKind.WRONG_ENVIRONMENT
    return StatusKind.CLASSIFIED_ERROR


def _failure_result(status):
    return {
        "status": status,
        "message": get_status_message(status),
        "service": SERVICE_APPLE,
    }


def build_request_body(receipt, password=None):
    if isinstance(receipt, bytes):
        receipt = base64.b64encode(receipt).decode("utf-8")

    body = {"receipt-data": receipt}
    if password:
        body["password"] = password
    return body


class AppleReceiptValidator(object):
    """
    Verifies receipts with Apple's verifyReceipt service.

    Production is always tried first. The sandbox is only tried when
    production answers that the receipt belongs to the other environment.
    Every failure raises a ReceiptValidationException subclass whose
    ``result`` carries the status, message and service tag.
    """

    def __init__(self, config=None, transport=None):
        self.config = config or EMPTY_CONFIG
        self.transport = transport or RequestsTransport(self.config.request_defaults)

    async def _send(self, endpoint, body):
        log.info(
            "Validating receipt with Apple at the {} url".format(
                endpoint.name.lower()
            )
        )

        response = await self.transport.post(endpoint.url, body, encoding=None)

        if response.error is not None:
            log.info(
                "Request to {} failed: {!r}".format(endpoint.url, response.error)
            )
            raise TransportFailureException(
                _failure_result(APPSTORE_STATUS_UNKNOWN), str(response.error)
            ) from response.error

        content = response.body
        if not isinstance(content, dict):
            raise ReceiptValidationException(
                _failure_result(APPSTORE_STATUS_UNKNOWN), "Unknown response format"
            )

        log.debug("Response from {}: {}".format(endpoint.url, content))
        return content

    async def validate(self, receipt, secret=None):
        # Resolved once, reused for the sandbox attempt
        body = build_request_body(receipt, self.config.resolve_password(secret))

        for endpoint in (Endpoint.PRODUCTION, Endpoint.SANDBOX):
            content = await self._send(endpoint, body)
            status = content.get("status")
            kind = classify_status(status, endpoint)

            log.info("Received status {} from Apple".format(status))

            if kind is StatusKind.WRONG_ENVIRONMENT:
                log.info("Receipt should be in the sandbox environment")
                continue

            if kind is StatusKind.UNCLASSIFIED:
                raise ReceiptValidationException(
                    _failure_result(APPSTORE_STATUS_UNKNOWN),
                    "Unknown status {!r} from {}".format(status, endpoint.url),
                )

            if kind is StatusKind.CLASSIFIED_ERROR:
                result = _failure_result(status)
                raise AppleStatusException(result, result["message"])

            return self._handle_success(content, endpoint)

    def _handle_success(self, content, endpoint):
        content["service"] = SERVICE_APPLE
        content["message"] = ""

        receipt = content.get("receipt")
        if isinstance(receipt, dict):
            receipt["_sandbox"] = endpoint is Endpoint.SANDBOX

            in_app = receipt.get("in_app")
            if isinstance(in_app, list) and not in_app:
                # A valid receipt that bought nothing is most likely replayed
                # or forged, see https://forums.developer.apple.com/thread/8954
                content["status"] = APPSTORE_STATUS_POSSIBLE_HACK
                content["message"] = get_status_message(APPSTORE_STATUS_POSSIBLE_HACK)
                log.warning(
                    "Empty purchase list detected, treating the receipt as invalid"
                )
                raise PossibleHackException(
                    content, "failed to validate for empty purchased list"
                )

        log.info(
            "{} validation successful".format(endpoint.name.capitalize())
        )
        return content


def validate_receipt_with_apple(receipt, secret=None, config=None, transport=None):
    """
    Blocking helper around AppleReceiptValidator.validate.

    Must not be called from a running event loop.
    """
    validator = AppleReceiptValidator(config=config, transport=transport)
    return asyncio.run(validator.validate(receipt, secret=secret))
