import collections
import datetime
import math
import re

import pytz

IN_APP = "in_app"
LATEST_RECEIPT_INFO = "latest_receipt_info"

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_int(value):
    """
    Parse a base-10 integer the way Apple's string fields need it.

    Leading digits are used ("1595808159000", "2020-07-27 ..." -> 2020).
    Anything unparseable becomes NaN and is passed through untouched.
    """
    if isinstance(value, bool):
        return float("nan")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else float("nan")
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return float("nan")


def now_ms():
    return int(datetime.datetime.now(tz=pytz.utc).timestamp() * 1000)


def get_expiration_date(item):
    # expires_date_ms first, then expires_date, otherwise not a subscription
    for key in ("expires_date_ms", "expires_date"):
        if item.get(key):
            return parse_int(item[key])
    return 0


class PurchaseRecord(
    collections.namedtuple(
        "PurchaseRecord",
        [
            "bundle_id",
            "transaction_id",
            "product_id",
            "purchase_date",
            "quantity",
            "expiration_date",
        ],
    )
):
    __slots__ = ()

    @property
    def expires_at(self):
        if not self.expiration_date or math.isnan(self.expiration_date):
            return None
        return datetime.datetime.fromtimestamp(
            self.expiration_date / 1000.0, tz=pytz.utc
        )

    def is_expired(self, now=None):
        if now is None:
            now = now_ms()
        return self.expiration_date > 0 and now - self.expiration_date >= 0


def _make_record(bundle_id, item, expiration_date):
    return PurchaseRecord(
        bundle_id=bundle_id,
        transaction_id=item.get("transaction_id"),
        product_id=item.get("product_id"),
        purchase_date=parse_int(item.get("original_purchase_date_ms")),
        quantity=parse_int(item.get("quantity")),
        expiration_date=expiration_date,
    )


class _PurchaseList(object):
    """
    Records in first-seen order.

    A later purchase of a known transaction replaces its record in place.
    An older or equal one is appended without touching the slot map.
    """

    def __init__(self):
        self.records = []
        self._slots = {}

    def add(self, original_transaction_id, purchase_date_ms, record):
        slot = self._slots.get(original_transaction_id)

        if slot is None:
            self._slots[original_transaction_id] = (
                purchase_date_ms,
                len(self.records),
            )
            self.records.append(record)
            return

        last_purchase_date_ms, index = slot
        if last_purchase_date_ms < purchase_date_ms:
            # Later purchase wins but keeps the earlier position
            self.records[index] = record
            self._slots[original_transaction_id] = (purchase_date_ms, index)
        else:
            self.records.append(record)


def get_purchase_data(payload, ignore_expired=False, now=None):
    """
    Turn a validated Apple response into a list of PurchaseRecords.

    Returns None when there is no payload or no receipt in it.

    iOS 6+ receipts carry their purchases in ``receipt["in_app"]``, with
    auto-renewable subscription updates in the top level
    ``latest_receipt_info``. Both are merged by ``original_transaction_id``:
    a later ``purchase_date_ms`` replaces the record where the transaction
    was first seen, an older or equal one is appended as its own record.
    When ``ignore_expired`` is set, expired subscriptions are dropped.

    Older receipts have no ``in_app`` list and produce a single record.
    ``ignore_expired`` is not applied to them.
    """
    if not payload or not payload.get("receipt"):
        return None

    receipt = payload["receipt"]

    if receipt.get(IN_APP) is None:
        return [
            _make_record(
                receipt.get("bundle_id"), receipt, get_expiration_date(receipt)
            )
        ]

    items = list(receipt[IN_APP])
    latest_receipt_info = payload.get(LATEST_RECEIPT_INFO)
    if isinstance(latest_receipt_info, list):
        items.extend(latest_receipt_info)

    if ignore_expired and now is None:
        now = now_ms()

    purchases = _PurchaseList()
    for item in items:
        expiration_date = get_expiration_date(item)

        if ignore_expired and expiration_date > 0 and now - expiration_date >= 0:
            continue

        purchases.add(
            item.get("original_transaction_id"),
            parse_int(item.get("purchase_date_ms")),
            _make_record(receipt.get("bundle_id"), item, expiration_date),
        )

    return purchases.records
