import pytest

from apple_iap.config import read_config


@pytest.fixture
def config():
    return read_config({"APPLE_PASSWORD": "s3cret"}, environ={})


@pytest.fixture
def valid_content():
    # An example (trimmed) response from Apple
    return {
        "status": 0,
        "environment": "Production",
        "receipt": {
            "bundle_id": "com.example.app",
            "in_app": [
                {
                    "quantity": "1",
                    "product_id": "com.example.app.coins",
                    "transaction_id": "1000000000000001",
                    "original_transaction_id": "1000000000000001",
                    "purchase_date_ms": "1593216159000",
                    "original_purchase_date_ms": "1593216162000",
                }
            ],
        },
    }
