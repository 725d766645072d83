LIVE_HOST = "buy.itunes.apple.com"
SANDBOX_HOST = "sandbox.itunes.apple.com"
VERIFY_RECEIPT_PATH = "/verifyReceipt"

PRODUCTION_VERIFICATION_URL = "https://" + LIVE_HOST + VERIFY_RECEIPT_PATH
SANDBOX_VERIFICATION_URL = "https://" + SANDBOX_HOST + VERIFY_RECEIPT_PATH

# Tag placed on every validation result
SERVICE_APPLE = "apple"

# Only keys carrying this prefix are read from IAP_SETTINGS
CONFIG_PREFIX = "APPLE_"
PASSWORD_SETTING = "APPLE_PASSWORD"
REQUEST_DEFAULTS_SETTING = "REQUEST_DEFAULTS"

# Used only when no password is configured
PASSWORD_ENV_VAR = "APPLE_IAP_PASSWORD"
