import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./settlement.db")
    DB_ECHO = bool(data.get("DB_ECHO", False))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Settlement retry on concurrency conflicts
    SETTLEMENT_MAX_ATTEMPTS = int(data.get("SETTLEMENT_MAX_ATTEMPTS", 3))
    SETTLEMENT_RETRY_BASE_DELAY = float(data.get("SETTLEMENT_RETRY_BASE_DELAY", 0.05))  # Seconds
    SETTLEMENT_RETRY_MAX_DELAY = float(data.get("SETTLEMENT_RETRY_MAX_DELAY", 1.0))  # Seconds

    # Receipts
    RECEIPT_ENABLED = bool(data.get("RECEIPT_ENABLED", True))
    RECEIPT_STORAGE_PATH = data.get("RECEIPT_STORAGE_PATH", os.path.join(ROOT_PATH, "receipts"))
    RECEIPT_COMPANY_NAME = data.get("RECEIPT_COMPANY_NAME", "Package Forwarding Co.")
    RECEIPT_COMPANY_ADDRESS = data.get("RECEIPT_COMPANY_ADDRESS", "1 Harbour Road, Kingston")
    RECEIPT_NOTIFICATION_WEBHOOK = data.get("RECEIPT_NOTIFICATION_WEBHOOK", None)

    # Ledger Reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
