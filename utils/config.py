# utils/config.py

import os
import logging
from decimal import Decimal, InvalidOperation
from dotenv import load_dotenv
from typing import Dict, Any

# Initialize logger
logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


SECRETS_SECTION = "ALLOCATION"

DEFAULT_SETTINGS = {
    "TOTAL_STOCK": "10",
    "DEFAULT_CUSTOMER_ID": "company1",
    "DEFAULT_CUSTOMER_NAME": "Company 1",
    "DEFAULT_CUSTOMER_CREDIT": "3000.00",
    "DEFAULT_PRODUCT_ID": "product",
    "DEFAULT_PRODUCT_NAME": "1 day delivery Product",
    "DEFAULT_PRICE_PER_UNIT": "515.75",
    "DEMO_REQUESTED_QTY": "10",
    "ORDER_ID_PREFIX": "ORDER",
    "ORDER_ID_WIDTH": "3",
    "CURRENCY_SYMBOL": "฿",
    "QUANTITY_UOM": "Unit",
    "TRACK_CUSTOMER_CREDIT": "false",
    "LOG_LEVEL": "INFO",
}


def is_running_on_streamlit_cloud() -> bool:
    """Detect if running on Streamlit Cloud"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and SECRETS_SECTION in st.secrets
    except Exception:
        return False


def _parse_int(key: str, raw: Any, minimum: int = 0) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {raw!r}")
    if value < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {value}")
    return value


def _parse_decimal(key: str, raw: Any) -> Decimal:
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"{key} must be a decimal number, got {raw!r}")
    if not value.is_finite() or value < 0:
        raise ValueError(f"{key} must be a non-negative number, got {raw!r}")
    return value


def _parse_bool(raw: Any) -> bool:
    return str(raw).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Centralized configuration management for the Product Allocation app"""

    def __init__(self):
        self.is_cloud = is_running_on_streamlit_cloud()
        self._load_config()

    def _load_config(self):
        """Load configuration based on environment"""
        if self.is_cloud:
            raw = self._load_cloud_config()
        else:
            raw = self._load_local_config()

        self._load_app_config(raw)
        self._log_config_status()

    def _load_cloud_config(self) -> Dict[str, Any]:
        """Load configuration from Streamlit Cloud secrets"""
        import streamlit as st

        secrets = dict(st.secrets.get(SECRETS_SECTION, {}))
        logger.info("☁️  Running in STREAMLIT CLOUD")
        return {key: secrets.get(key, default) for key, default in DEFAULT_SETTINGS.items()}

    def _load_local_config(self) -> Dict[str, Any]:
        """Load configuration from local environment"""
        # Load .env file
        load_dotenv()

        logger.info("💻 Running in LOCAL environment")
        return {key: os.getenv(key, default) for key, default in DEFAULT_SETTINGS.items()}

    def _load_app_config(self, raw: Dict[str, Any]):
        """Parse raw settings into typed application configuration"""
        self.app_config = {
            # Stock
            "TOTAL_STOCK": _parse_int("TOTAL_STOCK", raw["TOTAL_STOCK"]),

            # Reference data for the demo session and new orders
            "DEFAULT_CUSTOMER_ID": str(raw["DEFAULT_CUSTOMER_ID"]),
            "DEFAULT_CUSTOMER_NAME": str(raw["DEFAULT_CUSTOMER_NAME"]),
            "DEFAULT_CUSTOMER_CREDIT": _parse_decimal(
                "DEFAULT_CUSTOMER_CREDIT", raw["DEFAULT_CUSTOMER_CREDIT"]
            ),
            "DEFAULT_PRODUCT_ID": str(raw["DEFAULT_PRODUCT_ID"]),
            "DEFAULT_PRODUCT_NAME": str(raw["DEFAULT_PRODUCT_NAME"]),
            "DEFAULT_PRICE_PER_UNIT": _parse_decimal(
                "DEFAULT_PRICE_PER_UNIT", raw["DEFAULT_PRICE_PER_UNIT"]
            ),
            "DEMO_REQUESTED_QTY": _parse_int("DEMO_REQUESTED_QTY", raw["DEMO_REQUESTED_QTY"]),

            # Order ids
            "ORDER_ID_PREFIX": str(raw["ORDER_ID_PREFIX"]),
            "ORDER_ID_WIDTH": _parse_int("ORDER_ID_WIDTH", raw["ORDER_ID_WIDTH"], minimum=1),

            # Display
            "CURRENCY_SYMBOL": str(raw["CURRENCY_SYMBOL"]),
            "QUANTITY_UOM": str(raw["QUANTITY_UOM"]),

            # Business logic
            "TRACK_CUSTOMER_CREDIT": _parse_bool(raw["TRACK_CUSTOMER_CREDIT"]),

            # Logging
            "LOG_LEVEL": str(raw["LOG_LEVEL"]).upper(),
        }

    def _log_config_status(self):
        """Log configuration status for debugging"""
        logger.info("─" * 55)
        logger.info("📦 ALLOCATION CONFIGURATION")
        logger.info(f"   ✅ Total stock: {self.app_config['TOTAL_STOCK']}")
        logger.info(
            f"   ✅ Default customer: {self.app_config['DEFAULT_CUSTOMER_ID']} "
            f"(credit {self.app_config['DEFAULT_CUSTOMER_CREDIT']})"
        )
        logger.info(
            f"   ✅ Default product: {self.app_config['DEFAULT_PRODUCT_ID']} "
            f"@ {self.app_config['DEFAULT_PRICE_PER_UNIT']}"
        )
        logger.info(
            f"   ✅ Order ids: {self.app_config['ORDER_ID_PREFIX']}-"
            f"{'0' * self.app_config['ORDER_ID_WIDTH']}"
        )

        if self.app_config["TRACK_CUSTOMER_CREDIT"]:
            logger.info("   ℹ️  Customer credit: running balance per customer")
        else:
            logger.info("   ℹ️  Customer credit: each order checked against full credit")

        if not isinstance(logging.getLevelName(self.app_config["LOG_LEVEL"]), int):
            logger.warning(f"   ⚠️  Unknown LOG_LEVEL {self.app_config['LOG_LEVEL']}, using INFO")
        logger.info("─" * 55)

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting"""
        return self.app_config.get(key, default)

    def get_log_level(self) -> int:
        """Get numeric logging level"""
        level = logging.getLevelName(self.app_config["LOG_LEVEL"])
        return level if isinstance(level, int) else logging.INFO


# Create singleton instance
config = Config()

# Export all
__all__ = [
    'config',
    'Config',
    'DEFAULT_SETTINGS',
]
