"""Unit tests for utils.config and engine configuration."""

import logging
from decimal import Decimal

import pytest

import utils.config as config_module
from utils.config import DEFAULT_SETTINGS, Config
from utils.product_allocation.allocation_engine import AllocationConfig
from utils.product_allocation.demo_data import build_demo_state


@pytest.fixture
def local_env(monkeypatch):
    """Local mode with no .env file and a clean environment."""
    monkeypatch.setattr(config_module, 'is_running_on_streamlit_cloud', lambda: False)
    monkeypatch.setattr(config_module, 'load_dotenv', lambda *args, **kwargs: False)
    for key in DEFAULT_SETTINGS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(local_env):
    cfg = Config()

    assert cfg.is_cloud is False
    assert cfg.get_app_setting('TOTAL_STOCK') == 10
    assert cfg.get_app_setting('DEFAULT_PRICE_PER_UNIT') == Decimal('515.75')
    assert cfg.get_app_setting('DEFAULT_CUSTOMER_CREDIT') == Decimal('3000.00')
    assert cfg.get_app_setting('ORDER_ID_WIDTH') == 3
    assert cfg.get_app_setting('TRACK_CUSTOMER_CREDIT') is False
    assert cfg.get_app_setting('MISSING', 'fallback') == 'fallback'
    assert cfg.get_log_level() == logging.INFO


def test_environment_overrides(local_env):
    local_env.setenv('TOTAL_STOCK', '25')
    local_env.setenv('DEFAULT_PRICE_PER_UNIT', '99.90')
    local_env.setenv('TRACK_CUSTOMER_CREDIT', 'true')
    local_env.setenv('LOG_LEVEL', 'debug')

    cfg = Config()

    assert cfg.get_app_setting('TOTAL_STOCK') == 25
    assert cfg.get_app_setting('DEFAULT_PRICE_PER_UNIT') == Decimal('99.90')
    assert cfg.get_app_setting('TRACK_CUSTOMER_CREDIT') is True
    assert cfg.get_log_level() == logging.DEBUG


def test_unknown_log_level_falls_back_to_info(local_env):
    local_env.setenv('LOG_LEVEL', 'chatty')

    assert Config().get_log_level() == logging.INFO


@pytest.mark.parametrize(
    "key, value",
    [
        ('TOTAL_STOCK', 'ten'),
        ('TOTAL_STOCK', '-1'),
        ('ORDER_ID_WIDTH', '0'),
        ('DEFAULT_PRICE_PER_UNIT', '-5'),
        ('DEFAULT_CUSTOMER_CREDIT', 'lots'),
    ],
)
def test_invalid_values_raise(local_env, key, value):
    local_env.setenv(key, value)

    with pytest.raises(ValueError):
        Config()


def test_allocation_config_from_app_config(local_env):
    local_env.setenv('ORDER_ID_PREFIX', 'SO')
    local_env.setenv('TRACK_CUSTOMER_CREDIT', '1')

    engine_config = AllocationConfig.from_app_config(Config())

    assert engine_config.order_id_prefix == 'SO'
    assert engine_config.order_id_width == 3
    assert engine_config.track_customer_credit is True
    assert engine_config.default_price_per_unit == Decimal('515.75')
    assert engine_config.default_customer_id == 'company1'


def test_demo_state_from_config(local_env):
    state = build_demo_state(Config())

    assert state.total_stock == 10
    assert len(state.orders) == 1
    order = state.orders[0]
    assert order.id == 'ORDER-001'
    assert order.requested_qty == 10
    assert order.suggestion == 10
    assert order.allocated_qty == 0
    assert state.find_customer('company1').credit_remaining == Decimal('3000.00')
    assert state.find_product('product').price_per_unit == Decimal('515.75')
