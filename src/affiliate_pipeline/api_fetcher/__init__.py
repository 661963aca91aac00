"""
Affiliate Pipeline - API Fetcher Module

Client for the Zanox publisher API: product search, lead/sale reports and
commission rates, returned as normalized domain objects.

Usage:
------
    from affiliate_pipeline.api_fetcher import ZanoxClient

    client = ZanoxClient()
    products = client.search_products("running shoes", tracking_code="newsletter", per_page=20)
    transactions = client.get_transactions(from_date=date(2026, 10, 1), to_date=date(2026, 10, 7))
    rates = client.get_commission_rates("1234")

Configuration:
--------------
Set these environment variables:

    ZANOX_CONNECT_ID    - Publisher connect id (required)
    ZANOX_SECRET_KEY    - Signing secret (required)
    ZANOX_AD_SPACE_ID   - Ad space id (required)
    ZANOX_BASE_URL      - Override the API root
    ZANOX_TIMEOUT_SEC   - Request timeout (default: 15)
"""

# -----------------------------------------------------------------------------
# Transport
# -----------------------------------------------------------------------------
from .client_base import (
    BaseAPIClient,
    TransportError,
    TransportTimeout,
)

# -----------------------------------------------------------------------------
# Errors and configuration
# -----------------------------------------------------------------------------
from .errors import (
    ZanoxError,
    ZanoxConfigError,
    UnexpectedStatusError,
    MissingDataError,
    UnknownEnumValueError,
)
from .config import ZanoxConfig

# -----------------------------------------------------------------------------
# Signing and aggregation
# -----------------------------------------------------------------------------
from .signer import RequestSigner
from .pagination import collect_pages, collect_report_days, sum_report_totals

# -----------------------------------------------------------------------------
# Domain schema and normalization
# -----------------------------------------------------------------------------
from .schema import (
    ApiRequest,
    CommissionRate,
    Product,
    Program,
    Transaction,
    TransactionStatus,
    ValueType,
)
from .normalizer import (
    commission_rate_from_json,
    product_from_json,
    program_from_json,
    transaction_from_json,
)

# -----------------------------------------------------------------------------
# Zanox client
# -----------------------------------------------------------------------------
from .zanox_api import ZanoxClient


__all__ = [
    # Transport
    "BaseAPIClient",
    "TransportError",
    "TransportTimeout",
    # Errors / config
    "ZanoxError",
    "ZanoxConfigError",
    "UnexpectedStatusError",
    "MissingDataError",
    "UnknownEnumValueError",
    "ZanoxConfig",
    # Signing / aggregation
    "RequestSigner",
    "collect_pages",
    "collect_report_days",
    "sum_report_totals",
    # Schema
    "ApiRequest",
    "CommissionRate",
    "Product",
    "Program",
    "Transaction",
    "TransactionStatus",
    "ValueType",
    # Normalizer
    "commission_rate_from_json",
    "product_from_json",
    "program_from_json",
    "transaction_from_json",
    # Client
    "ZanoxClient",
]
