from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .client_base import BaseAPIClient
from .config import ZanoxConfig
from .errors import MissingDataError, UnexpectedStatusError
from .normalizer import (
    NETWORK_KEY,
    TRACKING_CODE_PARAM,
    commission_rate_from_json,
    product_from_json,
    transaction_from_json,
    dig,
    unwrap_list,
)
from .pagination import DateLike, collect_pages, collect_report_days, sum_report_totals
from .schema import ApiRequest, CommissionRate, Product, Transaction
from .signer import RequestSigner


logger = logging.getLogger(__name__)

REPORT_TYPES = ("lead", "sale")


class ZanoxClient:
    """
    Client for the Zanox publisher API (JSON, 2011-03-01).

    Every call is described by an immutable ApiRequest, signed, sent once
    and accepted only on HTTP 200. Request parameters never live on the
    client; the underlying requests.Session is not guaranteed thread-safe,
    so give each thread its own client.

    Usage:
        client = ZanoxClient()                       # config from ZANOX_* env vars
        products = client.search_products("shoes", tracking_code="abc", per_page=20)
        sales = client.get_transactions(from_date=date(2026, 10, 1))
    """

    KEY = NETWORK_KEY
    MAX_PER_PAGE = 50
    TRACKING_CODE_PARAM = TRACKING_CODE_PARAM

    def __init__(
        self,
        config: Optional[ZanoxConfig] = None,
        transport: Optional[BaseAPIClient] = None,
    ) -> None:
        self.config = config or ZanoxConfig.from_env()
        self.transport = transport or BaseAPIClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_sec,
        )
        self.signer = RequestSigner(self.config.connect_id, self.config.secret_key)
        logger.info("ZanoxClient initialized for %s", self.config.base_url)

    # -------------------------------------------------
    # Request plumbing
    # -------------------------------------------------
    def call(self, request: ApiRequest) -> str:
        """Send one signed GET and return the body; anything but 200 is fatal."""
        headers = self.signer.sign(request.endpoint, base_headers=self.transport.default_headers)
        response = self.transport.send_get(request.endpoint, params=request.params, headers=headers)

        if response.status_code != 200:
            raise UnexpectedStatusError(response.status_code, self.transport.build_url(request.endpoint))
        return response.text

    def call_json(self, request: ApiRequest) -> Dict[str, Any]:
        body = self.call(request)
        try:
            data = json.loads(body)
        except ValueError as e:
            raise MissingDataError("Response body is not valid JSON", body) from e
        if not isinstance(data, dict):
            raise MissingDataError("Expected a JSON object", body)
        return data

    # -------------------------------------------------
    # Products
    # -------------------------------------------------
    @staticmethod
    def _product_search_request(
        keyword: Optional[str],
        programs: Optional[Sequence[str]],
        page: int,
        items: Optional[int],
    ) -> ApiRequest:
        params: Dict[str, Any] = {}
        if keyword is not None:
            params["q"] = keyword
        if programs is not None:
            params["programs"] = ",".join(str(p) for p in programs)
        params["page"] = page
        if items is not None:
            params["items"] = items
        return ApiRequest("/products", params)

    def search_products(
        self,
        keyword: Optional[str] = None,
        programs: Optional[Sequence[str]] = None,
        tracking_code: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> List[Product]:
        """
        Return up to `per_page` products, fetching as many pages as needed.
        See https://developer.zanox.com/web/guest/publisher-api-2011/get-products
        """

        def fetch_page(page_index: int, items: int) -> List[Dict[str, Any]]:
            data = self.call_json(self._product_search_request(keyword, programs, page_index, items))
            return unwrap_list(dig(data, "productItems", None), "productItem")

        raw_items = collect_pages(fetch_page, page, per_page, max_page_size=self.MAX_PER_PAGE)
        products = [product_from_json(item, tracking_code) for item in raw_items]
        logger.info("Fetched %s products (keyword=%r)", len(products), keyword)
        return products

    def count_products(
        self,
        keyword: Optional[str] = None,
        programs: Optional[Sequence[str]] = None,
    ) -> int:
        data = self.call_json(self._product_search_request(keyword, programs, 1, 1))
        try:
            return int(data.get("total") or 0)
        except (TypeError, ValueError) as e:
            raise MissingDataError("Field 'total' is not an integer", data) from e

    def get_product(self, product_id: str, tracking_code: Optional[str] = None) -> Product:
        """See https://developer.zanox.com/web/guest/publisher-api-2011/get-products-product"""
        data = self.call_json(ApiRequest(f"/products/product/{product_id}"))
        item = dig(data, "productItem.0", None)
        if item is None:
            raise MissingDataError(f"Got null product for id {product_id}", data)
        return product_from_json(item, tracking_code)

    # -------------------------------------------------
    # Reports
    # -------------------------------------------------
    def _report_fetcher(
        self,
        report_type: str,
        programs: Optional[Sequence[str]],
        page: int,
        per_page: Optional[int],
    ):
        params: Dict[str, Any] = {}
        if programs is not None:
            params["programs"] = ",".join(str(p) for p in programs)
        params["page"] = page
        if per_page is not None:
            params["items"] = per_page

        def fetch_day(day: date) -> Dict[str, Any]:
            endpoint = f"/reports/{report_type}s/date/{day.isoformat()}"
            logger.debug("Fetching %s report for %s", report_type, day.isoformat())
            return self.call_json(ApiRequest(endpoint, dict(params)))

        return fetch_day

    def get_report_items(
        self,
        report_type: str,
        programs: Optional[Sequence[str]] = None,
        from_date: DateLike = None,
        to_date: DateLike = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> List[Transaction]:
        """
        Transactions of one report type ('lead' or 'sale') across the window.
        See https://developer.zanox.com/web/guest/publisher-api-2011/get-sales-date
        """
        if report_type not in REPORT_TYPES:
            raise ValueError(f"report_type must be one of {REPORT_TYPES}, got {report_type!r}")

        fetch_day = self._report_fetcher(report_type, programs, page, per_page)
        raw_items = collect_report_days(fetch_day, report_type, from_date, to_date)
        return [transaction_from_json(item) for item in raw_items]

    def get_transactions(
        self,
        programs: Optional[Sequence[str]] = None,
        from_date: DateLike = None,
        to_date: DateLike = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> List[Transaction]:
        """Leads followed by sales; the two windows are walked independently."""
        transactions: List[Transaction] = []
        for report_type in REPORT_TYPES:
            transactions.extend(
                self.get_report_items(report_type, programs, from_date, to_date, page, per_page)
            )
        logger.info("Fetched %s transactions", len(transactions))
        return transactions

    def count_transactions(
        self,
        programs: Optional[Sequence[str]] = None,
        from_date: DateLike = None,
        to_date: DateLike = None,
    ) -> int:
        return sum(
            sum_report_totals(self._report_fetcher(report_type, programs, 1, 1), from_date, to_date)
            for report_type in REPORT_TYPES
        )

    # -------------------------------------------------
    # Commission rates
    # -------------------------------------------------
    def get_commission_rates(self, program_id: str) -> List[CommissionRate]:
        endpoint = (
            f"/programapplications/program/{program_id}"
            f"/adspace/{self.config.ad_space_id}/trackingcategories"
        )
        data = self.call_json(ApiRequest(endpoint))
        items = unwrap_list(dig(data, "trackingCategoryItem", None), "trackingCategoryItem")
        return [commission_rate_from_json(program_id, item) for item in items]

    def count_commission_rates(self, program_id: str) -> int:
        # TODO: follow further pages once the trackingcategories endpoint is confirmed to paginate
        return len(self.get_commission_rates(program_id))
