# shoppingcart/services/product_client.py
import requests

from shoppingcart.domain.buyable import ProductBuyable
from shoppingcart.domain.errors import ProductNotFound
from shoppingcart.utils.retry import http_retry
from shoppingcart.utils.settings import PRODUCT_SERVICE_URL, PRODUCT_SERVICE_TIMEOUT
from shoppingcart.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    def __init__(self, base_url: str | None = None, timeout: int | None = None, session: requests.Session | None = None):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout or PRODUCT_SERVICE_TIMEOUT
        self.session = session or requests.Session()

    @http_retry()
    def fetch_product(self, product_id: int) -> dict:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = self.session.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            raise ProductNotFound(f"Product {product_id} not found")
        resp.raise_for_status()
        return resp.json()

    def get_buyable(self, product_id: int) -> ProductBuyable:
        return ProductBuyable.model_validate(self.fetch_product(product_id))

    def find_buyable(self, product_id: int) -> ProductBuyable | None:
        """Loader dla ModelResolver: brak produktu -> None, pozostale bledy leca dalej."""
        try:
            return self.get_buyable(product_id)
        except ProductNotFound:
            return None
