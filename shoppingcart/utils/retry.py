# shoppingcart/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception
import requests


def _is_transient(exc: BaseException) -> bool:
    # 4xx to blad klienta - ponawianie nic nie zmieni
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return exc.response.status_code >= 500
    return isinstance(exc, requests.RequestException)


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception(_is_transient),
    )
