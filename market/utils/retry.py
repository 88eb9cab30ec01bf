# market/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from market.domain.errors import TrackingNumberConflict
from market.utils.settings import CHECKOUT_RETRY_ATTEMPTS


def checkout_retry():
    #tracking numbers are random, a collision is retried with a fresh number
    return retry(
        reraise=True,
        stop=stop_after_attempt(CHECKOUT_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.01, min=0.01, max=0.2),
        retry=retry_if_exception_type(TrackingNumberConflict),
    )
