from __future__ import annotations

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class CaptchaVerifier:
    """Checks a client CAPTCHA token against a siteverify-style endpoint.

    Works with Cloudflare Turnstile, Google reCAPTCHA and hCaptcha: all three
    take ``secret`` and ``response`` form fields and answer with a JSON body
    carrying a ``success`` flag.

    Verification is fail-closed: a timeout, network error, non-2xx answer or
    unreadable body counts as a failed verification. ``verify`` never raises.
    """

    def __init__(
        self,
        secret_key: str,
        client: httpx.Client,
        *,
        verify_url: str,
        timeout: float = 5.0,
    ) -> None:
        self.secret_key = secret_key
        self.client = client
        self.verify_url = verify_url
        self.timeout = timeout

        if not secret_key:
            logger.warning("CAPTCHA secret key is not set; every verification will fail")

    def verify(self, token: Optional[str], remote_ip: Optional[str] = None) -> bool:
        if not token:
            return False
        if not self.secret_key:
            logger.error("CAPTCHA verification attempted without a secret key")
            return False

        payload = {"secret": self.secret_key, "response": token}
        if remote_ip:
            payload["remoteip"] = remote_ip

        try:
            res = self.client.post(self.verify_url, data=payload, timeout=self.timeout)
            res.raise_for_status()
            data = res.json()
        except httpx.TimeoutException:
            logger.error("CAPTCHA verification timed out")
            return False
        except httpx.HTTPStatusError as e:
            logger.error("CAPTCHA service returned HTTP %s", e.response.status_code)
            return False
        except httpx.HTTPError as e:
            logger.error("CAPTCHA verification network error: %s", e)
            return False
        except ValueError:
            logger.error("CAPTCHA service returned a non-JSON body")
            return False

        if isinstance(data, dict) and data.get("success") is True:
            return True

        codes = data.get("error-codes", []) if isinstance(data, dict) else []
        logger.info("CAPTCHA token rejected: %s", codes)
        return False
