import base64
import logging
from datetime import datetime
from enum import Enum

import requests as r

from bitfreeze.errors import GatewayUnavailable

log = logging.getLogger("gateway")

SUCCESS_RESULT_CODE = 0


class DarajaEnvironment(Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"


DARAJA_BASE_URLS = {
    DarajaEnvironment.SANDBOX: "https://sandbox.safaricom.co.ke",
    DarajaEnvironment.PRODUCTION: "https://api.safaricom.co.ke",
}


class DarajaGateway:
    """Lipa na M-PESA STK push client."""

    token_endpoint = "/oauth/v1/generate"
    stk_push_endpoint = "/mpesa/stkpush/v1/processrequest"
    callback_path = "/api/mpesa/callback"

    def __init__(
        self,
        consumer_key,
        consumer_secret,
        shortcode,
        passkey,
        callback_base,
        environment="sandbox",
        timeout=20,
    ):
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.shortcode = shortcode
        self.passkey = passkey
        self.callback_base = callback_base
        self.environment = DarajaEnvironment(environment)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "DarajaGateway":
        return cls(
            config.get("MPESA_CONSUMER_KEY"),
            config.get("MPESA_CONSUMER_SECRET"),
            config.get("MPESA_SHORTCODE"),
            config.get("MPESA_PASSKEY"),
            config.get("MPESA_CALLBACK_BASE"),
            environment=config.get("MPESA_ENV") or "sandbox",
            timeout=config.get("MPESA_TIMEOUT_SECONDS") or 20,
        )

    @property
    def api_url(self) -> str:
        return DARAJA_BASE_URLS[self.environment]

    @property
    def callback_url(self) -> str:
        return f"{self.callback_base.rstrip('/')}{self.callback_path}"

    def is_configured(self) -> bool:
        return all(
            (self.consumer_key, self.consumer_secret, self.shortcode, self.passkey, self.callback_base)
        )

    @staticmethod
    def timestamp(now: datetime = None) -> str:
        return (now or datetime.now()).strftime("%Y%m%d%H%M%S")

    def password(self, timestamp: str) -> str:
        raw = f"{self.shortcode}{self.passkey}{timestamp}".encode()
        return base64.b64encode(raw).decode()

    @staticmethod
    def normalize_phone(phone: str) -> str:
        return phone.strip().lstrip("+")

    def get_access_token(self) -> str:
        credentials = base64.b64encode(f"{self.consumer_key}:{self.consumer_secret}".encode()).decode()
        try:
            response = r.get(
                f"{self.api_url}{self.token_endpoint}",
                params={"grant_type": "client_credentials"},
                headers={"Authorization": f"Basic {credentials}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()["access_token"]
        except (KeyError, r.exceptions.RequestException) as e:
            log.error(f"Failed to obtain Daraja access token: {e}")
            raise GatewayUnavailable("Payment provider authentication failed") from e

    def build_stk_push_body(self, phone: str, amount: int, reference: str, description: str, timestamp: str) -> dict:
        phone = self.normalize_phone(phone)
        return {
            "BusinessShortCode": self.shortcode,
            "Password": self.password(timestamp),
            "Timestamp": timestamp,
            "TransactionType": "CustomerPayBillOnline",
            "Amount": int(round(amount)),
            "PartyA": phone,
            "PartyB": self.shortcode,
            "PhoneNumber": phone,
            "CallBackURL": self.callback_url,
            "AccountReference": reference,
            "TransactionDesc": description,
        }

    def request_push(self, phone: str, amount: int, reference: str, description: str = "Bitfreeze deposit") -> str:
        """
        Start an STK push prompt on the payer's phone.

        Returns the provider's checkout reference used to correlate the
        asynchronous callback. Any network, credential or provider error is
        raised as GatewayUnavailable.
        """
        if not self.is_configured():
            raise GatewayUnavailable("Payment provider is not configured")

        token = self.get_access_token()
        body = self.build_stk_push_body(phone, amount, reference, description, self.timestamp())
        try:
            log.info(f"Requesting STK push of KES {body['Amount']} for reference {reference}")
            response = r.post(
                f"{self.api_url}{self.stk_push_endpoint}",
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (ValueError, r.exceptions.RequestException) as e:
            log.error(f"STK push request failed for reference {reference}: {e}")
            raise GatewayUnavailable("Payment provider request failed") from e

        gateway_ref = data.get("CheckoutRequestID") or data.get("MerchantRequestID")
        if not gateway_ref:
            log.error(f"STK push response for reference {reference} carried no checkout id")
            raise GatewayUnavailable("Payment provider returned no reference")
        return gateway_ref


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def parse_callback(body: dict) -> tuple:
    """
    Extract (gateway_ref, success) from a Daraja callback body.

    Accepts both the nested stkCallback envelope and flat bodies. gateway_ref
    is None when the body carries no checkout id.
    """
    body = _as_dict(body)
    stk = _as_dict(_as_dict(body.get("Body")).get("stkCallback"))
    gateway_ref = (
        stk.get("CheckoutRequestID")
        or body.get("CheckoutRequestID")
        or body.get("MerchantRequestID")
    )
    result_code = stk.get("ResultCode", body.get("ResultCode"))
    if result_code is not None:
        success = str(result_code).strip() == str(SUCCESS_RESULT_CODE)
    else:
        status = body.get("status") or body.get("Status") or ""
        success = str(status).lower() == "success"
    return gateway_ref, success
