import requests
from typing import Dict, Any, List, Optional

from ..core.constants import TWILIO_TIMEOUT_S

TWILIO_API = "https://api.twilio.com/2010-04-01"

class NotifyError(RuntimeError):
    """The SMS gateway refused a message."""

def to_e164(number: str, country_prefix: str = "+1") -> str:
    n = str(number).strip()
    if n.startswith("+"):
        return n
    return f"{country_prefix}{n}"

class TwilioSms:
    def __init__(self, cfg: Dict[str, Any]):
        self.cfg = cfg
        self.account_sid = str(cfg.get("twilio_account_sid", "") or "")
        self.auth_token = str(cfg.get("twilio_auth_token", "") or "")
        self.from_phone = str(cfg.get("twilio_from_phone", "") or "")
        self.country_prefix = str(cfg.get("sms_country_prefix", "+1") or "+1")

    def send(self, to_number: str, body: str, media_urls: Optional[List[str]] = None) -> str:
        """Send one message; returns the message sid."""
        if not self.account_sid or not self.auth_token:
            raise NotifyError("twilio credentials not configured")
        data: Dict[str, Any] = {
            "To": to_e164(to_number, self.country_prefix),
            "From": self.from_phone,
            "Body": body,
        }
        if media_urls:
            data["MediaUrl"] = list(media_urls)
        url = f"{TWILIO_API}/Accounts/{self.account_sid}/Messages.json"
        r = requests.post(url, data=data, auth=(self.account_sid, self.auth_token), timeout=TWILIO_TIMEOUT_S)
        if r.status_code not in (200, 201):
            raise NotifyError(f"sms to {data['To']} failed | HTTP {r.status_code} | {r.text[:200]!r}")
        return str(r.json().get("sid", ""))
