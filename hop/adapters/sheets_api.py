"""
Google Sheets index: Locations, Blog Posts and SMS Subscribers tabs.

Each tab is keyed by its first column. The sheet is a human-auditable log of
what was ingested; it is read for seen ids and appended to in batches.
"""

import random
import time
from typing import Any, Dict, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..core.constants import SHEET_SUBSCRIBERS
from ..utils.log import log_line

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

RETRY_STATUSES = (429, 500, 502, 503, 504)

def _col_letter(n: int) -> str:
    res = ""
    while n:
        n, r = divmod(n - 1, 26)
        res = chr(65 + r) + res
    return res

def _cell(v: Any) -> Any:
    if v is None:
        return ""
    if isinstance(v, (bool, int, float)):
        return v
    return str(v)

def _dict_to_row(d: Dict[str, Any], headers: List[str]) -> List[Any]:
    return [_cell(d.get(h)) for h in headers]

def _unique_nonempty(values: List[Any]) -> List[str]:
    out: List[str] = []
    seen = set()
    for v in values:
        s = str(v).strip() if v is not None else ""
        if s and s not in seen:
            seen.add(s)
            out.append(s)
    return out

def _http_status(e: HttpError) -> Optional[int]:
    status = getattr(e, "status_code", None)
    if status is None and getattr(e, "resp", None) is not None:
        status = getattr(e.resp, "status", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None

class SheetsIndex:
    def __init__(self, cfg: Dict[str, Any], values_service=None):
        self.cfg = cfg
        self.spreadsheet_id = str(cfg.get("spreadsheet_id") or "")
        self.rate_limit_s = float(cfg.get("sheets_rate_limit_s", 0.5) or 0)
        self.max_attempts = int(cfg.get("sheets_max_attempts", 8) or 1)
        self._values = values_service
        self._last_call_ts = 0.0

    def _service(self):
        if self._values is not None:
            return self._values
        creds_path = self.cfg.get("google_credentials_path")
        if not creds_path:
            raise RuntimeError("google_credentials_path not configured")
        creds = service_account.Credentials.from_service_account_file(str(creds_path), scopes=SCOPES)
        root = build("sheets", "v4", credentials=creds, cache_discovery=False)
        self._values = root.spreadsheets().values()
        return self._values

    def _rate_limit(self) -> None:
        if self.rate_limit_s <= 0:
            return
        wait = self.rate_limit_s - (time.time() - self._last_call_ts)
        if wait > 0:
            time.sleep(wait)
        self._last_call_ts = time.time()

    def _execute(self, req, base: float = 0.8, jitter: float = 0.5):
        attempt = 0
        while True:
            try:
                self._rate_limit()
                return req.execute(num_retries=0)
            except HttpError as e:
                status = _http_status(e)
                if status not in RETRY_STATUSES:
                    raise
                attempt += 1
                if attempt >= self.max_attempts:
                    raise
                sleep_s = base * (2 ** (attempt - 1)) + random.uniform(0, jitter)
                log_line(f"Sheets API {status} | backoff {sleep_s:.2f}s ({attempt}/{self.max_attempts})", "WARN")
                time.sleep(sleep_s)

    def read_keys(self, title: str) -> List[str]:
        """First-column values below the header row; blanks dropped, de-duplicated in order."""
        values = self._service()
        resp = self._execute(values.get(spreadsheetId=self.spreadsheet_id, range=f"{title}!A2:A"))
        rows = resp.get("values", []) or []
        return _unique_nonempty([row[0] if row else "" for row in rows])

    def read_subscribers(self) -> List[str]:
        return self.read_keys(SHEET_SUBSCRIBERS)

    def _ensure_headers(self, title: str, headers: List[str]) -> None:
        values = self._service()
        resp = self._execute(values.get(spreadsheetId=self.spreadsheet_id, range=f"{title}!1:1"))
        current = resp.get("values", [[]])[0] if resp.get("values") else []
        if current:
            return
        self._execute(values.update(
            spreadsheetId=self.spreadsheet_id,
            range=f"{title}!A1:{_col_letter(len(headers))}1",
            valueInputOption="RAW",
            body={"values": [headers]},
        ))

    def append_rows(self, title: str, headers: List[str], rows: List[Dict[str, Any]]) -> int:
        """One batch append. Returns the number of rows written (0 means no API call)."""
        if not rows:
            return 0
        self._ensure_headers(title, headers)
        values = self._service()
        self._execute(values.append(
            spreadsheetId=self.spreadsheet_id,
            range=f"{title}!A:{_col_letter(len(headers))}",
            valueInputOption="RAW",
            insertDataOption="INSERT_ROWS",
            body={"values": [_dict_to_row(r, headers) for r in rows]},
        ))
        return len(rows)
