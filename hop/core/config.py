from pathlib import Path
from typing import Any, Dict

from ..utils.files import load_json

# config.json is tracked; secrets.json stays local. Secrets win over config.
DEFAULTS: Dict[str, Any] = {
    "route_url": "https://forecast.predictwind.com/vodafone/Hoptoad.json",
    "blog_url": "https://forecast.predictwind.com/tracking/blog/Hoptoad",
    "post_link_template": "https://forecast.predictwind.com/tracking/display/Hoptoad?post={topic_id}",
    "user_agent": "HoptoadTracker/1.0",
    "spreadsheet_id": "",
    "google_credentials_path": "google_service_account.json",
    "sanity_project_id": "",
    "sanity_dataset": "production",
    "sanity_api_version": "v2021-11-23",
    "twilio_from_phone": "",
    "sms_enabled": True,
    "sms_country_prefix": "+1",
    "ingest_interval_s": 600,
    "reconcile_interval_s": 3600,
    "tick_s": 15,
    "content_write_delay_s": 0.1,
    "max_workers": 8,
    "sheets_rate_limit_s": 0.5,
}

def load_config(root: Path) -> Dict[str, Any]:
    cfg = dict(DEFAULTS)
    file_cfg = load_json(root / "config.json", {})
    if isinstance(file_cfg, dict):
        cfg.update(file_cfg)
    secrets = load_json(root / "secrets.json", {})
    if isinstance(secrets, dict):
        cfg.update(secrets)
    creds = cfg.get("google_credentials_path")
    if creds and not Path(creds).is_absolute():
        cfg["google_credentials_path"] = str(root / creds)
    return cfg
