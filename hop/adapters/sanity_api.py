import json
import requests
from typing import Dict, Any, List, Optional

from ..core.constants import SANITY_TIMEOUT_S, DOC_POST, DOC_PHOTO
from ..utils.log import log_line

DEFAULT_API_VERSION = "v2021-11-23"

Q_POST_IDS = f'*[_type == "{DOC_POST}"]._id'
Q_POSTS = f'*[_type == "{DOC_POST}"]{{_id, title, html, replaceState}}'
Q_POST_BY_ID = f'*[_type == "{DOC_POST}" && _id == $id][0]{{_id, title, html, replaceState}}'
Q_PHOTOS_FOR_POST = f'*[_type == "{DOC_PHOTO}" && post._ref == $postId]'
Q_ALL_PHOTOS = f'*[_type == "{DOC_PHOTO}"]'
Q_ALL_POSTS = f'*[_type == "{DOC_POST}"]'

class ContentStoreError(RuntimeError):
    """A query or mutation was rejected by the content store."""

def _api_headers(cfg: Dict[str, Any]) -> Dict[str, str]:
    token = str(cfg.get("sanity_token", "") or "")
    ua = str(cfg.get("user_agent", "HoptoadTracker/1.0") or "HoptoadTracker/1.0")
    headers = {"User-Agent": ua}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers

def _base_url(cfg: Dict[str, Any]) -> str:
    project = str(cfg.get("sanity_project_id", "") or "")
    if not project:
        raise ContentStoreError("sanity_project_id not configured")
    version = str(cfg.get("sanity_api_version", DEFAULT_API_VERSION) or DEFAULT_API_VERSION)
    if not version.startswith("v"):
        version = "v" + version
    return f"https://{project}.api.sanity.io/{version}"

def _dataset(cfg: Dict[str, Any]) -> str:
    return str(cfg.get("sanity_dataset", "production") or "production")

class SanityStore:
    def __init__(self, cfg: Dict[str, Any]):
        self.cfg = cfg

    def query(self, groq: str, params: Optional[Dict[str, Any]] = None) -> Any:
        qs: Dict[str, str] = {"query": groq}
        for k, v in (params or {}).items():
            qs[f"${k}"] = json.dumps(v)
        url = f"{_base_url(self.cfg)}/data/query/{_dataset(self.cfg)}"
        r = requests.get(url, headers=_api_headers(self.cfg), params=qs, timeout=SANITY_TIMEOUT_S)
        if r.status_code != 200:
            raise ContentStoreError(f"query failed | HTTP {r.status_code} | {r.text[:200]!r}")
        return r.json().get("result")

    def mutate(self, mutations: List[Dict[str, Any]]) -> Dict[str, Any]:
        url = f"{_base_url(self.cfg)}/data/mutate/{_dataset(self.cfg)}"
        r = requests.post(
            url,
            headers=_api_headers(self.cfg),
            params={"returnIds": "true", "visibility": "sync"},
            json={"mutations": mutations},
            timeout=SANITY_TIMEOUT_S,
        )
        if r.status_code != 200:
            raise ContentStoreError(f"mutate failed | HTTP {r.status_code} | {r.text[:200]!r}")
        return r.json()

    # --- reads

    def fetch_post_ids(self) -> List[str]:
        return [str(i) for i in (self.query(Q_POST_IDS) or [])]

    def fetch_posts(self) -> Dict[str, Dict[str, Any]]:
        return {str(d["_id"]): d for d in (self.query(Q_POSTS) or []) if d.get("_id")}

    def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        return self.query(Q_POST_BY_ID, {"id": str(post_id)})

    # --- writes

    def create_if_absent(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        return self.mutate([{"createIfNotExists": doc}])

    def create_or_replace(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        return self.mutate([{"createOrReplace": doc}])

    def patch_set(self, doc_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self.mutate([{"patch": {"id": str(doc_id), "set": fields}}])

    def delete_by_query(self, groq: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"query": groq}
        if params:
            body["params"] = params
        res = self.mutate([{"delete": body}])
        log_line(f"CONTENT DELETE | query={groq!r} | results={len(res.get('results') or [])}")
        return res

    def delete_photos_for_post(self, post_id: str) -> Dict[str, Any]:
        return self.delete_by_query(Q_PHOTOS_FOR_POST, {"postId": str(post_id)})
