# app/tvdb/client.py
from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

MAX_PEOPLE_PAGES = 25
SHORT_PAGE = 50


class TvdbError(Exception):
    """Upstream failure; `status` and `payload` are passed through to API callers."""

    def __init__(self, message: str, status: int = 502, payload: Any = None, hint: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.payload = payload
        self.hint = hint


class TvdbAuthError(TvdbError):
    def __init__(self, message: str = "TVDB_APIKEY_missing"):
        super().__init__(message, status=401, hint="Set TVDB_APIKEY in the environment")


def _read_trim(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    try:
        return Path(path).read_text(encoding="utf-8").strip() or None
    except OSError:
        return None


class TvdbClient:
    """Thin requests wrapper around the TVDB v4 API with bearer-token refresh."""

    def __init__(
        self,
        base_url: str = "https://api4.thetvdb.com/v4",
        apikey: Optional[str] = None,
        pin: Optional[str] = None,
        token: Optional[str] = None,
        token_file: Optional[str] = None,
        timeout: float = 12,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.apikey = apikey
        self.pin = pin
        self.token_file = token_file
        self.timeout = timeout
        self.session = session or requests.Session()
        self._token = token
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg) -> "TvdbClient":
        return cls(
            base_url=cfg.get("TVDB_BASE_URL") or "https://api4.thetvdb.com/v4",
            apikey=cfg.get("TVDB_APIKEY"),
            pin=cfg.get("TVDB_PIN"),
            token=cfg.get("TVDB_TOKEN"),
            token_file=cfg.get("TVDB_TOKEN_FILE"),
            timeout=cfg.get("TVDB_TIMEOUT") or 12,
        )

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def login(self) -> str:
        if not self.apikey:
            raise TvdbAuthError()
        body = {"apikey": self.apikey}
        if self.pin:
            body["pin"] = self.pin
        try:
            r = self.session.post(f"{self.base_url}/login", json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TvdbError(f"TVDB_login_failed: {exc}") from exc
        if not r.ok:
            raise TvdbError("TVDB_login_failed", status=r.status_code, payload=_json_or_text(r))
        body = _json_or_text(r)
        token = (body.get("data") or {}).get("token") if isinstance(body, dict) else None
        if not token:
            raise TvdbError("TVDB_login_failed")

        with self._lock:
            self._token = token
        if self.token_file:
            try:
                path = Path(self.token_file)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(token, encoding="utf-8")
            except OSError:
                pass
        return token

    def token(self) -> str:
        with self._lock:
            if self._token:
                return self._token
        stored = _read_trim(self.token_file)
        if stored:
            with self._lock:
                self._token = stored
            return stored
        return self.login()

    def forget_token(self) -> None:
        with self._lock:
            self._token = None

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def _request_once(self, method: str, path: str, params: Optional[dict] = None) -> requests.Response:
        headers = {"Authorization": f"Bearer {self.token()}", "Accept": "application/json"}
        try:
            return self.session.request(
                method, f"{self.base_url}{path}", params=params or {}, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise TvdbError(str(exc)) from exc

    def request(self, method: str, path: str, params: Optional[dict] = None) -> Any:
        r = self._request_once(method, path, params)
        if r.status_code in (401, 403):
            self.forget_token()
            self.login()
            r = self._request_once(method, path, params)
        if not r.ok:
            raise TvdbError(f"TVDB {method} {path} failed", status=r.status_code, payload=_json_or_text(r))
        return _json_or_text(r)

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params)

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------
    def search(self, query: str, type: str = "movie", limit: int = 20) -> Dict[str, Any]:
        return self.get("/search", {"query": query, "type": type, "limit": limit})

    def movie_extended(self, movie_id: str, meta: Optional[str] = None) -> Dict[str, Any]:
        return self.get(f"/movies/{movie_id}/extended", {"meta": meta} if meta else None)

    def movie_people(self, movie_id: str, page: int = 0) -> Any:
        return self.get(f"/movies/{movie_id}/people", {"page": page})

    def movie_actors(self, movie_id: str) -> Any:
        return self.get(f"/movies/{movie_id}/actors")

    def fetch_all_people(self, movie_id: str) -> List[dict]:
        """Page through cast and crew, then append the actors endpoint if it answers."""
        results: List[dict] = []
        page = 0
        for _ in range(MAX_PEOPLE_PAGES):
            body = self.movie_people(movie_id, page)
            rows = _rows(body, "people")
            if not rows:
                break
            results.extend(rows)
            nxt = ((body or {}).get("links") or {}).get("next") if isinstance(body, dict) else None
            if nxt is None:
                if len(rows) < SHORT_PAGE:
                    break
                page += 1
            else:
                try:
                    page = int(nxt)
                except (TypeError, ValueError):
                    break
        try:
            results.extend(_rows(self.movie_actors(movie_id)))
        except TvdbError:
            pass
        return results


def _rows(body: Any, alt_key: Optional[str] = None) -> List[dict]:
    if isinstance(body, list):
        return body
    if not isinstance(body, dict):
        return []
    data = body.get("data")
    if isinstance(data, list):
        return data
    if alt_key and isinstance(body.get(alt_key), list):
        return body[alt_key]
    return []


def _json_or_text(r: requests.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return {"raw": r.text[:500]}
