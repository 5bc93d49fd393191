from dataclasses import dataclass
from urllib.parse import quote

import requests

from app.core.config import settings
from app.core.errors import ServiceNotConfigured


@dataclass
class AirtableConfig:
    api_key: str
    base_id: str
    table_name: str
    timeout: int = 25


class AirtableError(RuntimeError):
    """category: auth | not_found | schema | remote"""

    def __init__(self, category: str, message: str, status_code: int | None = None):
        self.category = category
        self.status_code = status_code
        super().__init__(message)


def _error_for(status: int, detail) -> AirtableError:
    if status in (401, 403):
        return AirtableError("auth", "Airtable authentication failed. Check AIRTABLE_API_KEY and its base permissions.", status)
    if status == 404:
        return AirtableError("not_found", "Airtable base or table not found. Check AIRTABLE_BASE_ID and AIRTABLE_TABLE_NAME.", status)
    if status == 422:
        return AirtableError("schema", f"Airtable rejected the record; a field name or type does not match the table: {detail}", status)
    return AirtableError("remote", f"Airtable {status}: {detail}", status)


class AirtableClient:
    def __init__(self, cfg: AirtableConfig):
        self.cfg = cfg

    @property
    def table_url(self) -> str:
        return f"https://api.airtable.com/v0/{self.cfg.base_id}/{quote(self.cfg.table_name, safe='')}"

    def create_record(self, fields: dict) -> dict:
        try:
            r = requests.post(
                self.table_url,
                json={"records": [{"fields": fields}]},
                headers={"Authorization": f"Bearer {self.cfg.api_key}", "Content-Type": "application/json"},
                timeout=self.cfg.timeout,
            )
        except requests.RequestException as e:
            raise AirtableError("remote", f"Airtable request failed: {e}") from e
        try:
            data = r.json() if r.text else {}
        except ValueError:
            data = {"raw": r.text[:200]}
        if r.status_code >= 400:
            err = data.get("error") if isinstance(data, dict) else None
            detail = err.get("message") if isinstance(err, dict) else (err or data)
            raise _error_for(r.status_code, detail)
        records = data.get("records") or []
        if not records or not records[0].get("id"):
            raise AirtableError("remote", "Airtable response did not include the created record")
        return records[0]


def get_airtable_client() -> AirtableClient:
    missing = [k for k in ("AIRTABLE_API_KEY", "AIRTABLE_BASE_ID", "AIRTABLE_TABLE_NAME") if not getattr(settings, k)]
    if missing:
        raise ServiceNotConfigured("Airtable", missing)
    return AirtableClient(AirtableConfig(
        api_key=settings.AIRTABLE_API_KEY,
        base_id=settings.AIRTABLE_BASE_ID,
        table_name=settings.AIRTABLE_TABLE_NAME,
    ))
