import asyncio
from typing import Optional, Dict, Any
import httpx


async def http_request(method: str, url: str, *, config: Optional[Dict] = None) -> str:
    """
    Core HTTP helper. Returns the decoded response body.

    config keys:
      - timeout  (seconds, default 5.0)
      - retries  (extra attempts after the first, default 2)
      - backoff  (seconds, doubled after each failed attempt, default 0.2)
      - headers  (extra request headers)
    """
    cfg = dict(config or {})
    timeout = float(cfg.pop('timeout', 5.0))
    retries = int(cfg.pop('retries', 2))
    backoff = float(cfg.pop('backoff', 0.2))
    headers = dict(cfg.pop('headers', {}))

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        last_exc = None
        for attempt in range(retries + 1):
            try:
                resp = await client.request(method.upper(), url, headers=headers)
                if 200 <= resp.status_code < 300:
                    return resp.text
                preview = (resp.text or "")[:200]
                raise RuntimeError(f"HTTP {resp.status_code} for {url}: {preview}")
            except Exception as e:
                last_exc = e
                if attempt < retries:
                    await asyncio.sleep(backoff * (2 ** attempt))
                    continue
                raise last_exc


async def http_get(url: str, config: Optional[Dict[str, Any]] = None) -> str:
    return await http_request('GET', url, config=config)


__all__ = ["http_request", "http_get"]
