from __future__ import annotations

import argparse
import asyncio
import json

from loca.core.config import settings
from loca.services.emailer_service import build_emailer_client
from loca.services.notification_service import NotificationRequest, compute_term


async def _send(document: str, tenant_id: str, term: str) -> None:
    request = NotificationRequest(document=document, tenant_id=tenant_id, term=term)
    async with build_emailer_client() as emailer:
        statuses = await emailer.send(request.to_payload())
    print("recipients:", len(statuses))
    for status in statuses:
        print(json.dumps(status, ensure_ascii=False))


def main() -> None:
    parser = argparse.ArgumentParser(description="Emailer service connectivity check")
    parser.add_argument("tenant_id", help="occupant id sent as recordId")
    parser.add_argument("--document", default="rentcall", help="emailer template name")
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--month", type=int, required=True)
    args = parser.parse_args()

    term = compute_term(args.year, args.month)
    print(f"POST {settings.emailer_url} (timeout={settings.emailer_timeout}s, term={term})")
    asyncio.run(_send(args.document, args.tenant_id, term))


if __name__ == "__main__":
    main()
