"""Tenant notification dispatch.

A dispatch runs in two phases.  Tenant ids are first resolved one after
the other; unknown tenants are logged and dropped.  One emailer call per
resolved tenant is then issued concurrently, and the per-recipient
statuses are flattened in tenant order, each tagged with the tenant name.

When a call fails, ``demo_mode`` decides between a synthetic failed
outcome for that tenant and failing the whole dispatch.  ``join_policy``
decides whether the whole-dispatch failure is raised on the first error or
after every call has settled.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable

from loca.core.errors import DispatchAggregateError, EmailerError, TenantNotFoundError
from loca.services.emailer_service import EmailerClient
from loca.services.tenant_resolver import TenantResolver

logger = logging.getLogger(__name__)

DEMO_MODE_ERROR_MESSAGE = "demo mode, mail cannot be sent"


class JoinPolicy(str, Enum):
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


@dataclass(frozen=True)
class NotificationRequest:
    document: str
    tenant_id: str
    term: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "templateName": self.document,
            "recordId": self.tenant_id,
            "params": {"term": self.term},
        }


@dataclass(frozen=True)
class PendingNotification:
    name: str
    request: NotificationRequest


@dataclass
class DispatchResult:
    outcomes: list[dict[str, Any]] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)


def compute_term(year: int, month: int) -> str:
    """Billing term key: YYYY MM, day 01, hour 00 (2023-05 -> "2023050100")."""
    start = datetime(year, month, 1)
    return f"{start.year:04d}{start.month:02d}{start.day:02d}{start.hour:02d}"


async def dispatch(
    resolver: TenantResolver,
    emailer: EmailerClient,
    realm_id: int,
    document: str,
    tenant_ids: list[str],
    year: int,
    month: int,
    *,
    demo_mode: bool = False,
    join_policy: JoinPolicy = JoinPolicy.FAIL_FAST,
) -> DispatchResult:
    term = compute_term(year, month)
    pending, unresolved = await _resolve_tenants(resolver, realm_id, tenant_ids, document, term)
    if unresolved:
        logger.warning(
            "%d tenant(s) dropped from %s dispatch (realm_id=%s): %s",
            len(unresolved),
            document,
            realm_id,
            ", ".join(unresolved),
        )
    if not pending:
        return DispatchResult(outcomes=[], unresolved=unresolved)

    async with emailer:
        calls = [_send(emailer, item.request, demo_mode=demo_mode) for item in pending]
        if join_policy is JoinPolicy.COLLECT_ALL:
            results = await asyncio.gather(*calls, return_exceptions=True)
            failures = [
                (item.request.tenant_id, result)
                for item, result in zip(pending, results)
                if isinstance(result, BaseException)
            ]
            if failures:
                raise DispatchAggregateError(failures)
        else:
            results = await _join_fail_fast(calls)

    outcomes = [
        {"name": item.name, **status}
        for item, statuses in zip(pending, results)
        for status in statuses
    ]
    return DispatchResult(outcomes=outcomes, unresolved=unresolved)


async def _resolve_tenants(
    resolver: TenantResolver,
    realm_id: int,
    tenant_ids: list[str],
    document: str,
    term: str,
) -> tuple[list[PendingNotification], list[str]]:
    pending: list[PendingNotification] = []
    unresolved: list[str] = []
    for tenant_id in tenant_ids:
        try:
            tenant = await resolver.resolve(realm_id, tenant_id)
        except TenantNotFoundError as exc:
            logger.error("%s", exc)
            unresolved.append(tenant_id)
            continue
        pending.append(
            PendingNotification(
                name=tenant.display_name,
                request=NotificationRequest(document=document, tenant_id=tenant_id, term=term),
            )
        )
    return pending, unresolved


async def _join_fail_fast(
    calls: list[Awaitable[list[dict[str, Any]]]],
) -> list[list[dict[str, Any]]]:
    tasks = [asyncio.ensure_future(call) for call in calls]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    failed = next((t for t in tasks if t in done and t.exception() is not None), None)
    if failed is None:
        return [task.result() for task in tasks]

    if pending:
        # siblings are not cancelled; they finish on the shared client and
        # their results are discarded
        logger.debug("discarding %d in-flight notification(s) after failure", len(pending))
        await asyncio.gather(*pending, return_exceptions=True)
    raise failed.exception()


async def _send(
    emailer: EmailerClient,
    request: NotificationRequest,
    *,
    demo_mode: bool,
) -> list[dict[str, Any]]:
    payload = request.to_payload()
    try:
        statuses = await emailer.send(payload)
        return [_to_outcome(entry) for entry in statuses]
    except (EmailerError, KeyError, TypeError) as exc:
        logger.error("POST %s failed: %s", emailer.url, exc)
        logger.error("data sent: %s", payload)
        if not demo_mode:
            raise
        logger.info("email status fallback workflow activated in demo mode")
        return [
            {
                "document": request.document,
                "tenantId": request.tenant_id,
                "term": request.term,
                "error": {"message": DEMO_MODE_ERROR_MESSAGE},
            }
        ]


def _to_outcome(entry: dict[str, Any]) -> dict[str, Any]:
    outcome = {
        "document": entry["templateName"],
        "tenantId": entry["recordId"],
        "term": entry["params"]["term"],
        "email": entry.get("email"),
        "status": entry.get("status"),
    }
    if entry.get("error") is not None:
        outcome["error"] = entry["error"]
    return outcome
