import asyncio
from typing import Optional, Sequence

from services.product_verification import BatchResult, Deadline, LineItem, ProductVerifier


def _semaphore(concurrency: int) -> asyncio.Semaphore:
    return asyncio.Semaphore(max(1, concurrency))


async def _verify_one(
    verifier: ProductVerifier,
    index: int,
    item: LineItem,
    deadline: Deadline,
    semaphore: asyncio.Semaphore,
):
    async with semaphore:
        return await asyncio.to_thread(verifier.verify_item, index, item, deadline)


async def verify_batch_parallel(
    verifier: ProductVerifier,
    items: Sequence[LineItem],
    concurrency: Optional[int] = None,
    deadline_seconds: Optional[float] = None,
) -> BatchResult:
    """Score line items on worker threads; outcomes keep input order."""
    if concurrency is None:
        from config import settings

        concurrency = settings.verification_concurrency
    verifier.require_catalog()
    items = list(items)
    seconds = deadline_seconds if deadline_seconds is not None else verifier.deadline_seconds
    deadline = Deadline(seconds)
    semaphore = _semaphore(concurrency)
    coros = [_verify_one(verifier, i, item, deadline, semaphore) for i, item in enumerate(items)]
    results = await asyncio.gather(*coros)
    return verifier.assemble(results)
