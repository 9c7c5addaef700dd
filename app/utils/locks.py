# app/utils/locks.py
import asyncio
from contextlib import asynccontextmanager
from weakref import WeakValueDictionary

# One lock per product id, dropped once nobody holds or waits on it
_product_locks: "WeakValueDictionary[int, asyncio.Lock]" = WeakValueDictionary()


def _lock_for(product_id: int) -> asyncio.Lock:
    lock = _product_locks.get(product_id)
    if lock is None:
        lock = asyncio.Lock()
        _product_locks[product_id] = lock
    return lock


@asynccontextmanager
async def product_lock(product_id: int):
    """
    Serializes read-check-write sequences on a single product within this process.
    Cross-process safety comes from the row lock and guarded UPDATE in the services.
    """
    lock = _lock_for(product_id)
    async with lock:
        yield
