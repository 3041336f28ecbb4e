"""Cache admin endpoints — per-store statistics and generic clearing."""
from fastapi import APIRouter, Depends

from quoteboard.api.v1.responses import cleared, get_services
from quoteboard.core.services import Services

router = APIRouter(tags=["Cache"])


@router.get("/cache")
async def cache_stats(services: Services = Depends(get_services)):
    return {"success": True, "data": services.caches.stats()}


@router.get("/cache/clear")
async def clear_cache(store: str | None = None, key: str | None = None, services: Services = Depends(get_services)):
    """Without ``store`` every store is cleared; naming a store also clears its companion stores."""
    removed = services.caches.clear_store(store, key)
    target = store or "all stores"
    return cleared(f"Cleared {key} from {target}" if key else f"Cleared {target}", removed)
