"""
Settings service for the Clinic Access Layer.
"""

from collections import OrderedDict
from typing import Callable, Dict, Optional

from fastapi import Header, Query

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import AuthorizationError, ClinicAccessException, ConflictError, NotFoundError
from shared.logging import set_user_context

from .lifecycle.directory import StatusDirectory
from .lifecycle.manager import EntityLifecycleManager
from .lifecycle.models import (
    AppointmentStatus, StatusIdentity, StatusCreateRequest, StatusUpdateRequest,
    BatchUpdateRequest, StatusListResponse, LifecycleRefusal, LifecycleResult
)
from .persistence.redis_store import RedisEntityStore, create_client
from .persistence.store import EntityStore, InMemoryEntityStore


def refusal_error(result: LifecycleResult) -> ClinicAccessException:
    """Map a lifecycle refusal onto the HTTP error taxonomy."""
    details = {"reason": result.refusal.value, **result.details}
    if result.refusal == LifecycleRefusal.NOT_FOUND:
        return NotFoundError("Status not found", details)
    if result.refusal == LifecycleRefusal.AMBIGUOUS_MATCH:
        return ConflictError("Status identity matches more than one status", details,
                             code="AMBIGUOUS_MATCH")
    if result.refusal == LifecycleRefusal.NOT_DELETED:
        return ConflictError("Status is not deleted", details, code="NOT_DELETED")
    if result.refusal == LifecycleRefusal.PROTECTED_ENTITY:
        return AuthorizationError("Cannot delete this protected status", details,
                                  code="PROTECTED_ENTITY")
    return AuthorizationError("Cannot delete default status", details, code="DEFAULT_ENTITY")


class SettingsService(BaseService):
    """Settings service implementation.

    All clinics share one storage backend. Per-clinic stores are thin views
    over it, kept in an LRU map of at most ``store_cache_size`` entries, so
    a store factory must not hold data of its own.
    """

    def __init__(self, config: Optional[ServiceConfig] = None,
                 store_factory: Optional[Callable[[str], EntityStore]] = None):
        super().__init__("settings", 8022, config)
        self.manager = EntityLifecycleManager(protected_codes=self.config.protected_status_codes)
        self.redis_client = None
        self.documents: Dict[str, str] = {}
        if store_factory is None and self.config.store_backend == "redis":
            self.redis_client = create_client(self.config.redis_url)
        self.store_factory = store_factory or self._default_store_factory
        self.stores: "OrderedDict[str, EntityStore]" = OrderedDict()
        self._setup_settings_routes()

    def _default_store_factory(self, key: str) -> EntityStore:
        if self.redis_client is not None:
            return RedisEntityStore(self.config.redis_url, key=key, client=self.redis_client)
        return InMemoryEntityStore(key=key, documents=self.documents)

    def store_for(self, clinic_id: Optional[str]) -> EntityStore:
        """Store of one clinic; created on first use."""
        key = self.config.status_storage_key
        if clinic_id:
            key = f"{key}:{clinic_id}"
        if key in self.stores:
            self.stores.move_to_end(key)
            return self.stores[key]

        store = self.store_factory(key)
        self.stores[key] = store
        self._evict_idle_stores()
        return store

    def _evict_idle_stores(self):
        # Busy stores are skipped so a clinic never has two live locks
        excess = len(self.stores) - self.config.store_cache_size
        for key in [k for k, s in self.stores.items() if not s.busy][:max(excess, 0)]:
            del self.stores[key]

    async def _apply(self, clinic_id: Optional[str], operation: str, transition) -> LifecycleResult:
        set_user_context(clinic_id=clinic_id)
        result = await self.store_for(clinic_id).mutate(transition)
        self.metrics.increment_counter(
            "lifecycle_operations_total",
            operation=operation,
            outcome="ok" if result.ok else result.refusal.value
        )
        if not result.ok:
            raise refusal_error(result)
        self.metrics.record_business_event(f"status_{operation}")
        return result

    def _setup_settings_routes(self):
        """Set up settings-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "settings",
                "message": "Clinic Access Layer - Settings Service",
                "version": "1.0.0",
                "capabilities": ["appointment_statuses", "soft_delete", "restore"]
            }

        @self.app.get("/statuses", response_model=StatusListResponse)
        async def list_statuses(
            include_deleted: bool = Query(False, description="Also return soft-deleted statuses"),
            x_clinic_id: Optional[str] = Header(None)
        ):
            """List the clinic's statuses split into active and deleted."""
            collection = await self.store_for(x_clinic_id).load_or_seed()
            partition = self.manager.partition(collection)
            return StatusListResponse(
                active=partition.active,
                deleted=partition.deleted if include_deleted else [],
                total=len(collection)
            )

        @self.app.get("/statuses/calendar")
        async def calendar_statuses(x_clinic_id: Optional[str] = Header(None)):
            """Statuses shown on the appointments calendar."""
            collection = await self.store_for(x_clinic_id).load_or_seed()
            return {"statuses": StatusDirectory(collection).calendar_statuses()}

        @self.app.get("/statuses/lookup/{code}")
        async def lookup_status(
            code: str,
            language: str = Query("en"),
            x_clinic_id: Optional[str] = Header(None)
        ):
            """Display name and color for a status code."""
            directory = StatusDirectory(await self.store_for(x_clinic_id).load_or_seed())
            return {
                "code": code,
                "name": directory.name(code, language),
                "color": directory.color(code),
                "known": directory.get(code) is not None
            }

        @self.app.post("/statuses", response_model=AppointmentStatus, status_code=201)
        async def create_status(request: StatusCreateRequest, x_clinic_id: Optional[str] = Header(None)):
            """Create a status."""
            status = AppointmentStatus(**request.model_dump())
            result = await self._apply(
                x_clinic_id, "create", lambda c: self.manager.create(c, status)
            )
            return result.entity

        @self.app.put("/statuses", response_model=AppointmentStatus)
        async def update_status(request: StatusUpdateRequest, x_clinic_id: Optional[str] = Header(None)):
            """Edit a status; its code never changes."""
            result = await self._apply(
                x_clinic_id, "update",
                lambda c: self.manager.update(c, request.identity, request.patch)
            )
            return result.entity

        @self.app.post("/statuses/delete", response_model=AppointmentStatus)
        async def delete_status(identity: StatusIdentity, x_clinic_id: Optional[str] = Header(None)):
            """Soft-delete a status."""
            result = await self._apply(
                x_clinic_id, "soft_delete", lambda c: self.manager.soft_delete(c, identity)
            )
            return result.entity

        @self.app.post("/statuses/restore", response_model=AppointmentStatus)
        async def restore_status(identity: StatusIdentity, x_clinic_id: Optional[str] = Header(None)):
            """Restore a soft-deleted status."""
            result = await self._apply(
                x_clinic_id, "restore", lambda c: self.manager.restore(c, identity)
            )
            return result.entity

        @self.app.post("/statuses/batch", response_model=StatusListResponse)
        async def batch_update(request: BatchUpdateRequest, x_clinic_id: Optional[str] = Header(None)):
            """Reorder statuses or toggle their calendar flag in one write."""
            result = await self._apply(
                x_clinic_id, "reorder", lambda c: self.manager.reorder(c, request.updates)
            )
            partition = self.manager.partition(result.collection)
            return StatusListResponse(
                active=partition.active,
                deleted=partition.deleted,
                total=len(result.collection)
            )

    async def _check_dependencies(self):
        """Check settings service dependencies."""
        if self.redis_client is not None:
            try:
                await self.redis_client.ping()
                return {"redis": "ok"}
            except Exception as e:
                self.logger.warning("Redis health check failed", error=str(e))
                return {"redis": "error"}
        return {"store": self.config.store_backend}

    async def stop(self):
        """Close every open store and the shared Redis client."""
        for store in self.stores.values():
            await store.stop()
        self.stores.clear()
        if self.redis_client is not None:
            await self.redis_client.aclose()
        self.logger.info("Settings service stopped")


def create_app():
    """Create settings service application."""
    service = SettingsService()
    return service.app


if __name__ == "__main__":
    service = SettingsService()
    service.run()
