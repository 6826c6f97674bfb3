"""
Lifecycle transitions for configurable appointment statuses.
"""

import re
import uuid
from typing import Callable, Iterable, List, Optional, Tuple, Union

from shared.logging import get_logger
from shared.rules import is_member
from .defaults import PROTECTED_STATUS_CODES
from .models import (
    AppointmentStatus, StatusIdentity, StatusPatch, BatchUpdateItem,
    LifecycleRefusal, LifecycleResult, Partition
)

CODE_PATTERN = re.compile(r"^S(\d+)$")

# Optional display fields a patch may reset to None
CLEARABLE_FIELDS = frozenset({"icon", "description"})

Collection = List[AppointmentStatus]


class EntityLifecycleManager:
    """Applies create/update/soft-delete/restore to a status collection.

    Every operation is pure: it takes the current collection and returns a
    ``LifecycleResult`` holding a new list. A refused operation hands back
    the very list it was given, so nothing needs to be rolled back.
    Statuses are never removed; deletion only flips
    ``is_deleted``/``is_active``.
    """

    def __init__(
        self,
        protected_codes: Iterable[str] = PROTECTED_STATUS_CODES,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.protected_codes = frozenset(protected_codes)
        self.id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self.logger = get_logger("settings.lifecycle")

    def is_protected(self, status: AppointmentStatus) -> bool:
        """Whether ``status`` can never be deleted."""
        return is_member(status.code, self.protected_codes)

    def next_code(self, collection: Collection) -> str:
        """Next ``S###`` code after the highest numeric code in use."""
        highest = 0
        for status in collection:
            match = CODE_PATTERN.match(status.code or "")
            if match:
                highest = max(highest, int(match.group(1)))
        return f"S{highest + 1:03d}"

    def create(self, collection: Collection, status: AppointmentStatus) -> LifecycleResult:
        """Add a new active status.

        A caller-supplied ``code`` or ``order`` is kept; missing ones are
        generated.
        """
        order = status.order
        if order is None:
            order = max((s.sort_key for s in collection), default=0) + 1

        created = status.model_copy(update={
            "id": status.id or self.id_factory(),
            "code": status.code or self.next_code(collection),
            "order": order,
            "is_deleted": False,
            "is_active": True,
        })

        if any(s.code == created.code for s in collection):
            self.logger.warning("Status code already in use", code=created.code)

        updated = self._sorted(collection + [created])
        self._warn_on_multiple_defaults(updated)
        self.logger.info("Status created", code=created.code, id=created.id, order=order)
        return LifecycleResult(collection=updated, entity=created)

    def update(
        self,
        collection: Collection,
        identity: StatusIdentity,
        patch: Union[StatusPatch, dict],
    ) -> LifecycleResult:
        """Edit one status. ``code`` and ``id`` never change."""
        index, refusal = self._resolve(collection, identity)
        if refusal:
            return self._refuse(collection, "update", refusal, identity)

        if isinstance(patch, dict):
            patch = StatusPatch.model_validate(patch)
        changes = {
            name: value for name, value in patch.model_dump(exclude_unset=True).items()
            if value is not None or name in CLEARABLE_FIELDS
        }
        changes.pop("code", None)
        changes.pop("id", None)

        edited = collection[index].model_copy(update=changes)
        updated = self._sorted(self._replace(collection, index, edited))
        self._warn_on_multiple_defaults(updated)
        self.logger.info("Status updated", code=edited.code, id=edited.id, fields=sorted(changes))
        return LifecycleResult(collection=updated, entity=edited)

    def soft_delete(self, collection: Collection, identity: StatusIdentity) -> LifecycleResult:
        """Mark one status deleted and inactive.

        Default statuses and protected codes are refused.
        """
        index, refusal = self._resolve(collection, identity)
        if refusal:
            return self._refuse(collection, "soft_delete", refusal, identity)

        target = collection[index]
        if target.is_default:
            return self._refuse(collection, "soft_delete", LifecycleRefusal.DEFAULT_ENTITY, identity)
        if self.is_protected(target):
            return self._refuse(collection, "soft_delete", LifecycleRefusal.PROTECTED_ENTITY, identity)

        deleted = target.model_copy(update={"is_deleted": True, "is_active": False})
        self.logger.info("Status soft-deleted", code=deleted.code, id=deleted.id)
        return LifecycleResult(collection=self._replace(collection, index, deleted), entity=deleted)

    def restore(self, collection: Collection, identity: StatusIdentity) -> LifecycleResult:
        """Bring a soft-deleted status back as active."""
        index, refusal = self._resolve(collection, identity)
        if refusal:
            return self._refuse(collection, "restore", refusal, identity)

        target = collection[index]
        if not target.is_deleted:
            return self._refuse(collection, "restore", LifecycleRefusal.NOT_DELETED, identity)

        restored = target.model_copy(update={"is_deleted": False, "is_active": True})
        self.logger.info("Status restored", code=restored.code, id=restored.id)
        return LifecycleResult(collection=self._replace(collection, index, restored), entity=restored)

    def reorder(self, collection: Collection, updates: Iterable[BatchUpdateItem]) -> LifecycleResult:
        """Apply a batch of order/calendar changes keyed by id, all or nothing."""
        updates = list(updates)
        positions = {s.id: i for i, s in enumerate(collection) if s.id}
        missing = [u.id for u in updates if u.id not in positions]
        if missing:
            return self._refuse(collection, "reorder", LifecycleRefusal.NOT_FOUND, None, ids=missing)

        updated = list(collection)
        for update in updates:
            index = positions[update.id]
            changes = update.model_dump(exclude={"id"}, exclude_none=True)
            updated[index] = updated[index].model_copy(update=changes)

        self.logger.info("Statuses reordered", count=len(updates))
        return LifecycleResult(collection=self._sorted(updated))

    def partition(self, collection: Collection) -> Partition:
        """Split into active and soft-deleted statuses."""
        result = Partition()
        for status in collection:
            (result.deleted if status.is_deleted else result.active).append(status)
        return result

    def default_entities(self, collection: Collection) -> Collection:
        """All statuses flagged default; more than one is allowed."""
        return [s for s in collection if s.is_default]

    @staticmethod
    def matches(candidate: AppointmentStatus, identity: StatusIdentity) -> bool:
        """Whether ``candidate`` is the status ``identity`` points at.

        Ids decide when both sides carry one. Otherwise the code must be
        equal and so must every display field the identity provides.
        """
        if identity.id and candidate.id:
            return candidate.id == identity.id
        if not identity.code or candidate.code != identity.code:
            return False
        return all(
            expected is None or getattr(candidate, name) == expected
            for name, expected in (
                ("name_en", identity.name_en),
                ("name_ar", identity.name_ar),
                ("color", identity.color),
            )
        )

    def _resolve(
        self, collection: Collection, identity: StatusIdentity
    ) -> Tuple[Optional[int], Optional[LifecycleRefusal]]:
        found = [i for i, s in enumerate(collection) if self.matches(s, identity)]
        if not found:
            return None, LifecycleRefusal.NOT_FOUND
        if len(found) > 1:
            return None, LifecycleRefusal.AMBIGUOUS_MATCH
        return found[0], None

    def _refuse(self, collection: Collection, operation: str, refusal: LifecycleRefusal,
                identity: Optional[StatusIdentity], **details) -> LifecycleResult:
        if identity is not None:
            details.update(identity.model_dump(exclude_none=True))
        self.logger.warning("Lifecycle operation refused", operation=operation,
                            reason=refusal.value, **details)
        return LifecycleResult(collection=collection, refusal=refusal, details=details)

    def _warn_on_multiple_defaults(self, collection: Collection):
        defaults = self.default_entities(collection)
        if len(defaults) > 1:
            self.logger.warning("Multiple default statuses", codes=[s.code for s in defaults])

    @staticmethod
    def _replace(collection: Collection, index: int, status: AppointmentStatus) -> Collection:
        updated = list(collection)
        updated[index] = status
        return updated

    @staticmethod
    def _sorted(collection: Collection) -> Collection:
        # sorted() is stable, so equal orders keep insertion order
        return sorted(collection, key=lambda s: s.sort_key)
