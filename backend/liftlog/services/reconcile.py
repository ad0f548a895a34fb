"""
Desired-state reconciliation shared by template updates and session updates.

A client sends the complete list of children it wants a parent to have.
Items carrying an `id` update the matching live child, items without one are
created, and live children missing from the list are soft-deleted. All
reference checks run before the first write so a rejected payload never
leaves a half-applied parent behind.
"""
from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Optional, Sequence, TypeVar

from sqlalchemy.orm import Session

from liftlog.errors import ConflictError, ValidationError
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.repositories.instance_repo import ExerciseInstanceRepository

Row = TypeVar("Row")
Item = TypeVar("Item")


@dataclass
class ReconcilePlan(Generic[Row, Item]):
    to_update: list[tuple[Row, Item]] = field(default_factory=list)
    to_create: list[Item] = field(default_factory=list)
    to_remove: list[Row] = field(default_factory=list)


def plan_reconciliation(
    current: Iterable[Row],
    incoming: Sequence[Item],
    *,
    key: Callable[[Item], Optional[uuid.UUID]] = lambda item: item.id,
    noun: str = "item",
) -> ReconcilePlan[Row, Item]:
    """
    Diff `incoming` against the live `current` children. Pure: raises
    ConflictError for ids that are not children of this parent and
    ValidationError for ids listed twice, but touches no storage.
    """
    current_by_id = {row.id: row for row in current}
    plan: ReconcilePlan[Row, Item] = ReconcilePlan()
    seen: set = set()
    stale: list[dict[str, Any]] = []
    duplicated: list[dict[str, Any]] = []

    for position, item in enumerate(incoming, start=1):
        item_id = key(item)
        if item_id is None:
            plan.to_create.append(item)
            continue
        if item_id in seen:
            duplicated.append({"position": position, "id": str(item_id)})
            continue
        seen.add(item_id)
        row = current_by_id.get(item_id)
        if row is None:
            stale.append({"position": position, "id": str(item_id)})
            continue
        plan.to_update.append((row, item))

    if duplicated:
        raise ValidationError(f"Each {noun} id may appear only once", details=duplicated)
    if stale:
        raise ConflictError(f"Submitted {noun} ids do not belong to this parent", details=stale)

    plan.to_remove = [row for row_id, row in current_by_id.items() if row_id not in seen]
    return plan


def check_exercise_refs(db: Session, items: Sequence[Any]) -> None:
    """Every item must name a live catalog exercise; each distinct id is checked once."""
    live = ExerciseRepository(db).live_ids(item.exercise_id for item in items)
    bad = [
        {"position": position, "exercise_id": str(item.exercise_id)}
        for position, item in enumerate(items, start=1)
        if item.exercise_id not in live
    ]
    if bad:
        raise ValidationError("Unknown or deleted exercise referenced", details=bad)


def check_instance_refs(items: Sequence[Any], allowed: set) -> None:
    """
    An explicit exercise_instance_id may only point at an instance the parent
    already uses, and cannot be combined with a correlation token.
    """
    contradictory = []
    foreign = []
    for position, item in enumerate(items, start=1):
        if item.exercise_instance_id is None:
            continue
        if item.exercise_instance_client_id:
            contradictory.append({"position": position})
        elif item.exercise_instance_id not in allowed:
            foreign.append({"position": position, "exercise_instance_id": str(item.exercise_instance_id)})
    if contradictory:
        raise ValidationError(
            "exercise_instance_id and exercise_instance_client_id are mutually exclusive",
            details=contradictory,
        )
    if foreign:
        raise ConflictError("Exercise instance does not belong to this parent", details=foreign)


def check_set_numbers(plan: ReconcilePlan) -> None:
    """
    Set numbers must not repeat inside one instance group once the request
    is applied. Explicit numbers are checked against each other and against
    the numbers kept rows retain because the item did not send one.
    """
    groups: dict[tuple, list[tuple[int, Any]]] = defaultdict(list)
    items = [(row, item) for row, item in plan.to_update] + [(None, item) for item in plan.to_create]
    for row, item in items:
        if "set_number" in item.model_fields_set and item.set_number is not None and item.set_number >= 1:
            number = item.set_number
        elif row is not None and "set_number" not in item.model_fields_set:
            number = row.set_number
        else:
            continue
        group = _group_key(item, row)
        if group is not None:
            groups[group].append((number, item))

    clashes = []
    for members in groups.values():
        seen: set[int] = set()
        for number, item in members:
            if number in seen:
                clashes.append({"set_number": number, "id": str(item.id) if item.id else None})
            seen.add(number)
    if clashes:
        raise ValidationError("Duplicate set_number within one exercise instance", details=clashes)


def normalize_set_number(value: Optional[int]) -> int:
    return value if value is not None and value > 0 else 1


def _group_key(item: Any, row: Any) -> Optional[tuple]:
    if item.exercise_instance_id is not None:
        return ("instance", item.exercise_instance_id)
    if item.exercise_instance_client_id:
        return ("token", item.exercise_instance_client_id)
    if row is not None and row.exercise_id == item.exercise_id:
        return ("instance", row.exercise_instance_id)
    # gets a fresh instance of its own
    return None


class InstanceResolver:
    """
    Hands out ExerciseInstance ids for one request. The first item bearing a
    correlation token mints the instance, later items with the same token
    share it; items without a token always get a new one.
    """

    def __init__(self, instances: ExerciseInstanceRepository, *, workout_log_id: Optional[uuid.UUID] = None):
        self.instances = instances
        self.workout_log_id = workout_log_id
        self.by_token: dict[str, uuid.UUID] = {}
        self.created = 0

    def resolve(self, exercise_id: uuid.UUID, token: Optional[str] = None) -> uuid.UUID:
        if token and token in self.by_token:
            return self.by_token[token]
        instance = self.instances.create(exercise_id, workout_log_id=self.workout_log_id)
        self.created += 1
        if token:
            self.by_token[token] = instance.id
        return instance.id

    def for_item(self, item: Any, row: Any = None) -> uuid.UUID:
        """
        Instance for an incoming item. An explicit instance id or token always
        wins, even across exercises, since a superset groups different
        exercises under one instance. Without either, an identified row keeps
        its instance unless it switches exercise, which gets a fresh one.
        """
        if item.exercise_instance_id is not None:
            return item.exercise_instance_id
        if item.exercise_instance_client_id:
            return self.resolve(item.exercise_id, item.exercise_instance_client_id)
        if row is not None and row.exercise_id == item.exercise_id and row.exercise_instance_id is not None:
            return row.exercise_instance_id
        return self.resolve(item.exercise_id)
