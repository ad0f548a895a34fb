import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from liftlog.errors import ConflictError, InternalError, NotFoundError, ValidationError
from liftlog.models import ExerciseInstance, WorkoutExercise
from liftlog.schemas.workout import WorkoutExerciseIn
from liftlog.services import workouts as workouts_service
from liftlog.services.workouts import (
    create_workout,
    delete_workout,
    get_workout,
    list_workouts,
    update_workout,
    workout_entries,
)


def live_instances(db):
    stmt = select(ExerciseInstance).where(ExerciseInstance.deleted_at.is_(None))
    return db.execute(stmt).scalars().all()


def snapshot(db, workout):
    return [
        (e.id, e.exercise_id, e.exercise_instance_id, e.workout_order, e.sets, e.weight, e.reps)
        for e in workout_entries(db, workout)
    ]


@pytest.fixture
def leg_day(db, user_id, exercises):
    return create_workout(
        db, user_id, name="Leg day",
        entries=[
            WorkoutExerciseIn(exercise_id=exercises["Squat"].id, order=1, sets=3, weight=100, reps=5),
            WorkoutExerciseIn(exercise_id=exercises["Deadlift"].id, order=2, sets=1, weight=140, reps=3),
        ],
    )


def test_create_gives_each_entry_its_own_instance(db, leg_day):
    entries = workout_entries(db, leg_day)
    assert [e.workout_order for e in entries] == [1, 2]
    assert len({e.exercise_instance_id for e in entries}) == 2
    assert len(live_instances(db)) == 2


def test_create_shares_instance_for_same_token(db, user_id, exercises):
    workout = create_workout(
        db, user_id, name="Push",
        entries=[
            WorkoutExerciseIn(exercise_id=exercises["Bench Press"].id, order=1, exercise_instance_client_id="superset-1"),
            WorkoutExerciseIn(exercise_id=exercises["Squat"].id, order=2, exercise_instance_client_id="superset-1"),
        ],
    )
    entries = workout_entries(db, workout)
    assert entries[0].exercise_instance_id == entries[1].exercise_instance_id
    assert len(live_instances(db)) == 1


def test_create_rejects_unknown_exercise(db, user_id, exercises):
    with pytest.raises(ValidationError) as exc:
        create_workout(
            db, user_id, name="Bad",
            entries=[
                WorkoutExerciseIn(exercise_id=exercises["Squat"].id),
                WorkoutExerciseIn(exercise_id=uuid.uuid4()),
            ],
        )
    assert exc.value.details[0]["position"] == 2
    assert list_workouts(db, user_id).total == 0


def test_create_rejects_entry_ids(db, user_id, exercises):
    with pytest.raises(ConflictError):
        create_workout(
            db, user_id, name="Bad",
            entries=[WorkoutExerciseIn(id=uuid.uuid4(), exercise_id=exercises["Squat"].id)],
        )


def test_list_filters_by_name_and_paginates(db, user_id, other_user_id, exercises):
    squat = exercises["Squat"].id
    for name in ("Leg day", "Legs heavy", "Push"):
        create_workout(db, user_id, name=name, entries=[WorkoutExerciseIn(exercise_id=squat)])
    create_workout(db, other_user_id, name="Leg day", entries=[WorkoutExerciseIn(exercise_id=squat)])

    page = list_workouts(db, user_id, page=1, limit=2)
    assert page.total == 3
    assert len(page.items) == 2
    assert page.last_page == 2

    assert list_workouts(db, user_id, name="LEG").total == 2


def test_update_drops_and_adds_entries(db, user_id, exercises, leg_day):
    squat_entry, deadlift_entry = workout_entries(db, leg_day)
    squat_entry_id = squat_entry.id
    squat_instance_id = squat_entry.exercise_instance_id

    update_workout(
        db, user_id, leg_day.id, name="Leg day",
        entries=[
            WorkoutExerciseIn(id=deadlift_entry.id, exercise_id=exercises["Deadlift"].id, order=1, sets=2),
            WorkoutExerciseIn(exercise_id=exercises["Bench Press"].id, order=2, sets=3),
        ],
    )

    entries = workout_entries(db, leg_day)
    assert [e.exercise_id for e in entries] == [exercises["Deadlift"].id, exercises["Bench Press"].id]
    assert entries[0].id == deadlift_entry.id
    assert entries[0].sets == 2
    assert entries[1].exercise_instance_id not in (squat_instance_id, entries[0].exercise_instance_id)

    assert db.get(WorkoutExercise, squat_entry_id).deleted_at is not None
    assert db.get(ExerciseInstance, squat_instance_id).deleted_at is not None


def test_update_replaces_planned_fields(db, user_id, exercises, leg_day):
    squat_entry = workout_entries(db, leg_day)[0]
    update_workout(
        db, user_id, leg_day.id, name="Renamed",
        entries=[WorkoutExerciseIn(id=squat_entry.id, exercise_id=exercises["Squat"].id, order=1)],
    )
    entry = workout_entries(db, leg_day)[0]
    assert (entry.sets, entry.weight, entry.reps) == (None, None, None)
    assert get_workout(db, user_id, leg_day.id).name == "Renamed"


def test_resubmitting_current_state_changes_nothing(db, user_id, leg_day):
    before = snapshot(db, leg_day)
    instances_before = {i.id for i in live_instances(db)}

    update_workout(
        db, user_id, leg_day.id, name="Leg day",
        entries=[
            WorkoutExerciseIn(id=e_id, exercise_id=ex_id, order=order, sets=sets, weight=weight, reps=reps)
            for e_id, ex_id, _, order, sets, weight, reps in before
        ],
    )

    assert snapshot(db, leg_day) == before
    assert {i.id for i in live_instances(db)} == instances_before


def test_switching_exercise_mints_new_instance(db, user_id, exercises, leg_day):
    squat_entry = workout_entries(db, leg_day)[0]
    old_instance = squat_entry.exercise_instance_id

    update_workout(
        db, user_id, leg_day.id, name="Leg day",
        entries=[WorkoutExerciseIn(id=squat_entry.id, exercise_id=exercises["Bench Press"].id, order=1)],
    )

    entry = workout_entries(db, leg_day)[0]
    assert entry.id == squat_entry.id
    assert entry.exercise_instance_id != old_instance
    assert db.get(ExerciseInstance, old_instance).deleted_at is not None


def test_update_with_foreign_entry_id_conflicts(db, user_id, exercises, leg_day):
    other = create_workout(db, user_id, name="Other", entries=[WorkoutExerciseIn(exercise_id=exercises["Squat"].id)])
    foreign_entry = workout_entries(db, other)[0]
    before = snapshot(db, leg_day)

    with pytest.raises(ConflictError):
        update_workout(
            db, user_id, leg_day.id, name="Leg day",
            entries=[WorkoutExerciseIn(id=foreign_entry.id, exercise_id=exercises["Squat"].id)],
        )

    assert snapshot(db, leg_day) == before


def test_update_rejects_duplicate_entry_ids(db, user_id, exercises, leg_day):
    squat_entry = workout_entries(db, leg_day)[0]
    item = WorkoutExerciseIn(id=squat_entry.id, exercise_id=exercises["Squat"].id)
    with pytest.raises(ValidationError):
        update_workout(db, user_id, leg_day.id, name="Leg day", entries=[item, item])


def test_explicit_instance_must_belong_to_template(db, user_id, exercises, leg_day):
    other = create_workout(db, user_id, name="Other", entries=[WorkoutExerciseIn(exercise_id=exercises["Squat"].id)])
    foreign_instance = workout_entries(db, other)[0].exercise_instance_id

    with pytest.raises(ConflictError):
        update_workout(
            db, user_id, leg_day.id, name="Leg day",
            entries=[WorkoutExerciseIn(exercise_id=exercises["Squat"].id, exercise_instance_id=foreign_instance)],
        )


def test_explicit_instance_and_token_are_exclusive(db, user_id, exercises, leg_day):
    instance_id = workout_entries(db, leg_day)[0].exercise_instance_id
    with pytest.raises(ValidationError):
        update_workout(
            db, user_id, leg_day.id, name="Leg day",
            entries=[
                WorkoutExerciseIn(
                    exercise_id=exercises["Squat"].id,
                    exercise_instance_id=instance_id,
                    exercise_instance_client_id="a",
                )
            ],
        )


def test_new_entry_can_join_existing_instance(db, user_id, exercises, leg_day):
    squat_entry, deadlift_entry = workout_entries(db, leg_day)
    update_workout(
        db, user_id, leg_day.id, name="Leg day",
        entries=[
            WorkoutExerciseIn(id=squat_entry.id, exercise_id=exercises["Squat"].id, order=1),
            WorkoutExerciseIn(id=deadlift_entry.id, exercise_id=exercises["Deadlift"].id, order=2),
            WorkoutExerciseIn(
                exercise_id=exercises["Squat"].id, order=3, exercise_instance_id=squat_entry.exercise_instance_id
            ),
        ],
    )
    entries = workout_entries(db, leg_day)
    assert entries[2].exercise_instance_id == entries[0].exercise_instance_id


def test_other_users_workout_is_not_found(db, user_id, other_user_id, exercises, leg_day):
    with pytest.raises(NotFoundError):
        get_workout(db, other_user_id, leg_day.id)
    with pytest.raises(NotFoundError):
        update_workout(
            db, other_user_id, leg_day.id, name="Hijacked",
            entries=[WorkoutExerciseIn(exercise_id=exercises["Squat"].id)],
        )
    with pytest.raises(NotFoundError):
        delete_workout(db, other_user_id, leg_day.id)

    workout = get_workout(db, user_id, leg_day.id)
    assert workout.name == "Leg day"
    assert len(workout_entries(db, workout)) == 2


def test_failed_update_leaves_template_untouched(db, user_id, exercises, leg_day, monkeypatch):
    before = snapshot(db, leg_day)

    def boom(*args, **kwargs):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(workouts_service, "release_orphaned_instances", boom)
    with pytest.raises(InternalError):
        update_workout(
            db, user_id, leg_day.id, name="Changed",
            entries=[WorkoutExerciseIn(exercise_id=exercises["Bench Press"].id)],
        )

    workout = get_workout(db, user_id, leg_day.id)
    assert workout.name == "Leg day"
    assert snapshot(db, workout) == before
    assert len(live_instances(db)) == 2
