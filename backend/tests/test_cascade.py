import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from liftlog.errors import InternalError, NotFoundError
from liftlog.models import ExerciseInstance, ExerciseSet, WorkoutExercise
from liftlog.repositories.instance_repo import ExerciseInstanceRepository
from liftlog.schemas.workout import WorkoutExerciseIn
from liftlog.services.workout_logs import delete_workout_log, get_workout_log, load_log_sets, start_session
from liftlog.services.workouts import create_workout, delete_workout, get_workout, workout_entries


def live(db, model, *criteria):
    stmt = select(model).where(model.deleted_at.is_(None), *criteria)
    return db.execute(stmt).scalars().all()


@pytest.fixture
def leg_day(db, user_id, exercises):
    return create_workout(
        db, user_id, name="Leg day",
        entries=[
            WorkoutExerciseIn(exercise_id=exercises["Squat"].id, order=1, sets=2),
            WorkoutExerciseIn(exercise_id=exercises["Deadlift"].id, order=2, sets=1),
        ],
    )


def test_delete_workout_removes_entries_and_instances(db, user_id, leg_day):
    workout_id = leg_day.id
    delete_workout(db, user_id, workout_id)

    with pytest.raises(NotFoundError):
        get_workout(db, user_id, workout_id)
    assert live(db, WorkoutExercise, WorkoutExercise.workout_id == workout_id) == []
    assert live(db, ExerciseInstance) == []


def test_delete_workout_keeps_instances_used_by_a_session(db, user_id, leg_day):
    workout_log = start_session(db, user_id, leg_day.id)
    shared = {e.exercise_instance_id for e in workout_entries(db, leg_day)}

    delete_workout(db, user_id, leg_day.id)

    assert {i.id for i in live(db, ExerciseInstance)} == shared
    # the session outlives its template
    assert len(load_log_sets(db, get_workout_log(db, user_id, workout_log.id).id)) == 3


def test_delete_session_then_template_releases_everything(db, user_id, leg_day):
    workout_log = start_session(db, user_id, leg_day.id)

    delete_workout_log(db, user_id, workout_log.id)
    assert live(db, ExerciseSet) == []
    # still held by the template entries
    assert len(live(db, ExerciseInstance)) == 2

    delete_workout(db, user_id, leg_day.id)
    assert live(db, ExerciseInstance) == []


def test_deleted_rows_share_one_timestamp(db, user_id, leg_day):
    entry_ids = [e.id for e in workout_entries(db, leg_day)]
    delete_workout(db, user_id, leg_day.id)

    stamps = {db.get(WorkoutExercise, i).deleted_at for i in entry_ids}
    assert len(stamps) == 1


def test_failed_cascade_rolls_back(db, user_id, leg_day, monkeypatch):
    def boom(self, ids, *, now=None):
        raise SQLAlchemyError("connection reset")

    monkeypatch.setattr(ExerciseInstanceRepository, "soft_delete_ids", boom)
    with pytest.raises(InternalError):
        delete_workout(db, user_id, leg_day.id)
    monkeypatch.undo()

    workout = get_workout(db, user_id, leg_day.id)
    assert len(workout_entries(db, workout)) == 2
    assert len(live(db, ExerciseInstance)) == 2


def test_failed_session_cascade_rolls_back(db, user_id, leg_day, monkeypatch):
    workout_log = start_session(db, user_id, leg_day.id)
    log_id = workout_log.id

    def boom(self, ids, *, now=None):
        raise SQLAlchemyError("connection reset")

    monkeypatch.setattr(ExerciseInstanceRepository, "soft_delete_ids", boom)
    with pytest.raises(InternalError):
        delete_workout_log(db, user_id, log_id)
    monkeypatch.undo()

    assert get_workout_log(db, user_id, log_id).deleted_at is None
    assert len(live(db, ExerciseSet, ExerciseSet.workout_log_id == log_id)) == 3
    assert len(live(db, ExerciseInstance)) == 2
