from liftlog.models.exercise import Exercise
from liftlog.models.exercise_instance import ExerciseInstance
from liftlog.models.exercise_set import ExerciseSet, SetStatus
from liftlog.models.workout import Workout
from liftlog.models.workout_exercise import WorkoutExercise
from liftlog.models.workout_log import WorkoutLog, WorkoutLogStatus

__all__ = [
    "Exercise",
    "ExerciseInstance",
    "ExerciseSet",
    "SetStatus",
    "Workout",
    "WorkoutExercise",
    "WorkoutLog",
    "WorkoutLogStatus",
]
