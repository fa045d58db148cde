from app.models.exercise import Exercise
from app.models.routine import WorkoutRoutine, RoutineExercise
from app.models.workout_session import WorkoutSession
from app.models.exercise_set import ExerciseSet

__all__ = ["Exercise", "WorkoutRoutine", "RoutineExercise", "WorkoutSession", "ExerciseSet"]
