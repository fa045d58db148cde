from app.engine.progress import (
    all_targets_met,
    next_set_number,
    resume_point,
    summarize_sets,
    unfinished_steps,
)
from fakes import logged, step

ROUTINE = [step(10, 0, 2), step(20, 1, 3), step(30, 2, 1)]

def test_fresh_session_starts_at_first_exercise():
    assert resume_point(ROUTINE, []) == (0, 1)

def test_resume_mid_exercise_uses_per_exercise_count():
    sets = [logged(10, 1), logged(10, 2), logged(20, 1)]
    assert resume_point(ROUTINE, sets) == (1, 2)

def test_resume_skips_done_exercises_only_in_order():
    # 30 is done but 20 is not: resume at 20 even though it sits earlier
    sets = [logged(10, 1), logged(10, 2), logged(30, 1)]
    assert resume_point(ROUTINE, sets) == (1, 1)

def test_resume_tolerates_extra_and_out_of_order_sets():
    # user went back to 10 for a third set after starting 20
    sets = [logged(20, 1), logged(10, 1), logged(20, 2), logged(10, 2), logged(10, 3)]
    assert resume_point(ROUTINE, sets) == (1, 3)

def test_resume_point_past_end_when_everything_done():
    sets = [logged(10, 1), logged(10, 2), logged(20, 1), logged(20, 2), logged(20, 3), logged(30, 1)]
    assert resume_point(ROUTINE, sets) == (3, 1)

def test_resume_scans_by_order_index_not_list_order():
    shuffled = [ROUTINE[2], ROUTINE[0], ROUTINE[1]]
    assert resume_point(shuffled, [logged(10, 1), logged(10, 2)]) == (1, 1)

def test_resume_round_trip_for_every_prefix():
    # log sets in routine order one by one; the pointer always names the next set
    order = [(10, 1), (10, 2), (20, 1), (20, 2), (20, 3), (30, 1)]
    for n in range(len(order)):
        sets = [logged(ex, num) for ex, num in order[:n]]
        index, set_number = resume_point(ROUTINE, sets)
        next_ex, next_num = order[n]
        assert ROUTINE[index].exercise_id == next_ex
        assert set_number == next_num

def test_empty_routine():
    assert resume_point([], [logged(10, 1)]) == (0, 1)
    assert not all_targets_met([], [])

def test_next_set_number_counts_only_that_exercise():
    sets = [logged(10, 1), logged(20, 1), logged(20, 2)]
    assert next_set_number(20, sets) == 3
    assert next_set_number(30, sets) == 1

def test_unfinished_and_all_met():
    sets = [logged(10, 1), logged(10, 2), logged(30, 1)]
    assert [s.exercise_id for s in unfinished_steps(ROUTINE, sets)] == [20]
    assert not all_targets_met(ROUTINE, sets)
    sets += [logged(20, 1), logged(20, 2), logged(20, 3)]
    assert unfinished_steps(ROUTINE, sets) == []
    assert all_targets_met(ROUTINE, sets)

def test_summary_totals():
    steps = [step(10, 0, 2, name="Squat"), step(20, 1, 1, name="Plank")]
    sets = [
        logged(10, 2, weight=110, reps=8),
        logged(10, 1, weight=100, reps=10),
        logged(20, 1, reps=None),
    ]
    summary = summarize_sets(steps, sets)
    assert summary.set_count == 3
    assert summary.total_reps == 18
    assert summary.total_volume == 100 * 10 + 110 * 8
    assert summary.average_weight == 105

    squat, plank = summary.groups
    assert squat.exercise_name == "Squat"
    assert [s.set_number for s in squat.sets] == [1, 2]
    assert squat.volume == 1880
    assert plank.total_reps == 0 and plank.volume == 0

def test_summary_without_weights():
    summary = summarize_sets([], [logged(10, 1, reps=12)])
    assert summary.average_weight is None
    assert summary.groups[0].exercise_name is None
