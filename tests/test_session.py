from __future__ import annotations

import asyncio
import random
from collections import Counter

from lifeskills_core.question_bank import load_bank
from lifeskills_core.session import QuizSession

from tests.conftest import answer_and_wait, build_synthetic_catalog


def test_initial_state_and_start(make_session):
    sess = make_session()
    assert sess.phase == "not_started"
    assert sess.view().question is None
    assert sess.start() is True
    assert sess.phase == "in_progress"
    assert sess.current_index == 0
    assert len(sess.answers) == len(sess.questions) == len(load_bank())
    assert all(v == 0 for v in sess.answers)


def test_start_is_ignored_once_running(make_session):
    sess = make_session()
    sess.start()
    order = list(sess.questions)
    sess.answers[0] = 3
    assert sess.start() is False
    assert sess.questions == order and sess.answers[0] == 3


def test_answer_records_then_advances_after_delay(make_session, clock):
    sess = make_session()
    sess.start()
    assert sess.answer(3) is True
    assert sess.answers[0] == 3
    assert sess.highlighted == 3
    assert sess.current_index == 0, "Index must not move before the delay"
    clock.advance(0.1)
    assert sess.current_index == 0
    clock.advance(0.2)
    assert sess.current_index == 1
    assert sess.highlighted is None
    assert not sess.pending


def test_out_of_range_answers_are_ignored(make_session, clock):
    sess = make_session()
    sess.start()
    for bad in (0, 5, -1, "x", None, 2.5, True):
        assert sess.answer(bad) is False
    assert sess.answers[0] == 0
    assert sess.highlighted is None
    assert clock.live == 0


def test_answer_ignored_before_start_and_after_completion(make_session, clock):
    sess = make_session(catalog=build_synthetic_catalog())
    assert sess.answer(2) is False
    sess.start()
    answer_and_wait(sess, clock, 4)
    answer_and_wait(sess, clock, 1)
    assert sess.phase == "completed"
    snapshot = list(sess.answers)
    assert sess.answer(2) is False
    assert sess.answers == snapshot and sess.phase == "completed"


def test_last_answer_completes_instead_of_advancing(make_session, clock):
    sess = make_session(catalog=build_synthetic_catalog())
    sess.start()
    answer_and_wait(sess, clock, 4)
    assert sess.current_index == 1
    sess.answer(1)
    assert sess.phase == "in_progress"
    clock.advance(sess.delay)
    assert sess.phase == "completed"
    assert sess.current_index == 1
    assert all(v != 0 for v in sess.answers)


def test_one_skill_scores(make_session, clock):
    sess = make_session(catalog=build_synthetic_catalog())
    sess.start()
    for q in list(sess.questions):
        answer_and_wait(sess, clock, 4 if q.positive else 1)
    (res,) = sess.results()
    assert (res.raw_score, res.star_rating, res.category) == (3, 3, "Good")

    sess.restart(); sess.start()
    for q in list(sess.questions):
        answer_and_wait(sess, clock, 1 if q.positive else 4)
    (res,) = sess.results()
    assert (res.raw_score, res.star_rating, res.category) == (-3, 1, "Needs Improvement")


def test_double_press_keeps_single_pending_advance(make_session, clock):
    sess = make_session()
    sess.start()
    sess.answer(2)
    clock.advance(0.2)
    sess.answer(4)
    assert clock.live == 1
    clock.advance(0.2)
    assert sess.current_index == 0, "Second press re-arms the delay"
    clock.advance(0.15)
    assert sess.current_index == 1
    assert sess.answers[0] == 4 and sess.answers[1] == 0


def test_restart_cancels_pending_advance(make_session, clock):
    sess = make_session()
    sess.start()
    sess.answer(3)
    assert sess.restart() is True
    assert sess.phase == "not_started"
    assert sess.questions == [] and sess.answers == []
    assert sess.highlighted is None and not sess.pending
    sess.start()
    clock.fire_all(include_cancelled=True)
    assert sess.current_index == 0, "A stale timer must not move the new session"
    assert all(v == 0 for v in sess.answers)


def test_restart_is_idempotent(make_session):
    sess = make_session()
    assert sess.restart() and sess.restart()
    assert sess.phase == "not_started"


def test_restart_then_start_is_fresh_permutation(make_session, clock):
    sess = make_session()
    sess.start()
    first = Counter((q.text, q.skill, q.positive) for q in sess.questions)
    answer_and_wait(sess, clock, 2)
    sess.restart()
    sess.start()
    assert sess.current_index == 0
    assert all(v == 0 for v in sess.answers)
    assert Counter((q.text, q.skill, q.positive) for q in sess.questions) == first


def test_alignment_holds_throughout(make_session, clock):
    sess = make_session(catalog=build_synthetic_catalog(skills=["receivingLove", "expandingLove"]))
    sess.start()
    total = len(sess.questions)
    while sess.phase == "in_progress":
        assert len(sess.answers) == total
        answer_and_wait(sess, clock, 2)
    assert len(sess.answers) == total
    assert all(v != 0 for v in sess.answers)


def test_view_reports_position_and_results(make_session, clock):
    sess = make_session(catalog=build_synthetic_catalog())
    assert sess.view().phase == "not_started"
    sess.start()
    sess.answer(4)
    v = sess.view()
    assert (v.number, v.total, v.highlighted) == (1, 2, 4)
    assert v.progress == 0.5
    assert v.question is sess.questions[0]
    assert v.results == []
    clock.advance(sess.delay)
    answer_and_wait(sess, clock, 4)
    done = sess.view()
    assert done.phase == "completed" and done.question is None
    assert [r.skill for r in done.results] == ["receivingLove"]
    d = done.to_dict()
    assert d["results"][0]["star_rating"] == sess.results()[0].star_rating
    assert d["progress"] == 1.0


def test_results_empty_until_completed(make_session):
    sess = make_session()
    sess.start()
    assert sess.results() == []
    assert len(sess.score_preview()) == 7


def test_close_cancels_and_blocks_actions(make_session, clock):
    sess = make_session()
    sess.start()
    sess.answer(1)
    sess.close()
    assert sess.closed and not sess.pending
    clock.fire_all(include_cancelled=True)
    assert sess.current_index == 0
    assert sess.answer(2) is False
    assert sess.restart() is False


def test_default_scheduler_is_running_loop():
    async def scenario():
        sess = QuizSession(catalog=build_synthetic_catalog(), rng=random.Random(1), delay=0.01)
        sess.start()
        sess.answer(3)
        await asyncio.sleep(0.05)
        return sess

    sess = asyncio.run(scenario())
    assert sess.current_index == 1
    assert sess.highlighted is None


def test_empty_catalog_completes_on_start(make_session):
    sess = make_session(catalog=build_synthetic_catalog(developed=0, underdeveloped=0))
    assert sess.start() is True
    assert sess.phase == "completed"
    assert sess.questions == [] and sess.answers == []
    view = sess.view()
    assert view.question is None and view.total == 0
    assert [r.raw_score for r in view.results] == [0] * len(sess.skills)
    assert sess.answer(2) is False
    assert sess.jump_to_random_completion() is False


def test_answer_without_scheduler_or_loop_is_ignored():
    sess = QuizSession(catalog=build_synthetic_catalog(), rng=random.Random(0))
    sess.start()
    assert sess.answer(3) is False
    assert sess.answers == [0, 0]
    assert sess.highlighted is None and not sess.pending
    assert sess.phase == "in_progress" and sess.current_index == 0
    assert sess.jump_to_random_completion() is True
    assert sess.phase == "completed"


def test_failing_scheduler_keeps_previous_answer(make_session, clock):
    sess = make_session()
    sess.start()
    sess.answer(2)

    def refuse(*args):
        raise RuntimeError("timer shut down")

    clock.call_later = refuse
    assert sess.answer(4) is False
    assert sess.answers[0] == 2 and sess.highlighted == 2 and sess.pending
