from logic.badges import STARTER_BADGES
from logic.lesson_run import LessonRun
from logic.scoring import FIRST_LESSON_BADGE, PERFECT_LESSON_BADGE, QUIZ_MASTER_BADGE, grade_quiz
from logic.session import SessionSlice
from logic.store import LearnerState


QUESTIONS = [
    {"question": "Which dissolves in water?", "options": ["Stone", "Sugar"], "correctIndex": 1},
    {"question": "Which is a metal?", "options": ["Copper", "Wood", "Glass"], "correctIndex": 0},
    {"question": "Which lets light through?", "options": ["Glass", "Mud"], "correctIndex": 0},
]


def test_subscribers_see_every_change(learner):
    seen = []
    unsubscribe = learner.subscribe(lambda state: seen.append(state.xp.xp_all_time()))

    learner.increase_xp(10)
    learner.increase_xp(5)
    unsubscribe()
    learner.increase_xp(1)

    assert seen == [10, 15]


def test_failed_purchase_does_not_notify(learner):
    calls = []
    learner.subscribe(lambda state: calls.append(1))
    assert learner.purchase_item("advanced-math", 25) is False
    assert calls == []


def test_purchase_debits_shared_xp(learner):
    learner.increase_xp(30)
    assert learner.purchase_item("advanced-math", 25)
    assert learner.snapshot()["xp"]["all_time"] == 5
    assert learner.snapshot()["purchased_items"] == ["advanced-math"]


def test_log_in_marks_streak(learner, clock):
    learner.log_in("u1", "asha@example.com", "Asha", "Kumari")
    learner.log_in("u1", "asha@example.com", "Asha", "Kumari")
    assert learner.session.logged_in
    assert learner.session.name == "Asha Kumari"
    assert learner.session.username == "asha"
    assert learner.streak.streak == 1

    clock.advance(days=1)
    learner.log_in("u1", "asha@example.com")
    assert learner.streak.streak == 2


def test_log_out_clears_profile_but_keeps_progress(learner):
    learner.log_in("u1", "asha@example.com", "Asha")
    learner.update_profile(standard="6")
    learner.increase_xp(40)
    learner.log_out()

    user = learner.snapshot()["user"]
    assert user["logged_in"] is False
    assert user["name"] == user["email"] == user["standard"] == ""
    assert learner.xp.xp_all_time() == 40


def test_session_without_activity_marker(clock):
    session = SessionSlice(clock)
    session.log_in()
    assert session.logged_in
    session.log_out()
    assert not session.logged_in


def test_complete_lesson_rewards(learner):
    summary = learner.complete_lesson(correct_answers=4, incorrect_answers=0)

    assert summary["xp_awarded"] == 25
    assert learner.xp.xp_today() == 25
    assert learner.lessons.lessons_completed == 1
    assert learner.badges.has_badge(FIRST_LESSON_BADGE)
    assert learner.badges.has_badge(PERFECT_LESSON_BADGE)

    summary = learner.complete_lesson(correct_answers=3, incorrect_answers=1)
    assert summary["badges"] == []
    assert learner.lessons.lessons_completed == 2


def test_grade_quiz_counts_missing_answers_as_wrong():
    result = grade_quiz(QUESTIONS, [1, None])
    assert result == {"correct": 1, "total": 3, "xp_awarded": 10, "percentage": 33.33}


def test_submit_quiz_awards_xp_and_badge_once(learner):
    result = learner.submit_quiz(QUESTIONS, [1, 0, 0])
    assert result["xp_awarded"] == 30
    assert result["badges"] == [QUIZ_MASTER_BADGE]

    result = learner.submit_quiz(QUESTIONS, [1, 0, 0])
    assert result["badges"] == []
    assert learner.badges.badges.count(QUIZ_MASTER_BADGE) == 1
    assert learner.xp.xp_all_time() == 60


def test_zero_score_quiz_adds_no_ledger_event(learner):
    learner.submit_quiz(QUESTIONS, [0, 1, 1])
    assert learner.xp.events == []


def test_snapshot_shape(learner):
    snap = learner.snapshot()
    assert snap["xp"] == {"today": 0, "all_time": 0, "last_7_days": [0] * 7}
    assert snap["goal"]["goal_xp"] == 100
    assert snap["streak"] == {"count": 0, "last_marked": None}
    assert snap["badges"] == STARTER_BADGES
    assert snap["user"]["logged_in"] is False


def test_separate_states_do_not_share_data(clock):
    a, b = LearnerState(clock=clock), LearnerState(clock=clock)
    a.increase_xp(10)
    a.add_badge("Explorer")
    assert b.xp.xp_all_time() == 0
    assert not b.badges.has_badge("Explorer")


def test_only_a_completed_run_is_rewarded(learner):
    run = LessonRun(QUESTIONS[:1])
    assert learner.finish_lesson_run(run) is None

    run.answer(1)
    summary = learner.finish_lesson_run(run)
    assert summary["xp_awarded"] == 25
    assert learner.finish_lesson_run(run) is None
    assert learner.lessons.lessons_completed == 1
    assert learner.xp.xp_all_time() == 25


def test_failed_run_earns_nothing(learner):
    run = LessonRun(QUESTIONS, lives=1)
    run.answer(0)
    assert learner.finish_lesson_run(run) is None
    assert learner.lessons.lessons_completed == 0
