from typing import Dict, List, Optional, Sequence

DAILY_QUIZ_XP_PER_CORRECT = 10
LESSON_COMPLETE_XP = 25
LESSON_COMPLETE_LESSONS = 1

FIRST_LESSON_BADGE = "Lesson Explorer"
PERFECT_LESSON_BADGE = "Perfect Lesson"
QUIZ_MASTER_BADGE = "Quiz Master"


def grade_quiz(questions: Sequence[dict], answers: Sequence[Optional[int]]) -> Dict:
    """
    Grade a multiple choice quiz.

    `questions` are quiz records' questions (`correctIndex` per question) and
    `answers` the chosen option per question; missing or None answers count
    as wrong. Extra answers beyond the question list are ignored.
    """
    total = len(questions)
    correct = 0
    for index, question in enumerate(questions):
        if index < len(answers) and answers[index] is not None and answers[index] == question["correctIndex"]:
            correct += 1

    xp_awarded = correct * DAILY_QUIZ_XP_PER_CORRECT
    return {
        "correct": correct,
        "total": total,
        "xp_awarded": xp_awarded,
        "percentage": round((correct / total) * 100, 2) if total else 0,
    }


def quiz_badges(result: Dict) -> List[str]:
    if result["total"] and result["correct"] == result["total"]:
        return [QUIZ_MASTER_BADGE]
    return []


def lesson_summary(correct_answers: int, incorrect_answers: int, lessons_completed_before: int) -> Dict:
    # finishing a lesson pays the same regardless of mistakes
    badges = []
    if lessons_completed_before == 0:
        badges.append(FIRST_LESSON_BADGE)
    if incorrect_answers == 0:
        badges.append(PERFECT_LESSON_BADGE)

    return {
        "xp_awarded": LESSON_COMPLETE_XP,
        "lessons": LESSON_COMPLETE_LESSONS,
        "is_perfect": incorrect_answers == 0,
        "correct_answers": correct_answers,
        "incorrect_answers": incorrect_answers,
        "badges": badges,
    }
