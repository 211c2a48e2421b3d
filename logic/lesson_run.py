from typing import Dict, List, Optional, Sequence

SECONDS_PER_PROBLEM = 30
MAX_LIVES = 3

IN_PROGRESS = "in_progress"
COMPLETE = "complete"
FAILED = "failed"


class LessonRun:
    """
    One pass through a lesson's multiple choice problems.

    Each problem gets its own countdown; a wrong answer or a timeout costs a
    life and moves on. Losing every life fails the run, answering the last
    problem with lives left completes it.
    """

    def __init__(self, problems: Sequence[dict], seconds_per_problem: int = SECONDS_PER_PROBLEM,
                 lives: int = MAX_LIVES):
        if not problems:
            raise ValueError("Lesson has no problems")
        self.problems = list(problems)
        self.seconds_per_problem = seconds_per_problem
        self.seconds_left = seconds_per_problem
        self.lives = lives
        self.problem_index = 0
        self.correct_answers = 0
        self.incorrect_answers = 0
        self.rewarded = False

    @property
    def outcome(self) -> str:
        if self.lives <= 0:
            return FAILED
        if self.problem_index >= len(self.problems):
            return COMPLETE
        return IN_PROGRESS

    @property
    def finished(self) -> bool:
        return self.outcome != IN_PROGRESS

    def current_problem(self) -> Optional[dict]:
        if self.finished:
            return None
        return self.problems[self.problem_index]

    def _miss(self):
        self.incorrect_answers += 1
        self.lives = max(self.lives - 1, 0)

    def _next(self):
        self.problem_index += 1
        self.seconds_left = self.seconds_per_problem

    def answer(self, choice: int) -> bool:
        if self.finished:
            raise ValueError("Lesson is over")
        correct = choice == self.problems[self.problem_index]["correctIndex"]
        if correct:
            self.correct_answers += 1
        else:
            self._miss()
        self._next()
        return correct

    def tick(self, seconds: int = 1):
        # a problem left unanswered when its clock hits zero counts as wrong
        while seconds > 0 and not self.finished:
            step = min(seconds, self.seconds_left)
            self.seconds_left -= step
            seconds -= step
            if self.seconds_left <= 0:
                self._miss()
                self._next()

    def state(self) -> Dict:
        problem = self.current_problem()
        return {
            "outcome": self.outcome,
            "problem_index": self.problem_index,
            "total_problems": len(self.problems),
            "problem": None if problem is None else {
                "question": problem["question"],
                "options": problem["options"],
            },
            "seconds_left": self.seconds_left,
            "lives": self.lives,
            "correct_answers": self.correct_answers,
            "incorrect_answers": self.incorrect_answers,
        }
