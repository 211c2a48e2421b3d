#backend/main.py
import os
import logging
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

import requests
from fastapi import FastAPI, Depends, File, Form, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import auth_gateway
import gemini_chat
from config import ALLOWED_ORIGINS, DATA_DIR, PUBLIC_DIR
from db import get_db
from logic import drag_games
from logic.leaderboard import leaderboard_rank, leaderboard_users, lessons_to_unlock
from logic.lesson_run import LessonRun
from logic.quiz_store import QuizStore, validate_questions
from logic.shop import SHOP_ITEMS, find_item
from logic.store import LearnerState
from logic.upload_store import UploadStore
from models.user_profile import UserProfile

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Try again."


# --------- App Setup ---------
app = FastAPI(title="GraamGyaan Learner API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --------- Dependencies ---------
learner_state = LearnerState()
quiz_store = QuizStore(os.path.join(DATA_DIR, "quizzes.json"))
upload_store = UploadStore(os.path.join(DATA_DIR, "uploads.json"), PUBLIC_DIR)
game_rounds: Dict[str, object] = {}
lesson_runs: Dict[str, LessonRun] = {}
CURRENT_RUN = "current"


def get_learner_state():
    return learner_state


def get_quiz_store():
    return quiz_store


def get_upload_store():
    return upload_store


def get_game_rounds():
    return game_rounds


def get_lesson_runs():
    return lesson_runs


def error(status_code: int, message: str, **extra):
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def json_body(request: Request):
    try:
        return await request.json()
    except ValueError:
        return None


# --------- Pydantic Models ---------
class XpInput(BaseModel):
    amount: int = Field(..., examples=[10])


class GoalInput(BaseModel):
    goal_xp: int = Field(..., examples=[20])


class ProfileInput(BaseModel):
    name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    standard: Optional[str] = Field(None, examples=["6"])


class LessonStartInput(BaseModel):
    quiz_id: str


class AnswerInput(BaseModel):
    choice: int


class TileInput(BaseModel):
    index: int


class JumpInput(BaseModel):
    unit_number: int


class PurchaseInput(BaseModel):
    item_id: str = Field(..., examples=["advanced-math"])


class BadgeInput(BaseModel):
    name: str


class QuizSubmission(BaseModel):
    quiz_id: str
    answers: List[Optional[int]]


class LoginInput(BaseModel):
    email: str
    password: str


class SignupInput(BaseModel):
    email: str
    password: str
    confirm_password: str
    first_name: str = ""
    last_name: str = ""


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatInput(BaseModel):
    messages: Optional[List[ChatMessage]] = None
    system_prompt: Optional[str] = Field(None, alias="systemPrompt")


class ZoneRect(BaseModel):
    left: float
    top: float
    right: float
    bottom: float


class GameStartInput(BaseModel):
    zones: Dict[str, ZoneRect]


class DropInput(BaseModel):
    item: str
    x: float
    y: float


class TickInput(BaseModel):
    seconds: int = Field(1, ge=0)


# --------- Learner State ---------
@app.get("/state")
def get_state(state: LearnerState = Depends(get_learner_state)):
    return state.snapshot()


@app.post("/xp")
def increase_xp(data: XpInput, state: LearnerState = Depends(get_learner_state)):
    state.increase_xp(data.amount)
    return state.snapshot()["xp"]


@app.post("/streak/today")
def mark_today(state: LearnerState = Depends(get_learner_state)):
    state.add_today()
    return state.snapshot()["streak"]


@app.put("/goal")
def set_goal(data: GoalInput, state: LearnerState = Depends(get_learner_state)):
    try:
        state.set_goal_xp(data.goal_xp)
    except ValueError as e:
        return error(400, str(e))
    return state.snapshot()["goal"]


@app.put("/profile")
def update_profile(data: ProfileInput, state: LearnerState = Depends(get_learner_state)):
    state.update_profile(**data.model_dump())
    return state.snapshot()["user"]


# --------- Lessons ---------
@app.get("/lessons/tiles")
def get_tiles(state: LearnerState = Depends(get_learner_state)):
    completed = state.lessons.lessons_completed
    statuses = state.lessons.statuses()
    index = 0
    units = []
    for unit in state.lessons.units:
        tiles = []
        for tile in unit.tiles:
            tiles.append({
                "index": index,
                "type": tile.type,
                "description": tile.description,
                "status": statuses[index],
            })
            index += 1
        units.append({"unit_number": unit.unit_number, "description": unit.description, "tiles": tiles})
    return {"lessons_completed": completed, "units": units}


def lesson_run_response(run: LessonRun, state: LearnerState):
    # rewards land exactly once, on the request that completes the run
    summary = state.finish_lesson_run(run)
    return {"run": run.state(), "summary": summary, "lessons_completed": state.lessons.lessons_completed}


@app.post("/lessons/run/start")
def start_lesson_run(data: LessonStartInput, store: QuizStore = Depends(get_quiz_store),
                     runs: dict = Depends(get_lesson_runs)):
    quiz = store.get(data.quiz_id)
    if quiz is None:
        return error(404, "Quiz not found")
    try:
        runs[CURRENT_RUN] = LessonRun(quiz["questions"])
    except ValueError as e:
        return error(400, str(e))
    return runs[CURRENT_RUN].state()


@app.get("/lessons/run")
def get_lesson_run(runs: dict = Depends(get_lesson_runs)):
    if CURRENT_RUN not in runs:
        return error(404, "No lesson in progress")
    return runs[CURRENT_RUN].state()


@app.post("/lessons/run/answer")
def answer_lesson_problem(data: AnswerInput, runs: dict = Depends(get_lesson_runs),
                          state: LearnerState = Depends(get_learner_state)):
    run = runs.get(CURRENT_RUN)
    if run is None:
        return error(404, "No lesson in progress")
    try:
        correct = run.answer(data.choice)
    except ValueError as e:
        return error(400, str(e))
    return {"correct": correct, **lesson_run_response(run, state)}


@app.post("/lessons/run/tick")
def tick_lesson_run(data: TickInput, runs: dict = Depends(get_lesson_runs),
                    state: LearnerState = Depends(get_learner_state)):
    run = runs.get(CURRENT_RUN)
    if run is None:
        return error(404, "No lesson in progress")
    run.tick(data.seconds)
    return lesson_run_response(run, state)


@app.post("/lessons/treasure")
def open_treasure(data: TileInput, state: LearnerState = Depends(get_learner_state)):
    try:
        opened = state.open_treasure(data.index)
    except ValueError as e:
        return error(400, str(e))
    return {"opened": opened, "lessons_completed": state.lessons.lessons_completed}


@app.post("/lessons/jump")
def jump_to_unit(data: JumpInput, state: LearnerState = Depends(get_learner_state)):
    try:
        state.jump_to_unit(data.unit_number)
    except ValueError as e:
        return error(404, str(e))
    return {"lessons_completed": state.lessons.lessons_completed}


# --------- Shop ---------
@app.get("/shop/items")
def get_shop_items(state: LearnerState = Depends(get_learner_state)):
    total_xp = state.xp.xp_all_time()
    return {
        "xp_all_time": total_xp,
        "items": [
            {
                **item._asdict(),
                "purchased": state.shop.is_purchased(item.id),
                "can_afford": total_xp >= item.price,
            }
            for item in SHOP_ITEMS
        ],
    }


@app.post("/shop/purchase")
def purchase(data: PurchaseInput, state: LearnerState = Depends(get_learner_state)):
    item = find_item(data.item_id)
    if item is None:
        return error(404, "Item not found")

    if state.shop.is_purchased(item.id):
        message = "Already purchased"
        ok = False
    else:
        ok = state.purchase_item(item.id, item.price)
        message = f"Purchased {item.name}" if ok else "Not enough XP"

    return {
        "ok": ok,
        "message": message,
        "xp_all_time": state.xp.xp_all_time(),
        "purchased_items": state.shop.get_purchased_items(),
    }


@app.get("/shop/purchased")
def get_purchased(state: LearnerState = Depends(get_learner_state)):
    items = [find_item(item_id) for item_id in state.shop.get_purchased_items()]
    return {"items": [item._asdict() for item in items if item is not None]}


# --------- Badges / Leaderboard ---------
@app.get("/badges")
def get_badges(state: LearnerState = Depends(get_learner_state)):
    return {"badges": list(state.badges.badges)}


@app.post("/badges")
def add_badge(data: BadgeInput, state: LearnerState = Depends(get_learner_state)):
    added = state.add_badge(data.name)
    return {"added": added, "badges": list(state.badges.badges)}


@app.get("/leaderboard")
def get_leaderboard(state: LearnerState = Depends(get_learner_state)):
    remaining = lessons_to_unlock(state.lessons.lessons_completed)
    if remaining:
        return {"locked": True, "lessons_remaining": remaining, "users": [], "rank": None}
    users = leaderboard_users(state.session.name, state.xp.xp_today())
    return {"locked": False, "lessons_remaining": 0, "users": users, "rank": leaderboard_rank(users)}


# --------- Daily Quiz ---------
@app.post("/quiz/submit")
def submit_quiz(data: QuizSubmission, state: LearnerState = Depends(get_learner_state),
                store: QuizStore = Depends(get_quiz_store)):
    quiz = store.get(data.quiz_id)
    if quiz is None:
        return error(404, "Quiz not found")
    result = state.submit_quiz(quiz["questions"], data.answers)
    return {"result": result, "xp_all_time": state.xp.xp_all_time()}


# --------- Auth ---------
@app.post("/auth/login")
def login(data: LoginInput, db: Session = Depends(get_db), state: LearnerState = Depends(get_learner_state)):
    try:
        user = auth_gateway.sign_in(data.email, data.password)
    except auth_gateway.AuthError as e:
        return error(401, str(e))
    except auth_gateway.UPSTREAM_ERRORS as e:
        logger.error("Login failed: %s", e)
        return error(502, GENERIC_ERROR)

    first_name, last_name = "", ""
    try:
        profile = db.get(UserProfile, user["id"])
        if profile is None:
            profile = UserProfile(id=user["id"], email=user.get("email", data.email))
            db.add(profile)
        profile.last_login = datetime.now(timezone.utc)
        first_name, last_name = profile.first_name or "", profile.last_name or ""
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Could not update last_login: %s", e)

    state.log_in(user["id"], user.get("email", data.email), first_name, last_name)
    snapshot = state.snapshot()
    return {"ok": True, "user": snapshot["user"], "streak": snapshot["streak"]}


@app.post("/auth/signup")
def signup(data: SignupInput, db: Session = Depends(get_db), state: LearnerState = Depends(get_learner_state)):
    if data.password != data.confirm_password:
        return error(400, "Passwords do not match")

    try:
        user = auth_gateway.sign_up(data.email, data.password)
    except auth_gateway.AuthError as e:
        return error(400, str(e))
    except auth_gateway.UPSTREAM_ERRORS as e:
        logger.error("Signup failed: %s", e)
        return error(502, GENERIC_ERROR)

    try:
        db.merge(UserProfile(
            id=user["id"],
            email=data.email,
            first_name=data.first_name or None,
            last_name=data.last_name or None,
            last_login=datetime.now(timezone.utc),
        ))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to insert user: %s", e)

    state.log_in(user["id"], data.email, data.first_name, data.last_name)
    return {"ok": True, "user": state.snapshot()["user"]}


@app.post("/auth/logout")
def logout(state: LearnerState = Depends(get_learner_state)):
    state.log_out()
    return {"ok": True}


# --------- Chat ---------
@app.post("/api/gemini-chat")
def gemini_chat_endpoint(data: ChatInput):
    if data.messages is None:
        return error(400, "messages[] is required")

    messages = [m.model_dump() for m in data.messages]
    try:
        text = gemini_chat.gemini_reply(messages, data.system_prompt)
    except gemini_chat.MissingApiKey as e:
        return error(500, str(e))
    except (requests.exceptions.RequestException, KeyError, IndexError, ValueError) as e:
        logger.error("Gemini error: %s", e)
        return error(500, "Gemini request failed", text=gemini_chat.FALLBACK_REPLY)

    return {"text": text}


# --------- Quiz Management ---------
@app.get("/api/manage-quizzes")
def list_quizzes(store: QuizStore = Depends(get_quiz_store)):
    return {"ok": True, "quizzes": store.list()}


@app.post("/api/manage-quizzes")
async def create_quiz(request: Request, store: QuizStore = Depends(get_quiz_store)):
    body = await json_body(request)
    if body is None:
        return error(400, "Invalid JSON")
    if not isinstance(body, dict):
        return error(400, "Invalid questions payload")

    title = body.get("title")
    title = "Untitled Quiz" if title is None else str(title)
    unit_number = body.get("unitNumber")
    if not isinstance(unit_number, int) or isinstance(unit_number, bool):
        unit_number = None
    questions = body.get("questions")
    questions = questions if isinstance(questions, list) else []

    if not validate_questions(questions):
        return error(400, "Invalid questions payload")

    quiz = store.add(title, questions, unit_number)
    logger.info("Created quiz %s (%s questions)", quiz["id"], len(questions))
    return {"ok": True, "quiz": quiz}


@app.patch("/api/manage-quizzes")
async def patch_quiz(request: Request, store: QuizStore = Depends(get_quiz_store)):
    body = await json_body(request)
    if body is None:
        return error(400, "Invalid JSON")
    if not isinstance(body, dict) or not body.get("id"):
        return error(400, "Missing id")

    title = body.get("title") if isinstance(body.get("title"), str) else None
    questions = body.get("questions") if isinstance(body.get("questions"), list) else None
    if questions is not None and not validate_questions(questions):
        return error(400, "Invalid questions payload")

    quiz = store.update(str(body["id"]), title=title, unit_number=body.get("unitNumber"), questions=questions)
    if quiz is None:
        return error(404, "Not found")
    return {"ok": True, "quiz": quiz}


@app.delete("/api/manage-quizzes")
def delete_quiz(id: Optional[str] = None, store: QuizStore = Depends(get_quiz_store)):
    if not id:
        return error(400, "Missing id")
    removed = store.delete(id)
    if removed is None:
        return error(404, "Not found")
    return {"ok": True, "quiz": removed}


# --------- Upload Management ---------
def upload_type_param(upload_type: Optional[str] = Query(None, alias="type")):
    return "video" if upload_type == "video" else "note"


@app.get("/api/manage-uploads")
def list_uploads(upload_type: str = Depends(upload_type_param), store: UploadStore = Depends(get_upload_store)):
    return {"ok": True, "items": store.list(upload_type)}


@app.patch("/api/manage-uploads")
async def patch_upload(request: Request, upload_type: str = Depends(upload_type_param),
                       store: UploadStore = Depends(get_upload_store)):
    body = await json_body(request)
    if body is None:
        return error(400, "Invalid JSON")
    if not isinstance(body, dict) or not body.get("id"):
        return error(400, "Missing id")
    title = body.get("title") if isinstance(body.get("title"), str) else None
    description = body.get("description") if isinstance(body.get("description"), str) else None
    item = store.update(str(body["id"]), upload_type, title=title, description=description)
    if item is None:
        return error(404, "Not found")
    return {"ok": True, "item": item}


@app.delete("/api/manage-uploads")
def delete_upload(id: Optional[str] = None, upload_type: str = Depends(upload_type_param),
                  store: UploadStore = Depends(get_upload_store)):
    if not id:
        return error(400, "Missing id")
    try:
        removed = store.delete(id, upload_type)
    except OSError as e:
        logger.error("Could not remove uploaded file: %s", e)
        return error(500, "Server error")
    if removed is None:
        return error(404, "Not found")
    return {"ok": True, "item": removed}


def save_uploads(store, upload_type, files, title, description, teacher_id, unit_number):
    if not files:
        return error(400, "File missing")

    try:
        unit = int(unit_number) if unit_number not in (None, "") else None
    except ValueError:
        unit = None

    default_ext = ".mp4" if upload_type == "video" else ".pdf"
    saved = []
    try:
        for i, f in enumerate(files):
            name = f.filename or f"{upload_type}-{i + 1}{default_ext}"
            saved.append(store.save_file(
                upload_type, name, f.file.read(), index=i, title=title,
                description=description, teacher_id=teacher_id, unit_number=unit,
            ))
    except OSError as e:
        logger.error("Upload failed: %s", e)
        return error(500, "Upload failed")

    logger.info("Stored %s %s upload(s)", len(saved), upload_type)
    return {"ok": True, "items": saved}


@app.post("/api/upload-videos")
def upload_videos(file: Optional[List[UploadFile]] = File(None), title: str = Form("Untitled video"),
                  description: Optional[str] = Form(None), teacherId: Optional[str] = Form(None),
                  unitNumber: Optional[str] = Form(None), store: UploadStore = Depends(get_upload_store)):
    return save_uploads(store, "video", file, title, description, teacherId, unitNumber)


@app.post("/api/upload-notes")
def upload_notes(file: Optional[List[UploadFile]] = File(None), title: str = Form("Untitled note"),
                 description: Optional[str] = Form(None), teacherId: Optional[str] = Form(None),
                 unitNumber: Optional[str] = Form(None), store: UploadStore = Depends(get_upload_store)):
    return save_uploads(store, "note", file, title, description, teacherId, unitNumber)


# --------- Mini Games ---------
@app.post("/games/{game}/start")
def start_game(game: str, data: GameStartInput, rounds: dict = Depends(get_game_rounds)):
    rects = {key: rect.model_dump() for key, rect in data.zones.items()}
    try:
        rounds[game] = drag_games.new_round(game, rects)
    except KeyError:
        return error(404, "Unknown game")
    except ValueError as e:
        return error(400, str(e))
    return rounds[game].state()


@app.get("/games/{game}")
def get_game(game: str, rounds: dict = Depends(get_game_rounds)):
    if game not in rounds:
        return error(404, "No round in progress")
    return rounds[game].state()


@app.post("/games/{game}/drop")
def drop_item(game: str, data: DropInput, rounds: dict = Depends(get_game_rounds)):
    current = rounds.get(game)
    if current is None:
        return error(404, "No round in progress")
    try:
        result = current.drop(data.item, data.x, data.y)
    except ValueError as e:
        return error(400, str(e))
    return {"result": result._asdict(), "state": current.state()}


@app.post("/games/{game}/tick")
def tick_game(game: str, data: TickInput, rounds: dict = Depends(get_game_rounds)):
    current = rounds.get(game)
    if current is None:
        return error(404, "No round in progress")
    current.tick(data.seconds)
    return current.state()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)
