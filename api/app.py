from __future__ import annotations
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
from contextlib import ExitStack
import logging, os, random, time, uuid, typing as t

from lifeskills_core.session import QuizSession
from lifeskills_core.input_controller import InputController, KeyEventBus
from lifeskills_core.question_bank import SKILLS
from lifeskills_core.report_html import render_report_html
from lifeskills_core.types import KeyEvent
from lifeskills_core import config
from lifeskills_core.config import load_config, make_rng

log = logging.getLogger(__name__)

SESS: dict[str, QuizSession] = {}
BUSES: dict[str, KeyEventBus] = {}
SCOPES: dict[str, ExitStack] = {}
LAST_SEEN: dict[str, float] = {}

_now = time.monotonic

app = FastAPI(title="Life Skills Quiz API")

ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class CreateReq(BaseModel):
    seed: int | None = None
    start: bool = False

class AnswerReq(BaseModel):
    value: int

class KeyReq(BaseModel):
    key: str
    shift: bool = False

# ---- Helpers ----
def make_session(seed: int | None = None) -> QuizSession:
    if seed is not None:
        rng = random.Random(seed)
    else:
        rng = make_rng(load_config())
    return QuizSession(rng=rng)


def _sweep() -> None:
    ttl = config.SESSION_IDLE_TTL_SEC
    if ttl <= 0:
        return
    cutoff = _now() - ttl
    stale = [sid for sid, seen in LAST_SEEN.items() if seen < cutoff]
    for sid in stale:
        _teardown(sid)
    if stale:
        log.info("swept idle sessions n=%d", len(stale))


def _get(sid: str) -> QuizSession:
    _sweep()
    sess = SESS.get(sid)
    if not sess: raise HTTPException(404, "session not found")
    LAST_SEEN[sid] = _now()
    return sess


def _state(sid: str, sess: QuizSession, accepted: bool | None = None) -> dict[str, t.Any]:
    out: dict[str, t.Any] = {"session_id": sid, "view": sess.view().to_dict()}
    if accepted is not None:
        out["accepted"] = accepted
    return out


def _teardown(sid: str) -> None:
    scope = SCOPES.pop(sid, None)
    if scope is not None:
        scope.close()
    sess = SESS.pop(sid, None)
    if sess is not None:
        sess.close()
    BUSES.pop(sid, None)
    LAST_SEEN.pop(sid, None)

# ---- Health ----
@app.get("/")
def root():
    return {"status": "ok", "service": "life-skills-quiz"}

@app.get("/health")
def health():
    return {"status": "ok", "active_sessions": len(SESS)}

@app.get("/skills")
def skills():
    return {"skills": [{"id": s.id, "name": s.name, "description": s.description} for s in SKILLS]}

# ---- Session endpoints ----
# handlers are async so the advance timer lands on the serving event loop
@app.post("/session")
async def create(req: CreateReq | None = None):
    req = req or CreateReq()
    _sweep()
    sid = str(uuid.uuid4())
    sess = make_session(req.seed)
    bus = KeyEventBus()
    scope = ExitStack()
    scope.enter_context(InputController(sess).attached(bus))
    SESS[sid] = sess; BUSES[sid] = bus; SCOPES[sid] = scope
    LAST_SEEN[sid] = _now()
    if req.start:
        sess.start()
    log.info("session created sid=%s", sid)
    return _state(sid, sess)

@app.get("/session/{sid}")
async def view(sid: str):
    return _state(sid, _get(sid))

@app.post("/session/{sid}/start")
async def start(sid: str):
    sess = _get(sid)
    return _state(sid, sess, sess.start())

@app.post("/session/{sid}/answer")
async def answer(sid: str, req: AnswerReq):
    sess = _get(sid)
    return _state(sid, sess, sess.answer(req.value))

@app.post("/session/{sid}/random-complete")
async def random_complete(sid: str):
    sess = _get(sid)
    return _state(sid, sess, sess.jump_to_random_completion())

@app.post("/session/{sid}/restart")
async def restart(sid: str):
    sess = _get(sid)
    return _state(sid, sess, sess.restart())

@app.post("/session/{sid}/key")
async def key(sid: str, req: KeyReq):
    sess = _get(sid)
    BUSES[sid].publish(KeyEvent(key=req.key, shift=req.shift))
    return _state(sid, sess)

@app.get("/session/{sid}/report")
async def report(sid: str):
    sess = _get(sid)
    if sess.phase != "completed":
        raise HTTPException(409, "quiz not completed")
    return {"session_id": sid, "results": sess.view().to_dict()["results"]}

@app.get("/session/{sid}/report/html", response_class=HTMLResponse)
async def report_html(sid: str):
    sess = _get(sid)
    if sess.phase != "completed":
        raise HTTPException(409, "quiz not completed")
    return HTMLResponse(render_report_html(sess.results()))

@app.delete("/session/{sid}")
async def delete(sid: str):
    _get(sid)
    _teardown(sid)
    return {"ok": True}
