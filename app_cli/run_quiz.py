# app_cli/run_quiz.py
from __future__ import annotations
import argparse, asyncio, datetime, logging, os, random
from lifeskills_core.config import ANSWER_LABELS, DEBUG_TRACE, load_config, make_rng
from lifeskills_core.input_controller import InputController, KeyEventBus, parse_key
from lifeskills_core.question_bank import SKILLS
from lifeskills_core.report_html import export_report_html
from lifeskills_core.session import QuizSession
from lifeskills_core.types import SessionView

HELP = "Keys: 1-4 answer | shift+enter complete randomly | shift+1 (or !) restart | q quit"

def _render(v: SessionView) -> None:
    if v.phase == "not_started":
        print("\nWhich Developmental Skills are You Strong in?")
        for s in SKILLS: print(f"  {s.name}")
        print("Press enter to take the quiz.")
    elif v.phase == "in_progress" and v.question is not None:
        print(f"\nQuestion {v.number} of {v.total}  [{'#' * int(v.progress * 20):<20}]")
        print(f"  {v.question.text}")
        print("  " + "   ".join(f"{k}={lbl}" for k, lbl in ANSWER_LABELS.items()))
    elif v.phase == "completed":
        print("\nYour Results")
        for r in v.results:
            stars = "*" * r.star_rating + "." * (5 - r.star_rating)
            print(f"\n{r.name:<28} {stars}")
            print(f"  {r.description}")
            print(f"  Your skill level: {r.category}")
            print(f"  {r.narrative}")
        print("\nPress shift+1 to restart the quiz.")

async def _run(sess: QuizSession, html_out: str | None) -> None:
    loop = asyncio.get_running_loop()
    bus = KeyEventBus()
    with InputController(sess).attached(bus):
        print(HELP)
        _render(sess.view())
        while True:
            line = await loop.run_in_executor(None, input, "> ")
            token = line.strip()
            if token.lower() in ("q", "quit", "exit"):
                break
            if sess.phase == "not_started" and not token:
                sess.start()
            else:
                ev = parse_key(token)
                if ev is None:
                    print(HELP); continue
                bus.publish(ev)
                if sess.pending:
                    await asyncio.sleep(sess.delay + 0.01)
            _render(sess.view())
            if sess.phase == "completed" and html_out:
                print(f"Report: {export_report_html(sess.results(), html_out)}")
    sess.close()

def main():
    ap = argparse.ArgumentParser(description="Life skills self-assessment quiz")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--html", action="store_true", help="write an HTML report when finished")
    a = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if DEBUG_TRACE else logging.WARNING, format="[%(levelname)s] %(message)s")

    rng = random.Random(a.seed) if a.seed is not None else make_rng(load_config())
    html_out = None
    if a.html:
        ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        html_out = os.path.join("reports", f"life_skills_{ts}.html")
    try:
        asyncio.run(_run(QuizSession(rng=rng), html_out))
    except (KeyboardInterrupt, EOFError):
        print("\nStopped by user.")

if __name__ == "__main__": main()
