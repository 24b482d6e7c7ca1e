# autoplay.py
from __future__ import annotations
import argparse, json, logging, random
from collections import Counter, defaultdict
from typing import Dict, List
from lifeskills_core.question_bank import SKILLS
from lifeskills_core.session import QuizSession

class _NoTimer:
    # random completion never schedules an advance
    def call_later(self, delay, callback, *args):
        raise RuntimeError("autoplay does not answer manually")

def play(n: int, seed: int | None = None) -> Dict[str, Dict[str, object]]:
    rng = random.Random(seed)
    stars: Dict[str, List[int]] = defaultdict(list)
    cats: Dict[str, Counter] = defaultdict(Counter)
    for _ in range(n):
        sess = QuizSession(rng=rng, scheduler=_NoTimer())
        sess.start()
        sess.jump_to_random_completion()
        for r in sess.results():
            stars[r.skill].append(r.star_rating)
            cats[r.skill][r.category] += 1
        sess.close()
    out: Dict[str, Dict[str, object]] = {}
    for s in SKILLS:
        vals = stars[s.id]
        out[s.name] = {
            "mean_stars": round(sum(vals) / len(vals), 2) if vals else 0.0,
            "categories": dict(cats[s.id]),
        }
    return out

def main():
    ap = argparse.ArgumentParser(description="Run random-completion sessions and summarize ratings")
    ap.add_argument("--runs", type=int, default=200)
    ap.add_argument("--seed", type=int, default=None)
    a = ap.parse_args()
    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")
    print(json.dumps(play(a.runs, a.seed), indent=2))

if __name__ == "__main__":
    main()
