from __future__ import annotations
from collections import defaultdict
import os, sys
from lifeskills_core.question_bank import CATALOG, SKILLS, load_bank, validate_catalog

# Configurable targets; defaults match the current bank
TARGETS = {
    "developed_min": int(os.getenv("TARGET_DEVELOPED_MIN", 5)),
    "underdeveloped_min": int(os.getenv("TARGET_UNDERDEVELOPED_MIN", 5)),
}

def main() -> int:
    items = load_bank()
    by_skill = defaultdict(list)
    for st in items:
        by_skill[st.skill].append(st)

    print(f"Targets per skill: ≥{TARGETS['developed_min']} developed, "
          f"≥{TARGETS['underdeveloped_min']} underdeveloped.\n")

    for s in SKILLS:
        rows = by_skill[s.id]
        pos = sum(1 for st in rows if st.positive)
        neg = len(rows) - pos
        print(f"{s.name}: developed={pos} underdeveloped={neg}")
        need_pos = max(0, TARGETS["developed_min"] - pos)
        need_neg = max(0, TARGETS["underdeveloped_min"] - neg)
        if need_pos or need_neg:
            print(f"  → Add: developed {need_pos}, underdeveloped {need_neg}\n")
        else:
            print("  ✓ Meets targets\n")

    texts = [st.text for st in items]
    dupes = sorted({t for t in texts if texts.count(t) > 1})
    for t in dupes:
        print(f"duplicate statement: {t}")

    problems = validate_catalog(CATALOG)
    for p in problems:
        print(f"ERROR {p}")
    return 1 if problems else 0

if __name__ == "__main__":
    sys.exit(main())
