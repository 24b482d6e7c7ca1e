from __future__ import annotations
from html import escape
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .types import ScoreResult

MAX_STARS = 5

def _as_dict(r: Any) -> Dict[str, Any]:
    return r if isinstance(r, dict) else dict(r.__dict__)

def _stars(rating: int) -> str:
    n = max(0, min(MAX_STARS, int(rating)))
    filled = "<span class=\"star on\">&#9733;</span>" * n
    empty = "<span class=\"star\">&#9734;</span>" * (MAX_STARS - n)
    return f"<span class=\"stars\" title=\"{n} of {MAX_STARS}\">{filled}{empty}</span>"

def _block(d: Dict[str, Any]) -> str:
    return (
        "<div class=\"skill\">"
        f"<div class=\"head\"><h2>{escape(str(d.get('name')))}</h2>{_stars(d.get('star_rating', 1))}</div>"
        f"<p class=\"desc\">{escape(str(d.get('description') or ''))}</p>"
        f"<p>Your skill level: <b>{escape(str(d.get('category')))}</b></p>"
        f"<p>{escape(str(d.get('narrative') or ''))}</p>"
        "</div>"
    )

def render_report_html(results: Iterable[ScoreResult | Dict[str, Any]], title: str = "Your Results") -> str:
    rows: List[Dict[str, Any]] = [_as_dict(r) for r in results]
    blocks = "\n".join(_block(d) for d in rows)
    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8"/>
<title>{escape(title)}</title>
<style>
 body{{font-family:system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,'Helvetica Neue',Arial}}
 .wrap{{max-width:720px;margin:40px auto;padding:0 16px}}
 h1{{margin:0 0 24px;text-align:center}}
 .skill{{margin-bottom:32px}}
 .head{{display:flex;justify-content:space-between;align-items:center}}
 .desc{{font-style:italic;color:#4a5568}}
 .star{{color:#cbd5e0;font-size:1.4rem}}
 .star.on{{color:#ffd700}}
</style>
</head>
<body>
<div class="wrap">
  <h1>{escape(title)}</h1>
  {blocks}
</div>
</body>
</html>"""

def export_report_html(results: Iterable[ScoreResult | Dict[str, Any]], path: str) -> str:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(render_report_html(results), encoding="utf-8")
    return str(out)
