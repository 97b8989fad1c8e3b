from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

import config
from marksman.attack_input import FIELDS, AttackInput, canonical_field
from marksman.form_options import FIELD_LABELS, INITIAL_FORM, MIN_FORM_DAMAGE, options_payload, select_fields
from marksman.hit_policy import HitPolicy, parse_policy
from marksman.resolver import compare_policies, explain, format_bonus, resolve


app = FastAPI(title="Marksman Ammo Calculator")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def _policy(name: Optional[str]) -> HitPolicy:
    if name is None or not str(name).strip():
        return config.hit_policy()
    try:
        return parse_policy(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _raw_fields(source: Mapping[str, Any], fill_initial: bool) -> dict[str, Any]:
    """
    Pick the six calculator fields out of a request mapping.

    Missing fields fall back to the form's opening values for page renders,
    and to the coercion defaults for the JSON API.
    """
    raw: dict[str, Any] = dict(INITIAL_FORM) if fill_initial else {}
    for key, value in source.items():
        name = canonical_field(str(key))
        if name is not None:
            raw[name] = value
    return raw


def _coerce(raw: Mapping[str, Any]) -> AttackInput:
    return AttackInput.from_raw(raw, threshold_default=config.threshold_default())


def _page_context(raw: Mapping[str, Any], policy: HitPolicy) -> dict[str, Any]:
    inp = _coerce(raw)
    res = resolve(inp, policy)
    return {
        "values": inp.as_dict(),
        "result": res,
        "final_bonus_text": format_bonus(res.final_attack_bonus),
        "breakdown": "\n".join(explain(inp, res)),
        "select_fields": select_fields(inp.as_dict()),
        "labels": FIELD_LABELS,
        "min_damage": MIN_FORM_DAMAGE,
        "policies": [p.value for p in HitPolicy],
        "policy": policy.value,
    }


@app.get("/", response_class=HTMLResponse)
def index(request: Request, policy: Optional[str] = None):
    pol = _policy(policy)
    raw = _raw_fields(request.query_params, fill_initial=True)
    return templates.TemplateResponse(request, "index.html", _page_context(raw, pol))


@app.post("/ui/resolve", response_class=HTMLResponse)
def ui_resolve(
    request: Request,
    base_attack_roll: str = Form(""),
    additional_modifier: str = Form(""),
    hit_threshold: str = Form(""),
    damage: str = Form(""),
    ammo_spent: str = Form(""),
    extra_ammo: str = Form(""),
    policy: str = Form(""),
):
    pol = _policy(policy)
    raw = {
        "base_attack_roll": base_attack_roll,
        "additional_modifier": additional_modifier,
        "hit_threshold": hit_threshold,
        "damage": damage,
        "ammo_spent": ammo_spent,
        "extra_ammo": extra_ammo,
    }
    return templates.TemplateResponse(request, "index.html", _page_context(raw, pol))


@app.post("/resolve")
def post_resolve(payload: Dict[str, Any]):
    pol = _policy(payload.get("policy"))
    inp = _coerce(_raw_fields(payload, fill_initial=False))
    res = resolve(inp, pol)
    return {"input": inp.as_dict(), "result": res.as_dict(), "breakdown": explain(inp, res)}


@app.post("/compare")
def post_compare(payload: Dict[str, Any]):
    inp = _coerce(_raw_fields(payload, fill_initial=False))
    return {
        "input": inp.as_dict(),
        "results": {p.value: r.as_dict() for p, r in compare_policies(inp).items()},
    }


@app.get("/policies")
def list_policies():
    return {"policies": [p.value for p in HitPolicy], "default": config.hit_policy().value}


@app.get("/options")
def list_options():
    return {"fields": list(FIELDS), **options_payload()}


print("Using hit policy:", config.hit_policy().value)
