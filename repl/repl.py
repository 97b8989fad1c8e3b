from __future__ import annotations

from typing import Any, Dict, List

import config
from marksman.attack_input import FIELDS, AttackInput, canonical_field
from marksman.form_options import INITIAL_FORM
from marksman.hit_policy import parse_policy
from marksman.resolver import compare_policies, explain, format_result, resolve


HELP_LINES = [
    "Commands:",
    "  show                    - current fields and results",
    "  set <field> <value>     - change one field (re-resolves)",
    "  policy <simple|natural> - switch hit probability policy",
    "  compare                 - results under every policy",
    "  explain                 - step-by-step breakdown",
    "  reset                   - back to the opening values",
    "  exit                    - quit",
    "Fields: " + ", ".join(FIELDS),
]


def new_session() -> Dict[str, Any]:
    return {"fields": dict(INITIAL_FORM), "policy": config.hit_policy()}


def _current(session: Dict[str, Any]) -> AttackInput:
    return AttackInput.from_raw(session["fields"], threshold_default=config.threshold_default())


def _show(session: Dict[str, Any]) -> List[str]:
    inp = _current(session)
    fields = " ".join(f"{k}={v}" for k, v in inp.as_dict().items())
    res = resolve(inp, session["policy"])
    return [fields, f"[{session['policy'].value}] {format_result(res)}"]


def apply_command(session: Dict[str, Any], line: str) -> List[str]:
    """
    Run one REPL command against the session and return output lines.

    Field values are stored raw and coerced on every resolve, the same way
    the web form treats them.
    """
    parts = line.strip().split()
    if not parts:
        return []
    head = parts[0].lower()

    if head == "help":
        return list(HELP_LINES)

    if head == "show":
        return _show(session)

    if head == "set":
        if len(parts) != 3:
            return ["Usage: set <field> <value>"]
        name = canonical_field(parts[1])
        if name is None:
            return [f"Unknown field: {parts[1]}"]
        session["fields"][name] = parts[2]
        return _show(session)

    if head == "policy":
        if len(parts) != 2:
            return ["Usage: policy <simple|natural>"]
        try:
            session["policy"] = parse_policy(parts[1])
        except ValueError as e:
            return [f"ERROR: {e}"]
        return _show(session)

    if head == "compare":
        inp = _current(session)
        return [f"[{p.value}] {format_result(r)}" for p, r in compare_policies(inp).items()]

    if head == "explain":
        inp = _current(session)
        return explain(inp, resolve(inp, session["policy"]))

    if head == "reset":
        session["fields"] = dict(INITIAL_FORM)
        return _show(session)

    return [f"Unknown command: {line.strip()}"]


def run_repl(session: Dict[str, Any] | None = None) -> None:
    session = session if session is not None else new_session()
    print("Marksman Ammo Calculator")
    print("Type 'help' for commands. Type 'exit' to quit.\n")
    for out in _show(session):
        print(out)

    while True:
        try:
            raw = input(f"[{session['policy'].value}]> ").strip()
        except EOFError:
            break
        if raw.lower() in ("quit", "exit", "q"):
            break
        for out in apply_command(session, raw):
            print(out)


def main() -> None:
    run_repl()


if __name__ == "__main__":
    main()
