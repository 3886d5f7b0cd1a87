"""Scenario runner - replays YAML request scripts against a fresh store."""

from pathlib import Path
from typing import Any

import yaml

from ..api.router import Router
from ..backend.store import SessionStore
from ..config import Config
from ..models import ScenarioError, ScenarioReport, StepResult
from ..tracing import TracingClient, get_tracing


class ScenarioRunner:
    """Run request scenarios and compare responses with expectations."""

    def __init__(self, config: Config | None = None, tracing: TracingClient | None = None):
        self.config = config or Config()
        self.tracing = tracing if tracing is not None else get_tracing()

    def load(self, scenario_file: Path) -> dict:
        """Read and validate a scenario file."""
        try:
            raw = yaml.safe_load(Path(scenario_file).read_text())
        except (OSError, yaml.YAMLError) as e:
            raise ScenarioError(f"Cannot read scenario {scenario_file}: {e}") from e

        if not isinstance(raw, dict) or not isinstance(raw.get("steps"), list):
            raise ScenarioError(f"Scenario {scenario_file} needs a 'steps' list")

        for index, step in enumerate(raw["steps"], start=1):
            self._validate_step(step, f"Step {index} of {scenario_file}")

        raw.setdefault("name", Path(scenario_file).stem)
        return raw

    def _validate_step(self, step: Any, label: str) -> None:
        if not isinstance(step, dict) or "method" not in step or "path" not in step:
            raise ScenarioError(f"{label} needs 'method' and 'path'")
        if not isinstance(step["method"], str) or not isinstance(step["path"], str):
            raise ScenarioError(f"{label}: 'method' and 'path' must be strings")

        expect = step.get("expect")
        if expect is None:
            return
        if not isinstance(expect, dict):
            raise ScenarioError(f"{label}: 'expect' must be a mapping")
        if expect.get("body_contains") is not None and not isinstance(expect["body_contains"], dict):
            raise ScenarioError(f"{label}: 'expect.body_contains' must be a mapping")

    def run_file(self, scenario_file: Path) -> ScenarioReport:
        return self.run(self.load(scenario_file))

    def run(self, scenario: dict) -> ScenarioReport:
        """Run every step against one new store, in order."""
        store = SessionStore(self.config, tracing=self.tracing)
        router = Router(store)
        token = ""
        results = []

        for index, step in enumerate(scenario["steps"], start=1):
            if step.get("use_token"):
                store.set_token(token)

            response = router.dispatch(step["method"], step["path"], step.get("json"))
            body = response.json()

            # Remember the token of the last successful login
            if response.ok and isinstance(body, dict) and "token" in body:
                token = body["token"]

            expect = step.get("expect") or {}
            results.append(StepResult(
                name=str(step.get("name") or f"step {index}"),
                method=step["method"].upper(),
                path=step["path"],
                expected_status=expect.get("status"),
                actual_status=response.status,
                body=body,
                failures=self._check(expect, response.status, body),
            ))

        return ScenarioReport(name=str(scenario.get("name", "scenario")), steps=results)

    def _check(self, expect: dict, status: int, body: Any) -> list[str]:
        """Compare a response with the step's expectations."""
        failures = []

        if "status" in expect and expect["status"] != status:
            failures.append(f"expected status {expect['status']}, got {status}")

        if "body" in expect and expect["body"] != body:
            failures.append(f"expected body {expect['body']!r}, got {body!r}")

        for key, value in (expect.get("body_contains") or {}).items():
            if not isinstance(body, dict) or key not in body:
                failures.append(f"missing key '{key}'")
            elif value is not None and body[key] != value:
                failures.append(f"expected {key}={value!r}, got {body[key]!r}")

        return failures
