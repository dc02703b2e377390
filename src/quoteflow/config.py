"""Runtime settings resolved from the environment."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Mapping

from quoteflow.flows import DISPUTE_CLOSE_DELAY_S, REPORT_CLOSE_DELAY_S
from quoteflow.wizard.flow import QUOTE_CLOSE_DELAY_S


@dataclass(frozen=True)
class Settings:
    submit_mode: str = "mock"
    api_url: str | None = None
    api_key: str | None = None
    timeout_s: float = 30.0
    geolocation_url: str | None = None
    outbox_path: Path | None = None
    log_level: str = "WARNING"
    quote_close_delay_s: float = QUOTE_CLOSE_DELAY_S
    report_close_delay_s: float = REPORT_CLOSE_DELAY_S
    dispute_close_delay_s: float = DISPUTE_CLOSE_DELAY_S
    notes: list[str] = field(default_factory=list)

    def client_kwargs(self) -> dict:
        if self.submit_mode == "remote":
            return {"base_url": self.api_url, "api_key": self.api_key, "timeout_s": self.timeout_s}
        return {"outbox_path": self.outbox_path}


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    notes: list[str] = []

    mode = env.get("QUOTEFLOW_SUBMIT_MODE", "mock").strip().lower()
    if mode not in {"mock", "remote"}:
        notes.append(f"Unknown QUOTEFLOW_SUBMIT_MODE '{mode}'; using mock.")
        mode = "mock"
    api_url = env.get("QUOTEFLOW_API_URL") or None
    api_key = env.get("QUOTEFLOW_API_KEY") or None
    if mode == "remote" and not (api_url and api_key):
        notes.append("QUOTEFLOW_API_URL or QUOTEFLOW_API_KEY missing; submit mode set to mock.")
        mode = "mock"

    outbox = env.get("QUOTEFLOW_OUTBOX_PATH")
    return Settings(
        submit_mode=mode,
        api_url=api_url,
        api_key=api_key,
        timeout_s=_float(env, "QUOTEFLOW_TIMEOUT_S", 30.0, notes),
        geolocation_url=env.get("QUOTEFLOW_GEOLOCATION_URL") or None,
        outbox_path=Path(outbox) if outbox else None,
        log_level=env.get("QUOTEFLOW_LOG_LEVEL", "WARNING").upper(),
        quote_close_delay_s=_float(env, "QUOTEFLOW_QUOTE_CLOSE_DELAY_S", QUOTE_CLOSE_DELAY_S, notes),
        report_close_delay_s=_float(env, "QUOTEFLOW_REPORT_CLOSE_DELAY_S", REPORT_CLOSE_DELAY_S, notes),
        dispute_close_delay_s=_float(env, "QUOTEFLOW_DISPUTE_CLOSE_DELAY_S", DISPUTE_CLOSE_DELAY_S, notes),
        notes=notes,
    )


def _float(env: Mapping[str, str], key: str, default: float, notes: list[str]) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        notes.append(f"{key} must be a number; using {default}.")
        return default
    if value < 0:
        notes.append(f"{key} must be >= 0; using {default}.")
        return default
    return value
