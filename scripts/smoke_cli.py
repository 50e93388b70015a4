"""
Lightweight smoke runner for the CLI across providers.

Writes a temporary settings file with one model per vendor whose API key is
present, then runs one short completion per model through
``python -m completekit.cli complete``. Vendors without a key are skipped.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple

# (vendor kind, model name, env var holding the key)
PROVIDERS: List[Tuple[str, str, Optional[str]]] = [
    ("openai", "gpt-4o-mini", "OPENAI_API_KEY"),
    ("anthropic", "claude-3-5-haiku-latest", "ANTHROPIC_API_KEY"),
    ("gemini", "gemini-2.0-flash", "GEMINI_API_KEY"),
    ("groq", "llama-3.1-8b-instant", "GROQ_API_KEY"),
    ("openrouter", "meta-llama/llama-3.1-8b-instruct", "OPENROUTER_API_KEY"),
    ("ollama", "llama3.2", None),
]


def main() -> None:
    project_root = Path(__file__).resolve().parents[1]
    # Ensure package is importable in subprocess even if not installed.
    env = os.environ.copy()
    existing_pp = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = (
        f"{project_root / 'src'}{os.pathsep}{existing_pp}" if existing_pp else str(project_root / "src")
    )

    providers, models = [], []
    for kind, model, env_key in PROVIDERS:
        if env_key and not env.get(env_key):
            print(f"Skipping {kind}: missing {env_key}")
            continue
        providers.append({"id": kind, "name": kind, "type": kind, "apiKey": env.get(env_key or "", "local")})
        models.append({"id": kind, "name": model, "providerId": kind, "modelName": model})

    with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as handle:
        json.dump({"providers": providers, "models": models}, handle)
        settings_path = handle.name

    try:
        for model in models:
            print(f"\n=== Smoke: {model['id']} ({model['modelName']}) ===")
            cmd = [
                sys.executable,
                "-m",
                "completekit.cli",
                "complete",
                "--config",
                settings_path,
                "--model",
                model["id"],
                "--system",
                "Reply with one short sentence.",
                "--content",
                f"Hello from {model['id']}",
                "--max-tokens",
                "64",
                "--timeout",
                "15",
                "--stream",
            ]
            try:
                subprocess.run(cmd, check=True, env=env)
            except subprocess.CalledProcessError as exc:  # noqa: BLE001
                print(f"{model['id']} smoke FAILED: {exc}")
    finally:
        os.unlink(settings_path)


if __name__ == "__main__":
    main()
