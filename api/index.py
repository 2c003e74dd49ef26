"""Vercel serverless entrypoint for the catalog and meal API."""

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from nutrition_admin.api.app import create_app  # noqa: E402
from nutrition_admin.containers import build_container  # noqa: E402

app = create_app(build_container())
