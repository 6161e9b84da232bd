from __future__ import annotations

from maintainerd.ui.cli import run

run()
