#!/usr/bin/env python3
"""Run the redirector with explicit args (avoids shell interpolation)."""
from __future__ import annotations

from consul_redirect.app.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
