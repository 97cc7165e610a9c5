#!/usr/bin/env python3
from hhand.tui import run


if __name__ == "__main__":
    raise SystemExit(run())
