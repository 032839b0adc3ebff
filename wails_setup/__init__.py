"""Wails + Cursor setup: scaffolds Cursor rules, a Go test layout and tooling
into an existing Wails project."""

__version__ = "0.1.0"
