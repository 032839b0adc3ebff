"""Entry point for ``python -m wails_setup``."""

from wails_setup.pipeline import main

main()
