"""Allow running as ``python -m remglk_events``."""

from .cli import main

main()
