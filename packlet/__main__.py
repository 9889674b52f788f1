"""Allow ``python -m packlet``."""

from .cli import main

raise SystemExit(main())
