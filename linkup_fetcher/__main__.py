"""Allow ``python -m linkup_fetcher``."""

from .cli import main

main()
