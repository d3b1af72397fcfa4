"""Allow ``python -m themetools``."""

from themetools.cli import main

main()
