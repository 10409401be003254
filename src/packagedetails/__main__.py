"""Allow ``python -m packagedetails``."""

from packagedetails.cli import main

main()
