"""Module entrypoint for ``python -m golo_cli``."""

from .main import main

if __name__ == "__main__":
    main()
