"""Allow ``python -m project_refs``."""

from project_refs.cli import main

if __name__ == "__main__":
    main()
