"""Allow ``python -m exprwhizz``."""

from exprwhizz.cli import main

if __name__ == "__main__":
    main()
