"""Allow ``python -m create_destino``."""

from create_destino.cli import main

if __name__ == "__main__":
    main()
