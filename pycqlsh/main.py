"""Main entry point for the pycqlsh CLI."""
from pycqlsh.cli.main import main

if __name__ == "__main__":
    main()
