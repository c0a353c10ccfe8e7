"""CLI entry point - wrapper so the tool runs from a source checkout

    python cli.py [--alpha|--cloud|--staging] [--logout] [--status]
"""

from cli.main import main

if __name__ == "__main__":
    main()
