"""Entry point for `python -m claude_code_summary`."""

import sys


def main():
    from claude_code_summary.cli import main as run
    sys.exit(run())


if __name__ == "__main__":
    main()
