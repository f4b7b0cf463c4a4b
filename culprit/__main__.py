"""Entry point for ``python -m culprit``"""

from culprit import cli

if __name__ == "__main__":
    cli.launch()
