"""Package entry point.

Preferred invocation is via the installed console script:

    analysis-graph ...

For convenience we also support:

    python -m analysis_graph ...
"""

from __future__ import annotations

from .cli import app


def main() -> None:
    """Entry point used by `python -m analysis_graph`."""

    app()


if __name__ == "__main__":
    main()
