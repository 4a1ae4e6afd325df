import logging
import os
from pathlib import Path
import sys

from streamlit.web import cli as stcli


def main() -> None:
    """Launch the placement dashboard via `python -m app`.

    PLACEMENT_LOG_LEVEL (default INFO) sets the level for the library's loggers.
    """
    level = os.environ.get("PLACEMENT_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    script = Path(__file__).resolve().parent / "app.py"
    sys.argv = ["streamlit", "run", str(script)] + sys.argv[1:]
    stcli.main()


if __name__ == "__main__":
    main()
