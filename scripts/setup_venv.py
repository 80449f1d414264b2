"""Run autovenv from a source checkout without installing it."""

from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from autovenv.cli import main  # noqa: E402


if __name__ == "__main__":
    sys.exit(main())
