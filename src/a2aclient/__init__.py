"""Client for exchanging messages with remote A2A agents."""

from pathlib import Path

__version__ = "0.1.0"

package_dir = Path(__file__).resolve().parent
