"""
Bundled data files.

    prerequisites.yml — default prerequisite catalog
"""

from pathlib import Path

DATA_DIR = Path(__file__).parent
