from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent
SOURCE_PATHS = (
    ROOT / "packages" / "common" / "src",
    ROOT / "services" / "cdt-express" / "src",
)

for source_path in SOURCE_PATHS:
    if str(source_path) not in sys.path:
        sys.path.insert(0, str(source_path))
