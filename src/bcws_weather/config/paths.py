"""Path configuration for the BCWS downloader."""

from pathlib import Path

# Project root is three levels up from this file:
# config -> bcws_weather -> src -> project
_THIS_FILE = Path(__file__).resolve()
PROJECT_ROOT = _THIS_FILE.parent.parent.parent.parent

DATA_DIR = PROJECT_ROOT / "data"
EXPORT_DIR = DATA_DIR / "exports"


def get_export_path(filename: str, output_dir: Path | None = None) -> Path:
    """Get the path a CSV export is written to.

    Args:
        filename: Artifact name (e.g. "Kamloops_2023_BCWS_WX_OBS.csv")
        output_dir: Directory override; defaults to data/exports/

    Returns:
        Path to the export file
    """
    return (output_dir or EXPORT_DIR) / filename


def ensure_directories(output_dir: Path | None = None) -> None:
    """Create the export directory if it doesn't exist."""
    (output_dir or EXPORT_DIR).mkdir(parents=True, exist_ok=True)
