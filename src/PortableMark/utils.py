from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

STDOUT = "-"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure a console logger; ``quiet`` wins over ``verbose``."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
    )


def resolve_output_path(input_path: Path, output: Optional[str]) -> Path | None:
    """Pick the JSON output path; ``None`` means write to stdout."""
    if output == STDOUT:
        return None
    if output:
        out_path = Path(output)
        if out_path.is_dir():
            out_path = out_path / f"{input_path.stem}.json"
        return out_path
    return input_path.with_suffix(".json")


def read_markdown(path: Path) -> str:
    # utf-8-sig drops a leading BOM that would otherwise hide front matter
    return path.read_text(encoding="utf-8-sig")
