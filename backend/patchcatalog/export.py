import logging
import shutil
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


def export_patches(patch_paths: Iterable[str], destination: str) -> List[Path]:
    """
    Copy patch files into a numbered bank/patch tree under ``destination``.

    The i-th file lands in ``bank{i:02d}/patch{i:02d}.mmp``.

    Returns:
        Paths of the written files, in input order
    """
    export_dir = Path(destination)
    export_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for index, patch_path in enumerate(patch_paths):
        source = Path(patch_path)
        if not source.is_file():
            raise FileNotFoundError(f"Patch file not found: {patch_path}")

        bank_dir = export_dir / f"bank{index:02d}"
        bank_dir.mkdir(parents=True, exist_ok=True)
        target = bank_dir / f"patch{index:02d}.mmp"
        shutil.copyfile(source, target)
        written.append(target)

    logger.info(f"Exported {len(written)} patches to {export_dir}")
    return written
