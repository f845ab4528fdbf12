"""
Tags file reader.

Each line of a tags file is `<filename>\t<label>`; the filename is relative
to the images folder. There is no header unless has_header is set.
"""
import csv
import logging
import os
from pathlib import Path
from typing import List, Union

from .records import ImageData

logger = logging.getLogger(__name__)


def read_from_tsv(file: Union[str, Path], folder: Union[str, Path], has_header: bool = False) -> List[ImageData]:
    """
    Parse a tags file into ImageData records.

    Args:
        file: path to the tab-separated tags file
        folder: images folder the filenames are relative to
        has_header: skip the first line when True

    Returns:
        list of ImageData with image_path = folder joined with the filename.
        Blank lines are skipped; a line without a label column gets label=None.
    """
    records = []
    with open(file, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f, delimiter="\t", quoting=csv.QUOTE_NONE)
        for line_no, row in enumerate(reader):
            if has_header and line_no == 0:
                continue
            if not row or not row[0].strip():
                continue
            name = row[0]
            label = row[1] if len(row) > 1 and row[1] != "" else None
            records.append(ImageData(image_path=os.path.join(str(folder), name), label=label))
    logger.debug(f"Read {len(records)} records from {file}")
    return records
