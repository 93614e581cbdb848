import fnmatch
import io
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO, Union


@contextmanager
def open_bugreport(path: Union[str, Path], encoding: str = "utf-8") -> Iterator[TextIO]:
    """
    Open a bugreport for reading, either a plain bugreport*.txt or the zip
    produced by `adb bugreport`, and close it when the block exits.

    Undecodable bytes are replaced instead of failing the read.

    Raises:
        OSError: if the file cannot be opened
        zipfile.BadZipFile: if a .zip file is corrupted
        FileNotFoundError: if the zip holds no bugreport*.txt

    Damaged compressed data only shows up while reading, as zlib.error or EOFError.
    """
    path = Path(path)
    if not zipfile.is_zipfile(path):
        with open(path, "r", encoding=encoding, errors="replace", newline="\n") as f:
            yield f
        return

    with zipfile.ZipFile(path, "r") as zip_ref:
        member = next(
            (
                name
                for name in zip_ref.namelist()
                if fnmatch.fnmatch(Path(name).name, "bugreport*.txt")
            ),
            None,
        )
        if member is None:
            raise FileNotFoundError(f"No bugreport*.txt file found in {path}")
        with zip_ref.open(member, "r") as raw:
            yield io.TextIOWrapper(raw, encoding=encoding, errors="replace", newline="\n")
