"""Load expressions from a text file or an archive containing one."""
from pathlib import Path
import tarfile
from typing import Callable, Dict, List
import zipfile

import py7zr


def _expression_lines(content: str) -> List[str]:
    """Stripped, non-empty lines of an operations file."""
    return [line.strip() for line in content.splitlines() if line.strip()]


def _first_txt(names: List[str], archive_kind: str) -> str:
    txt_names = [name for name in names if name.endswith(".txt")]
    if not txt_names:
        raise ValueError(f"📄❌ No .txt file found in {archive_kind} archive")
    return txt_names[0]


def _read_txt(path: Path) -> List[str]:
    return _expression_lines(path.read_text(encoding="utf-8"))


def _read_zip(path: Path) -> List[str]:
    with zipfile.ZipFile(path, "r") as zf:
        name = _first_txt(zf.namelist(), "zip")
        return _expression_lines(zf.read(name).decode("utf-8"))


def _read_tar_xz(path: Path) -> List[str]:
    with tarfile.open(path, "r:xz") as tf:
        members = {m.name: m for m in tf.getmembers() if m.isfile()}
        name = _first_txt(list(members), "tar.xz")
        with tf.extractfile(members[name]) as member:
            return _expression_lines(member.read().decode("utf-8"))


def _read_7z(path: Path) -> List[str]:
    with py7zr.SevenZipFile(path, mode="r") as archive:
        name = _first_txt(archive.getnames(), "7z")
        contents = archive.read([name])
        return _expression_lines(contents[name].read().decode("utf-8"))


# Input kind -> reader, keyed by the file's joined suffixes
READERS: Dict[str, Callable[[Path], List[str]]] = {
    ".txt": _read_txt,
    ".zip": _read_zip,
    ".tar.xz": _read_tar_xz,
    ".7z": _read_7z,
}


def load_expressions(input_file: Path) -> List[str]:
    """
    Read one expression per line from an operations file.

    :param Path input_file: ``.txt`` file, or ``.zip`` / ``.tar.xz`` / ``.7z`` archive holding one

    :return: Stripped, non-empty lines of the (first) text file
    :rtype: List[str]
    :raises ValueError: If the format is unsupported or the archive contains no .txt file
    """
    suffix = "".join(input_file.suffixes[-2:]) if input_file.suffixes[-2:] == [".tar", ".xz"] else input_file.suffix
    reader = READERS.get(suffix)
    if reader is None:
        raise ValueError(f"📄❌ Unsupported input format: {input_file.suffix}")
    return reader(input_file)
