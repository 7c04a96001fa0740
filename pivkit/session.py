"""Saving and opening the file lists of a PIV session as XML."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from os import PathLike

_INDENT = " " * 4


@dataclass
class Session:
    """The image and vector files that make up one experiment."""

    image_root: str = ""
    images: list[str] = field(default_factory=list)
    vector_root: str = ""
    vector_files: list[str] = field(default_factory=list)


def _add_file_section(parent, section, root_tag, root_text, list_tag, prefix, names):
    element = ET.SubElement(parent, section)
    ET.SubElement(element, root_tag).text = root_text
    listing = ET.SubElement(element, list_tag)
    for number, name in enumerate(names):
        ET.SubElement(listing, f"{prefix}{number}").text = name


def write_session(path: str | PathLike, session: Session) -> None:
    """Write the session to an XML file at ``path``."""
    data = ET.Element("Data")
    _add_file_section(
        data, "Images", "ImageRoot", session.image_root,
        "ImageList", "image", session.images,
    )
    _add_file_section(
        data, "VectorFiles", "VectorRoot", session.vector_root,
        "VectorList", "vector", session.vector_files,
    )
    ET.SubElement(data, "Settings")
    tree = ET.ElementTree(data)
    ET.indent(tree, space=_INDENT)
    tree.write(path, encoding="utf-8")


def _read_file_section(data, section, root_tag, list_tag):
    element = data.find(section)
    if element is None:
        return "", []
    root_text = element.findtext(root_tag, default="") or ""
    listing = element.find(list_tag)
    names = [] if listing is None else [(child.text or "") for child in listing]
    return root_text, names


def read_session(path: str | PathLike) -> Session:
    """Read a session written by write_session."""
    data = ET.parse(path).getroot()
    if data.tag != "Data":
        raise ValueError(f"not a session file: root element is {data.tag!r}")
    image_root, images = _read_file_section(data, "Images", "ImageRoot", "ImageList")
    vector_root, vectors = _read_file_section(
        data, "VectorFiles", "VectorRoot", "VectorList"
    )
    return Session(
        image_root=image_root,
        images=images,
        vector_root=vector_root,
        vector_files=vectors,
    )


__all__ = ["Session", "read_session", "write_session"]