"""
XML document access for the field transformer.

Thin layer over :mod:`xml.etree.ElementTree` giving the transformer what it
needs: marked elements in document order, their text, a way to replace it,
and a readable path for each element. Comments and processing instructions
are kept, both inside the root element and around it, so a sealed file
diffs cleanly against its plaintext original.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List

from .exceptions import DocumentError

INDENT = "    "


class ConfigDocument(ET.ElementTree):
    """ElementTree that also remembers the comments and PIs outside the root element."""

    def __init__(self, element: ET.Element | None = None):
        super().__init__(element)
        self.prolog: List[ET.Element] = []
        self.epilog: List[ET.Element] = []


class _ConfigTreeBuilder(ET.TreeBuilder):
    # expat reports declarations to the target whatever the input encoding

    def __init__(self):
        super().__init__(insert_comments=True, insert_pis=True)
        self.depth = 0
        self.seen_root = False
        self.prolog: List[ET.Element] = []
        self.epilog: List[ET.Element] = []

    def doctype(self, name, pubid, system):
        raise DocumentError("DOCTYPE declarations are not allowed")

    def start(self, tag, attrs):
        self.depth += 1
        self.seen_root = True
        return super().start(tag, attrs)

    def end(self, tag):
        self.depth -= 1
        return super().end(tag)

    def _outside(self, node: ET.Element) -> bool:
        if self.depth:
            return False
        (self.epilog if self.seen_root else self.prolog).append(node)
        return True

    def comment(self, text):
        node = ET.Comment(text)
        if self._outside(node):
            return node
        return super().comment(text)

    def pi(self, target, text=None):
        node = ET.ProcessingInstruction(target, text)
        if self._outside(node):
            return node
        return super().pi(target, text)


def loads_document(data: str | bytes) -> ConfigDocument:
    """Parse XML text; DOCTYPE declarations are refused to rule out entity tricks."""
    raw = data.encode("utf-8") if isinstance(data, str) else data
    builder = _ConfigTreeBuilder()
    parser = ET.XMLParser(target=builder)
    try:
        parser.feed(raw)
        root = parser.close()
    except ET.ParseError as e:
        raise DocumentError(f"malformed XML: {e}") from e
    tree = ConfigDocument(root)
    tree.prolog = builder.prolog
    tree.epilog = builder.epilog
    return tree


def load_document(path: str | Path) -> ConfigDocument:
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise DocumentError(f"cannot read {path}: {e.strerror}") from e
    try:
        return loads_document(raw)
    except DocumentError as e:
        raise DocumentError(f"{path}: {e}") from e


def dumps_document(tree: ET.ElementTree) -> str:
    """Serialize with an XML declaration and four-space indentation."""
    ET.indent(tree, space=INDENT)
    parts = ['<?xml version="1.0" encoding="UTF-8"?>']
    for node in getattr(tree, "prolog", []):
        parts.append(ET.tostring(node, encoding="unicode"))
    parts.append(ET.tostring(tree.getroot(), encoding="unicode"))
    for node in getattr(tree, "epilog", []):
        parts.append(ET.tostring(node, encoding="unicode"))
    return "\n".join(parts) + "\n"


def _apply_mode(tmp_path: Path, target: Path) -> None:
    # keep the permissions of the file being replaced, else what a plain open() would give
    if target.exists():
        shutil.copymode(target, tmp_path)
        return
    umask = os.umask(0)
    os.umask(umask)
    os.chmod(tmp_path, 0o666 & ~umask)


def dump_document(tree: ET.ElementTree, path: str | Path) -> None:
    """
    Write the document to ``path``.

    The file is first written to a temporary sibling and then moved into
    place, so readers never see a partially written document. An existing
    file keeps its permission bits.
    """
    path = Path(path)
    text = dumps_document(tree)
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmpf:
            tmp_path = Path(tmpf.name)
            tmpf.write(text)
        _apply_mode(tmp_path, path)
        os.replace(tmp_path, path)
    except OSError as e:
        raise DocumentError(f"cannot write {path}: {e.strerror}") from e
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()


def find_marked(root: ET.Element, attribute: str) -> List[ET.Element]:
    """Snapshot of all elements carrying ``attribute``, in document order."""
    return [el for el in root.iter() if isinstance(el.tag, str) and attribute in el.attrib]


def get_text(element: ET.Element) -> str:
    """Full text content of the element and its descendants, trimmed."""
    return "".join(element.itertext()).strip()


def set_text(element: ET.Element, value: str) -> None:
    """Replace all content of ``element`` with a single text value; attributes and tail survive."""
    for child in list(element):
        element.remove(child)
    element.text = value


def node_paths(root: ET.Element) -> Dict[ET.Element, str]:
    """
    Map every element to an XPath-like location, e.g. ``/config/db/password``.

    A positional index is added only where siblings share a tag:
    ``/config/server[2]/host``.
    """
    paths: Dict[ET.Element, str] = {root: f"/{root.tag}"}
    for parent in root.iter():
        if parent not in paths:
            continue
        children = [c for c in parent if isinstance(c.tag, str)]
        counts: Dict[str, int] = {}
        for child in children:
            counts[child.tag] = counts.get(child.tag, 0) + 1
        seen: Dict[str, int] = {}
        for child in children:
            seen[child.tag] = seen.get(child.tag, 0) + 1
            step = child.tag if counts[child.tag] == 1 else f"{child.tag}[{seen[child.tag]}]"
            paths[child] = f"{paths[parent]}/{step}"
    return paths
