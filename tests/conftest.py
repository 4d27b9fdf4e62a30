"""Shared fixtures: small Office packages built in tmp_path."""

from __future__ import annotations

import sys
import zipfile
from pathlib import Path
from typing import Callable, Union

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


LEGACY_FONT = "LegacyFont"

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
P_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"
X_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/></Types>'
)


def docx_run(font: str, text: str) -> str:
    return (
        f'<w:r><w:rPr><w:rFonts w:ascii="{font}" w:hAnsi="{font}"/></w:rPr>'
        f'<w:t>{text}</w:t></w:r>'
    )


def docx_document(*runs: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<w:document xmlns:w="{W_NS}"><w:body><w:p>'
        + "".join(runs)
        + "</w:p></w:body></w:document>"
    )


def pptx_run(font: str, text: str) -> str:
    return (
        f'<a:r><a:rPr lang="en-US" dirty="0"><a:latin typeface="{font}"/></a:rPr>'
        f'<a:t>{text}</a:t></a:r>'
    )


def pptx_slide(*runs: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<p:sld xmlns:a="{A_NS}" xmlns:p="{P_NS}"><p:cSld><p:spTree><p:sp>'
        '<p:txBody><a:bodyPr/><a:p>'
        + "".join(runs)
        + "</a:p></p:txBody></p:sp></p:spTree></p:cSld></p:sld>"
    )


Entries = list[tuple[str, Union[str, bytes]]]


def write_package(path: Path, entries: Entries) -> Path:
    """Write a zip package; str contents are UTF-8 encoded, names ending in / are directories."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries:
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
                continue
            data = content.encode("utf-8") if isinstance(content, str) else content
            zf.writestr(name, data)
    return path


def read_package(path: Path) -> dict[str, bytes]:
    with zipfile.ZipFile(path) as zf:
        return {info.filename: zf.read(info) for info in zf.infolist()}


@pytest.fixture
def make_package(tmp_path: Path) -> Callable[[str, Entries], Path]:
    """Factory writing a package with the given entries into tmp_path."""
    def factory(filename: str, entries: Entries) -> Path:
        return write_package(tmp_path / filename, entries)
    return factory


@pytest.fixture
def sample_docx(make_package) -> Path:
    """One legacy-font run and one Arial run, both with text "u"."""
    return make_package("sample.docx", [
        ("[Content_Types].xml", CONTENT_TYPES),
        ("word/", b""),
        ("word/document.xml", docx_document(docx_run(LEGACY_FONT, "u"), docx_run("Arial", "u"))),
        ("word/styles.xml", f'<w:styles xmlns:w="{W_NS}"><w:rFonts w:ascii="{LEGACY_FONT}"/></w:styles>'),
        ("word/header1.xml", f'<w:hdr xmlns:w="{W_NS}"><w:p>{docx_run(LEGACY_FONT, "c")}</w:p></w:hdr>'),
        ("word/media/image1.png", b"\x89PNG\r\n\x1a\n\x00\x00binary"),
    ])
