"""
Shared fixtures: a small support-matrix content tree and a factory for
building SiteData in memory.
"""

import asyncio
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pytest

from supportmatrix.data.aggregate import RawDataCollection, process_and_validate
from supportmatrix.data.config import ContentConfig
from supportmatrix.data.logging import PipelineLogger
from supportmatrix.data.metadata import SystemCategories
from supportmatrix.data.pipeline import build_site_data, load_site_data
from supportmatrix.data.schema import BoardRecord


METADATA_YML = """\
linux:
  - debian: Debian
  - ubuntu: Ubuntu Server
bsd:
  - freebsd: FreeBSD
customized:
  - revyos: RevyOS
arches:
  - riscv64: RISC-V 64
"""


def write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


@pytest.fixture(autouse=True)
def logger() -> PipelineLogger:
    """Fresh module-level pipeline logger for every test."""
    return PipelineLogger()


@pytest.fixture
def content_root(tmp_path) -> Path:
    """
    Content tree with:
    - two valid boards (licheepi_4a, visionfive2)
    - a board without vendor and one with malformed front-matter
    - a translation that must be skipped
    - a report with an invalid status
    - a report for a board that has no README (orphan)
    """
    root = tmp_path / "support-matrix"
    write(root, "assets/metadata.yml", METADATA_YML)
    write(root, "report-template/README.md", "---\nvendor: Template\n---\n")

    write(root, "licheepi_4a/README.md", (
        "---\n"
        "vendor: Sipeed\n"
        "product: Lichee Pi 4A\n"
        "cpu: TH1520\n"
        "cpu_core: XuanTie C910\n"
        "ram: 16GB LPDDR4X\n"
        "---\n"
        "# Lichee Pi 4A\n"
    ))
    write(root, "licheepi_4a/debian/README.md", (
        "---\n"
        "sys: debian\n"
        "sys_ver: bookworm\n"
        "sys_var: ''\n"
        "status: good\n"
        "last_update: 2024-05-01\n"
        "---\n"
    ))
    write(root, "licheepi_4a/debian/README_zh.md", (
        "---\nsys: debian\nstatus: good\nlast_update: 2024-05-01\n---\n"
    ))
    write(root, "licheepi_4a/revyos/README.md", (
        "---\nsys: revyos\nstatus: basic\nlast_update: '2024-04-20'\n---\n"
    ))
    write(root, "licheepi_4a/others.yml", (
        "- sys: freebsd\n"
        "  sys_ver: '14.0'\n"
        "  status: good\n"
        "- sys: ubuntu\n"
        "  status: cft\n"
    ))

    write(root, "visionfive2/README.md", (
        "---\n"
        "vendor: StarFive\n"
        "product: VisionFive 2\n"
        "cpu: JH7110\n"
        "cpu_core: SiFive U74\n"
        "ram: ''\n"
        "---\n"
    ))
    write(root, "visionfive2/ubuntu/README.md", (
        "---\nsys: ubuntu\nstatus: GOOD\nlast_update: 2024-06-10\n---\n"
    ))
    write(root, "visionfive2/debian/README.md", (
        "---\nsys: debian\nstatus: excellent\n---\n"
    ))

    write(root, "novendor/README.md", "---\nproduct: Mystery Board\n---\n")
    write(root, "broken/README.md", "---\nvendor: [unclosed\n---\n")
    write(root, "orphan/debian/README.md", "---\nsys: debian\nstatus: good\n---\n")

    return root


@pytest.fixture
def device_index(tmp_path) -> Path:
    index = tmp_path / "packages-index" / "entities" / "device"
    write(index, "sipeed.toml", "[device]\n")
    write(index, "milkv.toml", "[device]\n")
    return index


@pytest.fixture
def config(content_root, device_index) -> ContentConfig:
    return ContentConfig(content_root=content_root, device_index=device_index, dev_mode=True)


@pytest.fixture
def loaded_site(config):
    """SiteData loaded from the sample content tree."""
    return asyncio.run(load_site_data(config))


def make_report(
    board_id: str,
    sys: str,
    status: str = "GOOD",
    file_name: Optional[str] = "README",
    last_update: Optional[date] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Provisional report dict, as the loaders produce it."""
    report = {
        'sys': sys,
        'status': status,
        'board_id': board_id,
        'sys_ver': None,
        'sys_var': None,
        'last_update': last_update,
        'file_name': file_name,
    }
    report.update(extra)
    return report


@pytest.fixture
def report_factory():
    return make_report


@pytest.fixture
def site_factory():
    """Build SiteData in memory from board records and provisional reports."""

    def build(
        boards: Iterable[BoardRecord],
        reports: Iterable[Dict[str, Any]] = (),
        metadata: Optional[Dict[str, Any]] = None,
        vendors: Iterable[str] = (),
    ):
        reports: List[Dict[str, Any]] = list(reports)
        raw = RawDataCollection(
            boards=list(boards),
            markdown_reports=[r for r in reports if r.get('file_name')],
            bulk_reports=[r for r in reports if not r.get('file_name')],
            categories=SystemCategories.from_document(metadata or {}),
            recognized_vendors=list(vendors),
        )
        return build_site_data(raw, process_and_validate(raw))

    return build
