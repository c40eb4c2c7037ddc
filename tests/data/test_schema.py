"""
Tests for the support matrix schema.
"""

import json
from datetime import date
from typing import Optional, get_type_hints

import pytest

from supportmatrix.data.metadata import SystemCategories
from supportmatrix.data.schema import (
    NOT_SPECIFIED,
    BoardRecord,
    ReportRecord,
    ReportStatus,
    SiteData,
    SourceType,
)


class TestReportStatus:
    """Test ReportStatus parsing"""

    def test_parse_normalizes(self):
        assert ReportStatus.parse(" good ") is ReportStatus.GOOD
        assert ReportStatus.parse("Cfh") is ReportStatus.CFH

    def test_parse_passthrough(self):
        assert ReportStatus.parse(ReportStatus.WIP) is ReportStatus.WIP

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            ReportStatus.parse("excellent")
        with pytest.raises(ValueError):
            ReportStatus.parse(None)

    def test_six_grades(self):
        assert [s.value for s in ReportStatus] == ["GOOD", "BASIC", "CFH", "CFT", "WIP", "CFI"]


class TestBoardRecord:

    def test_defaults(self):
        board = BoardRecord(dir='lpi4a', vendor='Sipeed')
        assert board.product == NOT_SPECIFIED
        assert board.ram == NOT_SPECIFIED

    def test_from_dict_ignores_unknown_keys(self):
        board = BoardRecord.from_dict({'dir': 'lpi4a', 'vendor': 'Sipeed', 'soc_vendor': 'T-Head'})
        assert board == BoardRecord(dir='lpi4a', vendor='Sipeed')


class TestReportRecord:
    """Test ReportRecord identity, links and conversion"""

    def test_key(self):
        report = ReportRecord(sys='debian', status=ReportStatus.GOOD, board_id='lpi4a', file_name='README')
        assert report.key == ('lpi4a', 'debian', 'README')

    def test_links(self):
        report = ReportRecord(sys='debian', status=ReportStatus.GOOD, board_id='lpi4a', file_name='README')
        assert report.board_link() == 'board/lpi4a/debian-README'
        assert report.report_link() == 'reports/lpi4a-debian-README'

    def test_bulk_report_has_no_links(self):
        report = ReportRecord(
            sys='freebsd', status=ReportStatus.CFT, board_id='lpi4a', source_type=SourceType.OTHER,
        )
        assert report.board_link() is None
        assert report.report_link() is None

    def test_from_dict(self):
        report = ReportRecord.from_dict({
            'sys': 'debian',
            'status': 'basic',
            'board_id': 'lpi4a',
            'last_update': '2024-05-01',
            'source_type': 'other',
        })
        assert report.status is ReportStatus.BASIC
        assert report.last_update == date(2024, 5, 1)
        assert report.source_type is SourceType.OTHER
        assert report.file_name is None

    def test_to_dict(self):
        report = ReportRecord(
            sys='debian', status=ReportStatus.GOOD, board_id='lpi4a',
            last_update=date(2024, 5, 1), file_name='README',
        )
        data = report.to_dict()
        assert data['status'] == 'GOOD'
        assert data['last_update'] == '2024-05-01'
        assert data['source_type'] == 'report'


class TestSiteData:
    """Test the aggregated structure"""

    def test_json_serializable(self, loaded_site):
        payload = json.loads(json.dumps(loaded_site.to_dict()))
        assert set(payload['boards']) == {'licheepi_4a', 'visionfive2'}
        assert payload['statistics']['status_counts']['GOOD'] == 4
        assert payload['recognized_vendors'] == ['milkv', 'sipeed']
        assert 'customized' not in payload['categories']

    def test_is_empty(self, site_factory):
        assert site_factory([]).is_empty()
        assert not site_factory([BoardRecord(dir='lpi4a', vendor='Sipeed')]).is_empty()

    def test_categories_typed(self, loaded_site):
        assert get_type_hints(SiteData)['categories'] == Optional[SystemCategories]
        assert isinstance(loaded_site.categories, SystemCategories)
