"""
Tests for the report list.
"""

from datetime import date

import pytest

from supportmatrix.data.schema import NOT_SPECIFIED
from supportmatrix.engine.reports import (
    FilterOption,
    ReportFilterState,
    derive_report_list,
    enrich_reports,
    filter_options,
    sort_reports,
)


@pytest.fixture
def enriched(loaded_site):
    return enrich_reports(loaded_site)


def _keys(items):
    return [(i.report.board_id, i.report.sys) for i in items]


class TestEnrichReports:
    """Test the report/board/system join"""

    def test_every_report_enriched(self, enriched, loaded_site):
        assert len(enriched) == len(loaded_site.all_reports)

    def test_names(self, enriched):
        first = enriched[0]
        assert first.board_product == 'Lichee Pi 4A'
        assert first.cpu == 'TH1520'
        assert first.vendor == 'Sipeed'
        assert first.system_name == 'Debian'
        assert first.link == 'reports/licheepi_4a-debian-README'

    def test_unknown_board(self, enriched):
        orphan = next(i for i in enriched if i.report.board_id == 'orphan')
        assert orphan.board_product == 'orphan'
        assert orphan.cpu == NOT_SPECIFIED
        assert orphan.vendor == NOT_SPECIFIED


class TestFilters:
    """Test multi-select and date filters"""

    def test_no_filters(self, enriched):
        state = ReportFilterState()
        assert not state.has_active_filters
        view = derive_report_list(enriched, state)
        assert len(view.reports) == 6
        assert view.total == 6

    def test_vendor(self, enriched):
        view = derive_report_list(enriched, ReportFilterState(vendors=frozenset({'Sipeed'})))
        assert {i.report.board_id for i in view.reports} == {'licheepi_4a'}
        assert len(view.reports) == 4

    def test_filters_combine(self, enriched):
        state = ReportFilterState(cpus=frozenset({'TH1520', 'JH7110'}), systems=frozenset({'ubuntu'}))
        view = derive_report_list(enriched, state)
        assert sorted(_keys(view.reports)) == [('licheepi_4a', 'ubuntu'), ('visionfive2', 'ubuntu')]

    def test_status(self, enriched):
        view = derive_report_list(enriched, ReportFilterState(statuses=frozenset({'CFT'})))
        assert _keys(view.reports) == [('licheepi_4a', 'ubuntu')]

    def test_date_range_keeps_undated_reports(self, enriched):
        state = ReportFilterState(date_from=date(2024, 5, 1), date_to=date(2024, 5, 31))
        assert state.has_active_filters
        view = derive_report_list(enriched, state)
        dated = [i for i in view.reports if i.report.last_update is not None]
        assert _keys(dated) == [('licheepi_4a', 'debian')]
        assert len(view.reports) == 4

    def test_open_date_range_ignored(self, enriched):
        view = derive_report_list(enriched, ReportFilterState(date_from=date(2030, 1, 1)))
        assert len(view.reports) == 6

    def test_no_match(self, enriched):
        view = derive_report_list(enriched, ReportFilterState(vendors=frozenset({'Milk-V'})))
        assert not view.has_results
        assert view.total == 6


class TestSortReports:
    """Test report sorting"""

    def test_latest_first_by_default(self, enriched):
        view = derive_report_list(enriched, ReportFilterState())
        assert _keys(view.reports) == [
            ('visionfive2', 'ubuntu'),
            ('licheepi_4a', 'debian'),
            ('licheepi_4a', 'revyos'),
            ('orphan', 'debian'),
            ('licheepi_4a', 'freebsd'),
            ('licheepi_4a', 'ubuntu'),
        ]

    def test_undated_last_when_ascending(self, enriched):
        result = sort_reports(enriched, 'last_update', descending=False)
        assert _keys(result)[:3] == [
            ('licheepi_4a', 'revyos'),
            ('licheepi_4a', 'debian'),
            ('visionfive2', 'ubuntu'),
        ]
        assert all(i.report.last_update is None for i in result[3:])

    def test_text_column(self, enriched):
        result = sort_reports(enriched, 'board_product', descending=False)
        assert [i.board_product for i in result] == ['Lichee Pi 4A'] * 4 + ['orphan', 'VisionFive 2']

    def test_missing_text_values_last(self, enriched):
        result = sort_reports(enriched, 'sys_ver', descending=True)
        assert [i.report.sys_ver for i in result[:2]] == ['bookworm', '14.0']
        assert all(i.report.sys_ver is None for i in result[2:])

    def test_status_column(self, enriched):
        result = sort_reports(enriched, 'status', descending=False)
        assert [i.report.status.value for i in result] == ['BASIC', 'CFT', 'GOOD', 'GOOD', 'GOOD', 'GOOD']

    def test_unknown_column(self, enriched):
        with pytest.raises(ValueError):
            sort_reports(enriched, 'board_id', descending=False)


class TestFilterOptions:

    def test_options(self, enriched, loaded_site):
        options = filter_options(enriched, loaded_site)
        assert [o.value for o in options['cpus']] == ['JH7110', NOT_SPECIFIED, 'TH1520']
        assert [o.value for o in options['vendors']] == [NOT_SPECIFIED, 'Sipeed', 'StarFive']
        assert options['systems'] == [
            FilterOption('debian', 'Debian'),
            FilterOption('freebsd', 'FreeBSD'),
            FilterOption('revyos', 'RevyOS'),
            FilterOption('ubuntu', 'Ubuntu Server'),
        ]
        assert [o.value for o in options['statuses']] == ['BASIC', 'CFT', 'GOOD']
