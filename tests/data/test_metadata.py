"""
Tests for system category metadata.
"""

import yaml

from supportmatrix.data.metadata import (
    SystemCategories,
    SystemEntry,
    UNCATEGORIZED,
    normalize_categories,
)


DOCUMENT = yaml.safe_load("""
linux:
  - debian: Debian
  - ubuntu: Ubuntu
bsd:
  - freebsd: FreeBSD
customized:
  - revyos: RevyOS
  - deepin: deepin
arches:
  - riscv64: RISC-V 64
""")


class TestNormalizeCategories:
    """Test the customized/arches rules"""

    def test_customized_merged_into_linux(self):
        categories = normalize_categories(DOCUMENT)
        assert 'customized' not in categories
        assert [e.id for e in categories['linux']] == ['debian', 'ubuntu', 'revyos', 'deepin']

    def test_arches_dropped(self):
        assert 'arches' not in normalize_categories(DOCUMENT)

    def test_category_order_kept(self):
        assert list(normalize_categories(DOCUMENT)) == ['linux', 'bsd']

    def test_customized_without_linux(self):
        categories = normalize_categories({'customized': [{'revyos': 'RevyOS'}]})
        assert categories == {'linux': [SystemEntry('revyos', 'RevyOS')]}

    def test_malformed_entries_skipped(self, logger):
        categories = normalize_categories({'rtos': [{'zephyr': 'Zephyr'}, 'nuttx', {}], 'others': None})
        assert categories['rtos'] == [SystemEntry('zephyr', 'Zephyr')]
        assert categories['others'] == []
        assert len(logger.warnings) == 2

    def test_non_mapping_document(self):
        assert normalize_categories(['linux']) == {}


class TestSystemCategories:
    """Test SystemCategories lookups"""

    def test_display_name_fallback(self):
        categories = SystemCategories.from_document(DOCUMENT)
        assert categories.display_name('revyos') == 'RevyOS'
        assert categories.display_name('haiku') == 'haiku'

    def test_flatten(self):
        flat = SystemCategories.from_document(DOCUMENT).flatten()
        assert flat['freebsd'] == 'FreeBSD'
        assert 'riscv64' not in flat

    def test_category_of(self):
        categories = SystemCategories.from_document(DOCUMENT)
        assert categories.category_of('deepin') == 'linux'
        assert categories.category_of('freebsd') == 'bsd'
        assert categories.category_of('haiku') == UNCATEGORIZED

    def test_to_dict_uses_document_shape(self):
        as_dict = SystemCategories.from_document(DOCUMENT).to_dict()
        assert as_dict['bsd'] == [{'freebsd': 'FreeBSD'}]
