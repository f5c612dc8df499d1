"""Tests for CatalogLister and partition."""

import os
import pytest

from photodrop.catalog import CatalogLister, partition
from photodrop.exceptions import ListError
from photodrop.file_store import PreviewCache

BASE_NS = 1_700_000_000 * 1_000_000_000


def make_previews(cache_dir, count):
    """Create count previews, p000 oldest. Returns names newest first."""
    names = []
    for i in range(count):
        name = f"p{i:03d}.jpg"
        path = cache_dir / name
        path.write_bytes(b'x')
        mtime = BASE_NS + i * 1_000_000
        os.utime(str(path), ns=(mtime, mtime))
        names.append(name)
    return list(reversed(names))


class TestPartition:
    """Tests for partition function."""

    def test_empty(self):
        assert partition([]) == [[], [], []]

    def test_fewer_than_columns(self):
        """Test that all items go to the first group."""
        assert partition(['a', 'b']) == [['a', 'b'], [], []]

    def test_multiple_of_three(self):
        """Test an even split keeps order."""
        items = [str(i) for i in range(9)]

        groups = partition(items)

        assert groups == [['0', '1', '2'], ['3', '4', '5'], ['6', '7', '8']]

    def test_uneven_split(self):
        """Test leftovers go to the earlier groups."""
        assert [len(g) for g in partition(list(range(10)))] == [4, 3, 3]
        assert [len(g) for g in partition(list(range(11)))] == [4, 4, 3]

    def test_exactly_three(self):
        assert partition(['a', 'b', 'c']) == [['a'], ['b'], ['c']]

    def test_concatenation_preserves_order(self):
        items = list(range(100))

        groups = partition(items)

        assert groups[0] + groups[1] + groups[2] == items


class TestCatalogLister:
    """Tests for CatalogLister class."""

    def test_list_empty(self, preview_cache, logger):
        """Test listing an empty cache."""
        lister = CatalogLister(preview_cache, logger=logger)

        assert lister.list_urls() == []
        page = lister.page()
        assert page.columns == [[], [], []]
        assert page.total == 0
        assert page.truncated is False

    def test_list_newest_first(self, preview_cache, cache_dir, logger):
        """Test previews are ordered by modification time, newest first."""
        expected = make_previews(cache_dir, 5)
        lister = CatalogLister(preview_cache, logger=logger)

        urls = lister.list_urls()

        assert urls == ['/imagecache/' + name for name in expected]

    def test_page_two_entries(self, preview_cache, cache_dir, logger):
        """Test two previews all land in the first column."""
        expected = make_previews(cache_dir, 2)
        lister = CatalogLister(preview_cache, logger=logger)

        page = lister.page()

        assert page.first == ['/imagecache/' + name for name in expected]
        assert page.middle == []
        assert page.last == []

    def test_page_nine_entries(self, preview_cache, cache_dir, logger):
        """Test nine previews split into three columns of three in recency order."""
        expected = ['/imagecache/' + name for name in make_previews(cache_dir, 9)]
        lister = CatalogLister(preview_cache, logger=logger)

        page = lister.page()

        assert page.first == expected[0:3]
        assert page.middle == expected[3:6]
        assert page.last == expected[6:9]
        assert page.urls == expected

    def test_list_capped(self, preview_cache, cache_dir, logger):
        """Test that previews beyond the cap are dropped."""
        expected = make_previews(cache_dir, 150)
        lister = CatalogLister(preview_cache, limit=100, logger=logger)

        urls = lister.list_urls()
        page = lister.page()

        assert len(urls) == 100
        assert urls == ['/imagecache/' + name for name in expected[:100]]
        assert page.total == 100
        assert page.truncated is True

    def test_listing_is_recomputed(self, preview_cache, cache_dir, logger):
        """Test new previews show up without any refresh step."""
        make_previews(cache_dir, 1)
        lister = CatalogLister(preview_cache, logger=logger)
        assert len(lister.list_urls()) == 1

        newest = cache_dir / 'new.jpg'
        newest.write_bytes(b'x')
        mtime = BASE_NS + 10 * 1_000_000_000
        os.utime(str(newest), ns=(mtime, mtime))

        assert lister.list_urls()[0] == '/imagecache/new.jpg'

    def test_missing_directory(self, tmp_path, logger):
        """Test listing a missing directory raises ListError."""
        cache = PreviewCache(str(tmp_path / 'missing'), logger)
        lister = CatalogLister(cache, logger=logger)

        with pytest.raises(ListError):
            lister.page()
