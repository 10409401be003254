"""Tests for IndexHeader rendering and field-name normalization."""

from datetime import datetime, timedelta, timezone

import pytest

from packagedetails.errors import UnknownHeaderFieldError
from packagedetails.header import IndexHeader, format_date, to_external_name, to_internal_name
from packagedetails.index import IndexConfig, PackageIndex
from packagedetails.store import RecordStore


class TestFieldNames:
    """Internal <-> external field names."""

    @pytest.mark.parametrize(
        "internal,external",
        [
            ("file", "File"),
            ("description", "Description"),
            ("intended_for", "Intended-For"),
            ("written_by", "Written-By"),
            ("last_updated", "Last-Updated"),
            ("line_count", "Line-Count"),
            ("url", "URL"),
        ],
    )
    def test_external_name(self, internal, external):
        assert to_external_name(internal) == external
        assert to_internal_name(external) == internal

    def test_internal_name_lowercases(self):
        assert to_internal_name("X-Custom-Field ") == "x_custom_field"


class TestFormatDate:
    """Last-Updated formatting."""

    def test_rfc1123_gmt(self):
        moment = datetime(2008, 10, 23, 2, 27, 36, tzinfo=timezone.utc)
        assert format_date(moment) == "Thu, 23 Oct 2008 02:27:36 GMT"

    def test_naive_is_utc_and_offsets_are_converted(self):
        assert format_date(datetime(2008, 10, 23, 2, 27, 36)) == "Thu, 23 Oct 2008 02:27:36 GMT"
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2008, 10, 23, 4, 27, 36, tzinfo=plus_two)
        assert format_date(moment) == "Thu, 23 Oct 2008 02:27:36 GMT"


class TestHeaderFields:
    """set/get/columns."""

    def test_get_unknown_field(self):
        header = IndexHeader({"file": "02packages.details.txt"})
        assert header.get("file") == "02packages.details.txt"
        with pytest.raises(UnknownHeaderFieldError) as excinfo:
            header.get("nonesuch")
        assert excinfo.value.field == "nonesuch"
        assert not header.exists("nonesuch")

    def test_columns_as_list(self):
        header = IndexHeader({"columns": "package name, version, path"})
        assert header.columns_as_list() == ["package name", "version", "path"]

    def test_line_count_computed_when_not_stored(self):
        store = RecordStore(allow_packages_only_once=False)
        store.add(package_name="Foo", version="1.0", path="a")
        store.add(package_name="Foo", version="2.0", path="b")
        store.add(package_name="Bar", version="1.0", path="c")
        header = IndexHeader({"columns": "package name, version, path"}, store=store)
        assert header.get("line_count") == "2"
        assert header.line_count() == 2

    def test_stored_line_count_wins_for_get(self):
        header = IndexHeader({"line_count": "5"}, store=RecordStore())
        assert header.get("line_count") == "5"
        assert header.line_count() == 0


class TestRender:
    """Header block rendering."""

    def test_sorted_fields_then_line_count_then_blank_line(self):
        store = RecordStore()
        store.add(package_name="Foo", version="1.0", path="F/Foo-1.0.tgz")
        store.add(package_name="Bar", version="1.0", path="B/Bar-1.0.tgz")
        header = IndexHeader(
            {
                "url": "http://example.com/02packages.details.txt",
                "file": "02packages.details.txt",
                "columns": "package name, version, path",
                "_store_note": "internal",
                "line_count": "99",
            },
            store=store,
        )

        assert header.render() == (
            "Columns: package name, version, path\n"
            "File: 02packages.details.txt\n"
            "URL: http://example.com/02packages.details.txt\n"
            "Line-Count: 2\n"
            "\n"
        )

    def test_sorted_by_external_name_not_line_text(self):
        header = IndexHeader({"file_x": "b", "file": "a"}, store=RecordStore())
        assert header.render().splitlines()[:2] == ["File: a", "File-X: b"]

    def test_default_header_of_new_index(self):
        fixed = datetime(2008, 10, 23, 2, 27, 36, tzinfo=timezone.utc)
        index = PackageIndex.new(IndexConfig(written_by="tests", clock=lambda: fixed))

        assert index.header.render() == (
            "Columns: package name, version, path\n"
            "Description: Package names for my private CPAN\n"
            "File: 02packages.details.txt\n"
            "Intended-For: My private CPAN\n"
            "Last-Updated: Thu, 23 Oct 2008 02:27:36 GMT\n"
            "URL: http://example.com/MyCPAN/modules/02packages.details.txt\n"
            "Written-By: tests\n"
            "Line-Count: 0\n"
            "\n"
        )

    def test_new_index_overrides(self):
        index = PackageIndex.new(description="Mine", x_extra="yes")
        assert index.get_header("description") == "Mine"
        assert "X-Extra: yes\n" in index.header.render()


class TestPackageIndex:
    """Facade behaviour shared by the header and the store."""

    def test_header_exists(self):
        index = PackageIndex.new()
        assert index.header_exists("file")
        assert index.header_exists("line_count")
        assert not index.header_exists("nonesuch")

    def test_add_entry_and_replace_store(self):
        index = PackageIndex.new()
        index.add_entry(package_name="Foo", version="1.0", path="F/Foo-1.0.tgz")
        assert index.line_count == 1

        store = RecordStore(index.columns_as_list())
        store.add(package_name="Bar", version="1.0", path="B/Bar-1.0.tgz")
        store.add(package_name="Baz", version="1.0", path="B/Baz-1.0.tgz")
        index.replace_store(store)

        assert index.get_header("line_count") == "2"
        assert [r.package_name for r in index.records()] == ["Bar", "Baz"]
