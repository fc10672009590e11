"""Tests for HTML page rendering."""

from __future__ import annotations

from WheelIndex.catalog import CatalogEntry
from WheelIndex.config.defaults import REQUIRES_PYTHON_OVERRIDES
from WheelIndex.rendering import render_file_listing, render_package_listing, render_package_page

TS = 1700000000


def _entry(key, **fields):
    entry = CatalogEntry.from_source_key(key)
    if fields:
        from WheelIndex.catalog.models import ObjectMetadata

        entry = entry.with_metadata(ObjectMetadata(**fields))
    return entry


def _strip_timestamp(page):
    lines = page.split("\n")
    assert lines[-1].startswith("<!--TIMESTAMP ")
    return "\n".join(lines[:-1])


class TestPackageListing:
    """Subdirectory package listing."""

    def test_exact_output(self):
        page = render_package_listing({"torch", "triton_rocm", "numpy"}, timestamp=TS)
        assert page == "\n".join(
            [
                "<!DOCTYPE html>",
                "<html>",
                "  <body>",
                '    <a href="numpy/">numpy</a><br/>',
                '    <a href="torch/">torch</a><br/>',
                '    <a href="triton-rocm/">triton-rocm</a><br/>',
                "  </body>",
                "</html>",
                "<!--TIMESTAMP 1700000000-->",
            ]
        )

    def test_deterministic_apart_from_timestamp(self):
        names = ["b", "a", "c"]
        assert _strip_timestamp(render_package_listing(names)) == _strip_timestamp(
            render_package_listing(reversed(names))
        )


class TestPackagePage:
    """Per-package file listing."""

    def test_entries_sorted_by_key(self):
        entries = [
            _entry("whl/torch-2.1.0-cp311-cp311-linux_x86_64.whl"),
            _entry("whl/torch-2.0.0-cp311-cp311-linux_x86_64.whl"),
            _entry("whl/torch-2.0.1-cp311-cp311-linux_x86_64.whl"),
        ]
        page = render_package_page(entries, "torch", timestamp=TS)
        positions = [page.index(v) for v in ("2.0.0", "2.0.1", "2.1.0")]
        assert positions == sorted(positions)
        assert "    <h1>Links for torch</h1>" in page

    def test_heading_is_normalized(self):
        page = render_package_page([], "Triton_ROCm", timestamp=TS)
        assert "<h1>Links for triton-rocm</h1>" in page

    def test_checksum_fragment(self):
        entry = _entry("whl/cpu/a-1.0-py3-none-any.whl", checksum="616263")
        page = render_package_page([entry], "a", timestamp=TS)
        assert 'href="/whl/cpu/a-1.0-py3-none-any.whl#sha256=616263"' in page

    def test_rolling_feeds_never_emit_sha256(self):
        entry = _entry("whl/nightly/cpu/a-1.0-py3-none-any.whl", checksum="616263")
        page = render_package_page([entry], "a", include_checksums=False, timestamp=TS)
        assert "#sha256=" not in page

    def test_plus_is_encoded_in_href_and_shown_in_text(self):
        entry = _entry("whl/cu121/torch-2.1.0+cu121-cp311-cp311-linux_x86_64.whl")
        page = render_package_page([entry], "torch", timestamp=TS)
        assert (
            '<a href="/whl/cu121/torch-2.1.0%2Bcu121-cp311-cp311-linux_x86_64.whl">'
            "torch-2.1.0+cu121-cp311-cp311-linux_x86_64.whl</a><br/>"
        ) in page

    def test_core_metadata_attributes(self):
        entry = _entry("whl/cpu/a-1.0-py3-none-any.whl", metadata_checksum="646566")
        page = render_package_page([entry], "a", timestamp=TS)
        assert 'data-dist-info-metadata="sha256=646566"' in page
        assert 'data-core-metadata="sha256=646566"' in page

    def test_requires_python_override(self):
        entry = _entry("whl/networkx-3.3-py3-none-any.whl", checksum="aa")
        page = render_package_page(
            [entry], "networkx", requires_python=REQUIRES_PYTHON_OVERRIDES, timestamp=TS
        )
        assert 'data-requires-python="&gt;=3.10"' in page

    def test_no_requires_python_for_other_files(self):
        entry = _entry("whl/networkx-3.2-py3-none-any.whl")
        page = render_package_page(
            [entry], "networkx", requires_python=REQUIRES_PYTHON_OVERRIDES, timestamp=TS
        )
        assert "data-requires-python" not in page

    def test_deterministic_apart_from_timestamp(self):
        entries = [
            _entry("whl/cpu/a-1.0-py3-none-any.whl", checksum="01"),
            _entry("whl/cpu/a-2.0-py3-none-any.whl", checksum="02"),
        ]
        first = render_package_page(entries, "a")
        second = render_package_page(list(reversed(entries)), "a")
        assert _strip_timestamp(first) == _strip_timestamp(second)


class TestFileListing:
    """Raw artifact listings for non-Python feeds."""

    ENTRIES = [
        _entry("libtorch/libtorch-root.zip"),
        _entry("libtorch/cu121/libtorch-b.zip"),
        _entry("libtorch/cu121/libtorch-a.zip"),
    ]

    def test_non_root_page_excludes_root_entries(self):
        page = render_file_listing(self.ENTRIES, "libtorch/cu121", "libtorch", timestamp=TS)
        body = [line for line in page.split("\n") if "<a " in line]
        assert body == [
            '    <a href="/libtorch/cu121/libtorch-a.zip">libtorch-a.zip</a><br/>',
            '    <a href="/libtorch/cu121/libtorch-b.zip">libtorch-b.zip</a><br/>',
        ]

    def test_root_page_includes_root_entries(self):
        page = render_file_listing(self.ENTRIES[:1], "libtorch", "libtorch/", timestamp=TS)
        assert '<a href="/libtorch/libtorch-root.zip">libtorch-root.zip</a>' in page

    def test_skeleton_and_timestamp(self):
        page = render_file_listing(self.ENTRIES, "libtorch/cu121", "libtorch", timestamp=TS)
        assert page.startswith("<!DOCTYPE html>\n<html>\n  <body>\n")
        assert page.endswith("  </body>\n</html>\n<!--TIMESTAMP 1700000000-->")
