"""
SitemapWriter测试
"""

import gzip
import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from sitemapgen.writers import (
    SitemapWriter,
    IntegrityError,
    StateError,
    MAX_SIZE_BYTES,
    EMPTY_SITEMAP_SIZE_BYTES,
    EMPTY_ENTRY_SIZE_BYTES,
    INDEX_FILENAME
)
from sitemapgen.writers import sitemap_writer as sitemap_writer_module
from sitemapgen.writers.sitemap_writer import w3c_datetime, format_priority


NS = {'sm': 'http://www.sitemaps.org/schemas/sitemap/0.9'}
W3C_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}$')

URLS = [
    'https://example.com/',
    'https://example.com/about',
    'https://example.com/blog/hello-world',
]


def expected_size(entries):
    return EMPTY_SITEMAP_SIZE_BYTES + sum(
        EMPTY_ENTRY_SIZE_BYTES + len(url.encode('utf-8')) + len(changefreq.encode('utf-8'))
        for url, changefreq in entries
    )


def test_w3c_datetime_keeps_offset_and_drops_microseconds():
    value = datetime(2024, 1, 2, 3, 4, 5, 678, tzinfo=timezone.utc)
    formatted = w3c_datetime(value)

    assert W3C_PATTERN.match(formatted)
    assert datetime.fromisoformat(formatted) == value.replace(microsecond=0)
    assert W3C_PATTERN.match(w3c_datetime(datetime.now()))


def test_format_priority():
    assert format_priority(0.5) == '0.5'
    assert format_priority(0.8) == '0.8'
    assert format_priority(1.0) == '1'


def test_new_writer_has_no_open_document(writer):
    assert not writer.has_open_document
    assert writer.entry_count == 0
    assert writer.sitemap_count == 0
    assert writer.sitemaps == []


def test_append_tracks_entry_count_and_estimated_size(writer):
    entries = [(URLS[0], 'weekly'), (URLS[1], 'daily'), ('https://example.com/café', 'monthly')]
    for url, changefreq in entries:
        writer.append(url, changefreq)

    assert writer.has_open_document
    assert writer.entry_count == 3
    assert writer.size_in_bytes == expected_size(entries)


def test_save_without_entries_is_noop(writer, tmp_path):
    assert writer.save() == 0
    assert list(tmp_path.iterdir()) == []
    assert writer.sitemap_count == 0


def test_save_writes_pretty_printed_urlset(writer, tmp_path):
    for url in URLS:
        writer.append(url)

    written = writer.save()

    path = tmp_path / 'robot-sitemap-0.xml'
    assert sorted(p.name for p in tmp_path.iterdir()) == ['robot-sitemap-0.xml']
    content = path.read_bytes()
    assert written == len(content) == expected_size([(url, 'weekly') for url in URLS])

    lines = content.decode('utf-8').split('\n')
    assert lines[0] == '<?xml version="1.0" encoding="UTF-8"?>'
    assert lines[1] == '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
    assert lines[2] == '  <url>'
    assert lines[3] == f'    <loc>{URLS[0]}</loc>'
    assert lines[-2] == '</urlset>'
    assert lines[-1] == ''

    root = ET.fromstring(content)
    url_nodes = root.findall('sm:url', NS)
    assert len(url_nodes) == 3
    assert [node.findtext('sm:loc', namespaces=NS) for node in url_nodes] == URLS
    for node in url_nodes:
        assert node.findtext('sm:changefreq', namespaces=NS) == 'weekly'
        assert node.findtext('sm:priority', namespaces=NS) == '0.5'
        assert W3C_PATTERN.match(node.findtext('sm:lastmod', namespaces=NS))


def test_save_closes_document_and_advances_count(writer):
    writer.append(URLS[0])
    writer.save()

    assert not writer.has_open_document
    assert writer.entry_count == 0
    assert writer.sitemap_count == 1
    assert [s.filename for s in writer.sitemaps] == ['robot-sitemap-0.xml']
    assert writer.save() == 0


def test_save_uses_given_template(writer, tmp_path):
    writer.append(URLS[0])
    writer.save('pages-%d.xml')

    assert (tmp_path / 'pages-0.xml').exists()
    assert writer.sitemaps[0].filename == 'pages-0.xml'


def test_constructor_template_is_used_by_default(tmp_path):
    writer = SitemapWriter(str(tmp_path), 'https://example.com', filename_template='catalog-%d.xml', compress=False)
    writer.append(URLS[0])
    writer.save()

    assert (tmp_path / 'catalog-0.xml').exists()


def test_save_raises_integrity_error_when_serializer_drifts(writer, tmp_path):
    writer.append(URLS[0])

    with patch.object(SitemapWriter, '_serialize', return_value=b'<urlset/>'):
        with pytest.raises(IntegrityError) as exc_info:
            writer.save()

    assert exc_info.value.written == len(b'<urlset/>')
    assert exc_info.value.expected == writer.size_in_bytes
    assert writer.has_open_document
    assert writer.sitemaps == []


def test_escaped_characters_trip_integrity_guard(writer, tmp_path):
    url = 'https://example.com/search?q=a&page=<2>'
    writer.append(url)

    with pytest.raises(IntegrityError):
        writer.save()

    content = (tmp_path / 'robot-sitemap-0.xml').read_text(encoding='utf-8')
    assert '?q=a&amp;page=&lt;2&gt;' in content


def test_gzip_compression_replaces_xml_file(gzip_writer, tmp_path):
    for url in URLS:
        gzip_writer.append(url)

    written = gzip_writer.save()

    assert sorted(p.name for p in tmp_path.iterdir()) == ['robot-sitemap-0.xml.gz']
    data = gzip.decompress((tmp_path / 'robot-sitemap-0.xml.gz').read_bytes())
    assert len(data) == written
    assert len(ET.fromstring(data).findall('sm:url', NS)) == 3
    assert gzip_writer.sitemaps[0].filename == 'robot-sitemap-0.xml.gz'


def test_auto_save_when_max_entries_reached(writer, tmp_path, monkeypatch):
    monkeypatch.setattr(sitemap_writer_module, 'MAX_ENTRIES', 3)

    for url in URLS:
        writer.append(url)

    assert (tmp_path / 'robot-sitemap-0.xml').exists()
    assert not writer.has_open_document
    assert writer.sitemap_count == 1

    writer.append('https://example.com/next')

    assert writer.has_open_document
    assert writer.entry_count == 1
    assert writer.sitemap_count == 1


def test_auto_save_before_size_limit(writer, tmp_path):
    # 单条大小不超过 2 * EMPTY_ENTRY_SIZE_BYTES，预留余量足以保证文件不超限
    url = 'https://example.com/' + 'a' * 100
    per_entry = EMPTY_ENTRY_SIZE_BYTES + len(url) + len('weekly')
    assert per_entry <= 2 * EMPTY_ENTRY_SIZE_BYTES

    appended = 0
    while writer.sitemap_count == 0:
        writer.append(url)
        appended += 1

    first = tmp_path / 'robot-sitemap-0.xml'
    assert first.stat().st_size == EMPTY_SITEMAP_SIZE_BYTES + appended * per_entry
    assert first.stat().st_size <= MAX_SIZE_BYTES
    # 最后一次追加之前尚未触发保存
    assert EMPTY_SITEMAP_SIZE_BYTES + (appended - 1) * per_entry + 2 * EMPTY_ENTRY_SIZE_BYTES <= MAX_SIZE_BYTES
    assert EMPTY_SITEMAP_SIZE_BYTES + appended * per_entry + 2 * EMPTY_ENTRY_SIZE_BYTES > MAX_SIZE_BYTES
    assert not writer.has_open_document

    writer.append('https://example.com/next')
    assert writer.entry_count == 1
    writer.save()

    assert (tmp_path / 'robot-sitemap-1.xml').exists()
    assert writer.sitemap_count == 2


def test_write_index_requires_saved_document(writer):
    writer.append(URLS[0])

    with pytest.raises(StateError):
        writer.write_index()


def test_write_index_lists_sitemaps_in_write_order(writer, tmp_path):
    for url in URLS:
        writer.append(url)
        writer.save()

    written = writer.sitemaps
    writer.write_index()

    root = ET.parse(tmp_path / INDEX_FILENAME).getroot()
    assert root.tag == '{http://www.sitemaps.org/schemas/sitemap/0.9}sitemapindex'
    nodes = root.findall('sm:sitemap', NS)
    assert [node.findtext('sm:loc', namespaces=NS) for node in nodes] == [
        f'https://example.com/{s.filename}' for s in written
    ]
    assert [node.findtext('sm:loc', namespaces=NS) for node in nodes] == [
        'https://example.com/robot-sitemap-0.xml',
        'https://example.com/robot-sitemap-1.xml',
        'https://example.com/robot-sitemap-2.xml',
    ]
    assert [node.findtext('sm:lastmod', namespaces=NS) for node in nodes] == [
        w3c_datetime(s.datetime) for s in written
    ]

    assert writer.sitemap_count == 0
    assert writer.sitemaps == []
    assert not writer.has_open_document


def test_write_index_starts_new_batch(writer, tmp_path):
    writer.append(URLS[0])
    writer.save('first-%d.xml')
    writer.write_index()

    writer.append(URLS[1])
    writer.save('second-%d.xml')

    assert (tmp_path / 'second-0.xml').exists()
    assert [s.filename for s in writer.sitemaps] == ['second-0.xml']


def test_end_to_end_with_compression(gzip_writer, tmp_path):
    for url in URLS:
        gzip_writer.append(url)
    gzip_writer.save()
    gzip_writer.write_index()

    assert sorted(p.name for p in tmp_path.iterdir()) == ['robot-sitemap-0.xml.gz', INDEX_FILENAME]

    sitemap = ET.fromstring(gzip.decompress((tmp_path / 'robot-sitemap-0.xml.gz').read_bytes()))
    assert len(sitemap.findall('sm:url', NS)) == 3

    index = ET.parse(tmp_path / INDEX_FILENAME).getroot()
    assert [node.findtext('sm:loc', namespaces=NS) for node in index.findall('sm:sitemap', NS)] == [
        'https://example.com/robot-sitemap-0.xml.gz'
    ]
