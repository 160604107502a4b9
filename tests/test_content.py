"""
Content Shape Tests
===================

Legacy newline-separated list fields and their migration to item lists.
"""

import os
import shutil
import tempfile

from folio.core.content import (
    LegacyText,
    StructuredList,
    coerce_document,
    load_list_field,
    migrate_list,
    parse_list_field,
)
from folio.core.database import Database
from folio.core.stores import DocumentStore
from folio.modules.about.database import ABOUT_DEFAULTS, LIST_FIELDS
from folio.modules.projects.database import normalize_contents


def test_parse_string_is_legacy():
    assert parse_list_field("Branding\nWeb") == LegacyText("Branding\nWeb")


def test_parse_list_is_structured():
    variant = parse_list_field([{'id': 's1', 'text': 'Web'}])
    assert isinstance(variant, StructuredList)
    assert variant.items == [{'id': 's1', 'text': 'Web'}]


def test_parse_none_is_empty():
    assert parse_list_field(None) == StructuredList([])
    assert parse_list_field(42) == StructuredList([])


def test_structured_items_without_id_get_one():
    variant = parse_list_field([{'text': 'Web'}, 'Print'])
    ids = [item['id'] for item in variant.items]
    assert all(ids)
    assert len(set(ids)) == 2
    assert variant.items[1]['text'] == 'Print'


def test_migrate_legacy_keeps_blank_lines():
    """Every line becomes an item; blank lines stay as empty-text items."""
    items = migrate_list(LegacyText("  Branding \n\nWeb\r\n   \nPrint"))
    assert [item['text'] for item in items] == ['Branding', '', 'Web', '', 'Print']
    assert len({item['id'] for item in items}) == 5


def test_migrate_blank_legacy_text_is_empty():
    assert migrate_list(LegacyText("")) == []
    assert migrate_list(LegacyText("  \n \n")) == []


def test_migrate_structured_is_passthrough():
    items = [{'id': 'a', 'text': 'X'}]
    assert migrate_list(StructuredList(items)) == items


def test_load_list_field_with_custom_key():
    items = load_list_field("/a.jpg\n/b.jpg", text_key='url')
    assert [item['url'] for item in items] == ['/a.jpg', '/b.jpg']


def test_coerce_about_document_from_legacy_row():
    raw = {'description': 'Studio', 'services': "Branding\nWeb", 'clients': None}
    document = coerce_document(raw, ABOUT_DEFAULTS, LIST_FIELDS)

    assert document['description'] == 'Studio'
    assert [s['text'] for s in document['services']] == ['Branding', 'Web']
    assert document['clients'] == []
    assert document['imageUrl'] == ABOUT_DEFAULTS['imageUrl']
    assert ABOUT_DEFAULTS['experience'] == [], "defaults must not be mutated"


def test_coerce_plain_text_row_becomes_description():
    document = coerce_document("Just some text", ABOUT_DEFAULTS, LIST_FIELDS, fallback_field='description')
    assert document['description'] == "Just some text"
    assert document['experience'] == []


def test_normalize_project_contents():
    contents = normalize_contents({
        'keyword': 'brand, identity , ',
        'detailImages': ['/img/1.jpg', {'id': 'img-2', 'url': '/img/2.jpg'}],
    })
    assert contents['keyword'] == ['brand', 'identity']
    assert [i['url'] for i in contents['detailImages']] == ['/img/1.jpg', '/img/2.jpg']
    assert contents['detailImages'][1]['id'] == 'img-2'
    assert contents['challenge'] == ''


def test_document_store_returns_raw_text_for_non_json():
    d = tempfile.mkdtemp(prefix="folio-test-")
    try:
        store = DocumentStore(os.path.join(d, "content.db"))
        store.init_schema()
        with Database.connect(store.db_path) as conn:
            conn.execute("INSERT INTO config (id, content) VALUES ('about', 'hand written')")
            conn.commit()
        assert store.read_one('about') == 'hand written'
        assert store.read_one('missing') is None
    finally:
        shutil.rmtree(d, ignore_errors=True)
