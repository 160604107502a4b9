"""
Editor Tests
============

Dirty tracking of ListEditor (embedded and external) and DocumentDraft.
"""

import pytest

from folio.core.editor import DocumentDraft, EMBEDDED, EXTERNAL, ListEditor
from folio.core.ordering import IndexOutOfRange


@pytest.fixture
def items():
    return [
        {'id': 'a', 'text': 'Studio A'},
        {'id': 'b', 'text': 'Studio B'},
        {'id': 'c', 'text': 'Studio C'},
    ]


@pytest.fixture
def records():
    return [
        {'id': 1, 'title': 'One', 'status': 'published', 'position': 1},
        {'id': 2, 'title': 'Two', 'status': 'ready', 'position': 2},
        {'id': 3, 'title': 'Three', 'status': 'hidden', 'position': 3},
    ]


# ---------------------------------------------------------------------------
# Embedded lists
# ---------------------------------------------------------------------------

def test_loaded_editor_is_clean(items):
    editor = ListEditor(items)
    assert editor.dirty is False
    assert editor.items == items
    assert editor.snapshot == items


def test_move_makes_editor_dirty(items):
    editor = ListEditor(items)
    editor.apply_move(0, 2)
    assert editor.dirty is True
    assert [i['id'] for i in editor.items] == ['b', 'c', 'a']
    assert [i['id'] for i in editor.snapshot] == ['a', 'b', 'c'], "snapshot must not follow live moves"


def test_reorder_stays_dirty_after_moving_back(items):
    """A reorder keeps the editor dirty until it is synced or reloaded."""
    editor = ListEditor(items)
    editor.apply_move(0, 1)
    editor.apply_move(1, 0)
    assert editor.items == items
    assert editor.dirty is True


def test_same_index_move_is_not_a_change(items):
    editor = ListEditor(items)
    editor.apply_move(1, 1)
    assert editor.dirty is False


def test_bad_move_changes_nothing(items):
    editor = ListEditor(items)
    with pytest.raises(IndexOutOfRange):
        editor.apply_move(0, 5)
    assert editor.dirty is False
    assert editor.items == items


def test_edit_and_revert_embedded(items):
    editor = ListEditor(items)
    assert editor.apply_edit('b', {'text': 'Changed'}) is True
    assert editor.dirty is True

    editor.apply_edit('b', {'text': 'Studio B'})
    assert editor.dirty is False, "embedded lists compare structurally with the snapshot"


def test_edit_missing_item(items):
    editor = ListEditor(items)
    assert editor.apply_edit('zzz', {'text': 'x'}) is False
    assert editor.dirty is False


def test_add_and_remove(items):
    editor = ListEditor(items, id_prefix='exp')
    new_id = editor.add({'text': 'Studio D'})
    assert new_id.startswith('exp-')
    assert editor.dirty is True
    assert len(editor) == 4

    assert editor.remove(new_id) is True
    assert editor.dirty is False
    assert editor.remove(new_id) is False


def test_mark_synced_clears_dirty(items):
    editor = ListEditor(items)
    editor.apply_move(2, 0)
    editor.mark_synced()
    assert editor.dirty is False
    assert [i['id'] for i in editor.snapshot] == ['c', 'a', 'b']

    # reloading the synced order is not a change
    editor.load(editor.items)
    assert editor.dirty is False
    assert [i['id'] for i in editor.items] == ['c', 'a', 'b']


def test_load_replaces_state(items):
    editor = ListEditor(items)
    editor.apply_move(0, 2)
    editor.load(items[:2])
    assert editor.dirty is False
    assert editor.items == items[:2]


def test_unknown_mode():
    with pytest.raises(ValueError):
        ListEditor([], mode='sideways')


# ---------------------------------------------------------------------------
# External lists
# ---------------------------------------------------------------------------

def test_external_move_is_dirty(records):
    editor = ListEditor(records, mode=EXTERNAL)
    editor.apply_move(2, 0)
    assert editor.dirty is True
    assert [r['id'] for r in editor.items] == [3, 1, 2]


def test_external_status_edit(records):
    """Editing a field marks dirty; editing it back clears it again."""
    editor = ListEditor(records, mode=EXTERNAL)
    editor.apply_edit(2, {'status': 'published'})
    assert editor.dirty is True
    assert editor.items[1]['status'] == 'published'

    editor.apply_edit(2, {'status': 'ready'})
    assert editor.dirty is False


def test_external_edit_after_move_stays_dirty(records):
    editor = ListEditor(records, mode=EXTERNAL)
    editor.apply_move(0, 1)
    editor.apply_edit(1, {'status': 'published'})
    assert editor.dirty is True


# ---------------------------------------------------------------------------
# DocumentDraft
# ---------------------------------------------------------------------------

@pytest.fixture
def about_doc():
    return {
        'description': 'A studio.',
        'address': 'Seoul',
        'experience': [{'id': 'e1', 'text': '2020 Agency'}],
        'services': [{'id': 's1', 'text': 'Branding'}, {'id': 's2', 'text': 'Web'}],
        'clients': [],
    }


def test_draft_field_edits(about_doc):
    draft = DocumentDraft(about_doc, ('experience', 'services', 'clients'))
    assert draft.dirty is False

    draft.set_field('address', 'Busan')
    assert draft.dirty is True
    assert draft.document['address'] == 'Busan'

    draft.set_field('address', 'Seoul')
    assert draft.dirty is False


def test_draft_list_move(about_doc):
    draft = DocumentDraft(about_doc, ('experience', 'services', 'clients'))
    draft.list_editor('services').apply_move(0, 1)
    assert draft.dirty is True
    assert [s['id'] for s in draft.document['services']] == ['s2', 's1']

    draft.mark_synced()
    assert draft.dirty is False


def test_draft_rejects_list_fields_as_scalars(about_doc):
    draft = DocumentDraft(about_doc, ('experience', 'services', 'clients'))
    with pytest.raises(ValueError):
        draft.set_field('services', 'Branding\nWeb')
    with pytest.raises(KeyError):
        draft.list_editor('awards')


def test_draft_id_prefixes(about_doc):
    draft = DocumentDraft(about_doc, ('experience', 'services', 'clients'), id_prefixes={'clients': 'client'})
    new_id = draft.list_editor('clients').add({'text': 'ACME'})
    assert new_id.startswith('client-')
    assert draft.list_editor('clients').items[0]['text'] == 'ACME'
    assert draft.lists['experience'].mode == EMBEDDED
