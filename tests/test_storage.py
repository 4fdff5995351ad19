from beautyflow.models import StoredCollection
from beautyflow.storage import CLIENTS, EXPENSES, TEXTS, MemoryCollectionStore, SqlCollectionStore


def test_never_saved_differs_from_saved_empty(db_session):
    store = SqlCollectionStore(db_session)
    assert store.load(1, CLIENTS) is None
    store.save(1, CLIENTS, [])
    assert store.load(1, CLIENTS) == []


def test_save_replaces_the_whole_collection(db_session):
    store = SqlCollectionStore(db_session)
    store.save(1, CLIENTS, [{"id": "a", "name": "Lara"}, {"id": "b", "name": "Sofia"}])
    store.save(1, CLIENTS, [{"id": "b", "name": "Sofia Pereira"}])
    assert store.load(1, CLIENTS) == [{"id": "b", "name": "Sofia Pereira"}]
    assert db_session.query(StoredCollection).count() == 1


def test_accented_text_survives(db_session):
    store = SqlCollectionStore(db_session)
    store.save(None, TEXTS, [{"key": "title", "value": "Extensão de Cílios"}])
    assert store.load(None, TEXTS)[0]["value"] == "Extensão de Cílios"
    assert store.owners(TEXTS) == []


def test_corrupted_payload_reads_as_empty(db_session):
    db_session.add(StoredCollection(owner_id=2, name=EXPENSES, payload="{not json"))
    db_session.commit()
    assert SqlCollectionStore(db_session).load(2, EXPENSES) == []


def test_owners_and_drop_owner(db_session):
    store = SqlCollectionStore(db_session)
    store.save(3, CLIENTS, [])
    store.save(1, CLIENTS, [])
    store.save(3, EXPENSES, [])
    assert store.owners(CLIENTS) == [1, 3]

    store.drop_owner(3)
    assert store.owners(CLIENTS) == [1]
    assert store.load(3, EXPENSES) is None


def test_memory_store_hands_out_copies():
    store = MemoryCollectionStore()
    items = [{"id": "a", "tags": ["VIP"]}]
    store.save(1, CLIENTS, items)
    items[0]["tags"].append("changed")

    loaded = store.load(1, CLIENTS)
    assert loaded == [{"id": "a", "tags": ["VIP"]}]
    loaded[0]["tags"].clear()
    assert store.load(1, CLIENTS)[0]["tags"] == ["VIP"]

    assert store.load(2, CLIENTS) is None
    store.save(None, TEXTS, [])
    assert store.owners(CLIENTS) == [1]
    store.drop_owner(1)
    assert store.load(1, CLIENTS) is None
