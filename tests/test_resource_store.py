from __future__ import annotations

from edu_resources.models.resource import Difficulty, ResourcePatch, ResourceType
from edu_resources.services.resource_store import MAX_ROW_INDEX, ResourceFilter, ResourceStore, SortDirection, SortField


def test_upsert_then_get_round_trips_fields(session):
    store = ResourceStore(session)
    patch = ResourcePatch(
        url="https://example.org/intro.pdf",
        resource_type="pdf",
        difficulty="intermediate",
        duration_minutes=30,
        is_featured=True,
    )
    assert store.upsert(101, patch) is True

    row = store.get(101)
    assert row is not None
    assert row.content_id == 101
    assert row.url == "https://example.org/intro.pdf"
    assert row.resource_type == ResourceType.PDF.value
    assert row.difficulty == Difficulty.INTERMEDIATE.value
    assert row.duration_minutes == 30
    assert row.is_featured is True
    assert row.download_count == 0

    assert store.get(999) is None


def test_second_upsert_updates_in_place(session):
    store = ResourceStore(session)
    assert store.upsert(7, ResourcePatch(resource_type="video"))
    first = store.get(7)
    first_updated = first.updated_at
    assert store.count(ResourceFilter()) == 1

    assert store.upsert(7, ResourcePatch(duration_minutes=45))
    assert store.count(ResourceFilter()) == 1

    row = store.get(7)
    # untouched fields survive a partial update
    assert row.resource_type == "video"
    assert row.duration_minutes == 45
    assert row.updated_at >= first_updated


def test_patch_normalizes_untrusted_values():
    patch = ResourcePatch(resource_type="hologram", difficulty="expert", duration_minutes=-5, url="  x  ")
    assert patch.to_columns() == {
        "url": "x",
        "resource_type": "",
        "difficulty": "beginner",
        "duration_minutes": 0,
    }
    assert ResourcePatch(duration_minutes="abc").to_columns() == {"duration_minutes": 0}
    assert ResourcePatch(is_featured="yes").to_columns() == {"is_featured": True}
    assert ResourcePatch().to_columns() == {}


def test_new_row_defaults(session):
    store = ResourceStore(session)
    assert store.upsert(3, ResourcePatch())
    row = store.get(3)
    assert row.url == ""
    assert row.resource_type == ""
    assert row.difficulty == "beginner"
    assert row.duration_minutes == 0
    assert row.is_featured is False


def test_increment_download_count(session):
    store = ResourceStore(session)
    store.upsert(5, ResourcePatch(resource_type="book"))
    for _ in range(4):
        assert store.increment_download_count(5) is True
    session.expire_all()
    assert store.get(5).download_count == 4

    # no row: no-op, reported as failure, nothing created
    assert store.increment_download_count(6) is False
    assert store.get(6) is None


def test_delete(session):
    store = ResourceStore(session)
    store.upsert(9, ResourcePatch())
    assert store.delete(9) is True
    assert store.get(9) is None
    assert store.delete(9) is False


def test_unknown_sort_field_falls_back_to_created_at_desc(session):
    store = ResourceStore(session)
    for cid in range(1, 6):
        store.upsert(cid, ResourcePatch(duration_minutes=cid * 10))

    default = [r.content_id for r in store.list(ResourceFilter())]
    hostile = [
        r.content_id
        for r in store.list(ResourceFilter(sort_field="malicious; DROP TABLE resourcemeta", sort_direction="sideways"))
    ]
    assert hostile == default
    assert store.count(ResourceFilter()) == 5


def test_sort_by_allowed_field(session):
    store = ResourceStore(session)
    store.upsert(1, ResourcePatch(duration_minutes=20))
    store.upsert(2, ResourcePatch(duration_minutes=5))
    store.upsert(3, ResourcePatch(duration_minutes=60))

    asc = store.list(ResourceFilter(sort_field=SortField.DURATION_MINUTES, sort_direction=SortDirection.ASC))
    assert [r.content_id for r in asc] == [2, 1, 3]

    desc = store.list(ResourceFilter(sort_field="duration_minutes", sort_direction="DESC"))
    assert [r.content_id for r in desc] == [3, 1, 2]


def test_pagination(session):
    store = ResourceStore(session)
    for cid in range(1, 26):
        store.upsert(cid, ResourcePatch())

    assert len(store.list(ResourceFilter(page=1, page_size=10))) == 10
    assert len(store.list(ResourceFilter(page=3, page_size=10))) == 5
    assert store.list(ResourceFilter(page=4, page_size=10)) == []

    # clamped rather than rejected
    assert len(store.list(ResourceFilter(page=0, page_size=0))) == 1
    assert len(store.list(ResourceFilter(page=-2, page_size=10))) == 10

    pages = [store.list(ResourceFilter(page=p, page_size=10, sort_field="id", sort_direction="asc")) for p in (1, 2, 3)]
    seen = [r.content_id for page in pages for r in page]
    assert seen == list(range(1, 26))


def test_filters(session):
    store = ResourceStore(session)
    store.upsert(1, ResourcePatch(resource_type="video", difficulty="beginner", is_featured=True))
    store.upsert(2, ResourcePatch(resource_type="video", difficulty="advanced"))
    store.upsert(3, ResourcePatch(resource_type="podcast", difficulty="advanced", is_featured=True))

    assert store.count(ResourceFilter(resource_type=ResourceType.VIDEO)) == 2
    assert store.count(ResourceFilter(difficulty=Difficulty.ADVANCED)) == 2
    assert store.count(ResourceFilter(is_featured=True)) == 2
    assert store.count(ResourceFilter(is_featured=False)) == 1
    assert store.count(ResourceFilter(resource_type=ResourceType.VIDEO, difficulty=Difficulty.ADVANCED)) == 1

    rows = store.list(ResourceFilter(resource_type=ResourceType.PODCAST))
    assert [r.content_id for r in rows] == [3]


def test_page_far_past_the_end_is_empty(session):
    store = ResourceStore(session)
    for cid in range(1, 4):
        store.upsert(cid, ResourcePatch())

    flt = ResourceFilter(page=10**20, page_size=12)
    assert flt.offset == MAX_ROW_INDEX
    assert store.list(flt) == []
    assert store.count(flt) == 3

    assert ResourceFilter(page_size=10**30).limit == MAX_ROW_INDEX
    assert len(store.list(ResourceFilter(page_size=10**30))) == 3


def test_upsert_losing_insert_race_reports_failure(session, monkeypatch):
    store = ResourceStore(session)
    assert store.upsert(11, ResourcePatch(resource_type="video"))

    # another request inserted the row between our read and our write
    monkeypatch.setattr(store, "get", lambda content_id: None)
    assert store.upsert(11, ResourcePatch(resource_type="book")) is False
    monkeypatch.undo()

    assert store.count(ResourceFilter()) == 1
    assert store.get(11).resource_type == "video"
    # session is usable again after the rollback
    assert store.upsert(11, ResourcePatch(resource_type="book")) is True
    assert store.get(11).resource_type == "book"
