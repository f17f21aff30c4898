import pytest

from edu_resources.models.content import TAXONOMY_CATEGORY, TAXONOMY_TAG
from edu_resources.services.content_store import create_content_item
from edu_resources.services.taxonomy import list_terms, resolve_term_filter, slugify, terms_for_content


def test_slugify():
    assert slugify("  Data Science & ML ") == "data-science-ml"
    assert slugify("") == ""
    assert slugify(None) == ""


def test_terms_are_shared_between_items(session):
    a = create_content_item(session, title="A", category_names=["Maths", "Physics"], tag_names=["exam"])
    b = create_content_item(session, title="B", category_names=["maths"])

    assert [t.slug for t in list_terms(session, TAXONOMY_CATEGORY)] == ["maths", "physics"]
    assert [t.name for t in list_terms(session, TAXONOMY_TAG)] == ["exam"]

    terms = terms_for_content(session, a.id)
    assert [t.name for t in terms["category"]] == ["Maths", "Physics"]
    assert [t.name for t in terms["tag"]] == ["exam"]
    assert [t.slug for t in terms_for_content(session, b.id)["category"]] == ["maths"]
    assert terms_for_content(session, b.id)["tag"] == []


def test_resolve_term_filter(session):
    create_content_item(session, title="A", category_names=["Maths"])

    assert resolve_term_filter(session, TAXONOMY_CATEGORY, None) is None
    assert resolve_term_filter(session, TAXONOMY_CATEGORY, "  ") is None

    tf = resolve_term_filter(session, TAXONOMY_CATEGORY, "Maths")
    assert tf.slug == "maths"
    assert len(tf.term_ids) == 1

    # unknown slug: a filter that matches nothing, not "no filter"
    missing = resolve_term_filter(session, TAXONOMY_CATEGORY, "astronomy")
    assert missing is not None
    assert missing.term_ids == ()

    # same slug, other taxonomy
    assert resolve_term_filter(session, TAXONOMY_TAG, "maths").term_ids == ()

    with pytest.raises(ValueError):
        resolve_term_filter(session, "genre", "maths")


def test_create_content_item_normalizes_status_and_slug(session):
    first = create_content_item(session, title="Linear Algebra")
    second = create_content_item(session, title="Linear Algebra", status="pending")
    assert first.slug == "linear-algebra"
    assert second.slug == "linear-algebra-2"
    assert second.status == "draft"
