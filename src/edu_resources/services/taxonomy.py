from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session, select

from edu_resources.models.content import TAXONOMY_CATEGORY, TAXONOMY_TAG, ContentTermLink, Term

TAXONOMIES = (TAXONOMY_CATEGORY, TAXONOMY_TAG)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    return _SLUG_STRIP.sub("-", str(value or "").strip().lower()).strip("-")


@dataclass(frozen=True)
class TermFilter:
    """Opaque filter handed to the content store.

    An empty `term_ids` means the slug did not resolve, so nothing matches.
    """

    taxonomy: str
    slug: str
    term_ids: tuple[int, ...] = ()

    def content_ids(self):
        return select(ContentTermLink.content_id).where(ContentTermLink.term_id.in_(self.term_ids))


def resolve_term_filter(session: Session, taxonomy: str, slug: Optional[str]) -> Optional[TermFilter]:
    """Map a human-readable slug to a TermFilter; None when no filter was requested."""

    s = slugify(slug or "")
    if not s:
        return None
    if taxonomy not in TAXONOMIES:
        raise ValueError(f"unknown taxonomy: {taxonomy}")
    ids = session.exec(select(Term.id).where(Term.taxonomy == taxonomy).where(Term.slug == s)).all()
    return TermFilter(taxonomy=taxonomy, slug=s, term_ids=tuple(int(i) for i in ids))


def get_or_create_term(session: Session, taxonomy: str, name: str) -> Term:
    slug = slugify(name)
    term = session.exec(select(Term).where(Term.taxonomy == taxonomy).where(Term.slug == slug)).first()
    if term:
        return term
    term = Term(taxonomy=taxonomy, name=name.strip(), slug=slug)
    session.add(term)
    session.commit()
    session.refresh(term)
    return term


def list_terms(session: Session, taxonomy: str) -> list[Term]:
    return list(session.exec(select(Term).where(Term.taxonomy == taxonomy).order_by(Term.name.asc())))


def terms_for_content(session: Session, content_id: int) -> dict[str, list[Term]]:
    rows = session.exec(
        select(Term)
        .join(ContentTermLink, ContentTermLink.term_id == Term.id)
        .where(ContentTermLink.content_id == content_id)
        .order_by(Term.name.asc())
    ).all()
    out: dict[str, list[Term]] = {t: [] for t in TAXONOMIES}
    for term in rows:
        out.setdefault(term.taxonomy, []).append(term)
    return out
