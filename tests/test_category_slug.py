from sqlmodel import select

from app.models.category import Category
from app.utils.cache_helpers import build_category_tree
from app.utils.category_slug import (
    build_category_path_from_chain,
    build_slug_from_id,
    build_slug_from_map,
    fetch_chain,
    is_descendant,
)


def _tree(session):
    living = Category(title="Living Room")
    session.add(living)
    session.commit()
    sofas = Category(title="Sofas & Couches", parent_id=living.id)
    session.add(sofas)
    session.commit()
    three = Category(title="3 Seater Sofas", parent_id=sofas.id)
    session.add(three)
    session.commit()
    return living, sofas, three


def test_only_last_segment_carries_id(session):
    living, sofas, three = _tree(session)

    assert build_slug_from_id(session, living.id) == f"/living-room-{living.id}"
    assert build_slug_from_id(session, three.id) == f"/living-room/sofas-couches/3-seater-sofas-{three.id}"


def test_chain_runs_root_to_self(session):
    living, sofas, three = _tree(session)
    assert [c.id for c in fetch_chain(session, three)] == [living.id, sofas.id, three.id]


def test_map_and_query_slugs_agree(session):
    _, _, three = _tree(session)
    by_id = {c.id: c for c in session.exec(select(Category)).all()}
    assert build_slug_from_map(three.id, by_id) == build_slug_from_id(session, three.id)


def test_empty_chain_and_unknown_id():
    assert build_category_path_from_chain([]) == "/"
    assert build_slug_from_map(42, {}) == "/"


def test_parent_cycle_terminates():
    a = Category(id=1, title="A", parent_id=2)
    b = Category(id=2, title="B", parent_id=1)
    assert build_slug_from_map(1, {1: a, 2: b}) == "/b/a-1"


def test_is_descendant(session):
    living, sofas, three = _tree(session)
    assert is_descendant(session, three.id, living.id)
    assert is_descendant(session, living.id, living.id)
    assert not is_descendant(session, living.id, three.id)


def test_tree_skips_inactive_branches():
    root = Category(id=1, title="Decor")
    hidden = Category(id=2, title="Hidden", parent_id=1, status=False)
    under_hidden = Category(id=3, title="Vases", parent_id=2)
    lamps = Category(id=4, title="Lamps", parent_id=1)

    tree = build_category_tree([root, hidden, under_hidden, lamps])

    assert len(tree) == 1
    assert tree[0]["slug"] == "/decor-1"
    assert [c["title"] for c in tree[0]["children"]] == ["Lamps"]
    assert tree[0]["children"][0]["slug"] == "/decor/lamps-4"
