from functools import lru_cache
import time
from sqlmodel import select
from app.database import get_session
from app.models.category import Category
from app.utils.category_slug import build_slug_from_map

CACHE_TTL = 60 * 60  # 60 minutes

def _ttl_bucket():
    return int(time.time() // CACHE_TTL)


def build_category_tree(categories):
    """Nests active categories under their parents, each node carrying its slug path."""
    by_id = {c.id: c for c in categories}
    nodes = {
        c.id: {"id": c.id, "title": c.title, "slug": build_slug_from_map(c.id, by_id), "children": []}
        for c in categories
        if c.status
    }

    roots = []
    for c in categories:
        if c.id not in nodes:
            continue
        parent = nodes.get(c.parent_id) if c.parent_id else None
        if parent:
            parent["children"].append(nodes[c.id])
        elif c.parent_id is None:
            roots.append(nodes[c.id])
    return roots


@lru_cache(maxsize=8)
def cached_category_tree(bucket: int):
    with next(get_session()) as session:
        categories = session.exec(select(Category).order_by(Category.id)).all()
        return build_category_tree(categories)


def clear_category_cache():
    cached_category_tree.cache_clear()
