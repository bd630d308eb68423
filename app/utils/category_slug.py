"""
Hierarchical category URL paths.

    root:         /<root>-<id>
    second level: /<root>/<sub>-<id>
    third level:  /<root>/<sub>/<list>-<id>

Only the last segment carries the id.
"""
from typing import Dict, List, Optional

from slugify import slugify
from sqlmodel import Session

from app.models.category import Category


def _slug(title: str) -> str:
    return slugify(title, lowercase=True)


def fetch_chain(session: Session, category: Category) -> List[Category]:
    """Ancestors (root ... parent) followed by the category itself."""
    chain: List[Category] = []
    seen = set()
    cur: Optional[Category] = category
    while cur and cur.id not in seen:
        chain.append(cur)
        seen.add(cur.id)
        if not cur.parent_id:
            break
        cur = session.get(Category, cur.parent_id)
    chain.reverse()
    return chain


def build_category_path_from_chain(chain: List[Category]) -> str:
    if not chain:
        return "/"
    parts = [_slug(c.title) for c in chain]
    parts[-1] = f"{parts[-1]}-{chain[-1].id}"
    return "/" + "/".join(parts)


def build_category_slug_for(session: Session, category: Category) -> str:
    return build_category_path_from_chain(fetch_chain(session, category))


def build_slug_from_id(session: Session, category_id: int) -> str:
    category = session.get(Category, category_id)
    if not category:
        return "/"
    return build_category_slug_for(session, category)


def build_slug_from_map(category_id: int, by_id: Dict[int, Category]) -> str:
    """Batched variant for when every category is already loaded."""
    chain: List[Category] = []
    seen = set()
    cur = by_id.get(category_id)
    while cur and cur.id not in seen:
        chain.append(cur)
        seen.add(cur.id)
        cur = by_id.get(cur.parent_id) if cur.parent_id else None
    chain.reverse()
    return build_category_path_from_chain(chain)


def is_descendant(session: Session, candidate_id: int, ancestor_id: int) -> bool:
    """True when candidate_id sits at or below ancestor_id in the tree."""
    seen = set()
    cur = session.get(Category, candidate_id)
    while cur and cur.id not in seen:
        if cur.id == ancestor_id:
            return True
        seen.add(cur.id)
        cur = session.get(Category, cur.parent_id) if cur.parent_id else None
    return False
