from sqlalchemy import func
from sqlmodel import select


def paginate(
    *,
    session,
    query,
    page: int = 1,
    page_size: int = 10,
):
    if page < 1:
        page = 1

    if page_size < 1:
        page_size = 10

    offset = (page - 1) * page_size

    total = session.exec(
        select(func.count()).select_from(query.subquery())
    ).one()

    results = session.exec(
        query.offset(offset).limit(page_size)
    ).all()

    return {
        "data": results,
        "pagination": {
            "total": total,
            "page": page,
            "page_size": page_size,
            "total_pages": max(1, (total + page_size - 1) // page_size),
        },
    }
