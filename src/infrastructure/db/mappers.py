from domain.models import Access, Link, NewLink
from .models import AccessORM, LinkORM


def to_link_model(orm: LinkORM) -> Link:
    """Преобразует ORM модель в доменную модель Link"""
    return Link(
        id=orm.id,
        author=orm.author,
        target=orm.target,
        title=orm.title,
    )


def to_link_orm(domain: NewLink) -> LinkORM:
    """Преобразует NewLink в ORM модель, id назначает база"""
    return LinkORM(
        author=domain.author,
        target=domain.target,
        title=domain.title,
    )


def to_access_model(orm: AccessORM) -> Access:
    """Преобразует ORM модель в доменную модель Access"""
    return Access(
        id=orm.id,
        link_id=orm.link_id,
        address=orm.address,
        accessed_at=orm.accessed_at,
    )
