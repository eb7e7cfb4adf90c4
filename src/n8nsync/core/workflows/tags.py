"""
Tag name to tag id resolution.

Tag names are portable, tag ids are not. Resolving a set of names against an
instance fetches the tag catalog once, reuses the ids of known names, and
creates the missing ones.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

from n8nsync.core.workflows.models import Tag

logger = logging.getLogger(__name__)

CatalogFetcher = Callable[[], Iterable[Tag]]
TagCreator = Callable[[str], Tag]


def resolve_tags(
    desired_names: Iterable[str],
    fetch_catalog: CatalogFetcher,
    create_tag: TagCreator,
) -> list[str]:
    """
    Map tag names to ids on one instance, creating missing tags.

    The catalog is fetched once per call. Duplicate names collapse to a
    single id; ids are returned in first-seen order of the names.

    Args:
        desired_names: Tag names the workflow should carry
        fetch_catalog: Returns every tag currently defined on the instance
        create_tag: Creates a tag by name and returns it

    Returns:
        Tag ids, one per distinct desired name

    Example:
        >>> resolve_tags(["prod", "shared"], lambda: [Tag(id="t1", name="prod")], api.create_tag)
        ['t1', 't7']
    """
    names = list(dict.fromkeys(desired_names))
    if not names:
        return []

    catalog = {tag.name: tag.id for tag in fetch_catalog()}
    tag_ids: list[str] = []

    for name in names:
        tag_id = catalog.get(name)
        if tag_id is None:
            created = create_tag(name)
            logger.info("Created tag %r (id %s)", name, created.id)
            tag_id = created.id
            catalog[name] = tag_id
        tag_ids.append(tag_id)

    return tag_ids


class TagResolver:
    """
    Serialized tag resolution shared by all deployments of a batch.

    Two parallel deployments that both need a tag that does not exist yet
    would otherwise each see it missing and each create it. Holding a lock
    around fetch-and-create makes the second one see the tag created by the
    first.
    """

    def __init__(self, fetch_catalog: CatalogFetcher, create_tag: TagCreator) -> None:
        self._fetch_catalog = fetch_catalog
        self._create_tag = create_tag
        self._lock = threading.Lock()

    def resolve(self, desired_names: Iterable[str]) -> list[str]:
        with self._lock:
            return resolve_tags(desired_names, self._fetch_catalog, self._create_tag)


__all__ = ["CatalogFetcher", "TagCreator", "TagResolver", "resolve_tags"]
