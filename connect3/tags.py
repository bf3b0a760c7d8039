"""Tag lookup and assignment derived from the people in the document."""

from typing import Iterable

from connect3.domain.person import Person

MAX_TAG_LENGTH = 30


def all_tags(people: Iterable[Person]) -> set[str]:
    """Collect the distinct tags used by any person.

    Args:
        people: People to collect tags from

    Returns:
        Set of tags, compared case-sensitively. Sort before displaying.
    """
    return {tag for person in people for tag in person.tags}


def candidate_pool(people: Iterable[Person], pending_tags: Iterable[str]) -> set[str]:
    """Tags that can be offered while a person's tags are being edited.

    Tags added to the edit buffer but not yet saved are included, so they can
    be picked again straight away.
    """
    return all_tags(people) | set(pending_tags)


def filter_tags(tags: Iterable[str], search_term: str) -> list[str]:
    """Keep the tags containing search_term, ignoring case.

    Args:
        tags: Tags to filter
        search_term: Text to look for. Surrounding whitespace is ignored and an
            empty term keeps every tag.

    Returns:
        Matching tags in ascending order
    """
    term = search_term.strip().lower()
    return sorted(tag for tag in set(tags) if not term or term in tag.lower())


def add_tag(pending_tags: list[str], candidate: str) -> list[str]:
    """Append a tag to the edit buffer unless it is blank or already there.

    Args:
        pending_tags: Tags currently in the edit buffer
        candidate: Tag to add, trimmed of surrounding whitespace

    Returns:
        New list of tags. pending_tags itself is left unchanged.
    """
    tag = candidate.strip()
    if not tag or tag in pending_tags:
        return list(pending_tags)
    return [*pending_tags, tag]


def remove_tag(pending_tags: list[str], tag: str) -> list[str]:
    return [t for t in pending_tags if t != tag.strip()]
