"""Author identity reconciliation.

Folds author-name variants into one canonical identity, drops excluded
authors and re-aggregates the per-interval counts.

Rules, in order:

1. Groups are processed in input order. A group whose canonical (first)
   name is excluded is skipped entirely. Otherwise every member that is a
   known author, is not excluded and has not already been claimed maps to
   the canonical name. A name listed in two groups belongs to the first.
2. Remaining authors that are not excluded keep their own name.
3. A group that claimed no member produces no identity.

Reconciliation never mutates its input and performs no I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from .documents import (
    ReconciledDocument,
    TimeSeriesDocument,
    commits_key,
    edits_key,
    interval_of,
    make_point,
)
from .exceptions import InvalidInputError
from .logging_config import get_logger

logger = get_logger(__name__)

AuthorGroup = Sequence[str]


@dataclass(frozen=True)
class IdentityMap:
    """Resolved mapping from original author names to output identities."""

    identities: tuple[str, ...]
    canonical: Mapping[str, str]

    def contributors(self, identity: str) -> list[str]:
        return [name for name, target in self.canonical.items() if target == identity]


@dataclass(frozen=True)
class AuthorTotals:
    author: str
    commits: int
    edits: int


def build_identity_map(
    authors: Sequence[str],
    groups: Iterable[AuthorGroup] = (),
    excludes: Iterable[str] = (),
) -> IdentityMap:
    """Resolve groups and excludes against the authors of a document."""
    group_list = _validated_groups(groups)
    excluded = _validated_excludes(excludes)
    known = set(authors)

    canonical: dict[str, str] = {}
    identities: list[str] = []

    for group in group_list:
        if not group:
            continue
        main = group[0]
        if main in excluded:
            logger.debug("Skipping group %s: canonical name is excluded", list(group))
            continue
        members = [
            name
            for name in dict.fromkeys(group)
            if name in known and name not in excluded and name not in canonical
        ]
        if not members:
            logger.debug("Dropping group %s: no unclaimed authors", list(group))
            continue
        for name in members:
            canonical[name] = main
        if main not in identities:
            identities.append(main)

    for author in authors:
        if author in canonical or author in excluded:
            continue
        canonical[author] = author
        if author not in identities:
            identities.append(author)

    return IdentityMap(identities=tuple(identities), canonical=canonical)


def reconcile(
    document: Union[TimeSeriesDocument, Mapping[str, Any]],
    groups: Iterable[AuthorGroup] = (),
    excludes: Iterable[str] = (),
) -> ReconciledDocument:
    """Merge author groups and drop excluded authors.

    Args:
        document: A TimeSeriesDocument, or a decoded JSON artifact which
            is validated first
        groups: Author groups; the first name of each group is canonical
        excludes: Author names to remove, matched against raw and
            canonical names

    Returns:
        A new ReconciledDocument with the same intervals, whose ``source``
        is the input document

    Raises:
        InvalidDocumentError: If *document* is malformed
        InvalidInputError: If *groups* or *excludes* are malformed
    """
    if not isinstance(document, TimeSeriesDocument):
        document = TimeSeriesDocument.from_dict(document)

    mapping = build_identity_map(document.authors, groups, excludes)
    contributors = {identity: mapping.contributors(identity) for identity in mapping.identities}
    logger.debug("Reconciled identities: %s", dict(mapping.canonical))

    data_points = []
    for point in document.data_points:
        new_point = make_point(interval_of(point) or "")
        for identity, names in contributors.items():
            new_point[commits_key(identity)] = sum(
                int(point.get(commits_key(n), 0)) for n in names
            )
            new_point[edits_key(identity)] = sum(int(point.get(edits_key(n), 0)) for n in names)
        data_points.append(new_point)

    return ReconciledDocument(
        authors=list(mapping.identities),
        data_points=data_points,
        config=dict(document.config),
        source=document,
    )


def author_totals(document: TimeSeriesDocument) -> list[AuthorTotals]:
    """Total commits and edits per author, most commits first."""
    totals = [
        AuthorTotals(
            author=author,
            commits=sum(document.series(author, "commits")),
            edits=sum(document.series(author, "edits")),
        )
        for author in document.authors
    ]
    return sorted(totals, key=lambda t: (-t.commits, -t.edits, t.author))


def available_authors(
    all_authors: Sequence[str],
    groups: Sequence[AuthorGroup],
    current_index: int = -1,
) -> list[str]:
    """Authors not yet placed in any group other than ``groups[current_index]``.

    Pass ``-1`` to list authors free for a new group.
    """
    used = set()
    for index, group in enumerate(groups):
        if index != current_index:
            used.update(group)
    return [a for a in all_authors if a not in used]


def promote_to_canonical(group: AuthorGroup, index: int) -> tuple[str, ...]:
    """Return *group* with the member at *index* moved to the front."""
    members = list(group)
    if not 0 <= index < len(members):
        raise InvalidInputError("group index", index, f"group has {len(members)} members")
    members.insert(0, members.pop(index))
    return tuple(members)


def _validated_groups(groups: Iterable[AuthorGroup]) -> list[tuple[str, ...]]:
    if isinstance(groups, (str, bytes)) or not isinstance(groups, Iterable):
        raise InvalidInputError("groups", groups, "must be a list of name lists")
    result = []
    for group in groups:
        if isinstance(group, (str, bytes)) or not isinstance(group, Iterable):
            raise InvalidInputError("group", group, "must be a list of names")
        names = tuple(group)
        if not all(isinstance(n, str) for n in names):
            raise InvalidInputError("group", names, "names must be strings")
        result.append(names)
    return result


def _validated_excludes(excludes: Iterable[str]) -> frozenset[str]:
    if isinstance(excludes, (str, bytes)) or not isinstance(excludes, Iterable):
        raise InvalidInputError("excludes", excludes, "must be a list of names")
    names = list(excludes)
    if not all(isinstance(n, str) for n in names):
        raise InvalidInputError("excludes", names, "names must be strings")
    return frozenset(names)
