"""Remote tree traversal.

The walk uses an explicit stack instead of recursion; the filtering policy is
injected as two predicates so it can be tested without any remote calls.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from testgen.entities import RemoteEntry
from testgen.observability.logging import get_logger

logger = get_logger(__name__)

ListDirectory = Callable[[str], Awaitable[list[RemoteEntry]]]
EntryPredicate = Callable[[RemoteEntry], bool]


@dataclass
class WalkResult:
    """Files accepted during a walk plus the directories that could not be listed."""

    files: list[RemoteEntry] = field(default_factory=list)
    failed_paths: list[str] = field(default_factory=list)


async def walk_tree(
    list_directory: ListDirectory,
    should_descend: EntryPredicate,
    should_accept: EntryPredicate,
    root: str = "",
) -> WalkResult:
    """Visit every reachable directory below ``root``.

    A directory that fails to list is recorded in ``failed_paths`` and the
    walk continues with the remaining work.

    Args:
        list_directory: Coroutine returning the entries of one directory
        should_descend: Whether a ``dir`` entry is walked into
        should_accept: Whether a ``file`` entry is kept

    Returns:
        WalkResult in visiting order
    """
    result = WalkResult()
    stack = [root]

    while stack:
        path = stack.pop()
        try:
            entries = await list_directory(path)
        except Exception as e:
            logger.warning("directory_list_failed", path=path or "/", error=str(e))
            result.failed_paths.append(path)
            continue

        subdirs = []
        for entry in entries:
            if entry.type == "dir":
                if should_descend(entry):
                    subdirs.append(entry.path)
            elif entry.type == "file":
                if should_accept(entry):
                    result.files.append(entry)

        # reversed so siblings are visited in listing order
        stack.extend(reversed(subdirs))

    return result
