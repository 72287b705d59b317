"""Reply tree construction from a flat, parent-referencing list of comments."""

from collections.abc import Iterable, Iterator, Sequence

from blogcomments.core.modules.comment.models import Comment, CommentNode


def build_comment_tree(comments: Sequence[Comment]) -> list[CommentNode]:
    """Nest comments under their parents and return the top-level nodes.

    Replies keep input order, so a chronological list gives chronological threads.
    A comment whose parent is missing from the list is returned as a root. When
    parent links form a cycle, the earlier attachments win: the cycle member that
    comes last in the input is detached and returned as a root, so every comment
    appears exactly once. A repeated id keeps its first occurrence.

    Runs in time linear in the number of comments.
    """
    nodes: dict[int, CommentNode] = {}
    position: dict[int, int] = {}
    for index, comment in enumerate(comments):
        if comment.id not in nodes:
            nodes[comment.id] = CommentNode.from_comment(comment)
            position[comment.id] = index

    parent_of: dict[int, int] = {}
    roots: list[CommentNode] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_id) if node.parent_id is not None else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.replies.append(node)
            parent_of[node.id] = parent.id

    reached: set[int] = set()
    _mark_reached(roots, reached)
    if len(reached) == len(nodes):
        return roots

    # Whatever is unreachable from the roots hangs off a parent cycle
    for node_id in nodes:
        if node_id in reached:
            continue
        path: dict[int, int] = {}
        current = node_id
        while current not in path:
            path[current] = len(path)
            current = parent_of[current]
        cycle = list(path)[path[current] :]
        detached_id = max(cycle, key=position.__getitem__)
        parent = nodes[parent_of.pop(detached_id)]
        parent.replies = [reply for reply in parent.replies if reply.id != detached_id]
        roots.append(nodes[detached_id])
        _mark_reached([nodes[detached_id]], reached)

    roots.sort(key=lambda root: position[root.id])
    return roots


def _mark_reached(start: Iterable[CommentNode], reached: set[int]) -> None:
    stack = list(start)
    while stack:
        node = stack.pop()
        if node.id in reached:
            continue
        reached.add(node.id)
        stack.extend(node.replies)


def walk_comment_tree(roots: Sequence[CommentNode]) -> Iterator[tuple[CommentNode, int]]:
    """Yield (node, depth) pairs in display order, depth-first, without recursion."""
    stack: list[tuple[CommentNode, int]] = [(root, 0) for root in reversed(roots)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((reply, depth + 1) for reply in reversed(node.replies))
