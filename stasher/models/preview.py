"""Preview tree model built by the dry run."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

NodeKey = Tuple[Optional[int], str, bool]

YEAR_SUFFIX_REGEX = re.compile(r'\s\(\d{4}\)$')


@dataclass
class PreviewNode:
    """
    One folder or file of the planned library.

    Attributes:
        display_name: Folder name, or renamed file name.
        is_file: True for files (renamed media and sidecar placeholders).
        source_path: Original file location, None for folders and sidecars.
        destination_path: Planned location below the preview root.
        children: Indices of child nodes, in insertion order.
        show_selector: True on title folders offering an include toggle.
        original_name: Original file name (media files only).
        renamed_name: Computed file name (media files only).
        is_checked: Inclusion flag, True by default.
        depth: Distance from the root node.
    """

    display_name: str
    is_file: bool
    destination_path: Path
    source_path: Optional[Path] = None
    children: List[int] = field(default_factory=list)
    show_selector: bool = False
    original_name: Optional[str] = None
    renamed_name: Optional[str] = None
    is_checked: bool = True
    depth: int = 0

    @property
    def is_folder(self) -> bool:
        """Check if this node is a folder."""
        return not self.is_file

    @property
    def is_sidecar(self) -> bool:
        """Check if this node is a synopsis/poster placeholder."""
        return self.is_file and self.source_path is None


class PreviewTree:
    """
    Arena of preview nodes addressed by index.

    Nodes are merged by (parent, display name, kind), so files sharing a
    folder produce one folder node with several children.
    """

    def __init__(self) -> None:
        """Initialize an empty tree."""
        self.nodes: List[PreviewNode] = []
        self.roots: List[int] = []
        self._lookup: Dict[NodeKey, int] = {}

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self.nodes)

    def __getitem__(self, index: int) -> PreviewNode:
        """Return the node at an index."""
        return self.nodes[index]

    def find(self, parent: Optional[int], name: str, is_file: bool) -> Optional[int]:
        """Return the index of a child node, if it exists."""
        return self._lookup.get((parent, name, is_file))

    def add_node(self, parent: Optional[int], node: PreviewNode) -> int:
        """
        Add a node under a parent, merging with an existing equal node.

        Args:
            parent: Parent index, or None for a root node.
            node: Node to insert.

        Returns:
            Index of the inserted or already existing node.
        """
        key = (parent, node.display_name, node.is_file)
        existing = self._lookup.get(key)
        if existing is not None:
            return existing

        index = len(self.nodes)
        node.depth = 0 if parent is None else self.nodes[parent].depth + 1
        self.nodes.append(node)
        self._lookup[key] = index

        if parent is None:
            self.roots.append(index)
        else:
            self.nodes[parent].children.append(index)
        return index

    def ensure_folders(self, root: Path, parts: Tuple[str, ...], selector_depth: int) -> int:
        """
        Create (or reuse) the folder chain for path parts.

        Args:
            root: Path of the preview root folder.
            parts: Folder names, starting with the root name.
            selector_depth: Depth at which folders get a selector.

        Returns:
            Index of the deepest folder.
        """
        parent: Optional[int] = None
        path = root.parent
        for name in parts:
            path = path / name
            depth = 0 if parent is None else self.nodes[parent].depth + 1
            parent = self.add_node(parent, PreviewNode(
                display_name=name,
                is_file=False,
                destination_path=path,
                show_selector=depth == selector_depth,
            ))
        return parent

    def children(self, index: int) -> List[PreviewNode]:
        """Return the child nodes of a node."""
        return [self.nodes[i] for i in self.nodes[index].children]

    def walk(self) -> Iterator[Tuple[int, PreviewNode]]:
        """Yield (index, node) pairs depth-first, in insertion order."""
        stack = list(reversed(self.roots))
        while stack:
            index = stack.pop()
            node = self.nodes[index]
            yield index, node
            stack.extend(reversed(node.children))

    def files(self) -> List[PreviewNode]:
        """Return every media file node (sidecars excluded)."""
        return [node for _, node in self.walk() if node.is_file and not node.is_sidecar]

    def set_checked(self, index: int, checked: bool) -> None:
        """Toggle inclusion of a node."""
        self.nodes[index].is_checked = checked

    def selected_files(self) -> List[PreviewNode]:
        """
        Return the media files left included.

        A file is selected when it and every folder above it are checked.
        """
        selected: List[PreviewNode] = []
        stack = [(index, True) for index in reversed(self.roots)]
        while stack:
            index, included = stack.pop()
            node = self.nodes[index]
            included = included and node.is_checked
            if node.is_file:
                if included and not node.is_sidecar:
                    selected.append(node)
                continue
            stack.extend((child, included) for child in reversed(node.children))
        return selected

    def selectors(self) -> List[Tuple[int, PreviewNode]]:
        """Return the (index, node) pairs of the folders offering a selector."""
        return [(index, node) for index, node in self.walk() if node.show_selector]

    def uncheck_titles(self, titles: Iterable[str]) -> List[str]:
        """
        Uncheck the title folders matching some titles.

        A title matches a selector folder by its name, case-insensitively,
        with or without the " (Year)" suffix.

        Args:
            titles: Titles to leave out.

        Returns:
            Names of the folders that were unchecked.
        """
        wanted = {title.strip().lower() for title in titles if title.strip()}
        unchecked: List[str] = []
        for index, node in self.selectors():
            name = node.display_name.lower()
            if name in wanted or YEAR_SUFFIX_REGEX.sub("", name) in wanted:
                self.set_checked(index, False)
                unchecked.append(node.display_name)
        return unchecked
