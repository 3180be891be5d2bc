from typing import List, Optional, Sequence

from dirnest.provider import NestingTreeProvider


class Renderer:
    """
    Renderer turns project tree entries into an ASCII tree:
      - every level goes through the provider first, so nested directories
        show up under their file instead of beside it
      - directories get a trailing ``/``, files and nested files do not
    """
    def __init__(self, provider: Optional[NestingTreeProvider] = None, max_depth: Optional[int] = None):
        self.provider = provider or NestingTreeProvider()
        self.max_depth = max_depth

    def render_tree(self, roots: Sequence) -> str:
        """Return an ASCII tree for the given root entries."""
        lines = []
        for root in roots:
            lines.append(self._format_node_header(root))
            if root.is_expandable():
                lines.extend(self._format_children(root, prefix="", depth=1))
        return "\n".join(lines)

    def _format_node_header(self, node) -> str:
        """Format the header line for a root node; the scanned root is plain `.`."""
        return node.name if node.name == "." else node.label()

    def _format_children(self, parent, prefix: str, depth: int) -> List[str]:
        """Recursively format one level with ASCII connectors."""
        if self.max_depth is not None and depth > self.max_depth:
            return []
        nodes = self.provider.modify(parent, parent.list_children())
        formatted = []
        count = len(nodes)
        for index, node in enumerate(nodes):
            is_last = (index == count - 1)
            connector = "└── " if is_last else "├── "
            formatted.append(f"{prefix}{connector}{node.label()}")

            if node.is_expandable():
                next_prefix = prefix + ("    " if is_last else "│   ")
                formatted.extend(self._format_children(node, next_prefix, depth + 1))
        return formatted
