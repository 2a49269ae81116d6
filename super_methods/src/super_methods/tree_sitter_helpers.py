# --- Tree-sitter plumbing ----------------------------------------------------

def node_text(source_bytes: bytes, node) -> str:
    """
    Converts a node's [start_byte:end_byte] into the corresponding string.
    Tree-sitter nodes only store byte offsets, so we slice the original source.
    """
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def span_text(source_bytes: bytes, first, last) -> str:
    """Source text from the start of `first` to the end of `last`."""
    return source_bytes[first.start_byte:last.end_byte].decode("utf-8", errors="replace")


def unwrap_parens(node):
    """Skips any `( ... )` wrappers around an expression node."""
    while node is not None and node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type != "comment"]
        if len(inner) != 1:
            return node
        node = inner[0]
    return node
