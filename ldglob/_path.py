import posixpath


def normalize_path(path: str) -> str:
    converted = path.replace("\\", "/")
    if not converted:
        return "/"

    # Traversal check: simulate path resolution from root (depth 0)
    # relative paths are treated as if prepended with "/"
    parts = converted.split("/")
    depth = 0
    for part in parts:
        if part == "..":
            depth -= 1
            if depth < 0:
                raise ValueError(f"Path traversal attempt detected: '{path}'")
        elif part and part != ".":
            depth += 1

    if not converted.startswith("/"):
        converted = "/" + converted
    # normpath keeps a leading "//" (POSIX implementation-defined root)
    normalized = posixpath.normpath(converted)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def join_path(directory: str, name: str) -> str:
    """Append a single child name to an already-normalized directory path."""
    return directory.rstrip("/") + "/" + name


def relative_to(path: str, root: str) -> str:
    """Express *path* relative to *root*; both must be normalized."""
    if root == "/":
        return path.lstrip("/") or "."
    if path == root:
        return "."
    prefix = root.rstrip("/") + "/"
    if not path.startswith(prefix):
        raise ValueError(f"'{path}' is not inside '{root}'")
    return path[len(prefix):]


def last_segment(path: str) -> str:
    """Return the final non-empty segment of a URL path ("/a/b/" -> "b")."""
    return posixpath.basename(path.rstrip("/"))
