from pathlib import Path


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Turn ``sqlite:///./relative.db`` into an absolute ``sqlite:///`` URL.

    In-memory and non-sqlite URLs are returned untouched.
    """
    prefix = "sqlite:///./"
    if not url.startswith(prefix):
        return url
    relative = url[len(prefix) :]
    return f"sqlite:///{(project_root / relative).resolve()}"
