from typing import Optional

from slugify import slugify


def slug_from_name(name: Optional[str]) -> str:
    """
    Derive a URL slug from a display name.

    Lower-cases, collapses every run of non-alphanumeric characters into a
    single ``-`` and trims leading and trailing dashes, so
    ``"Limited Edition Tee!"`` becomes ``"limited-edition-tee"``.
    """
    if not name:
        return ""
    return slugify(name, lowercase=True, separator="-", allow_unicode=False)
