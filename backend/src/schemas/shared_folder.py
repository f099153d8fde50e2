"""Pydantic schemas for the public shared-folder view."""
from pydantic import BaseModel

from schemas.bookmark import Bookmark
from schemas.folder import Folder


class SharedFolderView(BaseModel):
    """
    A shared folder resolved from its share token.

    ``can_edit`` gates whether edit, delete and pin actions are exposed.
    """

    folder: Folder
    bookmarks: list[Bookmark]
    can_edit: bool
