"""Pydantic models for the folder index."""

from pathlib import Path

from pydantic import BaseModel, Field

from .document import Category


class FolderNode(BaseModel):
    """One directory level of the index.

    Children and documents keep filesystem enumeration order.
    """

    path: Path
    children: tuple["FolderNode", ...] = Field(default_factory=tuple)
    documents: tuple[Path, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        return self.path.name

    def iter_documents(self):
        """Yield every document path in this subtree, depth first."""
        yield from self.documents
        for child in self.children:
            yield from child.iter_documents()


class FolderIndex(BaseModel):
    """Immutable snapshot of both category trees."""

    roots: tuple[FolderNode, ...] = Field(default_factory=tuple)
    categories: tuple[Category, ...] = Field(
        default_factory=tuple,
        description="Category of each root, in the same order as roots"
    )
    unreadable: tuple[Path, ...] = Field(
        default_factory=tuple,
        description="Directories skipped because they could not be listed"
    )

    model_config = {"frozen": True}

    @property
    def partial(self) -> bool:
        return bool(self.unreadable)

    def root_for(self, category: Category) -> FolderNode | None:
        for root_category, root in zip(self.categories, self.roots):
            if root_category == category:
                return root
        return None

    def all_documents(self) -> list[Path]:
        return [p for root in self.roots for p in root.iter_documents()]

    def contains(self, path: Path) -> bool:
        return path in self.all_documents()
