"""
Prompt store backed by a directory of Markdown notes.

Templates live under ``<vault>/<folder>/`` as ``<name>.md`` files. Nested
folders are allowed; a nested template's name is its path relative to the
prompt folder, without the extension.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .. import get_logger
from ..errors import PromptFolderNotFound, TemplateNotFound
from .constants import TEMPLATE_EXTENSION

logger = get_logger(__name__)


@dataclass
class StoreConfig:
    vault_root: Path
    extension: str = TEMPLATE_EXTENSION
    encoding: str = "utf-8"


class TemplateStore(ABC):
    """Read and enumerate prompt templates."""

    @abstractmethod
    def read(self, folder: str, name: str) -> str:
        """Return the raw body of ``<folder>/<name>``.

        Raises:
            TemplateNotFound: If the template file does not exist
        """

    @abstractmethod
    def list(self, folder: str) -> List[str]:
        """Return the template names found recursively under ``folder``.

        Raises:
            PromptFolderNotFound: If the folder does not exist
        """


class VaultTemplateStore(TemplateStore):
    """Template store reading plain files under a vault root."""

    def __init__(self, vault_root: Union[str, Path] = "."):
        self.config = StoreConfig(vault_root=Path(vault_root))

    def folder_path(self, folder: str) -> Path:
        return self.config.vault_root / folder

    def read(self, folder: str, name: str) -> str:
        template_path = self.folder_path(folder) / f"{name}{self.config.extension}"
        if not template_path.is_file():
            raise TemplateNotFound(f"Prompt file not found: {template_path}")

        logger.debug("Reading template %s", template_path)
        return template_path.read_text(encoding=self.config.encoding)

    def list(self, folder: str) -> List[str]:
        folder_path = self.folder_path(folder)
        if not folder_path.is_dir():
            raise PromptFolderNotFound(f"Prompt folder not found: {folder_path}")

        names = []
        for path in folder_path.rglob(f"*{self.config.extension}"):
            if not path.is_file():
                continue
            relative = path.relative_to(folder_path).as_posix()
            names.append(relative[: -len(self.config.extension)])
        return sorted(names)
