"""Output Assembler -- write generated files and describe the layout.

:class:`OutputWriter` collects generated files for one output directory,
prefixes the "DO NOT EDIT" header matching each file's kind, normalises blank
lines, and writes everything to disk.  :func:`preview_structure` renders the
folder tree shown after generation (and by ``--dry-run``), and
:func:`clean_directory` removes the previous run's output.

Layout of one service::

    generatedClients/
      PetStoreService/
        Pets/
          PetStoreServicePetsClient.ts
          types.ts
"""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Iterable
from pathlib import Path

from swaggen.exceptions import ConfigError
from swaggen.models import GenerationOutput

logger = logging.getLogger(__name__)

TYPES_MODULE_NAME = "types"
"""The types module of every folder is always named exactly this."""

TYPES_HEADER = (
    "/**\n"
    " * Auto-generated TypeScript types\n"
    " * DO NOT EDIT - This file is generated from Swagger/OpenAPI specification\n"
    " */"
)
CLIENT_HEADER = (
    "/**\n"
    " * Auto-generated API Client\n"
    " * DO NOT EDIT - This file is generated from Swagger/OpenAPI specification\n"
    " */"
)

_EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")


def format_file(body: str, header: str) -> str:
    """Prefix *header*, collapse runs of blank lines, and end with one newline."""
    text = f"{header}\n\n{body}"
    return _EXCESS_BLANK_LINES_RE.sub("\n\n", text).strip() + "\n"


def preview_structure(paths: Iterable[str]) -> str:
    """Render relative file paths as an indented tree.

    Paths are sorted; every directory level is indented two spaces and
    directories carry a trailing ``/``.

    Example::

        >>> print(preview_structure(["Svc/Pets/types.ts", "Svc/Pets/SvcPetsClient.ts"]))
        Svc/
          Pets/
            SvcPetsClient.ts
            types.ts
    """
    lines: list[str] = []
    seen_dirs: set[tuple[str, ...]] = set()
    for path in sorted(set(paths)):
        parts = path.split("/")
        for depth, directory in enumerate(parts[:-1]):
            key = tuple(parts[: depth + 1])
            if key not in seen_dirs:
                seen_dirs.add(key)
                lines.append(f"{'  ' * depth}{directory}/")
        lines.append(f"{'  ' * (len(parts) - 1)}{parts[-1]}")
    return "\n".join(lines)


def clean_directory(path: str | Path) -> bool:
    """Remove a previous output tree.

    Returns:
        ``True`` if something was removed.

    Raises:
        ConfigError: If *path* is the filesystem root, the home directory,
            or the current working directory.
    """
    target = Path(path).resolve()
    if target in (Path(target.anchor), Path.home().resolve(), Path.cwd().resolve()):
        raise ConfigError(f"Refusing to clean {target}: not a generated output directory")
    if not target.exists():
        return False
    if not target.is_dir():
        raise ConfigError(f"Output path exists and is not a directory: {target}")
    shutil.rmtree(target)
    logger.debug("Removed %s", target)
    return True


class OutputWriter:
    """Collects generated files under one output directory and writes them.

    Args:
        output_dir: Root the relative file paths are written under.

    Example::

        writer = OutputWriter("src/clients/generatedClients")
        writer.add_output(generate(document))
        written = writer.write_all()
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        self._files: dict[str, str] = {}

    def add(self, relative_path: str, body: str, header: str = CLIENT_HEADER) -> None:
        """Queue one file; a later call for the same path replaces it."""
        self._files[relative_path] = format_file(body, header)

    def add_output(self, output: GenerationOutput) -> None:
        """Queue every file of a :class:`~swaggen.models.GenerationOutput`."""
        for group in output.groups:
            for generated in group.files:
                header = TYPES_HEADER if generated.name == TYPES_MODULE_NAME else CLIENT_HEADER
                self.add("/".join(group.folder + [generated.filename]), generated.body, header)

    @property
    def files(self) -> dict[str, str]:
        """Queued files keyed by relative path."""
        return dict(self._files)

    def preview(self) -> str:
        return preview_structure(self._files)

    def write_all(self) -> list[Path]:
        """Write every queued file, creating directories as needed.

        Returns:
            The written paths, in queue order.

        Raises:
            OSError: If a file cannot be written.
        """
        written: list[Path] = []
        for relative_path, content in self._files.items():
            target = self.output_dir / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            written.append(target)
        logger.debug("Wrote %d files under %s", len(written), self.output_dir)
        return written
