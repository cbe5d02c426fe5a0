"""JSON persistence for pydantic models.

Used for the application config. Writes are atomic (temp file, then
rename) and the previous file is kept as ``<name>.bak``; reads turn
syntax and validation problems into configuration errors with hints.
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from triggerdeck.exceptions import ConfigFileInvalidError, wrap_pydantic_error

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class PydanticPersistence:
    """Stateless load/save helpers."""

    @staticmethod
    def load_json(path: Path, model_type: type[T]) -> T:
        """
        Read and validate ``path`` as ``model_type``.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If it is empty, unreadable or not JSON
            ConfigValidationError: If a value fails validation
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigFileInvalidError(str(path), f"Cannot read file: {e}") from e

        if not text.strip():
            raise ConfigFileInvalidError(str(path), "File is empty")

        try:
            model = model_type.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"Invalid {model_type.__name__} in {path}: {e}")
            raise wrap_pydantic_error(e, str(path)) from e

        logger.debug(f"Loaded {model_type.__name__} from {path}")
        return model

    @staticmethod
    def save_json(data: BaseModel, path: Path, indent: int = 2, backup: bool = True) -> None:
        """
        Write ``data`` to ``path``.

        Args:
            data: Model to write
            path: Destination (parent directories are created)
            indent: JSON indentation
            backup: Copy an existing file to ``<name>.bak`` first

        Raises:
            OSError: If the file cannot be written
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        if backup and path.exists():
            shutil.copy2(path, path.with_suffix(path.suffix + ".bak"))

        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            temp_path.write_text(data.model_dump_json(indent=indent), encoding="utf-8")
            temp_path.replace(path)
        finally:
            temp_path.unlink(missing_ok=True)
        logger.info(f"Saved {type(data).__name__} to {path}")

    @staticmethod
    def load_json_or_default(
        path: Path, model_type: type[T], default_factory: Callable[[], T] | None = None
    ) -> T:
        """
        Like ``load_json`` but a missing file yields a default instance.

        The default is not written to disk. A file that exists but is
        broken still raises, so a typo never silently resets settings.
        """
        try:
            return PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            logger.info(f"No {model_type.__name__} at {path}, using defaults")
            return default_factory() if default_factory else model_type()
